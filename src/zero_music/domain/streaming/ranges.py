"""
HTTP Range header parsing.

Only the single-range form "bytes=<start>-<end>" is supported. The value is
split on "-", so multi-range requests ("bytes=0-9,20-29") and suffix forms
with extra dashes are rejected as malformed.
"""

from typing import NamedTuple, Optional

from .exceptions import BadRequestError

RANGE_UNIT_PREFIX = "bytes="


class ByteRange(NamedTuple):
    """Inclusive byte range within a file."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, file_size: int) -> str:
        return f"bytes {self.start}-{self.end}/{file_size}"


def unsatisfiable_content_range(file_size: int) -> str:
    return f"bytes */{file_size}"


def _parse_position(value: str, field: str) -> int:
    # str.isdigit() also accepts non-ASCII digits such as "²"
    if not (value.isascii() and value.isdigit()):
        raise BadRequestError(f"Invalid Range {field} value: {value!r}")
    return int(value)


def parse_range_header(
    range_header: str, file_size: int, max_range_size: int
) -> Optional[ByteRange]:
    """Parse a Range header against a file of file_size bytes.

    Missing start defaults to 0, missing end to file_size - 1.

    Returns:
        ByteRange to serve, or None if the range is not satisfiable (416)

    Raises:
        BadRequestError: Malformed header, or range longer than max_range_size
    """
    value = range_header.strip()
    if value.startswith(RANGE_UNIT_PREFIX):
        value = value[len(RANGE_UNIT_PREFIX):]

    parts = value.split("-")
    if len(parts) != 2:
        raise BadRequestError("Invalid Range header format")

    start_str, end_str = parts
    start = _parse_position(start_str, "start") if start_str else 0
    end = _parse_position(end_str, "end") if end_str else file_size - 1

    if start < 0 or end >= file_size or start > end:
        return None

    byte_range = ByteRange(start, end)
    if byte_range.length > max_range_size:
        raise BadRequestError(
            f"Requested range too large (max {max_range_size} bytes)"
        )
    return byte_range
