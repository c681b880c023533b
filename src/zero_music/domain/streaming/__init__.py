"""Streaming domain - byte-range delivery of indexed songs."""

from .engine import (
    AUDIO_MIME_TYPES,
    FileBody,
    StreamEngine,
    StreamResult,
    content_disposition,
    get_mime_type,
)
from .exceptions import (
    BadRequestError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    StreamError,
)
from .ranges import ByteRange, parse_range_header

__all__ = [
    "AUDIO_MIME_TYPES",
    "FileBody",
    "StreamEngine",
    "StreamResult",
    "content_disposition",
    "get_mime_type",
    "BadRequestError",
    "ForbiddenError",
    "InternalError",
    "NotFoundError",
    "StreamError",
    "ByteRange",
    "parse_range_header",
]
