"""Streaming exceptions, each mapped to an HTTP status by the web layer."""


class StreamError(Exception):
    """Base exception for stream requests."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BadRequestError(StreamError):
    """Raised for a malformed song id or Range header, or an oversized range."""

    status_code = 400


class NotFoundError(StreamError):
    """Raised when the song id is unknown or its file has vanished."""

    status_code = 404


class ForbiddenError(StreamError):
    """Raised when the resolved path leaves the music root or is a directory."""

    status_code = 403


class InternalError(StreamError):
    """Raised for unexpected I/O failures."""

    status_code = 500
