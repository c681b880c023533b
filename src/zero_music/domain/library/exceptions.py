"""Library scanning exceptions for error handling."""


class LibraryError(Exception):
    """Base exception for library index operations."""

    pass


class DirectoryNotFoundError(LibraryError):
    """Raised when the music root does not exist at scan time."""

    def __init__(self, directory: str):
        self.directory = directory
        super().__init__(f"Music directory does not exist: {directory}")


class WalkError(LibraryError):
    """Raised when directory traversal fails partway."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        self.cause = cause
        super().__init__(f"Error scanning {path}: {cause}")


class ScanCancelledError(LibraryError):
    """Raised when a scan is cancelled before it completes."""

    pass
