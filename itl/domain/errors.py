class LibraryError(Exception):
    """Base class for recoverable library reading failures."""


class ReadError(LibraryError):
    """The input stream could not be fully consumed."""


class DecodeError(LibraryError):
    """Content is not a valid property list or does not match the library shape."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class NotFound(Exception):
    """Requested resource was not found."""


class FieldAccessError(AssertionError):
    """Field looked up by name does not exist or has a different kind.

    Indicates a caller bug, not bad input data.
    """
