class ConversionError(Exception):
    """Base class for failures at the conversion I/O boundary."""

    def __init__(
        self, message: str, path: str | None = None, *, cause: Exception = None
    ):
        self.path = path
        super().__init__(message)
        self.__cause__ = cause  # Optional chaining for debugging


class InputUnavailableError(ConversionError):
    """Raised when the input path is missing, unreadable or not supplied."""

    def __init__(
        self, path: str | None, message: str = None, *, cause: Exception = None
    ):
        if message is None:
            message = f"Input not available: {path}"
        super().__init__(message, path, cause=cause)


class OutputUnwritableError(ConversionError):
    """Raised when the output file cannot be created or written."""

    def __init__(
        self, path: str | None, message: str = None, *, cause: Exception = None
    ):
        if message is None:
            message = f"Output not writable: {path}"
        super().__init__(message, path, cause=cause)
