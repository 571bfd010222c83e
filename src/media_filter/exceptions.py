"""Custom exceptions for media filters."""


class MediaFilterError(Exception):
    """Base exception for all media filter errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class ConfigurationError(MediaFilterError):
    """Raised when a required configuration value is missing or invalid."""

    pass


class StagingError(MediaFilterError):
    """Raised when the source asset cannot be copied to a staging file."""

    pass


class ManifestError(MediaFilterError):
    """Raised when an item manifest cannot be read or does not validate."""

    pass


class ProcessLaunchError(MediaFilterError):
    """Raised when the external tool cannot be started."""

    def __init__(self, message: str, command: str | None = None, *args, **kwargs):
        self.command = command
        super().__init__(message, *args, **kwargs)


class ConversionError(MediaFilterError):
    """Raised when a filter fails to produce a derivative.

    For subprocess-backed filters this carries the tool's exit code and its
    classified status.
    """

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        status=None,
        *args,
        **kwargs,
    ):
        self.exit_code = exit_code
        self.status = status
        super().__init__(message, *args, **kwargs)


class InputOpenError(ConversionError):
    """Raised when the external tool could not open its input file."""

    pass


# Alias naming the exit-1 status after the staged input it failed on
StagingInputError = InputOpenError


class ContentPermissionError(ConversionError):
    """Raised when the source document forbids content extraction."""

    pass


class ToolFailureError(ConversionError):
    """Raised for any other non-zero exit status of the external tool."""

    pass


class InterruptedError(MediaFilterError):
    """Raised when waiting for the external tool was interrupted."""

    pass


class ProcessTimeoutError(InterruptedError):
    """Raised when the external tool did not finish within the timeout."""

    def __init__(self, message: str, timeout: float, *args, **kwargs):
        self.timeout = timeout
        super().__init__(message, *args, **kwargs)


class CleanupWarning(UserWarning):
    """Issued when a staging file could not be deleted."""

    pass
