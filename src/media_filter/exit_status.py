"""Exit status contract of the XPDF command-line tools."""

from enum import Enum

from .exceptions import (
    ContentPermissionError,
    ConversionError,
    InputOpenError,
    ToolFailureError,
)


class ExitStatus(Enum):
    """Outcome of an external tool run, classified from its exit code."""

    SUCCESS = "success"
    INPUT_ERROR = "input_error"
    PERMISSION_DENIED = "permission_denied"
    FAILURE = "failure"

    @property
    def error_class(self) -> type[ConversionError] | None:
        return _ERROR_CLASSES.get(self)


_KNOWN_CODES: dict[int, ExitStatus] = {
    0: ExitStatus.SUCCESS,
    1: ExitStatus.INPUT_ERROR,
    3: ExitStatus.PERMISSION_DENIED,
}

_ERROR_CLASSES: dict[ExitStatus, type[ConversionError]] = {
    ExitStatus.INPUT_ERROR: InputOpenError,
    ExitStatus.PERMISSION_DENIED: ContentPermissionError,
    ExitStatus.FAILURE: ToolFailureError,
}


def classify_exit_status(code: int) -> ExitStatus:
    """Map a process exit code to an ExitStatus.

    Exit code 0 is success, 1 means the input file could not be opened and
    3 means the document's own permissions forbid extracting its content.
    Every other code, including negative codes for signal termination, is a
    generic failure.
    """
    return _KNOWN_CODES.get(code, ExitStatus.FAILURE)
