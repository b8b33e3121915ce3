"""Estimator errors.

Fatal conditions are exceptions carrying a code, a message and details so the
UI can display them; numeric edge cases only produce a warning.
"""

from typing import Any, Dict, Optional


class ErrorCode:
    """Error code constants."""

    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    UNSUPPORTED_FILE = "UNSUPPORTED_FILE"


class EstimatorError(Exception):
    """Base exception for estimator errors.

    Attributes:
        code: Error code from ErrorCode constants
        message: Human-readable error message
        details: Additional error context
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class InsufficientDataError(EstimatorError):
    """No historical project is available to estimate from."""

    def __init__(self, message: str = "No historical data available", details: Optional[Dict] = None):
        super().__init__(
            code=ErrorCode.INSUFFICIENT_DATA,
            message=message,
            details=details,
        )


class UnsupportedFileError(EstimatorError):
    """Uploaded file type cannot be imported."""

    def __init__(self, filename: str):
        super().__init__(
            code=ErrorCode.UNSUPPORTED_FILE,
            message=f"Unsupported file type: {filename}",
            details={"filename": filename},
        )


class DegenerateInputWarning(UserWarning):
    """Estimate computed from a single similar project or a zero mean surface."""
