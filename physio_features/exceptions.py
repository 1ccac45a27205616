"""
Exception hierarchy

Every failure raised by the library is one of three kinds: a precondition
violation on the input data, a configuration error, or an internal
consistency failure that indicates a bug rather than bad input.
"""
from typing import Optional, Dict, Any


class PhysioFeaturesError(Exception):
    """Base exception for all feature extraction errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a plain dictionary."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details
        }


class PreconditionError(PhysioFeaturesError, ValueError):
    """Input data violates a documented precondition."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message = message, code = "PRECONDITION_VIOLATION", details = details)


class ConfigurationError(PhysioFeaturesError, ValueError):
    """Unknown method, window type or otherwise invalid configuration."""

    def __init__(
        self,
        message: str,
        parameter: str = "unknown",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message = message,
            code = "CONFIGURATION_ERROR",
            details = {"parameter": parameter, **(details or {})}
        )
        self.parameter = parameter


class InternalConsistencyError(PhysioFeaturesError, RuntimeError):
    """Intermediate results disagree with each other."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message = message, code = "INTERNAL_CONSISTENCY", details = details)
