"""
StudyFlow - Custom Exceptions

This module defines the exceptions used throughout the question engine
with error codes, messages, and context information.
"""

from typing import Any


class StudyFlowException(Exception):
    """Base exception class for StudyFlow."""

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__.upper()
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code}')"

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


# ============================================================================
# Configuration Exceptions
# ============================================================================

class ConfigurationError(StudyFlowException):
    """Raised when there's a configuration error."""
    pass


# ============================================================================
# LLM Exceptions
# ============================================================================

class LLMError(StudyFlowException):
    """Base exception for text-completion service errors."""
    pass


class ModelResponseError(LLMError):
    """Raised when the model returns an error or an unusable response."""

    def __init__(self, message: str, model_name: str | None = None, response: str | None = None, **kwargs):
        self.model_name = model_name
        self.response = response
        details = kwargs.pop('details', {})
        if model_name:
            details['model_name'] = model_name
        if response:
            details['model_response'] = response[:500] + "..." if len(response) > 500 else response
        super().__init__(message, details=details, **kwargs)


# ============================================================================
# Generation Exceptions
# ============================================================================

class GenerationError(StudyFlowException):
    """Raised when question generation fails."""
    pass


class UnsuitableContentError(GenerationError):
    """Raised when a chunk fails the minimum suitability checks."""

    def __init__(self, reason: str, **kwargs):
        self.reason = reason
        details = kwargs.pop('details', {})
        details['reason'] = reason
        super().__init__(
            f"Content not suitable for question generation: {reason}",
            details=details,
            **kwargs
        )
