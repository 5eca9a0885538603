"""
Failure taxonomy for the swing analysis pipeline.

Every stage raises its own error type so logs can tell an unreadable
upload from a provider outage from a malformed reply. The controller
collapses all of them into a single user-facing failure message.
"""

from .models import FailureKind


class SwingAnalysisError(Exception):
    """Base class for every pipeline failure."""

    kind: FailureKind = FailureKind.REQUEST_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidSelection(SwingAnalysisError):
    """Raised when a selected file is not a video."""

    kind = FailureKind.INVALID_SELECTION


class EncodingFailed(SwingAnalysisError):
    """Raised when the video bytes cannot be read or encoded."""

    kind = FailureKind.ENCODING_FAILED


class RequestFailed(SwingAnalysisError):
    """Raised when the provider call errors or returns no usable text."""

    kind = FailureKind.REQUEST_FAILED


class ExtractionFailed(SwingAnalysisError):
    """Raised when the reply does not contain a valid report document."""

    kind = FailureKind.EXTRACTION_FAILED
