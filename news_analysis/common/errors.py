"""Error taxonomy for the analysis pipeline."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of per-item failure recorded in a batch report."""

    CONTENT = "content"
    TRANSPORT = "transport"
    PERSISTENCE = "persistence"
    INTERNAL = "internal"

    @property
    def message(self) -> str:
        """User-facing message for this kind of failure."""
        return {
            ErrorKind.CONTENT: "لا يوجد محتوى مناسب للتحليل",
            ErrorKind.TRANSPORT: "فشل في تحليل النص",
            ErrorKind.PERSISTENCE: "فشل في حفظ التحليل",
            ErrorKind.INTERNAL: "خطأ في معالجة المقال",
        }[self]


class AnalysisError(Exception):
    """Base class for pipeline errors."""

    kind: ErrorKind = ErrorKind.INTERNAL


class ConfigError(AnalysisError, ValueError):
    """Invalid or missing configuration."""


class ContentError(AnalysisError):
    """No candidate text cleared the quality floor."""

    kind = ErrorKind.CONTENT


class InferenceError(AnalysisError):
    """Inference endpoint unreachable, timed out, or returned a bad response."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, status_code: int | None = None, detail: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class PersistenceError(AnalysisError):
    """Write to the persistence store failed."""

    kind = ErrorKind.PERSISTENCE


class FetchError(AnalysisError):
    """Candidate articles could not be listed."""
