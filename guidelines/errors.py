"""Exceptions raised by the guideline viewer."""

from __future__ import annotations

from typing import Any, Dict, Optional


class GuidelineViewerError(Exception):
    """Base viewer error."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(GuidelineViewerError):
    """Invalid viewer configuration."""


class ApiError(GuidelineViewerError):
    """A MagicApp request failed at the transport or HTTP level."""

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message, {"url": url, "status_code": status_code})
        self.url = url
        self.status_code = status_code


class ExportError(GuidelineViewerError):
    """PDF generation failed."""


class ActionInProgress(GuidelineViewerError):
    """The same action is already running for this session."""
