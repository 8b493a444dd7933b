"""
Export Errors

Exception hierarchy for the export pipeline:
- ConfigError: bad or missing input, raised before any network/disk I/O
- FetchError / RenderError: document or image-render request failures
- DownloadError: output directory or per-file download/write failures
- OptimizeError: optimizer config load or per-file optimize failures
"""

from typing import Any, Dict, Optional


class FigmaExportError(Exception):
    """Base exception for all export failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(FigmaExportError):
    """Raised when the export configuration is missing a field or is invalid."""

    def __init__(self, field: str, reason: str):
        super().__init__(reason, context={"field": field})
        self.field = field


class FetchError(FigmaExportError):
    """Raised when the Figma file or its image data cannot be loaded."""


class RenderError(FetchError):
    """Raised when the image render endpoint fails or returns incomplete data."""


class DownloadError(FigmaExportError):
    """Raised when an SVG cannot be downloaded or written to disk."""


class OptimizeError(FigmaExportError):
    """Raised when the optimizer cannot be configured or an SVG cannot be optimized."""
