"""
Figma SVG Export

Downloads SVG components from a Figma file and optionally optimizes them.

Features:
- Finds visible components with an SVG export setting
- Batched, parallel render requests against the Figma image API
- Parallel downloads with configurable file name casing
- Optional SVG optimization with scour
"""

__version__ = "1.2.0"

from .config import build_config, normalize_node_ids, validate_config
from .exceptions import (
    ConfigError,
    DownloadError,
    FetchError,
    FigmaExportError,
    OptimizeError,
    RenderError,
)
from .models import DocumentNode, ExportConfig, ExportResult, FileNameStrategy, RenderOptions
from .pipeline import run, run_sync

__all__ = [
    "__version__",
    "build_config",
    "normalize_node_ids",
    "validate_config",
    "ConfigError",
    "DownloadError",
    "FetchError",
    "FigmaExportError",
    "OptimizeError",
    "RenderError",
    "DocumentNode",
    "ExportConfig",
    "ExportResult",
    "FileNameStrategy",
    "RenderOptions",
    "run",
    "run_sync",
]
