"""
Export Configuration

Responsibilities:
- Build an ExportConfig from flat CLI / programmatic input
- Normalize node ids to the Figma "1:2" form
- Validate required fields and the render scale range
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .exceptions import ConfigError
from .models import ExportConfig, RenderOptions

logger = logging.getLogger(__name__)

ACCESS_TOKEN_ENV = "FIGMA_ACCESS_TOKEN"

MIN_SCALE = 0.01
MAX_SCALE = 4.0

RENDER_OPTION_KEYS = set(RenderOptions.model_fields)


def normalize_node_ids(node_ids: Optional[Iterable[str]]) -> List[str]:
    """
    Trim node ids and convert URL-style "5432-1234" into "5432:1234".

    Entries that are empty after trimming are dropped, so a list holding
    only blanks collapses to "no filter".
    """
    cleaned = []
    for node_id in node_ids or []:
        node_id = node_id.strip().replace("-", ":")
        if node_id:
            cleaned.append(node_id)
    return cleaned


def validate_config(config: ExportConfig) -> ExportConfig:
    """
    Normalize and validate a config, returning a new instance.

    Checks run in a fixed order and the first failure is raised:
    node ids -> output directory -> access token -> file id -> scale.
    """
    node_ids = normalize_node_ids(config.node_ids)

    if not config.output_directory:
        raise ConfigError(
            "output_directory",
            "Missing required parameter: output path (-o /path/to/output)",
        )

    if not config.access_token:
        raise ConfigError(
            "access_token",
            "Missing required parameter: Figma personal access token (-a figd_sadasdjl...)",
        )

    if not config.file_id:
        raise ConfigError(
            "file_id",
            "Missing required parameter: Figma file ID (-f oQ5VCtq1r0KrPx3VpqMSX5)",
        )

    scale = config.render.scale
    if scale is not None and not (MIN_SCALE <= scale <= MAX_SCALE):
        raise ConfigError(
            "scale",
            f"Invalid Figma image scale value {scale:g}, must be between {MIN_SCALE} and {MAX_SCALE:g}",
        )

    logger.debug(f"[Config] Validated config for file {config.file_id} ({len(node_ids)} node filters)")

    return config.model_copy(update={"node_ids": node_ids})


def build_config(**options: Any) -> ExportConfig:
    """
    Build an ExportConfig from flat keyword options.

    Render options (scale, outline_text, ...) may be passed at the top
    level; they are grouped into RenderOptions. The access token falls
    back to the FIGMA_ACCESS_TOKEN environment variable.

    Usage:
        config = build_config(file_id="abc", output_directory="icons", scale=2)
    """
    render: Dict[str, Any] = dict(options.pop("render", None) or {})
    for key in list(options):
        if key in RENDER_OPTION_KEYS:
            value = options.pop(key)
            if value is not None:
                render[key] = value

    if not options.get("access_token"):
        options["access_token"] = os.getenv(ACCESS_TOKEN_ENV, "")

    options = {key: value for key, value in options.items() if value is not None}

    try:
        return ExportConfig(render=RenderOptions(**render), **options)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "config"
        raise ConfigError(field, f"Invalid value for {field}: {error['msg']}") from e
