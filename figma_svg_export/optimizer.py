"""
SVG Optimizer

Runs downloaded SVGs through scour.

Optimizer options come either inline (a dict of scour options) or from
a JSON / YAML file, e.g.:

    {"strip_comments": true, "shorten_ids": true, "enable_viewboxing": true}
"""

import asyncio
import json
import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional, Union

import yaml
from scour import scour

from .exceptions import OptimizeError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

YAML_SUFFIXES = (".yaml", ".yml")


def _read_config_file(config_path: Path) -> Any:
    with open(config_path, "r", encoding="utf-8") as f:
        if config_path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(f)
        return json.load(f)


def build_scour_options(options: Dict[str, Any]):
    """Merge user options over scour's defaults; unknown keys are dropped."""
    normalized = {key.replace("-", "_"): value for key, value in options.items()}
    return scour.sanitizeOptions(SimpleNamespace(**normalized))


def load_optimizer_config(
    inline_config: Optional[Dict[str, Any]] = None,
    config_path: Optional[str] = None,
    cwd: Optional[Union[str, Path]] = None,
):
    """
    Resolve the optimizer options.

    Args:
        inline_config: Scour options given directly (wins over config_path)
        config_path: JSON or YAML file with scour options
        cwd: Directory relative config paths are resolved against

    Returns:
        Sanitized scour options

    Raises:
        OptimizeError: if no configuration is given or it cannot be loaded
    """
    if not inline_config and not config_path:
        raise OptimizeError("No SVG optimizer configuration found")

    if inline_config:
        return build_scour_options(inline_config)

    path = Path(config_path).expanduser()
    if not path.is_absolute():
        path = Path(cwd or Path.cwd()) / path

    try:
        loaded = _read_config_file(path)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise OptimizeError(
            f"Failed to load SVG optimizer configuration file {path}: {e}",
            context={"path": str(path)},
        ) from e

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        raise OptimizeError(
            f"Failed to load SVG optimizer configuration file {path}: expected a mapping, got {type(loaded).__name__}",
            context={"path": str(path)},
        )

    logger.info(f"[Optimizer] Loaded configuration from {path}")
    return build_scour_options(loaded)


def optimize_svg_string(svg: str, options) -> str:
    """Optimize SVG markup with already-resolved scour options."""
    return scour.scourString(svg, options)


async def optimize_svg(svg_path: str, options) -> str:
    """
    Optimize one SVG file in place.

    Raises:
        OptimizeError: if the file cannot be read, is empty or fails to optimize
    """
    path = Path(svg_path)

    try:
        svg = await asyncio.to_thread(path.read_text, encoding="utf-8")
    except OSError as e:
        raise OptimizeError(
            f"Failed to read SVG from {svg_path} while attempting optimization: {e}",
            context={"path": svg_path},
        ) from e

    if not svg:
        raise OptimizeError(
            f"Encountered empty SVG at {svg_path} while attempting optimization",
            context={"path": svg_path},
        )

    try:
        optimized = optimize_svg_string(svg, options)
        await asyncio.to_thread(path.write_text, optimized, encoding="utf-8")
    except Exception as e:
        raise OptimizeError(f"Failed to optimize SVG at {svg_path}: {e}", context={"path": svg_path}) from e

    logger.debug(f"[Optimizer] {svg_path}: {len(svg)} -> {len(optimized)} chars")
    return svg_path


async def optimize_svgs(
    svg_paths: List[str],
    options,
    on_progress: Optional[ProgressCallback] = None,
) -> List[str]:
    """
    Optimize all files in parallel.

    Every file is attempted; the first failure to occur is raised.
    """
    failures: List[BaseException] = []

    async def optimize_and_report(svg_path: str) -> str:
        try:
            optimized = await optimize_svg(svg_path, options)
            if on_progress:
                on_progress(optimized)
        except Exception as e:
            failures.append(e)
            raise
        return optimized

    results = await asyncio.gather(
        *[optimize_and_report(svg_path) for svg_path in svg_paths],
        return_exceptions=True,
    )

    if failures:
        logger.error(f"[Optimizer] {len(failures)}/{len(results)} optimizations failed")
        first = failures[0]
        context = first.context if isinstance(first, OptimizeError) else {}
        raise OptimizeError(f"Failed to optimize SVGs: {first}", context=context) from first

    logger.info(f"[Optimizer] Optimized {len(results)} SVGs")
    return list(results)
