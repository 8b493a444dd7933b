"""
Export Pipeline - runs the export stages in order

Stages:
1. validate  - normalize and check the config
2. load      - fetch the Figma file and collect SVG components
3. render    - request SVG download URLs in batches
4. prepare   - optionally clear, then create the output directory
5. download  - download all SVGs in parallel
6. optimize  - optionally run every SVG through the optimizer

Any stage failure aborts the run; files written before the failure stay
on disk.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from .config import validate_config
from .downloader import SvgDownloader, clean_output_dir, ensure_output_dir
from .exceptions import FigmaExportError
from .figma_api import FigmaClient
from .models import ExportConfig, ExportResult
from .optimizer import load_optimizer_config, optimize_svgs
from .render import fetch_svg_components, fetch_svg_download_urls

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    VALIDATE = "validate"
    LOAD = "load"
    RENDER = "render"
    PREPARE = "prepare"
    DOWNLOAD = "download"
    OPTIMIZE = "optimize"


class StageStatus(str, Enum):
    START = "start"
    SUCCEED = "succeed"
    FAIL = "fail"


@dataclass
class StageEvent:
    """Progress notification for the presentation layer."""
    stage: Stage
    status: StageStatus
    message: str
    total: Optional[int] = None


StageCallback = Callable[[StageEvent], None]
ProgressCallback = Callable[[Stage, str], None]


class _StageReporter:
    def __init__(self, on_stage: Optional[StageCallback]):
        self.on_stage = on_stage

    def emit(self, stage: Stage, status: StageStatus, message: str, total: Optional[int] = None):
        log = logger.error if status == StageStatus.FAIL else logger.info
        log(f"[Pipeline] {stage.value}: {message}")
        if self.on_stage:
            self.on_stage(StageEvent(stage, status, message, total))


async def run(
    config: ExportConfig,
    on_stage: Optional[StageCallback] = None,
    on_progress: Optional[ProgressCallback] = None,
    cwd: Optional[Union[str, Path]] = None,
    figma_client: Optional[FigmaClient] = None,
    downloader: Optional[SvgDownloader] = None,
) -> ExportResult:
    """
    Export every SVG component of a Figma file.

    Args:
        config: Export configuration (validated here)
        on_stage: Called when a stage starts, succeeds or fails
        on_progress: Called with (stage, path) for each downloaded / optimized file
        cwd: Directory a relative optimizer config path is resolved against
        figma_client: Client to use instead of one built from the access token
        downloader: Downloader to use instead of a default one

    Returns:
        ExportResult (with no components when there is nothing to export)

    Raises:
        FigmaExportError: subclass matching the failed stage
    """
    start = time.perf_counter()
    reporter = _StageReporter(on_stage)
    result = ExportResult()

    stage = Stage.VALIDATE
    try:
        config = validate_config(config)

        client = figma_client or FigmaClient(config.access_token)
        try:
            stage = Stage.LOAD
            reporter.emit(stage, StageStatus.START, f"Loading Figma File: {config.file_id}")
            components = await fetch_svg_components(client, config.file_id, config.node_ids)
            result.components = components

            if not components:
                reporter.emit(stage, StageStatus.SUCCEED, "No SVGs found in the specified Figma file", total=0)
                result.duration_seconds = time.perf_counter() - start
                return result

            reporter.emit(
                stage, StageStatus.SUCCEED,
                f"Found {len(components)} SVGs in Figma file: {config.file_id}",
                total=len(components),
            )

            stage = Stage.RENDER
            reporter.emit(stage, StageStatus.START, "Getting image data from Figma")
            download_urls = await fetch_svg_download_urls(client, components, config)
            reporter.emit(stage, StageStatus.SUCCEED, "Image data retrieved from Figma", total=len(download_urls))
        finally:
            if figma_client is None:
                await client.close()

        stage = Stage.PREPARE
        if config.clear_output_directory:
            reporter.emit(stage, StageStatus.START, "Clearing output directory")
            await clean_output_dir(config.output_directory)
            reporter.emit(stage, StageStatus.SUCCEED, "Output directory cleared")
        await ensure_output_dir(config.output_directory)

        stage = Stage.DOWNLOAD
        reporter.emit(stage, StageStatus.START, "Downloading SVGs", total=len(download_urls))
        svg_downloader = downloader or SvgDownloader()
        try:
            result.written_files = await svg_downloader.download_all(
                download_urls,
                config.output_directory,
                config.file_name_strategy,
                on_progress=(lambda path: on_progress(Stage.DOWNLOAD, path)) if on_progress else None,
            )
        finally:
            if downloader is None:
                await svg_downloader.close()
        reporter.emit(stage, StageStatus.SUCCEED, "All SVGs downloaded", total=len(result.written_files))

        if config.optimize:
            stage = Stage.OPTIMIZE
            reporter.emit(stage, StageStatus.START, "Optimizing SVGs", total=len(result.written_files))
            options = load_optimizer_config(config.svgo_config, config.svgo_config_path, cwd)
            await optimize_svgs(
                result.written_files,
                options,
                on_progress=(lambda path: on_progress(Stage.OPTIMIZE, path)) if on_progress else None,
            )
            result.optimized = True
            reporter.emit(stage, StageStatus.SUCCEED, "SVGs optimized", total=len(result.written_files))

    except FigmaExportError as e:
        reporter.emit(stage, StageStatus.FAIL, str(e))
        raise

    result.duration_seconds = time.perf_counter() - start
    logger.info(f"[Pipeline] Export finished in {result.duration_seconds:.2f}s")
    return result


def run_sync(config: ExportConfig, **kwargs) -> ExportResult:
    """Blocking wrapper around run() for scripts."""
    return asyncio.run(run(config, **kwargs))
