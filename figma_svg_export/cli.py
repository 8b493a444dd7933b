"""Figma SVG Export CLI - Main entry point.

Downloads SVG components from a Figma file and optionally optimizes them.

Usage:
    figma-svg-export -a <token> -f <file id> -o icons --file-name-strategy pascal
    python -m figma_svg_export --help

Exit codes:
    0: Success (including "nothing to export")
    1: Validation or pipeline failure
"""

import asyncio
import logging
import os
import sys
from typing import Optional, Tuple

import click
from tqdm import tqdm

from . import __version__
from .config import ACCESS_TOKEN_ENV, build_config
from .exceptions import FigmaExportError
from .models import FileNameStrategy
from .pipeline import Stage, StageEvent, StageStatus, run

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

DEFAULT_OUTPUT_DIR = "svg_output"

FIGMA_IMAGE_OPTION = "Figma API Image option"


def setup_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure logging for CLI.

    Args:
        verbose: Enable debug logging
        log_file: Optional log file path
    """
    level = logging.DEBUG if verbose else logging.INFO
    handlers: list = []

    # stage results are already echoed; only mirror logs to the console in verbose mode
    if verbose:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def format_duration(seconds: float) -> str:
    """Human readable duration, e.g. 850ms, 2.4s, 1m 5s."""
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, seconds = divmod(int(seconds), 60)
    return f"{minutes}m {seconds}s"


def split_node_ids(values: Tuple[str, ...]) -> list:
    """Flatten repeated / comma-separated --node-id values."""
    return [node_id for value in values for node_id in value.split(",")]


class ConsoleReporter:
    """Prints stage results and shows a progress bar while files are processed."""

    def __init__(self):
        self.bar: Optional[tqdm] = None
        self.failed = False

    def on_stage(self, event: StageEvent) -> None:
        if event.status == StageStatus.START:
            if event.stage in (Stage.DOWNLOAD, Stage.OPTIMIZE) and event.total:
                self.bar = tqdm(total=event.total, desc=event.message, unit="svg", leave=False)
            return

        self.close()
        if event.status == StageStatus.SUCCEED:
            click.echo(f"{click.style('✔', fg='green')} {event.message}")
        else:
            self.failed = True
            click.echo(f"{click.style('✖', fg='red')} {event.message}", err=True)

    def on_progress(self, stage: Stage, path: str) -> None:
        if self.bar is not None:
            self.bar.update(1)

    def close(self) -> None:
        if self.bar is not None:
            self.bar.close()
            self.bar = None


@click.command(
    name="figma-svg-export",
    help="A CLI tool for downloading SVGs from Figma, and optionally optimizing them.",
)
@click.version_option(version=__version__, prog_name="figma-svg-export")
@click.option("-o", "--output-dir", default=DEFAULT_OUTPUT_DIR, show_default=True,
              help="The output directory for the downloaded SVG files")
@click.option("-c", "--clear-output-dir", is_flag=True,
              help="Clear the output directory before writing the SVG files")
@click.option("-a", "--access-token", envvar=ACCESS_TOKEN_ENV,
              help=f"A valid Figma personal access token (or set {ACCESS_TOKEN_ENV})")
@click.option("--file-name-strategy", default=FileNameStrategy.KEBAB.value, show_default=True,
              type=click.Choice([strategy.value for strategy in FileNameStrategy]),
              help="The casing strategy to use for the SVG file names")
@click.option("-f", "--file-id", help="The Figma file ID, e.g., oQ5VCtq1r0KrPx3VpqMSX5")
@click.option("-n", "--node-id", "node_ids", multiple=True,
              help="The Figma node ID(s), comma-separated if multiple, e.g., 5432:1234,1234:9876")
@click.option("--svgo-config", "svgo_config_path",
              help="Path to a JSON or YAML SVG optimizer configuration file")
@click.option("--scale", type=float, default=None,
              help=f"{FIGMA_IMAGE_OPTION}: Scale - A number between 0.01 and 4, the image scaling factor.")
@click.option("--outline-text", is_flag=True,
              help=f"{FIGMA_IMAGE_OPTION}: Outline Text - Render text elements as outlines (vector paths) "
                   "instead of <text> elements.")
@click.option("--include-id", is_flag=True,
              help=f"{FIGMA_IMAGE_OPTION}: Include ID - Add the layer name to the id attribute of SVG elements.")
@click.option("--include-node-id", is_flag=True,
              help=f"{FIGMA_IMAGE_OPTION}: Include Node ID - Add the node id to a data-node-id attribute "
                   "of SVG elements.")
@click.option("--simplify-stroke", is_flag=True,
              help=f"{FIGMA_IMAGE_OPTION}: Simplify Stroke - Use the stroke attribute instead of <mask> "
                   "for inside/outside strokes where possible.")
@click.option("--contents-only", is_flag=True,
              help=f"{FIGMA_IMAGE_OPTION}: Contents Only - Exclude content that overlaps the node from rendering.")
@click.option("--absolute-bounds", "use_absolute_bounds", is_flag=True,
              help=f"{FIGMA_IMAGE_OPTION}: Use Absolute Bounds - Use the full dimensions of the node "
                   "regardless of cropping or empty space.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write logs to this file")
def main(
    output_dir: str,
    clear_output_dir: bool,
    access_token: Optional[str],
    file_name_strategy: str,
    file_id: Optional[str],
    node_ids: Tuple[str, ...],
    svgo_config_path: Optional[str],
    scale: Optional[float],
    outline_text: bool,
    include_id: bool,
    include_node_id: bool,
    simplify_stroke: bool,
    contents_only: bool,
    use_absolute_bounds: bool,
    verbose: bool,
    log_file: Optional[str],
) -> None:
    """Download SVG components from a Figma file."""
    setup_logging(verbose, log_file)

    cwd = os.getcwd()
    reporter = ConsoleReporter()

    try:
        config = build_config(
            output_directory=os.path.join(cwd, output_dir) if output_dir else "",
            clear_output_directory=clear_output_dir,
            access_token=access_token,
            file_id=file_id,
            node_ids=split_node_ids(node_ids),
            file_name_strategy=file_name_strategy,
            svgo_config_path=svgo_config_path,
            scale=scale,
            # unset flags fall back to the Figma API defaults
            outline_text=outline_text or None,
            include_id=include_id or None,
            include_node_id=include_node_id or None,
            simplify_stroke=simplify_stroke or None,
            contents_only=contents_only or None,
            use_absolute_bounds=use_absolute_bounds or None,
        )
        result = asyncio.run(run(
            config,
            on_stage=reporter.on_stage,
            on_progress=reporter.on_progress,
            cwd=cwd,
        ))
    except FigmaExportError as e:
        reporter.close()
        if not reporter.failed:
            click.echo(f"{click.style('✖', fg='red')} {e}", err=True)
        sys.exit(EXIT_FAILURE)

    if result.nothing_to_export:
        click.echo("Nothing to export")
    else:
        click.echo(f"SVG Export finished in {format_duration(result.duration_seconds)}")

    sys.exit(EXIT_SUCCESS)


if __name__ == "__main__":
    main()
