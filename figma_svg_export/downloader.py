"""
SVG Downloader

Handles:
- Clearing / creating the output directory
- Mapping component names to file paths with the chosen casing
- Downloading every SVG in parallel and writing it to disk
- Reporting per-file completion for progress display
"""

import asyncio
import logging
import shutil
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

import httpx

from .exceptions import DownloadError
from .models import FileNameStrategy
from .naming import file_name_for

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

DEFAULT_TIMEOUT = 60

# no cap on downloads in flight
UNBOUNDED_LIMITS = httpx.Limits(max_connections=None, max_keepalive_connections=None)


async def clean_output_dir(output_dir: Union[str, Path]) -> None:
    """Recursively delete the output directory (a missing directory is fine)."""
    output_dir = Path(output_dir)
    if not output_dir.exists():
        return

    try:
        await asyncio.to_thread(shutil.rmtree, output_dir)
        logger.info(f"[SvgDownloader] Cleared output directory: {output_dir}")
    except OSError as e:
        raise DownloadError(f"Failed to clear output directory: {e}", context={"path": str(output_dir)}) from e


async def ensure_output_dir(output_dir: Union[str, Path]) -> None:
    """Create the output directory if it doesn't exist."""
    try:
        await asyncio.to_thread(Path(output_dir).mkdir, parents=True, exist_ok=True)
    except OSError as e:
        raise DownloadError(f"Failed to create output directory: {e}", context={"path": str(output_dir)}) from e


def build_file_paths(
    download_urls: Dict[str, str],
    output_dir: Union[str, Path],
    naming_strategy: Union[FileNameStrategy, str] = FileNameStrategy.KEBAB,
) -> Dict[str, str]:
    """
    Map each component name to its output file path.

    Raises:
        DownloadError: if two component names produce the same file name
    """
    output_dir = Path(output_dir)
    paths: Dict[str, str] = {}
    owners: Dict[str, str] = {}

    for svg_name in download_urls:
        file_path = str(output_dir / file_name_for(svg_name, naming_strategy))

        if file_path in owners:
            raise DownloadError(
                f"Components '{owners[file_path]}' and '{svg_name}' both map to {file_path} "
                f"with the '{FileNameStrategy(naming_strategy).value}' naming strategy",
                context={"path": file_path, "names": [owners[file_path], svg_name]},
            )

        owners[file_path] = svg_name
        paths[svg_name] = file_path

    return paths


class SvgDownloader:
    """
    Downloads rendered SVGs to the output directory.

    Usage:
        async with SvgDownloader() as downloader:
            written = await downloader.download_all(urls, "icons", "pascal")
    """

    def __init__(self, timeout: Optional[float] = DEFAULT_TIMEOUT, http_client: Optional[httpx.AsyncClient] = None):
        self.http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, pool=None),
            limits=UNBOUNDED_LIMITS,
            follow_redirects=True,
            headers={"Accept": "image/svg+xml,*/*;q=0.8"},
        )

    async def close(self):
        """Close HTTP client."""
        await self.http_client.aclose()

    async def __aenter__(self) -> "SvgDownloader":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def download_single(self, url: str, file_path: str) -> str:
        """
        Download one SVG and write it to file_path, overwriting any existing file.

        Returns:
            The written file path

        Raises:
            DownloadError: on transport failure, error status or write failure
        """
        try:
            response = await self.http_client.get(url)
        except httpx.HTTPError as e:
            raise DownloadError(f"Failed to download SVG from {url}: {e}", context={"url": url}) from e

        if response.is_error:
            raise DownloadError(
                f"Failed to download SVG from {url}: {response.status_code} {response.reason_phrase} - {response.text}",
                context={"url": url, "status_code": response.status_code},
            )

        try:
            await asyncio.to_thread(Path(file_path).write_bytes, response.content)
        except OSError as e:
            raise DownloadError(f"Failed to write SVG to {file_path}: {e}", context={"path": file_path}) from e

        logger.debug(f"[SvgDownloader] Saved {url[:60]} -> {file_path} ({len(response.content)} bytes)")
        return file_path

    async def download_all(
        self,
        download_urls: Dict[str, str],
        output_dir: Union[str, Path],
        naming_strategy: Union[FileNameStrategy, str] = FileNameStrategy.KEBAB,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[str]:
        """
        Download all SVGs in parallel.

        Every download runs to completion; if any failed, the first failure
        to occur is raised and files that did succeed stay on disk.

        Args:
            download_urls: Mapping of component name -> download URL
            output_dir: Directory the files are written to
            naming_strategy: Casing applied to component names
            on_progress: Called with each written path as it completes

        Returns:
            Written file paths, in the order of download_urls
        """
        file_paths = build_file_paths(download_urls, output_dir, naming_strategy)

        if not download_urls:
            return []

        logger.info(f"[SvgDownloader] Starting download of {len(download_urls)} SVGs")

        failures: List[BaseException] = []

        async def download_and_report(url: str, file_path: str) -> str:
            try:
                written = await self.download_single(url, file_path)
                if on_progress:
                    on_progress(written)
            except Exception as e:
                failures.append(e)
                raise
            return written

        results = await asyncio.gather(
            *[download_and_report(url, file_paths[svg_name]) for svg_name, url in download_urls.items()],
            return_exceptions=True,
        )

        if failures:
            logger.error(f"[SvgDownloader] {len(failures)}/{len(results)} downloads failed")
            first = failures[0]
            if isinstance(first, DownloadError):
                raise DownloadError(f"Failed to download SVGs: {first}", context=first.context) from first
            raise DownloadError(f"Failed to download SVGs: {first}") from first

        logger.info(f"[SvgDownloader] Downloaded {len(results)} SVGs to {output_dir}")
        return list(results)
