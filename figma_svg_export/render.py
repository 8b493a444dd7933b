"""
SVG Render Requests

Turns the scanned components into download URLs:
1. Load the document and collect exportable components
2. Split their ids into request-sized batches
3. Request all batches in parallel and merge the URLs by component name
"""

import asyncio
import logging
from typing import Dict, List, Optional

from .batching import DEFAULT_BATCH_SIZE, plan_batches
from .exceptions import FetchError, RenderError
from .figma_api import FigmaClient
from .models import ExportConfig
from .scanner import scan_document

logger = logging.getLogger(__name__)


async def fetch_svg_components(
    client: FigmaClient,
    file_id: str,
    node_ids: Optional[List[str]] = None,
) -> Dict[str, str]:
    """Load a Figma file and return its SVG components (node id -> name)."""
    try:
        document = await client.get_file(file_id, node_ids)
    except FetchError as e:
        raise FetchError(f"Failed to load Figma file: {file_id}. {e}", context={"file_id": file_id}) from e

    return scan_document(document, node_ids)


async def fetch_svg_download_urls(
    client: FigmaClient,
    components: Dict[str, str],
    config: ExportConfig,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Dict[str, str]:
    """
    Request render URLs for every component.

    All batches are requested at once; if any batch fails the whole call
    fails. Each returned id must be known and must carry a URL.

    Returns:
        Mapping of component name -> SVG download URL
    """
    batches = plan_batches(list(components), batch_size)

    logger.info(f"[Render] Requesting {len(components)} SVGs in {len(batches)} batches")

    try:
        results = await asyncio.gather(*[
            client.get_images(config.file_id, batch, config.render)
            for batch in batches
        ])
    except RenderError as e:
        raise RenderError(f"Failed to get image data from Figma: {e}", context=e.context) from e

    download_urls: Dict[str, str] = {}

    for result in results:
        for node_id, url in result.items():
            svg_name = components.get(node_id)

            if not svg_name:
                raise RenderError(
                    f"Failed to get image data from Figma: No SVG name found for node {node_id} "
                    f"returned in get images response. Url: {url or 'empty'}",
                    context={"node_id": node_id},
                )

            if not url:
                raise RenderError(
                    f"Failed to get image data from Figma: No URL found for node {node_id} "
                    f"({svg_name}) returned in get images response",
                    context={"node_id": node_id, "name": svg_name},
                )

            download_urls[svg_name] = url

    returned_ids = {node_id for result in results for node_id in result}
    missing = [node_id for node_id in components if node_id not in returned_ids]
    if missing:
        raise RenderError(
            f"Failed to get image data from Figma: No URL returned for nodes {', '.join(missing)}",
            context={"node_ids": missing},
        )

    return download_urls

