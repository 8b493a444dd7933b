"""
Figma REST API Client

Thin async wrapper over the two endpoints the exporter needs:
- GET /v1/files/:key   (document tree, optionally filtered by ids)
- GET /v1/images/:key  (render SVG download URLs for node ids)
"""

import logging
from typing import Dict, Iterable, Optional

import httpx
from pydantic import ValidationError

from .exceptions import FetchError, RenderError
from .models import DocumentNode, RenderOptions

logger = logging.getLogger(__name__)

FIGMA_API_URL = "https://api.figma.com"
DEFAULT_TIMEOUT = 60

# every render batch is in flight at once
UNBOUNDED_LIMITS = httpx.Limits(max_connections=None, max_keepalive_connections=None)


class FigmaClient:
    """
    Figma API client authenticated with a personal access token.

    Usage:
        async with FigmaClient(token) as client:
            document = await client.get_file(file_id)
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = FIGMA_API_URL,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
    ):
        self.http_client = httpx.AsyncClient(
            base_url=base_url,
            timeout=httpx.Timeout(timeout, pool=None),
            limits=UNBOUNDED_LIMITS,
            follow_redirects=True,
            headers={
                "X-Figma-Token": access_token,
                "Accept": "application/json",
            },
        )

    async def close(self):
        """Close HTTP client."""
        await self.http_client.aclose()

    async def __aenter__(self) -> "FigmaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def _get_json(self, path: str, params: Dict[str, str], error_cls=FetchError) -> dict:
        try:
            response = await self.http_client.get(path, params=params)
        except httpx.HTTPError as e:
            raise error_cls(f"Request to {path} failed: {e}", context={"path": path}) from e

        if response.is_error:
            raise error_cls(
                f"Request to {path} failed: {response.status_code} {response.reason_phrase} - {response.text}",
                context={"path": path, "status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise error_cls(f"Invalid JSON returned by {path}: {e}", context={"path": path}) from e

        if not isinstance(payload, dict):
            raise error_cls(
                f"Unexpected response from {path}: expected a JSON object, got {type(payload).__name__}",
                context={"path": path},
            )
        return payload

    async def get_file(self, file_id: str, node_ids: Optional[Iterable[str]] = None) -> DocumentNode:
        """
        Load a Figma file and return its document root.

        Args:
            file_id: Figma file key
            node_ids: Optional ids to restrict the returned tree to

        Raises:
            FetchError: on transport failure, error status or malformed payload
        """
        node_ids = list(node_ids or [])
        params = {"ids": ",".join(node_ids)} if node_ids else {}

        logger.info(f"[FigmaAPI] Loading file {file_id}")
        payload = await self._get_json(f"/v1/files/{file_id}", params)

        try:
            return DocumentNode.model_validate(payload["document"])
        except (KeyError, TypeError, ValidationError) as e:
            raise FetchError(
                f"Unexpected document payload for file {file_id}: {e}",
                context={"file_id": file_id},
            ) from e

    async def get_images(
        self,
        file_id: str,
        ids: Iterable[str],
        render: Optional[RenderOptions] = None,
    ) -> Dict[str, Optional[str]]:
        """
        Request SVG renders for a batch of node ids.

        Returns:
            Mapping of node id -> download URL (None when Figma could not render it)

        Raises:
            RenderError: on request failure or when the response carries an error
        """
        ids = list(ids)
        params = (render or RenderOptions()).to_query_params()
        params["ids"] = ",".join(ids)

        logger.debug(f"[FigmaAPI] Requesting {len(ids)} SVG renders for file {file_id}")
        payload = await self._get_json(f"/v1/images/{file_id}", params, error_cls=RenderError)

        if payload.get("err"):
            raise RenderError(f"Figma getImages error: {payload['err']}", context={"file_id": file_id})

        images = payload.get("images")
        if not isinstance(images, dict):
            raise RenderError(f"Figma getImages returned no images for file {file_id}", context={"file_id": file_id})

        return images
