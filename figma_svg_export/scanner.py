"""
Document Tree Scanner

Walks a Figma document tree and collects the components that are
exported as SVG, keyed by node id with the component name as value.
"""

import logging
from typing import Dict, Iterable, List, Optional

from .models import DocumentNode, NodeType

logger = logging.getLogger(__name__)

SVG_FORMAT = "SVG"


def is_svg_component(node: DocumentNode) -> bool:
    """A visible COMPONENT node declaring at least one SVG export."""
    return (
        node.type == NodeType.COMPONENT.value
        and node.visible is not False
        and any(setting.format == SVG_FORMAT for setting in node.export_settings)
    )


def collect_svg_components(nodes: Optional[Iterable[DocumentNode]]) -> Dict[str, str]:
    """
    Collect exportable SVG components, depth first.

    A matched component is recorded and its subtree is not searched.
    Any other node with children is searched recursively; on a duplicate
    id the last discovered name wins.

    Args:
        nodes: Nodes to scan (None or empty yields an empty dict)

    Returns:
        Mapping of node id -> component name
    """
    discovered: Dict[str, str] = {}

    for node in nodes or []:
        if is_svg_component(node):
            discovered[node.id] = node.name
        elif node.children:
            discovered.update(collect_svg_components(node.children))

    return discovered


def select_root_children(document: DocumentNode, node_ids: Optional[List[str]] = None) -> List[DocumentNode]:
    """
    Children of the document's top-level pages that should be scanned.

    With a node id filter only pages whose id is in the filter are used.
    """
    selected: List[DocumentNode] = []

    for page in document.children:
        if not node_ids or page.id in node_ids:
            selected.extend(page.children)

    return selected


def scan_document(document: DocumentNode, node_ids: Optional[List[str]] = None) -> Dict[str, str]:
    """Collect SVG components from a whole document, honoring the node id filter."""
    components = collect_svg_components(select_root_children(document, node_ids))
    logger.info(f"[Scanner] Found {len(components)} SVG components")
    return components
