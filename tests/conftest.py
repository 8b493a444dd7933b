"""
Test configuration and shared fixtures

Key pieces:
- Payload builders for Figma document trees (plain dicts, like the API)
- A validated ExportConfig pointing at a temporary output directory
- Constants for the mocked Figma / CDN URLs used with respx
"""

import sys
from pathlib import Path

import pytest

# Make the package importable without installing it
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

from figma_svg_export.config import build_config
from figma_svg_export.models import DocumentNode


FILE_ID = "oQ5VCtq1r0KrPx3VpqMSX5"
FILE_URL = f"https://api.figma.com/v1/files/{FILE_ID}"
IMAGES_URL = f"https://api.figma.com/v1/images/{FILE_ID}"
CDN_URL = "https://cdn.example.com"

SVG_BODY = b'<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24"><rect width="24" height="24"/></svg>'


# ============================================
# Payload builders
# ============================================

def component_payload(node_id, name, formats=("SVG",), visible=None, children=None):
    """A COMPONENT node as returned by GET /v1/files."""
    payload = {
        "id": node_id,
        "name": name,
        "type": "COMPONENT",
        "exportSettings": [{"format": fmt, "suffix": "", "constraint": {"type": "SCALE", "value": 1}} for fmt in formats],
    }
    if visible is not None:
        payload["visible"] = visible
    if children is not None:
        payload["children"] = children
    return payload


def container_payload(node_id, children, node_type="FRAME", name=None):
    return {
        "id": node_id,
        "name": name or f"{node_type.title()} {node_id}",
        "type": node_type,
        "children": children,
    }


def document_payload(*pages):
    """A full GET /v1/files response body."""
    return {
        "name": "Icons",
        "document": container_payload("0:0", list(pages), node_type="DOCUMENT", name="Document"),
    }


def nodes_from(*payloads):
    return [DocumentNode.model_validate(payload) for payload in payloads]


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "svg_output"


@pytest.fixture
def config(output_dir):
    return build_config(
        access_token="figd_test_token",
        file_id=FILE_ID,
        output_directory=str(output_dir),
    )


@pytest.fixture
def single_icon_document():
    """One page, one frame, one exportable component."""
    return document_payload(
        container_payload("0:1", [
            container_payload("10:1", [component_payload("1:1", "icon-home")]),
        ], node_type="CANVAS", name="Page 1"),
    )
