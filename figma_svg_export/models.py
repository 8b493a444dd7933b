"""
Figma SVG Export Data Models

Contains:
- NodeType: Figma node kinds the scanner distinguishes
- ExportSetting / DocumentNode: the remote document tree
- FileNameStrategy: casing strategy for written file names
- RenderOptions: options forwarded to the image render endpoint
- ExportConfig: validated, immutable run configuration
- ExportResult: summary of a finished export run
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================
# Document Tree
# ============================================

class NodeType(str, Enum):
    """Figma node types"""
    DOCUMENT = "DOCUMENT"
    CANVAS = "CANVAS"
    FRAME = "FRAME"
    GROUP = "GROUP"
    SECTION = "SECTION"
    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"
    INSTANCE = "INSTANCE"
    VECTOR = "VECTOR"


class ExportSetting(BaseModel):
    """An export declaration attached to a node in Figma"""
    model_config = ConfigDict(extra="ignore")

    format: str
    suffix: str = ""


class DocumentNode(BaseModel):
    """
    A node of the Figma document tree.

    Only the attributes used to find exportable components are kept,
    everything else in the API payload is ignored.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    name: str = ""
    type: str
    visible: bool = True
    export_settings: List[ExportSetting] = Field(default_factory=list, alias="exportSettings")
    children: List[DocumentNode] = Field(default_factory=list)


DocumentNode.model_rebuild()


# ============================================
# Naming
# ============================================

class FileNameStrategy(str, Enum):
    """Casing applied to component names when writing files"""
    CAMEL = "camel"
    PASCAL = "pascal"
    PASCAL_SNAKE = "pascalSnake"
    CONSTANT = "constant"
    KEBAB = "kebab"
    SNAKE = "snake"
    TRAIN = "train"


# ============================================
# Configuration
# ============================================

class RenderOptions(BaseModel):
    """
    Figma image render options.

    Every option is optional; when unset the Figma API default applies.
    """
    model_config = ConfigDict(frozen=True)

    scale: Optional[float] = None
    outline_text: Optional[bool] = None
    include_id: Optional[bool] = None
    include_node_id: Optional[bool] = None
    simplify_stroke: Optional[bool] = None
    contents_only: Optional[bool] = None
    use_absolute_bounds: Optional[bool] = None

    def to_query_params(self) -> Dict[str, str]:
        """Build the GET /v1/images query parameters (ids excluded)."""
        params = {"format": "svg"}
        flags = {
            "svg_outline_text": self.outline_text,
            "svg_include_id": self.include_id,
            "svg_include_node_id": self.include_node_id,
            "svg_simplify_stroke": self.simplify_stroke,
            "contents_only": self.contents_only,
            "use_absolute_bounds": self.use_absolute_bounds,
        }

        if self.scale is not None:
            params["scale"] = f"{self.scale:g}"

        for key, value in flags.items():
            if value is not None:
                params[key] = "true" if value else "false"

        return params


class ExportConfig(BaseModel):
    """Run configuration. Frozen: validation returns a new instance."""
    model_config = ConfigDict(frozen=True)

    access_token: str = ""
    file_id: str = ""
    node_ids: List[str] = Field(default_factory=list)
    output_directory: str = ""
    clear_output_directory: bool = False
    file_name_strategy: FileNameStrategy = FileNameStrategy.KEBAB

    # Optimizer: inline options win over a config file path
    svgo_config: Optional[Dict[str, Any]] = None
    svgo_config_path: Optional[str] = None

    render: RenderOptions = Field(default_factory=RenderOptions)

    @property
    def optimize(self) -> bool:
        return bool(self.svgo_config or self.svgo_config_path)


# ============================================
# Results
# ============================================

@dataclass
class ExportResult:
    """Summary of an export run."""
    components: Dict[str, str] = field(default_factory=dict)
    written_files: List[str] = field(default_factory=list)
    optimized: bool = False
    duration_seconds: float = 0.0

    @property
    def nothing_to_export(self) -> bool:
        return not self.components
