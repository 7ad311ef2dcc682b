"""
Bounds Visualizer

Caller-side cache around the metadata parser for one mesh object. The host
calls regions_to_draw() / draw_commands() on its own schedule; the model is
loaded on first use and kept until reset() is called.

normal_segments() turns the mesh buffers the host passes in into the face and
vertex normal lines to draw alongside the bounds.
"""

# QEM Tools imports
from qemtools import config
from qemtools.config import VisualizerSettings
from qemtools.geometry_utils import BoundingRegion
from qemtools.metadata_parser import BoundsModel, load_bounds_model, metadata_resource_path
from qemtools.normals import triangle_normal_segments, vertex_normal_segments

# Standard library imports
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# Third-party imports
import numpy as np

logger = logging.getLogger(__name__)

DrawCommand = Tuple[BoundingRegion, Tuple[float, float, float], Tuple[float, float, float, float]]


@dataclass
class BoundsVisualizer:
    """
    Holds the bounds model of one object and decides which regions to show.

    Parameters:
        object_name: Mesh object name, the metadata file is <object_name>_metadata.
        group_name: Name of the group (parent node) the object belongs to.
        settings: Visualizer options, see VisualizerSettings.
        resources_root: Directory resources are resolved against. Defaults to config.RESOURCES_DIR.
        category: Top-level resource folder. Defaults to config.CATEGORY.
    """

    object_name: str
    group_name: str
    settings: VisualizerSettings = field(default_factory=VisualizerSettings)
    resources_root: Optional[Path] = None
    category: Optional[str] = None

    model: Optional[BoundsModel] = field(init=False, default=None)

    def __post_init__(self):
        if self.resources_root is None:
            self.resources_root = config.RESOURCES_DIR
        if self.category is None:
            self.category = config.CATEGORY

    @property
    def resource_path(self) -> str:
        return metadata_resource_path(self.category, self.group_name, self.object_name)

    def reset(self) -> None:
        """Drops the cached model; the next draw call reloads it."""
        self.model = None

    def _ensure_model(self) -> Optional[BoundsModel]:
        if not self.settings.draw_bounds:
            return None
        if self.model is None:
            logger.debug(f"Loading bounds for '{self.object_name}': {self.resource_path}")
            model = load_bounds_model(self.resource_path, self.resources_root)
            # Not cached when the resource is unavailable, so the next call retries
            if model.source is None:
                return model
            self.model = model
        return self.model

    def regions_to_draw(self) -> List[BoundingRegion]:
        model = self._ensure_model()
        if model is None:
            return []
        return model.select(self.settings.selected_index)

    def draw_commands(self) -> List[DrawCommand]:
        """(region, wire color, translucent fill color) for each region to draw."""
        alpha = self.settings.bounds_alpha
        return [
            (region, region.color.as_tuple(), region.color.with_alpha(alpha))
            for region in self.regions_to_draw()
        ]

    def normal_segments(self, vertices, normals=None, triangles=None) -> Dict[str, np.ndarray]:
        """
        Normal lines for one mesh, scaled by settings.normal_length.

        Args:
            vertices: Array-like of shape (V, 3).
            normals: Per-vertex normals of shape (V, 3), or None if the mesh has none.
            triangles: Triangle index buffer, or None if the mesh has none.

        Returns:
            dict: {"triangle": (T, 2, 3) array, "vertex": (V, 2, 3) array}. A kind
                  that is switched off or has no input buffer is an empty (0, 2, 3) array.
        """
        length = self.settings.normal_length
        segments = {"triangle": np.empty((0, 2, 3)), "vertex": np.empty((0, 2, 3))}

        if self.settings.draw_triangle_normals and triangles is not None:
            segments["triangle"] = triangle_normal_segments(vertices, triangles, length)
        if self.settings.draw_vertex_normals and normals is not None:
            segments["vertex"] = vertex_normal_segments(vertices, normals, length)
        return segments
