"""
QEM Tools Configuration Module
==============================

Centralized configuration for resource paths and the option groups consumed by
the bounds visualizer and the fragment importer.
"""

# fmt: off
# autopep8: off

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

# Root directory of the project
PROJECT_ROOT        = Path(__file__).parent.parent

# ============================================================================
# RESOURCE PATHS
# ============================================================================
# Generated fragments and metadata live under <RESOURCES_DIR>/<CATEGORY>/...
# Users can set QEM_RESOURCES_ROOT / QEM_CATEGORY env vars to override
BUNDLED_RESOURCES_DIR = PROJECT_ROOT / "Assets" / "Resources"
RESOURCES_DIR       = Path(os.getenv("QEM_RESOURCES_ROOT", str(BUNDLED_RESOURCES_DIR)))
CATEGORY            = os.getenv("QEM_CATEGORY", "QEM")

# ============================================================================
# FILE CONVENTIONS
# ============================================================================
FRAGMENT_EXTENSION  = ".fbx"
METADATA_SUFFIX     = "_metadata"
# Tried in order when resolving a metadata resource on disk ("" = bare path)
METADATA_FILE_EXTENSIONS: Tuple[str, ...] = (".txt", ".bytes", "")

# fmt: on
# autopep8: on


@dataclass
class ImporterSettings:
    """
    Placement options applied to every assembled fragment.

    Attributes:
        object_offset (float): Lateral spacing between fragments along X.
        rotation_y (float): Fixed yaw in degrees applied to each fragment.
        scale (float): Uniform scale applied to each fragment.
        parent_offset (float): Z position of the container node.
    """

    object_offset: float = 3.0
    rotation_y: float = 0.0
    scale: float = 1.0
    parent_offset: float = 0.0

    def __post_init__(self):
        for name in ("object_offset", "rotation_y", "scale", "parent_offset"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be numeric, got {value!r}")
            setattr(self, name, float(value))


@dataclass
class VisualizerSettings:
    """
    Options for the bounds visualizer.

    Attributes:
        draw_bounds (bool): Load and expose bounding regions at all.
        bounds_alpha (float): Alpha of the translucent fill, 0..1.
        selected_index (int): 0 = show all regions, N = show only region N.
        draw_triangle_normals (bool): Emit one segment per triangle along its face normal.
        draw_vertex_normals (bool): Emit one segment per vertex along its stored normal.
        normal_length (float): Length of normal visualization segments, >= 0.
    """

    draw_bounds: bool = True
    bounds_alpha: float = 0.15
    selected_index: int = 0
    draw_triangle_normals: bool = True
    draw_vertex_normals: bool = True
    normal_length: float = 0.1

    def __post_init__(self):
        if isinstance(self.selected_index, bool) or not isinstance(self.selected_index, int):
            raise ValueError(f"selected_index must be an integer, got {self.selected_index!r}")
        if self.selected_index < 0:
            raise ValueError("selected_index must be >= 0 (0 = show all).")
        if not 0.0 <= self.bounds_alpha <= 1.0:
            raise ValueError("bounds_alpha must be between 0 and 1.")
        if isinstance(self.normal_length, bool) or not isinstance(self.normal_length, (int, float)):
            raise ValueError(f"normal_length must be numeric, got {self.normal_length!r}")
        if self.normal_length < 0:
            raise ValueError("normal_length must be >= 0.")
