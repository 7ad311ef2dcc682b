# QEM Tools imports

# Standard library imports
import math
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

# Third-party imports
import numpy as np
import pandas as pd

CORNER_COLUMNS = ["x_coords", "y_coords", "z_coords"]


@dataclass(frozen=True)
class Vec3:
    """Immutable 3D vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, factor: float) -> "Vec3":
        return Vec3(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Vec3":
        return Vec3(self.x / divisor, self.y / divisor, self.z / divisor)

    def __iter__(self):
        return iter((self.x, self.y, self.z))

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Color:
    """RGB color with components in 0..1."""

    r: float
    g: float
    b: float

    def __post_init__(self):
        # Clamp into range; frozen dataclass needs object.__setattr__
        for name in ("r", "g", "b"):
            object.__setattr__(self, name, min(1.0, max(0.0, float(getattr(self, name)))))

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.r, self.g, self.b)

    def with_alpha(self, alpha: float) -> Tuple[float, float, float, float]:
        return (self.r, self.g, self.b, alpha)


@dataclass(frozen=True)
class BoundingRegion:
    """
    Axis-aligned box described by its center and half-size, plus a display color.

    Attributes:
        center (Vec3): Box center.
        extent (Vec3): Half-size per axis, never negative.
        color (Color): Display color.
    """

    center: Vec3
    extent: Vec3
    color: Color

    def __post_init__(self):
        if not all(math.isfinite(v) for v in (*self.center, *self.extent)):
            raise ValueError(f"center and extent must be finite, got {self.center}, {self.extent}")
        if self.extent.x < 0 or self.extent.y < 0 or self.extent.z < 0:
            raise ValueError(f"extent must be non-negative on every axis, got {self.extent}")

    @classmethod
    def from_min_max(cls, box_min: Vec3, box_max: Vec3, color: Color) -> "BoundingRegion":
        """
        Builds a region from its min and max corners.

        Raises:
            ValueError: If max < min on any axis.
        """
        if box_max.x < box_min.x or box_max.y < box_min.y or box_max.z < box_min.z:
            raise ValueError(f"max {box_max} is below min {box_min} on at least one axis")
        return cls(center=(box_min + box_max) / 2, extent=(box_max - box_min) / 2, color=color)

    @property
    def min(self) -> Vec3:
        return self.center - self.extent

    @property
    def max(self) -> Vec3:
        return self.center + self.extent

    @property
    def size(self) -> Vec3:
        return self.extent * 2


def get_bounding_box_corners(region: BoundingRegion) -> pd.DataFrame:
    """
    Generates a Pandas DataFrame containing the 8 corner coordinates of a region.

    Args:
        region (BoundingRegion): The box to expand into corners.

    Returns:
        pd.DataFrame: 8 rows (one for each corner) with columns
                      ['x_coords', 'y_coords', 'z_coords'].
    """
    min_x, min_y, min_z = region.min
    max_x, max_y, max_z = region.max

    corners_list = [
        (min_x, min_y, min_z),  # Bottom-left-front
        (max_x, min_y, min_z),  # Bottom-right-front
        (min_x, max_y, min_z),  # Top-left-front
        (max_x, max_y, min_z),  # Top-right-front
        (min_x, min_y, max_z),  # Bottom-left-back
        (max_x, min_y, max_z),  # Bottom-right-back
        (min_x, max_y, max_z),  # Top-left-back
        (max_x, max_y, max_z),  # Top-right-back
    ]

    return pd.DataFrame(corners_list, columns=CORNER_COLUMNS)


def get_center_of_bounding_box(box_corners_df: pd.DataFrame) -> Optional[Tuple[float, float, float]]:
    """
    Calculates the center coordinate of a 3D bounding box and returns it as a tuple.

    Args:
        box_corners_df (pd.DataFrame): A Pandas DataFrame with columns
                                       ['x_coords', 'y_coords', 'z_coords']
                                       representing the corner coordinates.

    Returns:
        tuple: A tuple (x, y, z) representing the center coordinate.
               Returns None if input is invalid.
    """
    if (
        not isinstance(box_corners_df, pd.DataFrame)
        or box_corners_df.empty
        or not all(col in box_corners_df.columns for col in CORNER_COLUMNS)
    ):
        return None

    try:
        mins = box_corners_df[CORNER_COLUMNS].min()
        maxs = box_corners_df[CORNER_COLUMNS].max()
    except TypeError:
        return None

    center = (mins + maxs) / 2
    return (float(center["x_coords"]), float(center["y_coords"]), float(center["z_coords"]))


def bounding_region_from_vertices(vertices, color: Color) -> Optional[BoundingRegion]:
    """
    Computes the tight bounding region of a vertex buffer.

    Args:
        vertices: Array-like of shape (N, 3).
        color (Color): Color assigned to the resulting region.

    Returns:
        BoundingRegion or None if the buffer is empty.
    """
    points = np.asarray(vertices, dtype=float).reshape(-1, 3)
    if points.size == 0:
        return None

    box_min = Vec3(*points.min(axis=0).tolist())
    box_max = Vec3(*points.max(axis=0).tolist())
    return BoundingRegion.from_min_max(box_min, box_max, color)


def regions_to_dataframe(regions: Iterable[BoundingRegion]) -> pd.DataFrame:
    """One row per region: 1-based index, center, extent and color columns."""
    columns = [
        "region",
        "center_x", "center_y", "center_z",
        "extent_x", "extent_y", "extent_z",
        "r", "g", "b",
    ]
    rows = [
        (i, *region.center, *region.extent, *region.color.as_tuple())
        for i, region in enumerate(regions, 1)
    ]
    return pd.DataFrame(rows, columns=columns)
