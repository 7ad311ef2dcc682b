# QEM Tools imports
from qemtools.geometry_utils import (
    BoundingRegion,
    Color,
    Vec3,
    bounding_region_from_vertices,
    get_bounding_box_corners,
    get_center_of_bounding_box,
    regions_to_dataframe,
)

# Third-party imports
import numpy as np
import pandas as pd
import pytest


# Test fixtures
@pytest.fixture
def red():
    return Color(1.0, 0.0, 0.0)


@pytest.fixture
def unit_region(red):
    """Box from (1,2,0) to (3,4,1)"""
    return BoundingRegion.from_min_max(Vec3(1.0, 2.0, 0.0), Vec3(3.0, 4.0, 1.0), red)


@pytest.fixture
def empty_dataframe():
    """Empty DataFrame for testing edge cases"""
    return pd.DataFrame()


@pytest.fixture
def invalid_columns_df():
    """DataFrame with wrong column names"""
    return pd.DataFrame({"x": [1.0, 2.0], "y": [3.0, 4.0], "z": [5.0, 6.0]})


class TestVec3:
    """Tests for the Vec3 value type"""

    def test_arithmetic(self):
        a = Vec3(1.0, 2.0, 3.0)
        b = Vec3(3.0, 2.0, 1.0)

        assert a + b == Vec3(4.0, 4.0, 4.0)
        assert a - b == Vec3(-2.0, 0.0, 2.0)
        assert a * 2 == Vec3(2.0, 4.0, 6.0)
        assert 2 * a == Vec3(2.0, 4.0, 6.0)
        assert (a + b) / 2 == Vec3(2.0, 2.0, 2.0)

    def test_unpacking(self):
        x, y, z = Vec3(1.0, 2.0, 3.0)
        assert (x, y, z) == (1.0, 2.0, 3.0)

    def test_is_immutable(self):
        with pytest.raises(AttributeError):
            Vec3().x = 1.0


class TestColor:
    """Tests for the Color value type"""

    def test_clamps_components(self):
        assert Color(2.0, -1.0, 0.5).as_tuple() == (1.0, 0.0, 0.5)

    def test_with_alpha(self):
        assert Color(0.2, 0.4, 0.6).with_alpha(0.15) == (0.2, 0.4, 0.6, 0.15)


class TestBoundingRegion:
    """Tests for BoundingRegion construction"""

    def test_from_min_max(self, unit_region):
        assert unit_region.center == Vec3(2.0, 3.0, 0.5)
        assert unit_region.extent == Vec3(1.0, 1.0, 0.5)
        assert unit_region.size == Vec3(2.0, 2.0, 1.0)

    def test_from_min_max_rejects_inverted_axis(self, red):
        with pytest.raises(ValueError):
            BoundingRegion.from_min_max(Vec3(0.0, 0.0, 1.0), Vec3(1.0, 1.0, 0.0), red)

    def test_negative_extent_rejected(self, red):
        with pytest.raises(ValueError):
            BoundingRegion(center=Vec3(), extent=Vec3(1.0, -1.0, 1.0), color=red)

    @pytest.mark.parametrize(
        "center, extent",
        [
            (Vec3(), Vec3(float("nan"), 1.0, 1.0)),
            (Vec3(), Vec3(1.0, float("inf"), 1.0)),
            (Vec3(0.0, 0.0, float("-inf")), Vec3(1.0, 1.0, 1.0)),
        ],
    )
    def test_non_finite_values_rejected(self, red, center, extent):
        with pytest.raises(ValueError, match="must be finite"):
            BoundingRegion(center=center, extent=extent, color=red)

    def test_from_min_max_rejects_overflowing_extent(self, red):
        with pytest.raises(ValueError, match="must be finite"):
            BoundingRegion.from_min_max(Vec3(-1e308, 0.0, 0.0), Vec3(1e308, 0.0, 0.0), red)


class TestGetBoundingBoxCorners:
    """Tests for get_bounding_box_corners function"""

    def test_returns_eight_corners(self, unit_region):
        result = get_bounding_box_corners(unit_region)

        assert isinstance(result, pd.DataFrame)
        assert len(result) == 8
        assert list(result.columns) == ["x_coords", "y_coords", "z_coords"]

        assert result["x_coords"].min() == 1.0
        assert result["x_coords"].max() == 3.0
        assert result["y_coords"].min() == 2.0
        assert result["y_coords"].max() == 4.0
        assert result["z_coords"].min() == 0.0
        assert result["z_coords"].max() == 1.0

    def test_degenerate_region_has_identical_corners(self, red):
        point = Vec3(1.5, 2.5, 3.5)
        result = get_bounding_box_corners(BoundingRegion.from_min_max(point, point, red))

        assert all(result["x_coords"] == 1.5)
        assert all(result["y_coords"] == 2.5)
        assert all(result["z_coords"] == 3.5)


class TestGetCenterOfBoundingBox:
    """Tests for get_center_of_bounding_box function"""

    def test_corners_to_center_matches_region(self, unit_region):
        center = get_center_of_bounding_box(get_bounding_box_corners(unit_region))
        assert center == unit_region.center.as_tuple()

    def test_empty_dataframe_returns_none(self, empty_dataframe):
        assert get_center_of_bounding_box(empty_dataframe) is None

    def test_missing_columns_returns_none(self, invalid_columns_df):
        assert get_center_of_bounding_box(invalid_columns_df) is None

    def test_invalid_input_returns_none(self):
        assert get_center_of_bounding_box("not a dataframe") is None


class TestBoundingRegionFromVertices:
    """Tests for bounding_region_from_vertices function"""

    def test_tight_bounds(self, red):
        vertices = np.array([[0.0, 0.0, 0.0], [2.0, -1.0, 4.0], [1.0, 3.0, 2.0]])
        region = bounding_region_from_vertices(vertices, red)

        assert region.min == Vec3(0.0, -1.0, 0.0)
        assert region.max == Vec3(2.0, 3.0, 4.0)
        assert region.color == red

    def test_flat_buffer(self, red):
        region = bounding_region_from_vertices([0, 0, 0, 1, 1, 1], red)
        assert region.center == Vec3(0.5, 0.5, 0.5)

    def test_empty_buffer_returns_none(self, red):
        assert bounding_region_from_vertices([], red) is None


class TestRegionsToDataframe:
    """Tests for regions_to_dataframe function"""

    def test_one_row_per_region(self, unit_region):
        df = regions_to_dataframe([unit_region, unit_region])

        assert len(df) == 2
        assert list(df["region"]) == [1, 2]
        assert df.loc[0, "center_y"] == 3.0
        assert df.loc[1, "extent_z"] == 0.5
        assert df.loc[0, "r"] == 1.0

    def test_empty(self):
        df = regions_to_dataframe([])
        assert df.empty
        assert "center_x" in df.columns
