"""
Bounds Metadata Parser

Reads the per-object "_metadata" text resource written by the QEM builder and
turns it into an ordered list of bounding regions for the debug visualizer.

Each line holds one record of nine single-space separated numbers:

    f0 f1 f2 f3 f4 f5 f6 f7 f8

The builder writes X mirrored, so the fields map to:

    maxX = -f0   minY = f1   minZ = f2
    minX = -f3   maxY = f4   maxZ = f5
    r = f6       g = f7      b = f8

Malformed lines are skipped and counted; parsing never raises.

Usage: Run directly as a script with a metadata file path to print a report.
"""

# QEM Tools imports
from qemtools import config
from qemtools.errors import MalformedRecordError, ResourceUnavailableError
from qemtools.geometry_utils import (
    CORNER_COLUMNS,
    BoundingRegion,
    Color,
    Vec3,
    bounding_region_from_vertices,
    get_bounding_box_corners,
    get_center_of_bounding_box,
    regions_to_dataframe,
)

# Standard library imports
import logging
import math
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

# Third-party imports
import pandas as pd

logger = logging.getLogger(__name__)

FIELD_COUNT = 9
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$")


@dataclass
class RejectedLine:
    line_number: int
    reason: str


@dataclass
class BoundsModel:
    """
    Ordered bounding regions parsed from one metadata resource.

    Attributes:
        regions (List[BoundingRegion]): Accepted regions in file line order.
        rejected (List[RejectedLine]): Lines that were skipped, with the reason.
        source (Optional[Path]): File the model was loaded from, None if it was
                                 parsed from text or the resource was unavailable.
    """

    regions: List[BoundingRegion] = field(default_factory=list)
    rejected: List[RejectedLine] = field(default_factory=list)
    source: Optional[Path] = None

    def __len__(self) -> int:
        return len(self.regions)

    def __iter__(self) -> Iterator[BoundingRegion]:
        return iter(self.regions)

    def __getitem__(self, index: int) -> BoundingRegion:
        return self.regions[index]

    @property
    def accepted(self) -> int:
        return len(self.regions)

    def select(self, selected_index: int = 0) -> List[BoundingRegion]:
        """
        Regions to render for a 1-based selection index.

        0 selects every region; an index past the end also falls back to every region.
        """
        if 0 < selected_index <= len(self.regions):
            return [self.regions[selected_index - 1]]
        return list(self.regions)

    def to_dataframe(self) -> pd.DataFrame:
        return regions_to_dataframe(self.regions)

    def corners(self) -> pd.DataFrame:
        """Corner coordinates of every region, 8 rows per region tagged with its 1-based index."""
        if not self.regions:
            return pd.DataFrame(columns=["region", *CORNER_COLUMNS])
        frames = [
            get_bounding_box_corners(region).assign(region=i)
            for i, region in enumerate(self.regions, 1)
        ]
        return pd.concat(frames, ignore_index=True)[["region", *CORNER_COLUMNS]]

    def center(self) -> Optional[Tuple[float, float, float]]:
        """Center of the box enclosing all regions, None for an empty model."""
        return get_center_of_bounding_box(self.corners())

    def enclosing_region(self, color: Color = Color(1.0, 1.0, 1.0)) -> Optional[BoundingRegion]:
        """Smallest box containing every region, None for an empty model."""
        if not self.regions:
            return None
        return bounding_region_from_vertices(self.corners()[CORNER_COLUMNS].to_numpy(dtype=float), color)

    def report(self) -> None:
        print(f"Accepted regions: {self.accepted:,}")
        print(f"Rejected lines:   {len(self.rejected):,}\n")

        if self.regions:
            enclosing = self.enclosing_region()
            print(f"Overall center:   ({', '.join(f'{v:.3f}' for v in self.center())})")
            print(f"Overall extent:   ({', '.join(f'{v:.3f}' for v in enclosing.extent)})\n")

            df = self.to_dataframe()
            print(f"  {'#':>5}  {'Center':<32}  {'Extent':<32}  Color")
            print(f"  {'-'*5}  {'-'*32}  {'-'*32}  {'-'*20}")
            for row in df.itertuples(index=False):
                center = f"({row.center_x:.3f}, {row.center_y:.3f}, {row.center_z:.3f})"
                extent = f"({row.extent_x:.3f}, {row.extent_y:.3f}, {row.extent_z:.3f})"
                color = f"({row.r:.2f}, {row.g:.2f}, {row.b:.2f})"
                print(f"  {row.region:>5}  {center:<32}  {extent:<32}  {color}")

        if self.rejected:
            print("\nRejected:")
            for rejected in self.rejected:
                print(f"  line {rejected.line_number:>5}: {rejected.reason}")


def _parse_number(token: str) -> float:
    if not _NUMBER_RE.match(token):
        raise MalformedRecordError(f"not a number: {token!r}")
    value = float(token)
    if not math.isfinite(value):
        raise MalformedRecordError(f"number out of range: {token!r}")
    return value


def parse_record(line: str) -> BoundingRegion:
    """
    Converts one metadata line into a bounding region.

    Args:
        line: A single record, surrounding whitespace allowed.

    Returns:
        BoundingRegion: The decoded box and color.

    Raises:
        MalformedRecordError: Wrong field count, a non-numeric or non-finite
            field, or a box whose max lies below its min on any axis.
    """
    tokens = line.strip().split(" ")
    if len(tokens) != FIELD_COUNT:
        raise MalformedRecordError(f"expected {FIELD_COUNT} fields, got {len(tokens)}", line)

    try:
        f = [_parse_number(token) for token in tokens]
    except MalformedRecordError as e:
        raise MalformedRecordError(e.reason, line) from e

    box_min = Vec3(-f[3], f[1], f[2])
    box_max = Vec3(-f[0], f[4], f[5])
    try:
        return BoundingRegion.from_min_max(box_min, box_max, Color(f[6], f[7], f[8]))
    except ValueError as e:
        raise MalformedRecordError(f"invalid box: {e}", line) from e


def parse(raw_text: str) -> BoundsModel:
    """
    Parses a metadata resource into a BoundsModel.

    Blank lines are ignored. Any other line that fails parse_record is skipped
    and recorded in BoundsModel.rejected.
    """
    model = BoundsModel()

    for line_number, line in enumerate(raw_text.splitlines(), 1):
        if not line.strip():
            continue
        try:
            model.regions.append(parse_record(line))
        except MalformedRecordError as e:
            logger.debug(f"Skipping metadata line {line_number}: {e.reason}")
            model.rejected.append(RejectedLine(line_number, e.reason))

    logger.info(f"Loaded {model.accepted} bounding regions.")
    return model


def metadata_resource_path(category: str, group_name: str, object_name: str) -> str:
    """Logical resource path: <category>/<groupName>/<objectName>_metadata."""
    return f"{category}/{group_name}/{object_name}{config.METADATA_SUFFIX}"


def _resolve_resource(resources_root: Path, resource_path: str) -> Path:
    base = resources_root / resource_path
    for extension in config.METADATA_FILE_EXTENSIONS:
        candidate = base.with_name(base.name + extension)
        if candidate.is_file():
            return candidate
    raise ResourceUnavailableError(f"No metadata resource at {base}")


def load_bounds_model(
    resource_path: str,
    resources_root: Optional[Union[str, Path]] = None,
) -> BoundsModel:
    """
    Loads and parses a metadata resource addressed by its logical path.

    Args:
        resource_path: Logical path, see metadata_resource_path().
        resources_root: Directory the logical path is resolved against.
                        Defaults to config.RESOURCES_DIR.

    Returns:
        BoundsModel: Parsed model, empty if the resource is unavailable.
    """
    root = Path(resources_root) if resources_root is not None else config.RESOURCES_DIR
    logger.debug(f"Loading bounds metadata: {resource_path}")

    try:
        path = _resolve_resource(root, resource_path)
        raw_text = path.read_text(encoding="utf-8")
    except (ResourceUnavailableError, OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to load bounds metadata '{resource_path}': {e}")
        return BoundsModel()

    model = parse(raw_text)
    model.source = path
    return model


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    )
    if len(sys.argv) != 2:
        print("Usage: python -m qemtools.metadata_parser <metadata file>")
        sys.exit(1)

    metadata_file = Path(sys.argv[1])
    print(f"Metadata file: {metadata_file}\n")
    parse(metadata_file.read_text(encoding="utf-8")).report()
