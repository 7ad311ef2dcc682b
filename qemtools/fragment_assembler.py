"""
Fragment Assembler

Collects the mesh fragments the QEM builder writes for one object
(<root>/<category>/<name>/<name>_*.fbx) under a single container node, placing
them side by side along X in discovery order.

Assembly is incremental and idempotent: fragments already attached to the
container (matched by file stem) are never duplicated or moved, so the caller
can re-run it every tick while the builder is still producing files.

The assembler only sees a directory listing. Use scan_fragment_directory() to
produce one from disk; a missing directory is reported as None ("not ready").
"""

# QEM Tools imports
from qemtools import config
from qemtools.config import ImporterSettings
from qemtools.geometry_utils import Vec3

# Standard library imports
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
# Returns a loaded asset handle for a fragment file, or None if it cannot be loaded.
# Any exception it raises (FragmentLoadError, OSError, ...) is logged and the file skipped.
Loader = Callable[[Path], Any]


@dataclass(frozen=True)
class Placement:
    """Local transform of a fragment inside its container. Rotation is Euler degrees."""

    position: Vec3
    rotation_euler: Vec3
    scale: Vec3


@dataclass(frozen=True)
class FragmentRecord:
    """
    One fragment attached to a container.

    Attributes:
        source_path (Path): File the fragment was loaded from.
        logical_name (str): File stem, unique within the container.
        slot_index (int): Attachment order, drives the lateral offset.
        placement (Placement): Transform the scene collaborator should apply.
    """

    source_path: Path
    logical_name: str
    slot_index: int
    placement: Placement


@dataclass
class AssemblyContainer:
    """
    Named grouping node owning the attached fragments of one logical object.

    Attributes:
        name (str): Logical object name.
        position (Vec3): Position of the container node.
        fragments (List[FragmentRecord]): Attached fragments in attachment order.
        handles (Dict[str, Any]): Loaded asset per fragment logical name.
        invalidated (bool): Set once detach_all() ran; the container is not reused.
    """

    name: str
    position: Vec3 = field(default_factory=Vec3)
    fragments: List[FragmentRecord] = field(default_factory=list)
    handles: Dict[str, Any] = field(default_factory=dict)
    invalidated: bool = False

    def __len__(self) -> int:
        return len(self.fragments)

    def __iter__(self) -> Iterator[FragmentRecord]:
        return iter(self.fragments)

    def __contains__(self, logical_name: str) -> bool:
        return self.find(logical_name) is not None

    def find(self, logical_name: str) -> Optional[FragmentRecord]:
        for record in self.fragments:
            if record.logical_name == logical_name:
                return record
        return None

    def attach(self, record: FragmentRecord, handle: Any = None) -> None:
        if self.invalidated:
            raise ValueError(f"Container '{self.name}' has been invalidated")
        if record.logical_name in self:
            raise ValueError(f"Fragment '{record.logical_name}' is already attached to '{self.name}'")
        self.fragments.append(record)
        self.handles[record.logical_name] = handle

    def detach_all(self) -> None:
        self.fragments.clear()
        self.handles.clear()
        self.invalidated = True


def fragment_directory(root: PathLike, category: str, logical_name: str) -> Path:
    """Directory holding the fragments of one object: <root>/<category>/<logical_name>."""
    return Path(root) / category / logical_name


def scan_fragment_directory(
    root: PathLike,
    category: str,
    logical_name: str,
) -> Optional[List[Path]]:
    """
    Lists the files in an object's fragment directory.

    Returns:
        Sorted list of file paths, or None if the directory does not exist yet.
    """
    directory = fragment_directory(root, category, logical_name)
    if not directory.is_dir():
        return None
    return sorted(p for p in directory.iterdir() if p.is_file())


def invalidate(container: Optional[AssemblyContainer]) -> None:
    """Detaches every fragment of a container. Returns None, the new "no container" state."""
    if container is not None:
        logger.info(f"Invalidating container '{container.name}' ({len(container)} fragments)")
        container.detach_all()
    return None


def _normalize(entry: PathLike) -> Path:
    return Path(str(entry).replace("\\", "/"))


@dataclass
class FragmentAssembler:
    """
    Attaches newly discovered fragments to a container with deterministic placement.

    Fragment n (0-based attachment order) is placed at (object_offset * n, 0, 0),
    rotated by (0, rotation_y, 0) and scaled uniformly by scale.

    Example:
        >>> assembler = FragmentAssembler(ImporterSettings(object_offset=3))
        >>> listing = scan_fragment_directory(config.RESOURCES_DIR, config.CATEGORY, "Bunny")
        >>> container, attached = assembler.assemble("Bunny", None, listing)
    """

    settings: ImporterSettings = field(default_factory=ImporterSettings)
    loader: Optional[Loader] = None
    extension: str = config.FRAGMENT_EXTENSION

    def matches(self, logical_name: str, entry: PathLike) -> bool:
        """True if the entry is named <logical_name>_*<extension>."""
        path = _normalize(entry)
        return (
            path.name.startswith(f"{logical_name}_")
            and path.suffix.lower() == self.extension.lower()
        )

    def placement_for(self, slot_index: int) -> Placement:
        s = self.settings
        return Placement(
            position=Vec3(s.object_offset * slot_index, 0.0, 0.0),
            rotation_euler=Vec3(0.0, s.rotation_y, 0.0),
            scale=Vec3(s.scale, s.scale, s.scale),
        )

    def create_container(self, logical_name: str) -> AssemblyContainer:
        return AssemblyContainer(
            name=logical_name,
            position=Vec3(0.0, 0.0, self.settings.parent_offset),
        )

    def _load(self, path: Path) -> Tuple[bool, Any]:
        if self.loader is None:
            return True, None
        try:
            handle = self.loader(path)
        except Exception as e:
            logger.warning(f"Failed to load: {path} ({e})")
            return False, None
        if handle is None:
            logger.warning(f"Failed to load: {path}")
            return False, None
        return True, handle

    def assemble(
        self,
        logical_name: str,
        existing_container: Optional[AssemblyContainer],
        directory_listing: Optional[Sequence[PathLike]],
    ) -> Tuple[Optional[AssemblyContainer], List[FragmentRecord]]:
        """
        Attaches every not-yet-attached fragment of logical_name found in the listing.

        Args:
            logical_name: Object name; fragments are named <logical_name>_*.
            existing_container: Container from a previous call, or None.
            directory_listing: Paths in the object's fragment directory, or None
                               if that directory does not exist yet.

        Returns:
            tuple: (container, newly attached records in attachment order).
                   The container is returned unchanged (possibly None) with an
                   empty list when the directory is not ready or logical_name
                   is empty.
        """
        if not logical_name:
            logger.warning("Cannot assemble fragments without an object name")
            return existing_container, []

        if directory_listing is None:
            logger.debug(f"Fragment directory for '{logical_name}' not ready")
            return existing_container, []

        container = existing_container
        if container is None or container.invalidated:
            container = self.create_container(logical_name)
            logger.info(f"Created container '{logical_name}'")

        attached = []
        for entry in directory_listing:
            if not self.matches(logical_name, entry):
                continue

            path = _normalize(entry)
            fragment_name = path.stem
            if fragment_name in container:
                continue

            loaded, handle = self._load(path)
            if not loaded:
                continue

            slot_index = len(container)
            record = FragmentRecord(
                source_path=path,
                logical_name=fragment_name,
                slot_index=slot_index,
                placement=self.placement_for(slot_index),
            )
            container.attach(record, handle)
            attached.append(record)

        if attached:
            logger.info(f"Attached {len(attached)} fragments to '{logical_name}' ({len(container)} total)")
        return container, attached
