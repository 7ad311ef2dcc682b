"""
Fragment Importer

Per-tick driver around FragmentAssembler for one model. The host calls tick()
on its own schedule (e.g. every editor update) and realizes the returned
records as child objects of the container.

Changing the configuration calls request_invalidate(); the container is then
torn down at the start of the next tick and rebuilt from scratch.
"""

# QEM Tools imports
from qemtools import config
from qemtools.config import ImporterSettings
from qemtools.fragment_assembler import (
    AssemblyContainer,
    FragmentAssembler,
    FragmentRecord,
    Loader,
    invalidate,
    scan_fragment_directory,
)

# Standard library imports
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass
class FragmentImporter:
    """
    Keeps the assembled container of one model up to date.

    Parameters:
        model_name: Logical object name; fragments live in <root>/<category>/<model_name>.
        settings: Placement options, see ImporterSettings.
        resources_root: Root directory. Defaults to config.RESOURCES_DIR.
        category: Top-level resource folder. Defaults to config.CATEGORY.
        loader: Optional asset loader passed to the assembler.

    Example:
        >>> importer = FragmentImporter("Bunny", ImporterSettings(object_offset=2.5))
        >>> for record in importer.tick():
        ...     print(record.logical_name, record.placement.position)
    """

    model_name: str
    settings: ImporterSettings = field(default_factory=ImporterSettings)
    resources_root: Optional[Path] = None
    category: Optional[str] = None
    loader: Optional[Loader] = None

    container: Optional[AssemblyContainer] = field(init=False, default=None)
    _invalidate_pending: bool = field(init=False, default=False)
    _last_attached: int = field(init=False, default=0)

    def __post_init__(self):
        if self.resources_root is None:
            self.resources_root = config.RESOURCES_DIR
        if self.category is None:
            self.category = config.CATEGORY

    @property
    def is_idle(self) -> bool:
        return self.container is not None and self._last_attached == 0 and not self._invalidate_pending

    def request_invalidate(self) -> None:
        """Schedules teardown of the container for the next tick."""
        if self.container is not None:
            self._invalidate_pending = True

    def tick(self) -> List[FragmentRecord]:
        """
        Runs one polling step.

        Returns:
            List[FragmentRecord]: Fragments attached during this step.
        """
        if self._invalidate_pending:
            self._invalidate_pending = False
            self.container = invalidate(self.container)
            self._last_attached = 0

        if not self.model_name or self.is_idle:
            return []
        return self.rescan()

    def rescan(self) -> List[FragmentRecord]:
        """Scans the fragment directory once, even when idle."""
        if not self.model_name:
            return []

        # Settings may have changed since the last tick, build a fresh assembler
        assembler = FragmentAssembler(self.settings, loader=self.loader)
        listing = scan_fragment_directory(self.resources_root, self.category, self.model_name)
        self.container, attached = assembler.assemble(self.model_name, self.container, listing)
        self._last_attached = len(attached)
        return attached
