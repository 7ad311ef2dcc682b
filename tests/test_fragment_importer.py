# QEM Tools imports
from qemtools.config import ImporterSettings
from qemtools.fragment_importer import FragmentImporter
from qemtools.geometry_utils import Vec3

# Third-party imports
import pytest


class TestFragmentImporter:
    """Test suite for the per-tick FragmentImporter"""

    @pytest.fixture
    def fragment_dir(self, tmp_path):
        """Path of QEM/Bunny, not created yet"""
        return tmp_path / "QEM" / "Bunny"

    @pytest.fixture
    def importer(self, tmp_path):
        return FragmentImporter(
            "Bunny",
            ImporterSettings(object_offset=2.0),
            resources_root=tmp_path,
            category="QEM",
        )

    @staticmethod
    def add_fragments(directory, *names):
        directory.mkdir(parents=True, exist_ok=True)
        for name in names:
            (directory / name).write_text("")

    def test_waits_for_directory(self, importer, fragment_dir):
        """Test that ticks before the directory exists do nothing"""
        assert importer.tick() == []
        assert importer.container is None
        assert not importer.is_idle

        self.add_fragments(fragment_dir, "Bunny_0.fbx", "Bunny_1.fbx")
        attached = importer.tick()

        assert [r.logical_name for r in attached] == ["Bunny_0", "Bunny_1"]
        assert importer.container.name == "Bunny"

    def test_goes_idle_when_nothing_new(self, importer, fragment_dir):
        self.add_fragments(fragment_dir, "Bunny_0.fbx")
        importer.tick()
        assert not importer.is_idle

        assert importer.tick() == []
        assert importer.is_idle

        self.add_fragments(fragment_dir, "Bunny_1.fbx")
        assert importer.tick() == []

    def test_rescan_picks_up_new_fragments(self, importer, fragment_dir):
        self.add_fragments(fragment_dir, "Bunny_0.fbx")
        importer.tick()
        importer.tick()
        self.add_fragments(fragment_dir, "Bunny_1.fbx")

        attached = importer.rescan()

        assert [r.slot_index for r in attached] == [1]
        assert attached[0].placement.position == Vec3(2.0, 0.0, 0.0)

    def test_invalidate_rebuilds_on_next_tick(self, importer, fragment_dir):
        """Test deferred invalidation after a configuration change"""
        self.add_fragments(fragment_dir, "Bunny_0.fbx", "Bunny_1.fbx")
        importer.tick()
        old_container = importer.container

        importer.settings = ImporterSettings(object_offset=5.0)
        importer.request_invalidate()
        assert importer.container is old_container

        attached = importer.tick()

        assert old_container.invalidated
        assert len(old_container) == 0
        assert importer.container is not old_container
        assert [r.placement.position.x for r in attached] == [0.0, 5.0]

    def test_invalidate_without_container_is_noop(self, importer):
        importer.request_invalidate()
        assert importer.tick() == []
        assert importer.container is None

    def test_empty_model_name_does_nothing(self, tmp_path):
        importer = FragmentImporter("", resources_root=tmp_path, category="QEM")
        assert importer.tick() == []
        assert importer.rescan() == []

    def test_loader_failures_are_retried(self, tmp_path, fragment_dir):
        attempts = []

        def loader(path):
            attempts.append(path.name)
            return path if len(attempts) > 1 else None

        importer = FragmentImporter("Bunny", resources_root=tmp_path, category="QEM", loader=loader)
        self.add_fragments(fragment_dir, "Bunny_0.fbx")

        assert importer.tick() == []
        assert importer.is_idle
        assert [r.logical_name for r in importer.rescan()] == ["Bunny_0"]
