from .metadata_parser import BoundsModel, parse, parse_record, load_bounds_model, metadata_resource_path
from .fragment_assembler import (
    AssemblyContainer,
    FragmentAssembler,
    FragmentRecord,
    Placement,
    invalidate,
    scan_fragment_directory,
)
from .bounds_visualizer import BoundsVisualizer
from .fragment_importer import FragmentImporter
from .geometry_utils import BoundingRegion, Color, Vec3
from .config import ImporterSettings, VisualizerSettings
from . import config, errors, normals
