"""
Polls the QEM output folder for one model and prints every fragment as it is
attached, together with the bounds of the first fragment's metadata.

Run while the builder is writing fragments; stop with Ctrl+C.
"""

# QEM Tools imports
from qemtools import BoundsVisualizer, FragmentImporter, ImporterSettings, VisualizerSettings

# Standard library imports
import logging
import time

MODEL_NAME = "Bunny"

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
    )

    importer = FragmentImporter(MODEL_NAME, ImporterSettings(object_offset=3.0, rotation_y=180.0))

    try:
        while True:
            for record in importer.tick():
                print(f"{record.slot_index:>3}  {record.logical_name:<30} at {record.placement.position.as_tuple()}")

                visualizer = BoundsVisualizer(record.logical_name, MODEL_NAME, VisualizerSettings())
                print(f"     {len(visualizer.regions_to_draw())} bounding regions")
            time.sleep(1.0)
    except KeyboardInterrupt:
        print(f"\nStopped with {len(importer.container or [])} fragments attached.")
