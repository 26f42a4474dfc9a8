"""
Configuration & Path Management
===============================
Central registry for file paths and the global constants the scene is
authored against.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_SCENE_PATH (str): Absolute path to the bundled scene description.
    SCENE_DURATION (float): Length of the virtual clock in abstract time units.
"""
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # config.py is in src/scrollscene/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_SCENE_PATH: str = os.path.join(ASSETS_PATH, "scene_default.json")

# Virtual clock
SCENE_DURATION: float = 10.0

# Pin / scrub
PIN_DISTANCE: float = 5000.0
SCRUB_RATE: float = 0.1          # fraction of remaining distance closed per frame
SCRUB_EPSILON: float = 1e-4      # below this the smoothed value snaps to the target

# World travel expressed in viewport widths (the midground slides 400vw)
TRAVEL_VIEWPORTS: float = 4.0

# Pointer follower
POINTER_RATE: float = 0.12

# Keyboard navigation
KEY_STEP: float = 100.0

# Logical scene size; the view scales this rectangle to the window
LOGICAL_WIDTH: float = 1600.0
LOGICAL_HEIGHT: float = 900.0

# Frame loop
FRAME_INTERVAL_MS: int = 16
MAX_FRAME_DT: float = 0.1        # seconds; clamps long stalls (window drag, breakpoints)

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")
