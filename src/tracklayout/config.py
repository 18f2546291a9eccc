"""
Configuration & Editor Constants
================================
This module serves as the central registry for global constants of the editor.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (snap distance, history depth, ...)
   scattered throughout the engine.
2. Units: The model works in centimeters. The only place where the legacy
   pixel scale (1 cm = 2 px) still matters is boundary import, and the
   conversion factor lives here.

Exports:
    SNAP_DISTANCE_CM (float): Connector snap radius.
    CLICK_THRESHOLD_PX (float): Pointer travel separating a click from a drag.
    HISTORY_CAPACITY (int): Maximum number of undo snapshots.
"""

# Units
CM_TO_PX: float = 2.0

# Competition field (1170 cm x 827 cm)
DESIGN_WIDTH_CM: float = 1170.0
DESIGN_HEIGHT_CM: float = 827.0
VIEW_MARGIN_CM: float = 50.0

# Track skin
DEFAULT_TRACK_WIDTH_CM: float = 45.0
DEFAULT_TRACK_COLOR: str = "#333"

# Interaction
SNAP_DISTANCE_CM: float = 15.0
CLICK_THRESHOLD_PX: float = 5.0
ROTATION_STEP_DEG: float = 15.0
PASTE_OFFSET_CM: tuple[float, float] = (25.0, 25.0)

# View
MIN_ZOOM: float = 0.1
MAX_ZOOM: float = 5.0
WHEEL_ZOOM_STEP: float = 0.1

# History
HISTORY_CAPACITY: int = 50

# Spawn positions for new pieces (cm)
QUICK_STRAIGHT_POSITION: tuple[float, float] = (100.0, 100.0)
QUICK_CURVE_POSITION: tuple[float, float] = (200.0, 100.0)
CATALOG_POSITION: tuple[float, float] = (200.0, 200.0)

# Project defaults
DEFAULT_PROJECT_NAME: str = "New Track"
DEFAULT_PROJECT_VERSION: str = "1.0"
