"""Lienzo - version constants.

Keep this module tiny and dependency-free. It is imported by many places
(geom, core models, store, exporter) and must not have side effects.
"""

APP_NAME = "Lienzo"
APP_SHORT = "LNZ"

# App semantic version (must match pyproject.toml).
APP_VERSION = "0.1.0"
# Interchange schema version written by `serialization.save_scene`.
SCHEMA_VERSION = 1

# Viewport limits. NOTE: every zoom mutator clamps to this range.
MIN_ZOOM = 0.1
MAX_ZOOM = 4.0
# Preset ladder used by stepped zoom in/out.
ZOOM_LEVELS = (0.1, 0.25, 0.5, 0.75, 1.0, 1.25, 1.5, 2.0, 3.0, 4.0)

# Defaults (canvas units)
DEFAULT_GRID_SIZE = 20.0
DEFAULT_MIN_SIZE = 10.0
DEFAULT_ROTATION_SNAP_DEG = 15.0
DEFAULT_ROTATION_HANDLE_OFFSET = 20.0
DEFAULT_ROTATION_HANDLE_SIZE = 16.0
DEFAULT_EXPORT_PADDING = 20.0

# Animation durations (ms)
ZOOM_ANIMATION_MS = 200.0
RESET_VIEW_ANIMATION_MS = 300.0
