from __future__ import annotations

# Positional epsilon for near-zero distance/length checks.
EPS_POS = 1e-12

# Edges shorter than this are treated as degenerate by surface detection.
EPS_LENGTH = 1e-9

# Smallest enclosed area (square units) reported as a surface.
MIN_SURFACE_AREA = 100.0

# Wall thickness used when an edge is created without one.
DEFAULT_EDGE_THICKNESS = 4.0

# Undo/redo depth kept by CommandHistory.
DEFAULT_HISTORY_SIZE = 100

# Search radius for find_nearby_vertices when the caller does not pass one.
NEARBY_RADIUS = 10.0
