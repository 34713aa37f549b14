from __future__ import annotations

from dataclasses import dataclass

from roomgraph.geometry.tolerance import EPS_LENGTH, EPS_POS, MIN_SURFACE_AREA


@dataclass(frozen=True)
class DetectionPolicy:
    min_area: float = MIN_SURFACE_AREA
    min_edge_length: float = EPS_LENGTH
    # A face walk is abandoned after step_factor * vertex_count steps.
    step_factor: int = 2


DEFAULT_POLICY = DetectionPolicy()


def scaled_detection_policy(scene_scale: float = 1.0, min_area: float | None = None) -> DetectionPolicy:
    """Scale the length/area thresholds for drawings in other units.

    ``scene_scale`` is the number of drawing units per default unit, so area
    thresholds grow with its square.
    """
    s = max(float(scene_scale), EPS_POS)
    area = float(min_area) if min_area is not None else MIN_SURFACE_AREA * s * s
    return DetectionPolicy(min_area=max(area, 0.0), min_edge_length=max(EPS_LENGTH * s, EPS_POS))
