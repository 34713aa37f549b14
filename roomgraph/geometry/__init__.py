from roomgraph.geometry.policy import DEFAULT_POLICY, DetectionPolicy, scaled_detection_policy
from roomgraph.geometry.primitives import (
    Point2,
    SegmentProjection,
    distance,
    is_point_on_segment,
    midpoint,
    point_in_polygon,
    point_to_segment_distance,
    polygon_area,
    polygon_centroid,
    segments_intersect,
    signed_area,
)

__all__ = [
    "DEFAULT_POLICY",
    "DetectionPolicy",
    "scaled_detection_policy",
    "Point2",
    "SegmentProjection",
    "distance",
    "is_point_on_segment",
    "midpoint",
    "point_in_polygon",
    "point_to_segment_distance",
    "polygon_area",
    "polygon_centroid",
    "segments_intersect",
    "signed_area",
]
