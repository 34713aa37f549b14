from __future__ import annotations

import pytest

from roomgraph.geometry.policy import DEFAULT_POLICY, DetectionPolicy, scaled_detection_policy
from roomgraph.geometry.primitives import (
    ccw_before,
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
from roomgraph.graph.model import Vertex


def test_distance_accepts_vertices_and_tuples() -> None:
    assert distance((0.0, 0.0), (3.0, 4.0)) == pytest.approx(5.0)
    assert distance(Vertex("a", 0.0, 0.0), Vertex("b", 6.0, 8.0)) == pytest.approx(10.0)
    assert midpoint((0.0, 0.0), (10.0, 4.0)) == (5.0, 2.0)


def test_signed_area_sign_follows_winding() -> None:
    ccw = [(0.0, 0.0), (100.0, 0.0), (100.0, 100.0), (0.0, 100.0)]
    assert signed_area(ccw) == pytest.approx(10000.0)
    assert signed_area(list(reversed(ccw))) == pytest.approx(-10000.0)
    assert polygon_area(list(reversed(ccw))) == pytest.approx(10000.0)
    assert signed_area([(0.0, 0.0), (1.0, 1.0)]) == 0.0


def test_polygon_centroid_is_area_weighted() -> None:
    l_shape = [(0.0, 0.0), (200.0, 0.0), (200.0, 100.0), (100.0, 100.0), (100.0, 200.0), (0.0, 200.0)]
    cx, cy = polygon_centroid(l_shape)
    # Three unit cells at (50,50), (150,50), (50,150).
    assert cx == pytest.approx(250.0 / 3.0)
    assert cy == pytest.approx(250.0 / 3.0)


def test_polygon_centroid_degenerate_falls_back_to_mean() -> None:
    assert polygon_centroid([(0.0, 0.0), (10.0, 0.0), (20.0, 0.0)]) == pytest.approx((10.0, 0.0))


def test_point_to_segment_distance_clamps_to_endpoints() -> None:
    proj = point_to_segment_distance((50.0, 10.0), (0.0, 0.0), (100.0, 0.0))
    assert proj.distance == pytest.approx(10.0)
    assert proj.closest == pytest.approx((50.0, 0.0))
    assert proj.t == pytest.approx(0.5)

    past_end = point_to_segment_distance((130.0, 40.0), (0.0, 0.0), (100.0, 0.0))
    assert past_end.t == 1.0
    assert past_end.distance == pytest.approx(50.0)


def test_is_point_on_segment_excludes_endpoint_regions() -> None:
    assert is_point_on_segment((50.0, 3.0), (0.0, 0.0), (100.0, 0.0))
    assert not is_point_on_segment((50.0, 8.0), (0.0, 0.0), (100.0, 0.0))
    assert not is_point_on_segment((5.0, 0.0), (0.0, 0.0), (100.0, 0.0))
    assert not is_point_on_segment((95.0, 0.0), (0.0, 0.0), (100.0, 0.0))


def test_segments_intersect_only_for_proper_crossings() -> None:
    assert segments_intersect((0, 0), (100, 100), (0, 100), (100, 0))
    assert not segments_intersect((0, 0), (100, 0), (0, 10), (100, 10))
    # Touching at a shared endpoint is not a crossing.
    assert not segments_intersect((0, 0), (100, 0), (100, 0), (100, 100))


def test_ccw_before_orders_directions_around_reference() -> None:
    back = (-1.0, 0.0)
    down = (0.0, -1.0)
    right = (1.0, 0.0)
    up = (0.0, 1.0)
    assert ccw_before(back, down, right)
    assert ccw_before(back, right, up)
    assert ccw_before(back, down, up)
    assert not ccw_before(back, up, down)
    # The reference direction itself sorts last.
    assert ccw_before(back, up, back)


def test_scaled_detection_policy_scales_area_quadratically() -> None:
    p = scaled_detection_policy(10.0)
    assert p.min_area == pytest.approx(DEFAULT_POLICY.min_area * 100.0)
    assert p.min_edge_length > DEFAULT_POLICY.min_edge_length
    assert scaled_detection_policy(1.0, min_area=5.0).min_area == 5.0
    assert DetectionPolicy() == DEFAULT_POLICY


def test_point_in_polygon_handles_concave_outlines() -> None:
    l_shape = [(0, 0), (200, 0), (200, 100), (100, 100), (100, 200), (0, 200)]
    assert point_in_polygon((50, 150), l_shape)
    assert point_in_polygon(Vertex("p", 150.0, 50.0), l_shape)
    assert not point_in_polygon((150, 150), l_shape)
    assert not point_in_polygon((-1, 50), l_shape)
