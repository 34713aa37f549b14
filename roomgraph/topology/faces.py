from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from roomgraph.geometry.policy import DEFAULT_POLICY, DetectionPolicy
from roomgraph.geometry.primitives import (
    Point2,
    ccw_before,
    distance,
    point_in_polygon,
    polygon_centroid,
    signed_area,
    sub,
)
from roomgraph.geometry.tolerance import EPS_POS
from roomgraph.graph.model import DetectedFace, Edge, Vertex

logger = logging.getLogger(__name__)


Pair = Tuple[str, str]
DirectedEdge = Tuple[str, str]


def pair_key(a: str, b: str) -> Pair:
    return (a, b) if a <= b else (b, a)


@dataclass
class WorkingGraph:
    adjacency: Dict[str, Set[str]] = field(default_factory=dict)
    # One representative edge id per unordered vertex pair, first inserted wins.
    edge_for_pair: Dict[Pair, str] = field(default_factory=dict)


@dataclass(frozen=True)
class _Trace:
    vertex_ids: Tuple[str, ...]
    directed: Tuple[DirectedEdge, ...]


def build_working_graph(
    vertices: Mapping[str, Vertex],
    edges: Iterable[Edge],
    policy: DetectionPolicy = DEFAULT_POLICY,
) -> WorkingGraph:
    wg = WorkingGraph()
    for edge in edges:
        a, b = edge.start_vertex_id, edge.end_vertex_id
        if a == b:
            continue
        va, vb = vertices.get(a), vertices.get(b)
        if va is None or vb is None:
            continue
        if distance(va, vb) <= policy.min_edge_length:
            continue
        key = pair_key(a, b)
        if key in wg.edge_for_pair:
            continue
        wg.edge_for_pair[key] = edge.id
        wg.adjacency.setdefault(a, set()).add(b)
        wg.adjacency.setdefault(b, set()).add(a)
    return wg


def remove_filaments(adjacency: Mapping[str, Set[str]]) -> Dict[str, Set[str]]:
    """Strip dead-end chains: peel degree-1 vertices until none are left."""
    adj = {k: set(v) for k, v in adjacency.items()}
    pending = sorted(v for v, nbrs in adj.items() if len(nbrs) <= 1)
    while pending:
        v = pending.pop()
        nbrs = adj.get(v)
        if nbrs is None or len(nbrs) > 1:
            continue
        for n in nbrs:
            adj[n].discard(v)
            if len(adj[n]) <= 1:
                pending.append(n)
        del adj[v]
    return adj


def next_vertex_clockwise(
    prev_id: str,
    curr_id: str,
    adjacency: Mapping[str, Set[str]],
    coords: Mapping[str, Point2],
) -> Optional[str]:
    # Most clockwise turn == first neighbour met sweeping counter-clockwise
    # from the direction pointing back at prev.
    candidates = sorted(n for n in adjacency.get(curr_id, ()) if n != prev_id)
    if not candidates:
        return None
    origin = coords[curr_id]
    back = sub(coords[prev_id], origin)
    best = candidates[0]
    best_vec = sub(coords[best], origin)
    for n in candidates[1:]:
        vec = sub(coords[n], origin)
        if ccw_before(back, vec, best_vec):
            best, best_vec = n, vec
    return best


def _trace_face(
    start: DirectedEdge,
    adjacency: Mapping[str, Set[str]],
    coords: Mapping[str, Point2],
    max_steps: int,
) -> Optional[_Trace]:
    vertex_ids: List[str] = []
    directed: List[DirectedEdge] = []
    prev, curr = start
    steps = 0
    while True:
        vertex_ids.append(prev)
        directed.append((prev, curr))
        nxt = next_vertex_clockwise(prev, curr, adjacency, coords)
        if nxt is None:
            return None
        prev, curr = curr, nxt
        if (prev, curr) == start:
            break
        steps += 1
        if steps > max_steps:
            logger.warning("Face trace from %s->%s exceeded %d steps; abandoned", start[0], start[1], max_steps)
            return None
    if len(vertex_ids) < 3:
        return None
    return _Trace(vertex_ids=tuple(vertex_ids), directed=tuple(directed))


def trace_all_faces(
    adjacency: Mapping[str, Set[str]],
    pairs: Sequence[Pair],
    coords: Mapping[str, Point2],
    max_steps: int,
) -> List[_Trace]:
    visited: Set[DirectedEdge] = set()
    traces: List[_Trace] = []
    for a, b in pairs:
        for start in ((a, b), (b, a)):
            if start in visited:
                continue
            trace = _trace_face(start, adjacency, coords, max_steps)
            visited.add(start)
            if trace is None:
                continue
            visited.update(trace.directed)
            traces.append(trace)
    return traces


def cycle_key(cycle: Sequence[str]) -> Tuple[str, ...]:
    """Rotation- and reflection-independent key of a closed vertex walk."""
    lo = min(cycle)
    best: Optional[Tuple[str, ...]] = None
    for seq in (list(cycle), list(reversed(cycle))):
        for i, v in enumerate(seq):
            if v != lo:
                continue
            candidate = tuple(seq[i:] + seq[:i])
            if best is None or candidate < best:
                best = candidate
    return best or ()


def component_labels(adjacency: Mapping[str, Set[str]]) -> Dict[str, int]:
    labels: Dict[str, int] = {}
    label = -1
    for root in sorted(adjacency):
        if root in labels:
            continue
        label += 1
        labels[root] = label
        stack = [root]
        while stack:
            v = stack.pop()
            for n in adjacency.get(v, ()):
                if n not in labels:
                    labels[n] = label
                    stack.append(n)
    return labels


@dataclass
class _Region:
    trace: _Trace
    points: List[Point2]
    gross_area: float
    component: int
    area: float = 0.0
    moment: Point2 = (0.0, 0.0)

    @classmethod
    def of(cls, trace: _Trace, points: List[Point2], area: float, component: int) -> "_Region":
        cx, cy = polygon_centroid(points)
        return cls(trace, points, area, component, area, (area * cx, area * cy))

    def contains(self, point: Point2) -> bool:
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        if not (min(xs) <= point[0] <= max(xs) and min(ys) <= point[1] <= max(ys)):
            return False
        return point_in_polygon(point, self.points)

    @property
    def centroid(self) -> Point2:
        if self.area <= EPS_POS:
            return polygon_centroid(self.points)
        return (self.moment[0] / self.area, self.moment[1] / self.area)


def subtract_enclosed_outlines(interior: Sequence[_Region], outlines: Sequence[_Region]) -> None:
    # A component drawn inside a room is a hole of that room: the smallest
    # enclosing face of another component loses the component's footprint.
    for outline in outlines:
        if outline.gross_area <= EPS_POS:
            continue
        anchor = outline.points[0]
        hosts = [r for r in interior if r.component != outline.component and r.contains(anchor)]
        if not hosts:
            continue
        host = min(hosts, key=lambda r: r.gross_area)
        host.area -= outline.gross_area
        host.moment = (host.moment[0] - outline.moment[0], host.moment[1] - outline.moment[1])


def detect_faces(
    vertices: Mapping[str, Vertex],
    edges: Mapping[str, Edge] | Iterable[Edge],
    policy: DetectionPolicy = DEFAULT_POLICY,
) -> List[DetectedFace]:
    """Return every minimal bounded face of the planar wall graph.

    Filaments are stripped first, then each directed edge is walked with the
    right-hand rule exactly once. Counter-clockwise walks outline a connected
    component; when that component sits inside a room of another component its
    footprint is subtracted from the room, the same way a bridged inner room
    is cut out of the walk around it. Faces whose net area does not exceed
    ``policy.min_area`` and rotated/reflected repeats are discarded; the rest
    are kept smallest first while they still add an uncovered directed edge.
    Faces come back ordered by ascending area.
    """
    edge_list = list(edges.values()) if isinstance(edges, Mapping) else list(edges)
    wg = build_working_graph(vertices, edge_list, policy)
    adjacency = remove_filaments(wg.adjacency)
    pairs = [p for p in wg.edge_for_pair if p[0] in adjacency and p[1] in adjacency[p[0]]]
    if not pairs:
        return []

    coords: Dict[str, Point2] = {vid: (float(v.x), float(v.y)) for vid, v in vertices.items() if vid in adjacency}
    max_steps = max(int(policy.step_factor) * len(vertices), 1)
    traces = trace_all_faces(adjacency, pairs, coords, max_steps)
    logger.debug("Traced %d walks over %d working edges", len(traces), len(pairs))

    components = component_labels(adjacency)
    interior: List[_Region] = []
    outlines: List[_Region] = []
    for trace in traces:
        pts = [coords[v] for v in trace.vertex_ids]
        s = signed_area(pts)
        region = _Region.of(trace, pts, abs(s), components[trace.vertex_ids[0]])
        (interior if s < 0.0 else outlines).append(region)
    subtract_enclosed_outlines(interior, outlines)

    candidates: List[Tuple[float, Tuple[str, ...], _Region]] = []
    seen: Set[Tuple[str, ...]] = set()
    for region in interior:
        if region.area <= policy.min_area:
            continue
        key = cycle_key(region.trace.vertex_ids)
        if key in seen:
            continue
        seen.add(key)
        edge_ids = tuple(wg.edge_for_pair[pair_key(u, v)] for u, v in region.trace.directed)
        candidates.append((region.area, tuple(sorted(edge_ids)), region))

    candidates.sort(key=lambda c: (c[0], c[1]))
    covered: Set[DirectedEdge] = set()
    faces: List[DetectedFace] = []
    for area, _, region in candidates:
        trace = region.trace
        if all(d in covered for d in trace.directed):
            continue
        covered.update(trace.directed)
        faces.append(
            DetectedFace(
                edge_ids=tuple(wg.edge_for_pair[pair_key(u, v)] for u, v in trace.directed),
                vertex_ids=trace.vertex_ids,
                area=float(area),
                centroid=region.centroid,
            )
        )
    logger.debug("Kept %d of %d traced faces", len(faces), len(traces))
    return faces
