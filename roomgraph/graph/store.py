from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional

from roomgraph.geometry.policy import DEFAULT_POLICY, DetectionPolicy
from roomgraph.geometry.primitives import distance
from roomgraph.geometry.tolerance import NEARBY_RADIUS
from roomgraph.graph.model import SURFACE_OVERRIDES, Edge, Surface, Vertex
from roomgraph.topology.faces import detect_faces
from roomgraph.topology.identity import resolve_surface_ids

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphCounts:
    vertices: int
    edges: int
    surfaces: int


@dataclass(frozen=True)
class GraphSnapshot:
    vertices: Dict[str, Vertex]
    edges: Dict[str, Edge]
    surfaces: Dict[str, Surface]


class GraphStore:
    """Id-keyed vertices, edges and surfaces of one floor plan.

    Values are frozen dataclasses, so ``clone`` copies the three dicts and
    shares the values. Edge mutations re-run surface detection inline.
    """

    def __init__(
        self,
        vertices: Optional[Mapping[str, Vertex]] = None,
        edges: Optional[Mapping[str, Edge]] = None,
        surfaces: Optional[Mapping[str, Surface]] = None,
        *,
        policy: DetectionPolicy = DEFAULT_POLICY,
    ) -> None:
        self._vertices: Dict[str, Vertex] = dict(vertices or {})
        self._edges: Dict[str, Edge] = dict(edges or {})
        self._surfaces: Dict[str, Surface] = dict(surfaces or {})
        self.policy = policy

    # -- vertices --------------------------------------------------------

    def add_vertex(self, vertex: Vertex) -> None:
        self._vertices[vertex.id] = vertex

    def remove_vertex(self, vertex_id: str) -> List[Edge]:
        """Remove a vertex and its incident edges; returns the removed edges."""
        removed = [e for e in self._edges.values() if e.touches(vertex_id)]
        for edge in removed:
            del self._edges[edge.id]
        self._vertices.pop(vertex_id, None)
        if removed:
            self.detect_all_surfaces()
        return removed

    def get_vertex(self, vertex_id: str) -> Optional[Vertex]:
        return self._vertices.get(vertex_id)

    @property
    def vertices(self) -> Dict[str, Vertex]:
        return dict(self._vertices)

    def has_vertex(self, vertex_id: str) -> bool:
        return vertex_id in self._vertices

    def find_nearby_vertices(self, x: float, y: float, radius: float = NEARBY_RADIUS) -> List[Vertex]:
        return [v for v in self._vertices.values() if distance(v, (x, y)) <= radius]

    def vertex_degree(self, vertex_id: str) -> int:
        return len(self.get_connected_edges(vertex_id))

    def find_isolated_vertices(self) -> List[Vertex]:
        used = set()
        for e in self._edges.values():
            used.add(e.start_vertex_id)
            used.add(e.end_vertex_id)
        return [v for v in self._vertices.values() if v.id not in used]

    # -- edges -----------------------------------------------------------

    def add_edge(self, edge: Edge) -> List[Surface]:
        """Insert an edge and re-detect; returns surfaces that did not exist before.

        An edge whose endpoints are not both present is ignored.
        """
        if edge.start_vertex_id not in self._vertices or edge.end_vertex_id not in self._vertices:
            return []
        before = dict(self._surfaces)
        self._edges[edge.id] = edge
        detected = self.detect_all_surfaces()
        return [s for s in detected if s.id not in before]

    def restore_edge(self, edge: Edge) -> None:
        self._edges[edge.id] = edge

    def remove_edge(self, edge_id: str) -> Dict[str, Surface]:
        """Remove an edge and re-detect; returns the surfaces that referenced it."""
        if edge_id not in self._edges:
            return {}
        affected = {s.id: s for s in self._surfaces.values() if edge_id in s.edge_ids}
        del self._edges[edge_id]
        self.detect_all_surfaces()
        return affected

    def discard_edge(self, edge_id: str) -> Optional[Edge]:
        return self._edges.pop(edge_id, None)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self._edges.get(edge_id)

    @property
    def edges(self) -> Dict[str, Edge]:
        return dict(self._edges)

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edges

    def get_connected_edges(self, vertex_id: str) -> List[Edge]:
        return [e for e in self._edges.values() if e.touches(vertex_id)]

    def are_vertices_connected(self, v1: str, v2: str) -> bool:
        return self.find_edge_between(v1, v2) is not None

    def find_edge_between(self, v1: str, v2: str) -> Optional[Edge]:
        for edge in self._edges.values():
            if edge.connects(v1, v2):
                return edge
        return None

    def get_neighbors(self, vertex_id: str) -> List[str]:
        out: List[str] = []
        for edge in self._edges.values():
            other = edge.other(vertex_id)
            if other is not None and other not in out:
                out.append(other)
        return out

    def build_adjacency_list(self) -> Dict[str, List[str]]:
        adjacency: Dict[str, List[str]] = {vid: [] for vid in self._vertices}
        for edge in self._edges.values():
            adjacency.setdefault(edge.start_vertex_id, []).append(edge.end_vertex_id)
            adjacency.setdefault(edge.end_vertex_id, []).append(edge.start_vertex_id)
        return adjacency

    # -- surfaces --------------------------------------------------------

    def add_surface(self, surface: Surface) -> None:
        self._surfaces[surface.id] = surface

    def remove_surface(self, surface_id: str) -> Optional[Surface]:
        return self._surfaces.pop(surface_id, None)

    def update_surface(self, surface_id: str, **changes: Any) -> Optional[Surface]:
        """Apply user overrides (``name``, ``fill``) to a surface; returns the previous value.

        Any other key is ignored with a warning.
        """
        previous = self._surfaces.get(surface_id)
        if previous is None:
            return None
        ignored = sorted(k for k in changes if k not in SURFACE_OVERRIDES)
        if ignored:
            logger.warning("Ignoring non-overridable surface fields %s on %s", ignored, surface_id)
        overrides = {k: v for k, v in changes.items() if k in SURFACE_OVERRIDES}
        self._surfaces[surface_id] = replace(previous, **overrides)
        return previous

    def get_surface(self, surface_id: str) -> Optional[Surface]:
        return self._surfaces.get(surface_id)

    @property
    def surfaces(self) -> Dict[str, Surface]:
        return dict(self._surfaces)

    def has_surface(self, surface_id: str) -> bool:
        return surface_id in self._surfaces

    def get_surfaces_containing_edge(self, edge_id: str) -> List[Surface]:
        return [s for s in self._surfaces.values() if edge_id in s.edge_ids]

    def detect_all_surfaces(self) -> List[Surface]:
        faces = detect_faces(self._vertices, self._edges, self.policy)
        resolved = resolve_surface_ids(faces, self._surfaces)
        self._surfaces = {s.id: s for s in resolved}
        logger.debug("Detected %d surfaces from %d edges", len(resolved), len(self._edges))
        return resolved

    # -- graph-wide ------------------------------------------------------

    def clear(self) -> GraphSnapshot:
        previous = self.snapshot()
        self._vertices = {}
        self._edges = {}
        self._surfaces = {}
        return previous

    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot(vertices=dict(self._vertices), edges=dict(self._edges), surfaces=dict(self._surfaces))

    def restore(
        self,
        vertices: Mapping[str, Vertex],
        edges: Mapping[str, Edge],
        surfaces: Mapping[str, Surface],
    ) -> None:
        self._vertices = dict(vertices)
        self._edges = dict(edges)
        self._surfaces = dict(surfaces)

    def counts(self) -> GraphCounts:
        return GraphCounts(vertices=len(self._vertices), edges=len(self._edges), surfaces=len(self._surfaces))

    def clone(self) -> "GraphStore":
        return GraphStore(self._vertices, self._edges, self._surfaces, policy=self.policy)

    def validate(self) -> List[str]:
        issues: List[str] = []
        for edge_id, edge in self._edges.items():
            if edge.start_vertex_id not in self._vertices:
                issues.append(f"Edge {edge_id} references missing start vertex {edge.start_vertex_id}")
            if edge.end_vertex_id not in self._vertices:
                issues.append(f"Edge {edge_id} references missing end vertex {edge.end_vertex_id}")
        for surface_id, surface in self._surfaces.items():
            for edge_id in surface.edge_ids:
                if edge_id not in self._edges:
                    issues.append(f"Surface {surface_id} references missing edge {edge_id}")
        return issues

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vertices": [v.to_dict() for v in self._vertices.values()],
            "edges": [e.to_dict() for e in self._edges.values()],
            "surfaces": [s.to_dict() for s in self._surfaces.values()],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, policy: DetectionPolicy = DEFAULT_POLICY) -> "GraphStore":
        vertices = [Vertex.from_dict(v) for v in data.get("vertices", [])]
        edges = [Edge.from_dict(e) for e in data.get("edges", [])]
        surfaces = [Surface.from_dict(s) for s in data.get("surfaces", [])]
        return cls(
            {v.id: v for v in vertices},
            {e.id: e for e in edges},
            {s.id: s for s in surfaces},
            policy=policy,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraphStore):
            return NotImplemented
        return (
            self._vertices == other._vertices
            and self._edges == other._edges
            and self._surfaces == other._surfaces
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        c = self.counts()
        return f"GraphStore(vertices={c.vertices}, edges={c.edges}, surfaces={c.surfaces})"


def create_empty_graph(policy: DetectionPolicy = DEFAULT_POLICY) -> GraphStore:
    return GraphStore(policy=policy)
