from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from roomgraph.geometry.policy import DEFAULT_POLICY, DetectionPolicy
from roomgraph.graph.model import Edge, Vertex
from roomgraph.graph.store import GraphStore


@dataclass(frozen=True)
class PlanFixture:
    vertices: Tuple[Vertex, ...]
    edges: Tuple[Edge, ...]

    @property
    def vertex_map(self) -> Dict[str, Vertex]:
        return {v.id: v for v in self.vertices}

    @property
    def edge_map(self) -> Dict[str, Edge]:
        return {e.id: e for e in self.edges}

    def graph(self, *, detect: bool = True, policy: DetectionPolicy = DEFAULT_POLICY) -> GraphStore:
        g = GraphStore(self.vertex_map, self.edge_map, policy=policy)
        if detect:
            g.detect_all_surfaces()
        return g


def _plan(points: Sequence[Tuple[str, float, float]], walls: Sequence[Tuple[str, str, str]]) -> PlanFixture:
    return PlanFixture(
        vertices=tuple(Vertex(id=vid, x=float(x), y=float(y)) for vid, x, y in points),
        edges=tuple(Edge(id=eid, start_vertex_id=a, end_vertex_id=b) for eid, a, b in walls),
    )


def rectangle(x: float, y: float, width: float, height: float, prefix: str = "") -> PlanFixture:
    p = [f"{prefix}p{i}" for i in range(1, 5)]
    return _plan(
        [(p[0], x, y), (p[1], x + width, y), (p[2], x + width, y + height), (p[3], x, y + height)],
        [(f"{prefix}w{i + 1}", p[i], p[(i + 1) % 4]) for i in range(4)],
    )


def triangle(a: Tuple[float, float], b: Tuple[float, float], c: Tuple[float, float], prefix: str = "") -> PlanFixture:
    p = [f"{prefix}p{i}" for i in range(1, 4)]
    return _plan(
        [(p[0], a[0], a[1]), (p[1], b[0], b[1]), (p[2], c[0], c[1])],
        [(f"{prefix}w{i + 1}", p[i], p[(i + 1) % 3]) for i in range(3)],
    )


def two_adjacent_rooms() -> PlanFixture:
    """
    A--B--C
    |  |  |
    D--E--F
    """
    return _plan(
        [("A", 0, 0), ("B", 100, 0), ("C", 200, 0), ("D", 0, 100), ("E", 100, 100), ("F", 200, 100)],
        [
            ("w1", "A", "B"),
            ("w2", "B", "E"),
            ("w3", "E", "D"),
            ("w4", "D", "A"),
            ("w5", "B", "C"),
            ("w6", "C", "F"),
            ("w7", "F", "E"),
        ],
    )


def grid(cols: int, rows: int, cell: float = 100.0) -> PlanFixture:
    """Rectangular grid of ``cols`` x ``rows`` rooms; vertex ids are ``v{col}_{row}``."""
    points: List[Tuple[str, float, float]] = []
    for j in range(rows + 1):
        for i in range(cols + 1):
            points.append((f"v{i}_{j}", i * cell, j * cell))
    walls: List[Tuple[str, str, str]] = []
    for j in range(rows + 1):
        for i in range(cols):
            walls.append((f"h{i}_{j}", f"v{i}_{j}", f"v{i + 1}_{j}"))
    for i in range(cols + 1):
        for j in range(rows):
            walls.append((f"c{i}_{j}", f"v{i}_{j}", f"v{i}_{j + 1}"))
    return _plan(points, walls)


def four_room_grid() -> PlanFixture:
    """
    A--B--C
    |  |  |
    D--E--F
    |  |  |
    G--H--I
    """
    return _plan(
        [
            ("A", 0, 0),
            ("B", 100, 0),
            ("C", 200, 0),
            ("D", 0, 100),
            ("E", 100, 100),
            ("F", 200, 100),
            ("G", 0, 200),
            ("H", 100, 200),
            ("I", 200, 200),
        ],
        [
            ("w1", "A", "B"),
            ("w2", "B", "C"),
            ("w3", "D", "E"),
            ("w4", "E", "F"),
            ("w5", "G", "H"),
            ("w6", "H", "I"),
            ("w7", "A", "D"),
            ("w8", "D", "G"),
            ("w9", "B", "E"),
            ("w10", "E", "H"),
            ("w11", "C", "F"),
            ("w12", "F", "I"),
        ],
    )


def l_shaped_room() -> PlanFixture:
    """
    A--B--C
    |     |
    D--E  F
       |  |
       G--H
    """
    return _plan(
        [
            ("A", 0, 0),
            ("B", 100, 0),
            ("C", 200, 0),
            ("D", 0, 100),
            ("E", 100, 100),
            ("F", 200, 100),
            ("G", 100, 200),
            ("H", 200, 200),
        ],
        [
            ("w1", "A", "B"),
            ("w2", "B", "C"),
            ("w3", "C", "F"),
            ("w4", "F", "H"),
            ("w5", "H", "G"),
            ("w6", "G", "E"),
            ("w7", "E", "D"),
            ("w8", "D", "A"),
        ],
    )


def open_path() -> PlanFixture:
    # D-C is missing, so nothing closes.
    return _plan(
        [("A", 0, 0), ("B", 100, 0), ("C", 100, 100), ("D", 0, 100)],
        [("w1", "A", "B"), ("w2", "B", "C"), ("w3", "A", "D")],
    )


def three_room_l_shape() -> PlanFixture:
    """
    A--B--C
    |  |  |
    D--E--F
    |  |
    G--H
    """
    return _plan(
        [
            ("A", 0, 0),
            ("B", 100, 0),
            ("C", 200, 0),
            ("D", 0, 100),
            ("E", 100, 100),
            ("F", 200, 100),
            ("G", 0, 200),
            ("H", 100, 200),
        ],
        [
            ("w1", "A", "B"),
            ("w2", "B", "C"),
            ("w3", "D", "E"),
            ("w4", "E", "F"),
            ("w5", "G", "H"),
            ("w6", "A", "D"),
            ("w7", "D", "G"),
            ("w8", "B", "E"),
            ("w9", "E", "H"),
            ("w10", "C", "F"),
        ],
    )


def rectangle_with_filament() -> PlanFixture:
    """
    A--B--C
    |     |
    D     E
    |     |
    F--G--H
          |
          I
    """
    return _plan(
        [
            ("A", 0, 0),
            ("B", 50, 0),
            ("C", 100, 0),
            ("D", 0, 50),
            ("E", 100, 50),
            ("F", 0, 100),
            ("G", 50, 100),
            ("H", 100, 100),
            ("I", 100, 150),
        ],
        [
            ("w1", "A", "B"),
            ("w2", "B", "C"),
            ("w3", "C", "E"),
            ("w4", "E", "H"),
            ("w5", "H", "G"),
            ("w6", "G", "F"),
            ("w7", "F", "D"),
            ("w8", "D", "A"),
            ("w9", "H", "I"),
        ],
    )


def square_with_diagonal() -> PlanFixture:
    """
    A-----B
    | \\   |
    |   \\ |
    D-----C
    """
    return _plan(
        [("A", 0, 0), ("B", 100, 0), ("C", 100, 100), ("D", 0, 100)],
        [("w1", "A", "B"), ("w2", "B", "C"), ("w3", "C", "D"), ("w4", "D", "A"), ("w5", "A", "C")],
    )


def surrounded_room() -> PlanFixture:
    # 3x3 grid; the middle cell v1_1..v2_2 touches a neighbour on every side.
    return grid(3, 3)


def bridged_rooms() -> PlanFixture:
    """
    A--B======E--F
    |  |      |  |
    D--C      H--G
    """
    return _plan(
        [
            ("A", 0, 0),
            ("B", 100, 0),
            ("C", 100, 100),
            ("D", 0, 100),
            ("E", 200, 0),
            ("F", 300, 0),
            ("G", 300, 100),
            ("H", 200, 100),
        ],
        [
            ("w1", "A", "B"),
            ("w2", "B", "C"),
            ("w3", "C", "D"),
            ("w4", "D", "A"),
            ("w5", "E", "F"),
            ("w6", "F", "G"),
            ("w7", "G", "H"),
            ("w8", "H", "E"),
            ("bridge", "B", "E"),
        ],
    )
