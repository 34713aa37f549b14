from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Protocol, Sequence

from roomgraph.geometry.tolerance import DEFAULT_EDGE_THICKNESS
from roomgraph.graph.model import SURFACE_OVERRIDES, Edge, EdgeStyle, Surface, Vertex
from roomgraph.graph.store import GraphStore


def new_id(prefix: str = "") -> str:
    return f"{prefix}{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class CommandState:
    graph: GraphStore
    selected_ids: FrozenSet[str] = frozenset()

    def with_graph(self, graph: GraphStore) -> "CommandState":
        return replace(self, graph=graph)


class Command(Protocol):
    def execute(self, state: CommandState) -> CommandState: ...

    def undo(self, state: CommandState) -> CommandState: ...

    def description(self) -> str: ...


@dataclass
class SurfaceChange:
    created: Dict[str, Surface] = field(default_factory=dict)
    replaced: Dict[str, Surface] = field(default_factory=dict)


def surface_change(before: Mapping[str, Surface], after: Mapping[str, Surface]) -> SurfaceChange:
    return SurfaceChange(
        created={sid: s for sid, s in after.items() if before.get(sid) != s},
        replaced={sid: s for sid, s in before.items() if after.get(sid) != s},
    )


def revert_surfaces(graph: GraphStore, change: SurfaceChange) -> None:
    for sid in change.created:
        graph.remove_surface(sid)
    for surface in change.replaced.values():
        graph.add_surface(surface)


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


class AddVertexCommand:
    def __init__(self, vertex: Vertex) -> None:
        self.vertex = vertex
        self._applied = False

    def execute(self, state: CommandState) -> CommandState:
        self._applied = False
        if state.graph.has_vertex(self.vertex.id):
            return state
        graph = state.graph.clone()
        graph.add_vertex(self.vertex)
        self._applied = True
        return state.with_graph(graph)

    def undo(self, state: CommandState) -> CommandState:
        if not self._applied:
            return state
        graph = state.graph.clone()
        graph.remove_vertex(self.vertex.id)
        return state.with_graph(graph)

    def description(self) -> str:
        return f"Add vertex at ({self.vertex.x:g}, {self.vertex.y:g})"


class RemoveVertexCommand:
    def __init__(self, vertex_id: str) -> None:
        self.vertex_id = vertex_id
        self._removed: Optional[Vertex] = None
        self._removed_edges: List[Edge] = []
        self._change = SurfaceChange()

    def execute(self, state: CommandState) -> CommandState:
        self._removed = state.graph.get_vertex(self.vertex_id)
        if self._removed is None:
            return state
        graph = state.graph.clone()
        before = graph.surfaces
        self._removed_edges = graph.remove_vertex(self.vertex_id)
        self._change = surface_change(before, graph.surfaces)
        return state.with_graph(graph)

    def undo(self, state: CommandState) -> CommandState:
        if self._removed is None:
            return state
        graph = state.graph.clone()
        graph.add_vertex(self._removed)
        for edge in self._removed_edges:
            graph.restore_edge(edge)
        revert_surfaces(graph, self._change)
        return state.with_graph(graph)

    def description(self) -> str:
        if self._removed_edges:
            return f"Remove vertex {self.vertex_id} ({_plural(len(self._removed_edges), 'edge')})"
        return f"Remove vertex {self.vertex_id}"


class DrawEdgeCommand:
    """One drawing gesture: up to two new vertices plus the edge joining them."""

    def __init__(self, start: Vertex, end: Vertex, edge: Edge, start_exists: bool, end_exists: bool) -> None:
        self.start = start
        self.end = end
        self.edge = edge
        self.start_exists = bool(start_exists)
        self.end_exists = bool(end_exists)
        self._applied = False
        self._created: List[Surface] = []
        self._change = SurfaceChange()

    @classmethod
    def between(
        cls,
        graph: GraphStore,
        start: Vertex,
        end: Vertex,
        *,
        edge_id: Optional[str] = None,
        thickness: float = DEFAULT_EDGE_THICKNESS,
        style: EdgeStyle = EdgeStyle.SOLID,
    ) -> "DrawEdgeCommand":
        edge = Edge(
            id=edge_id or new_id("e-"),
            start_vertex_id=start.id,
            end_vertex_id=end.id,
            thickness=float(thickness),
            style=style,
        )
        return cls(start, end, edge, graph.has_vertex(start.id), graph.has_vertex(end.id))

    def execute(self, state: CommandState) -> CommandState:
        self._applied = False
        if state.graph.has_edge(self.edge.id) or self.start.id == self.end.id:
            return state
        graph = state.graph.clone()
        if not self.start_exists:
            graph.add_vertex(self.start)
        if not self.end_exists:
            graph.add_vertex(self.end)
        before = graph.surfaces
        self._created = graph.add_edge(self.edge)
        if not graph.has_edge(self.edge.id):
            return state
        self._change = surface_change(before, graph.surfaces)
        self._applied = True
        return state.with_graph(graph)

    def undo(self, state: CommandState) -> CommandState:
        if not self._applied:
            return state
        graph = state.graph.clone()
        graph.discard_edge(self.edge.id)
        if not self.end_exists:
            graph.remove_vertex(self.end.id)
        if not self.start_exists:
            graph.remove_vertex(self.start.id)
        revert_surfaces(graph, self._change)
        return state.with_graph(graph)

    def description(self) -> str:
        start_desc = "existing" if self.start_exists else "new"
        end_desc = "existing" if self.end_exists else "new"
        info = f" (created {_plural(len(self._created), 'room')})" if self._created else ""
        return f"Draw edge from {start_desc} vertex to {end_desc} vertex{info}"


class AddEdgeCommand:
    def __init__(self, edge: Edge) -> None:
        self.edge = edge
        self._applied = False
        self._created: List[Surface] = []
        self._change = SurfaceChange()

    def execute(self, state: CommandState) -> CommandState:
        self._applied = False
        g = state.graph
        if g.has_edge(self.edge.id) or not (g.has_vertex(self.edge.start_vertex_id) and g.has_vertex(self.edge.end_vertex_id)):
            return state
        graph = g.clone()
        before = graph.surfaces
        self._created = graph.add_edge(self.edge)
        self._change = surface_change(before, graph.surfaces)
        self._applied = True
        return state.with_graph(graph)

    def undo(self, state: CommandState) -> CommandState:
        if not self._applied:
            return state
        graph = state.graph.clone()
        graph.discard_edge(self.edge.id)
        revert_surfaces(graph, self._change)
        return state.with_graph(graph)

    def description(self) -> str:
        return f"Add edge from vertex {self.edge.start_vertex_id} to {self.edge.end_vertex_id}"


class RemoveEdgeCommand:
    def __init__(self, edge_id: str) -> None:
        self.edge_id = edge_id
        self._removed: Optional[Edge] = None
        self._affected: Dict[str, Surface] = {}
        self._change = SurfaceChange()

    def execute(self, state: CommandState) -> CommandState:
        self._removed = state.graph.get_edge(self.edge_id)
        if self._removed is None:
            return state
        graph = state.graph.clone()
        before = graph.surfaces
        self._affected = graph.remove_edge(self.edge_id)
        self._change = surface_change(before, graph.surfaces)
        return state.with_graph(graph)

    def undo(self, state: CommandState) -> CommandState:
        if self._removed is None:
            return state
        graph = state.graph.clone()
        graph.restore_edge(self._removed)
        revert_surfaces(graph, self._change)
        return state.with_graph(graph)

    def description(self) -> str:
        return f"Remove edge {self.edge_id}"


class SplitEdgeCommand:
    def __init__(self, edge_id: str, split_vertex: Vertex, first: Edge, second: Edge) -> None:
        self.edge_id = edge_id
        self.split_vertex = split_vertex
        self.first = first
        self.second = second
        self._original: Optional[Edge] = None
        self._vertex_created = False
        self._change = SurfaceChange()

    @classmethod
    def at_point(
        cls,
        graph: GraphStore,
        edge_id: str,
        x: float,
        y: float,
        *,
        vertex_id: Optional[str] = None,
    ) -> Optional["SplitEdgeCommand"]:
        edge = graph.get_edge(edge_id)
        if edge is None:
            return None
        vertex = Vertex(id=vertex_id or new_id("v-"), x=float(x), y=float(y))
        first = replace(edge, id=new_id("e-"), end_vertex_id=vertex.id)
        second = replace(edge, id=new_id("e-"), start_vertex_id=vertex.id)
        return cls(edge_id, vertex, first, second)

    def execute(self, state: CommandState) -> CommandState:
        self._original = state.graph.get_edge(self.edge_id)
        if self._original is None:
            return state
        graph = state.graph.clone()
        before = graph.surfaces
        self._vertex_created = not graph.has_vertex(self.split_vertex.id)
        if self._vertex_created:
            graph.add_vertex(self.split_vertex)
        graph.discard_edge(self.edge_id)
        graph.restore_edge(self.first)
        graph.add_edge(self.second)
        self._change = surface_change(before, graph.surfaces)
        return state.with_graph(graph)

    def undo(self, state: CommandState) -> CommandState:
        if self._original is None:
            return state
        graph = state.graph.clone()
        graph.discard_edge(self.first.id)
        graph.discard_edge(self.second.id)
        if self._vertex_created:
            graph.remove_vertex(self.split_vertex.id)
        graph.restore_edge(self._original)
        revert_surfaces(graph, self._change)
        return state.with_graph(graph)

    def description(self) -> str:
        return f"Split edge {self.edge_id} at ({self.split_vertex.x:g}, {self.split_vertex.y:g})"


def _surface_fits(graph: GraphStore, surface: Surface) -> bool:
    # Every boundary edge must exist and the area must clear the detection threshold.
    if not surface.edge_ids or not all(graph.has_edge(eid) for eid in surface.edge_ids):
        return False
    return float(surface.area) > graph.policy.min_area


class AddSurfaceCommand:
    def __init__(self, surface: Surface) -> None:
        self.surface = surface
        self._applied = False
        self._previous: Optional[Surface] = None

    def execute(self, state: CommandState) -> CommandState:
        self._applied = False
        if not _surface_fits(state.graph, self.surface):
            return state
        graph = state.graph.clone()
        self._previous = graph.get_surface(self.surface.id)
        graph.add_surface(self.surface)
        self._applied = True
        return state.with_graph(graph)

    def undo(self, state: CommandState) -> CommandState:
        if not self._applied:
            return state
        graph = state.graph.clone()
        graph.remove_surface(self.surface.id)
        if self._previous is not None:
            graph.add_surface(self._previous)
        return state.with_graph(graph)

    def description(self) -> str:
        return f'Add room "{self.surface.name}"'


class UpdateSurfaceCommand:
    """Rename or recolour a room. Only ``name`` and ``fill`` are applied."""

    def __init__(self, surface_id: str, **changes: Any) -> None:
        self.surface_id = surface_id
        self.changes = {k: v for k, v in changes.items() if k in SURFACE_OVERRIDES}
        self._previous: Optional[Surface] = None

    def execute(self, state: CommandState) -> CommandState:
        if not self.changes or not state.graph.has_surface(self.surface_id):
            self._previous = None
            return state
        graph = state.graph.clone()
        self._previous = graph.update_surface(self.surface_id, **self.changes)
        return state.with_graph(graph)

    def undo(self, state: CommandState) -> CommandState:
        if self._previous is None:
            return state
        graph = state.graph.clone()
        graph.add_surface(self._previous)
        return state.with_graph(graph)

    def description(self) -> str:
        return f"Update room {self.surface_id}"


class RemoveSurfaceCommand:
    def __init__(self, surface_id: str) -> None:
        self.surface_id = surface_id
        self._removed: Optional[Surface] = None

    def execute(self, state: CommandState) -> CommandState:
        if not state.graph.has_surface(self.surface_id):
            self._removed = None
            return state
        graph = state.graph.clone()
        self._removed = graph.remove_surface(self.surface_id)
        return state.with_graph(graph)

    def undo(self, state: CommandState) -> CommandState:
        if self._removed is None:
            return state
        graph = state.graph.clone()
        graph.add_surface(self._removed)
        return state.with_graph(graph)

    def description(self) -> str:
        return f"Remove room {self.surface_id}"


class DetectSurfacesCommand:
    def __init__(self) -> None:
        self._detected: List[Surface] = []
        self._change = SurfaceChange()

    def execute(self, state: CommandState) -> CommandState:
        graph = state.graph.clone()
        before = graph.surfaces
        self._detected = graph.detect_all_surfaces()
        self._change = surface_change(before, graph.surfaces)
        return state.with_graph(graph)

    def undo(self, state: CommandState) -> CommandState:
        graph = state.graph.clone()
        revert_surfaces(graph, self._change)
        return state.with_graph(graph)

    def description(self) -> str:
        return f"Detect rooms (found {_plural(len(self._detected), 'room')})"


class ClearAllCommand:
    def __init__(self) -> None:
        self._previous: Optional[CommandState] = None

    def execute(self, state: CommandState) -> CommandState:
        self._previous = CommandState(graph=state.graph.clone(), selected_ids=state.selected_ids)
        graph = state.graph.clone()
        graph.clear()
        return CommandState(graph=graph, selected_ids=frozenset())

    def undo(self, state: CommandState) -> CommandState:
        if self._previous is None:
            return state
        return CommandState(graph=self._previous.graph.clone(), selected_ids=self._previous.selected_ids)

    def description(self) -> str:
        return "Clear all"


class SelectCommand:
    def __init__(self, ids: Iterable[str], *, additive: bool = False) -> None:
        self.ids = frozenset(str(i) for i in ids)
        self.additive = bool(additive)
        self._previous: FrozenSet[str] = frozenset()

    def execute(self, state: CommandState) -> CommandState:
        self._previous = state.selected_ids
        selected = state.selected_ids | self.ids if self.additive else self.ids
        return replace(state, selected_ids=frozenset(selected))

    def undo(self, state: CommandState) -> CommandState:
        return replace(state, selected_ids=self._previous)

    def description(self) -> str:
        return f"Select {_plural(len(self.ids), 'item')}" if self.ids else "Deselect all"


class CompositeCommand:
    def __init__(self, commands: Sequence[Command], description: str) -> None:
        self.commands = list(commands)
        self._description = description

    def execute(self, state: CommandState) -> CommandState:
        current = state
        for command in self.commands:
            current = command.execute(current)
        return current

    def undo(self, state: CommandState) -> CommandState:
        current = state
        for command in reversed(self.commands):
            current = command.undo(current)
        return current

    def description(self) -> str:
        return self._description
