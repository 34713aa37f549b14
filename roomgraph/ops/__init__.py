from roomgraph.ops.commands import (
    AddEdgeCommand,
    AddSurfaceCommand,
    AddVertexCommand,
    ClearAllCommand,
    Command,
    CommandState,
    CompositeCommand,
    DetectSurfacesCommand,
    DrawEdgeCommand,
    RemoveEdgeCommand,
    RemoveSurfaceCommand,
    RemoveVertexCommand,
    SelectCommand,
    SplitEdgeCommand,
    UpdateSurfaceCommand,
    new_id,
)
from roomgraph.ops.history import CommandHistory, EditSession

__all__ = [
    "Command",
    "CommandState",
    "AddVertexCommand",
    "RemoveVertexCommand",
    "DrawEdgeCommand",
    "AddEdgeCommand",
    "RemoveEdgeCommand",
    "SplitEdgeCommand",
    "AddSurfaceCommand",
    "UpdateSurfaceCommand",
    "RemoveSurfaceCommand",
    "DetectSurfacesCommand",
    "ClearAllCommand",
    "SelectCommand",
    "CompositeCommand",
    "CommandHistory",
    "EditSession",
    "new_id",
]
