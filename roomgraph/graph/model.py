from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from roomgraph.geometry.tolerance import DEFAULT_EDGE_THICKNESS


# Surface fields a user may override; the rest is derived by detection.
SURFACE_OVERRIDES = ("name", "fill")


class EdgeStyle(str, Enum):
    SOLID = "solid"
    DASHED = "dashed"


@dataclass(frozen=True)
class Vertex:
    id: str
    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "x": float(self.x), "y": float(self.y)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vertex":
        return cls(id=str(data["id"]), x=float(data["x"]), y=float(data["y"]))


@dataclass(frozen=True)
class Edge:
    id: str
    start_vertex_id: str
    end_vertex_id: str
    thickness: float = DEFAULT_EDGE_THICKNESS
    style: EdgeStyle = EdgeStyle.SOLID

    def touches(self, vertex_id: str) -> bool:
        return self.start_vertex_id == vertex_id or self.end_vertex_id == vertex_id

    def connects(self, v1: str, v2: str) -> bool:
        return (self.start_vertex_id == v1 and self.end_vertex_id == v2) or (
            self.start_vertex_id == v2 and self.end_vertex_id == v1
        )

    def other(self, vertex_id: str) -> Optional[str]:
        if self.start_vertex_id == vertex_id:
            return self.end_vertex_id
        if self.end_vertex_id == vertex_id:
            return self.start_vertex_id
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "startVertexId": self.start_vertex_id,
            "endVertexId": self.end_vertex_id,
            "thickness": float(self.thickness),
            "style": self.style.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Edge":
        style = data.get("style", EdgeStyle.SOLID.value)
        try:
            parsed = EdgeStyle(style)
        except ValueError as exc:
            raise ValueError(f"Unsupported edge style: {style}") from exc
        return cls(
            id=str(data["id"]),
            start_vertex_id=str(data["startVertexId"]),
            end_vertex_id=str(data["endVertexId"]),
            thickness=float(data.get("thickness", DEFAULT_EDGE_THICKNESS)),
            style=parsed,
        )


@dataclass(frozen=True)
class Surface:
    id: str
    name: str
    edge_ids: Tuple[str, ...]
    centroid: Tuple[float, float] = (0.0, 0.0)
    area: float = 0.0
    fill: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "edgeIds": list(self.edge_ids),
            "centroid": {"x": float(self.centroid[0]), "y": float(self.centroid[1])},
            "area": float(self.area),
        }
        if self.fill is not None:
            out["fill"] = self.fill
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Surface":
        c = data.get("centroid") or {"x": 0.0, "y": 0.0}
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", f"Room {data['id']}")),
            edge_ids=tuple(str(e) for e in data.get("edgeIds", [])),
            centroid=(float(c["x"]), float(c["y"])),
            area=float(data.get("area", 0.0)),
            fill=data.get("fill"),
        )


@dataclass(frozen=True)
class DetectedFace:
    edge_ids: Tuple[str, ...]
    vertex_ids: Tuple[str, ...]
    area: float
    centroid: Tuple[float, float]
