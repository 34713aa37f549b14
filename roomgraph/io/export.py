from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Tuple

from roomgraph.geometry.policy import DEFAULT_POLICY, DetectionPolicy
from roomgraph.geometry.primitives import distance
from roomgraph.graph.store import GraphStore

WALL_COLUMNS = ["ID", "Start X", "Start Y", "End X", "End Y", "Length (mm)"]
ROOM_COLUMNS = ["ID", "Name", "Area (m²)"]


class GraphFormatError(ValueError):
    pass


@dataclass(frozen=True)
class CsvExport:
    walls: str
    rooms: str


def graph_to_json(graph: GraphStore) -> str:
    return json.dumps(graph.to_dict(), indent=2)


def graph_from_json(text: str, *, policy: DetectionPolicy = DEFAULT_POLICY) -> GraphStore:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GraphFormatError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise GraphFormatError("Graph document must be a JSON object")
    for key in ("vertices", "edges", "surfaces"):
        if not isinstance(data.get(key, []), list):
            raise GraphFormatError(f"'{key}' must be a list")
    try:
        return GraphStore.from_dict(data, policy=policy)
    except KeyError as exc:
        raise GraphFormatError(f"Missing field {exc}") from exc
    except (TypeError, ValueError) as exc:
        raise GraphFormatError(str(exc)) from exc


def write_json(graph: GraphStore, path: Path) -> Path:
    path = Path(path).expanduser().resolve()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(graph_to_json(graph), encoding="utf-8")
    return path


def read_json(path: Path, *, policy: DetectionPolicy = DEFAULT_POLICY) -> GraphStore:
    path = Path(path).expanduser().resolve()
    return graph_from_json(path.read_text(encoding="utf-8"), policy=policy)


def _coord(value: float) -> str:
    v = float(value)
    return str(int(v)) if v.is_integer() else repr(v)


def _render(header: List[str], rows: List[List[str]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buf.getvalue()


def graph_to_csv(graph: GraphStore, pixels_per_mm: float = 0.1) -> CsvExport:
    """Walls and rooms tables; lengths in millimetres, areas in square metres.

    Edges with a missing endpoint are left out of the walls table.
    """
    ppm = float(pixels_per_mm)
    if ppm <= 0.0:
        raise ValueError(f"pixels_per_mm must be > 0, got {pixels_per_mm}")

    wall_rows: List[List[str]] = []
    for edge in graph.edges.values():
        start = graph.get_vertex(edge.start_vertex_id)
        end = graph.get_vertex(edge.end_vertex_id)
        if start is None or end is None:
            continue
        length_mm = distance(start, end) / ppm
        wall_rows.append(
            [edge.id, _coord(start.x), _coord(start.y), _coord(end.x), _coord(end.y), f"{length_mm:.2f}"]
        )

    room_rows: List[List[str]] = []
    for surface in graph.surfaces.values():
        area_m2 = surface.area / (ppm * ppm) / 1_000_000.0
        room_rows.append([surface.id, surface.name, f"{area_m2:.2f}"])

    return CsvExport(walls=_render(WALL_COLUMNS, wall_rows), rooms=_render(ROOM_COLUMNS, room_rows))


def write_csv(graph: GraphStore, out_dir: Path, pixels_per_mm: float = 0.1) -> Tuple[Path, Path]:
    out_dir = Path(out_dir).expanduser().resolve()
    out_dir.mkdir(parents=True, exist_ok=True)
    export = graph_to_csv(graph, pixels_per_mm)
    walls_path = out_dir / "walls.csv"
    rooms_path = out_dir / "rooms.csv"
    walls_path.write_text(export.walls, encoding="utf-8")
    rooms_path.write_text(export.rooms, encoding="utf-8")
    return walls_path, rooms_path


def summarize(graph: GraphStore) -> dict[str, Any]:
    c = graph.counts()
    return {
        "vertices": c.vertices,
        "edges": c.edges,
        "surfaces": [
            {"id": s.id, "name": s.name, "area": round(float(s.area), 3), "edges": len(s.edge_ids)}
            for s in sorted(graph.surfaces.values(), key=lambda s: s.area)
        ],
    }
