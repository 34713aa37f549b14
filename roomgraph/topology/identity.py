from __future__ import annotations

from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from roomgraph.graph.model import DetectedFace, Surface


Signature = Tuple[str, ...]


def surface_signature(edge_ids: Iterable[str]) -> Signature:
    return tuple(sorted(str(e) for e in edge_ids))


def _numeric_id(surface_id: str) -> int | None:
    try:
        return int(str(surface_id), 10)
    except ValueError:
        return None


def default_surface_name(surface_id: str) -> str:
    return f"Room {surface_id}"


def resolve_surface_ids(faces: Sequence[DetectedFace], existing: Mapping[str, Surface]) -> List[Surface]:
    """Give detected faces the id, name and fill of the known surface with the same edge set.

    Unmatched faces get sequential ids after the largest numeric id known so
    far. Known surfaces whose edge set no longer appears are not carried over.
    """
    by_signature: Dict[Signature, Surface] = {}
    max_id = 0
    for surface in existing.values():
        by_signature.setdefault(surface_signature(surface.edge_ids), surface)
        n = _numeric_id(surface.id)
        if n is not None and n > max_id:
            max_id = n

    next_id = max_id + 1
    out: List[Surface] = []
    for face in faces:
        matched = by_signature.pop(surface_signature(face.edge_ids), None)
        if matched is not None:
            out.append(
                Surface(
                    id=matched.id,
                    name=matched.name,
                    edge_ids=tuple(face.edge_ids),
                    centroid=face.centroid,
                    area=face.area,
                    fill=matched.fill,
                )
            )
            continue
        sid = str(next_id)
        next_id += 1
        out.append(
            Surface(
                id=sid,
                name=default_surface_name(sid),
                edge_ids=tuple(face.edge_ids),
                centroid=face.centroid,
                area=face.area,
            )
        )
    return out
