from roomgraph.topology.faces import build_working_graph, cycle_key, detect_faces, next_vertex_clockwise, remove_filaments
from roomgraph.topology.identity import default_surface_name, resolve_surface_ids, surface_signature

__all__ = [
    "build_working_graph",
    "cycle_key",
    "detect_faces",
    "next_vertex_clockwise",
    "remove_filaments",
    "default_surface_name",
    "resolve_surface_ids",
    "surface_signature",
]
