from roomgraph.graph.model import DetectedFace, Edge, EdgeStyle, Surface, Vertex

__all__ = [
    "DetectedFace",
    "Edge",
    "EdgeStyle",
    "Surface",
    "Vertex",
]
