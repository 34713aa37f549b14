from roomgraph.io.export import (
    CsvExport,
    GraphFormatError,
    graph_from_json,
    graph_to_csv,
    graph_to_json,
    read_json,
    summarize,
    write_csv,
    write_json,
)

__all__ = [
    "CsvExport",
    "GraphFormatError",
    "graph_from_json",
    "graph_to_csv",
    "graph_to_json",
    "read_json",
    "summarize",
    "write_csv",
    "write_json",
]
