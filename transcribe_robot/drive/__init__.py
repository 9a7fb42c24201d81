"""
Remote drive clients
"""

from .graph import GRAPH_BASE_URL, GraphDriveClient

__all__ = [
    "GraphDriveClient",
    "GRAPH_BASE_URL",
]
