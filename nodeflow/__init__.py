"""Headless node-graph model: geometry, styles, models, connections, scenes and behavior-tree XML node models."""

__version__ = "0.1.0"

__all__ = [
    "geometry",
    "style",
    "properties",
    "registry",
    "node_state",
    "node_geometry",
    "connection",
    "node",
    "interaction",
    "scene",
    "xml_utilities",
]