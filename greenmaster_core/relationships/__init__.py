"""
Relationships Module

Connection filtering and radial layout for the relationship map.
"""

from greenmaster_core.relationships.graph import (
    Connection,
    ConnectionFilter,
    ConnectionStatus,
    Hub,
    PersonNode,
    RoleCategory,
    affinity_color,
    build_connections,
    layout_hubs,
    ring_positions,
    role_category,
    tenure,
)

__all__ = [
    "Connection",
    "ConnectionFilter",
    "ConnectionStatus",
    "Hub",
    "PersonNode",
    "RoleCategory",
    "affinity_color",
    "build_connections",
    "layout_hubs",
    "ring_positions",
    "role_category",
    "tenure",
]
