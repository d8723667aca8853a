"""Core data models for workflow diagrams."""

from stagegraph.models.connector import Connector
from stagegraph.models.item import Item, ItemRole
from stagegraph.models.stage import Stage, StageRole

__all__ = [
    "Connector",
    "Item",
    "ItemRole",
    "Stage",
    "StageRole",
]
