"""
Storage layer for SmeltDB - the item/connection graph.

This module provides:
- ValueTable: item id -> scalar payload
- ConnectionTable: owner id -> outgoing edge set, with the endpoint
  existence guard
- ItemStore: item-level CRUD, the only user of the two tables

Invariants:
    - All state is process-local and memory-resident
    - Edges are only written between items that currently have a value
"""

from .items import Item, ItemStore, generate_item_id
from .tables import ConnectionTable, EdgeWrite, ValueTable

__all__ = [
    "Item",
    "ItemStore",
    "generate_item_id",
    "ConnectionTable",
    "EdgeWrite",
    "ValueTable",
]
