"""
Codec layer for SmeltDB - records and relations on top of the item graph.

This module handles:
- Decoding edge sets into attribute edges and relation edges
- Encoding records as object items with key/value item pairs
- One-to-one and one-to-many relations via relation-field items

Invariants:
    - Edge kind is decided by endpoint equality alone (self-loop = relation)
    - Records never expose relation data; relations are read separately
"""

from .edges import AttributeEdge, RelationEdge, decode_edge, decode_edges
from .objects import ObjectCodec, Record, utc_timestamp
from .relations import RelationManager, normalize_member_ids

__all__ = [
    "AttributeEdge",
    "RelationEdge",
    "decode_edge",
    "decode_edges",
    "ObjectCodec",
    "Record",
    "utc_timestamp",
    "RelationManager",
    "normalize_member_ids",
]
