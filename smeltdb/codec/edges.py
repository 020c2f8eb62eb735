"""
Edge kinds decoded from an owner's edge set.

The connection table stores only ``from_id -> to_id`` pairs. Two kinds of
edge share that encoding:

    AttributeEdge: from_id != to_id
        from_id is a key item (value = field name),
        to_id is a value item (value = field value)

    RelationEdge: from_id == to_id
        a self-loop sentinel; the shared id is a relation-field item
        (on an object) or a related member (on a relation-field item)

The codec layers decode edge sets into these variants instead of comparing
endpoints inline. Writing goes the other way through ``to_pair``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class AttributeEdge:
    """Key/value edge encoding one scalar field."""

    key_id: str
    value_id: str

    def to_pair(self) -> tuple[str, str]:
        return self.key_id, self.value_id


@dataclass(frozen=True)
class RelationEdge:
    """Self-loop edge marking relational membership."""

    member_id: str

    def to_pair(self) -> tuple[str, str]:
        return self.member_id, self.member_id


Edge = AttributeEdge | RelationEdge


def decode_edge(from_id: str, to_id: str) -> Edge:
    if from_id == to_id:
        return RelationEdge(member_id=to_id)
    return AttributeEdge(key_id=from_id, value_id=to_id)


def decode_edges(edges: Mapping[str, str]) -> Iterator[Edge]:
    """Decode an edge set in its iteration order."""
    for from_id, to_id in edges.items():
        yield decode_edge(from_id, to_id)


def attribute_edges(edges: Mapping[str, str]) -> Iterator[AttributeEdge]:
    for edge in decode_edges(edges):
        if isinstance(edge, AttributeEdge):
            yield edge


def relation_edges(edges: Mapping[str, str]) -> Iterator[RelationEdge]:
    for edge in decode_edges(edges):
        if isinstance(edge, RelationEdge):
            yield edge


def relation_edge_map(member_ids: list[str]) -> dict[str, str]:
    """Build a self-loop edge map for the given member ids."""
    return dict(RelationEdge(member_id).to_pair() for member_id in member_ids)
