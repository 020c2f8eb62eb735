"""
Primitive tables backing the item graph.

Two in-memory mappings hold all state:

    values:
        - item_id -> scalar string payload
        - a missing key means the item is absent (deleted or never created)

    connections:
        - owner_id -> {from_id: to_id}
        - the owner's outgoing edge set

Invariants:
    - An edge is only written when both endpoints have a defined value
    - Removing an edge still requires its source to have a defined value
    - Edges that become dangling after a later delete are left in place
    - get_edges never returns None

How to change safely:
    - ItemStore is the only caller; keep these classes free of object/relation
      knowledge
    - The existence guard in set_edge is the store's only integrity check;
      do not loosen or tighten it without updating the codec tests
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum

logger = logging.getLogger(__name__)


class EdgeWrite(Enum):
    """Outcome of a single edge write."""

    WRITTEN = "written"
    REMOVED = "removed"
    DROPPED_MISSING_SOURCE = "dropped_missing_source"
    DROPPED_MISSING_TARGET = "dropped_missing_target"

    @property
    def dropped(self) -> bool:
        return self in (EdgeWrite.DROPPED_MISSING_SOURCE, EdgeWrite.DROPPED_MISSING_TARGET)


class ValueTable:
    """Maps item ids to scalar payloads.

    Example:
        >>> values = ValueTable()
        >>> values.set("a", "hello")
        >>> values.get("a")
        'hello'
        >>> values.set("a", None)
        >>> values.get("a") is None
        True
    """

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def get(self, item_id: str) -> str | None:
        return self._values.get(item_id)

    def set(self, item_id: str, value: str | None) -> None:
        """Write a value, or remove the entry when value is None."""
        if value is None:
            self._values.pop(item_id, None)
        else:
            self._values[item_id] = value

    def has(self, item_id: str | None) -> bool:
        return item_id in self._values

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)

    def clear(self) -> None:
        self._values.clear()

    def __len__(self) -> int:
        return len(self._values)


class ConnectionTable:
    """Maps owner ids to their outgoing edge sets.

    Endpoint existence is checked against the ValueTable passed in at
    construction time.

    Example:
        >>> values = ValueTable()
        >>> connections = ConnectionTable(values)
        >>> values.set("k", "name"); values.set("v", "Ryan")
        >>> connections.set_edge("obj", "k", "v")
        <EdgeWrite.WRITTEN: 'written'>
        >>> connections.get_edges("obj")
        {'k': 'v'}
    """

    def __init__(self, values: ValueTable) -> None:
        self._values = values
        self._edges: dict[str, dict[str, str]] = {}

    def get_edges(self, owner_id: str) -> dict[str, str]:
        """Get a copy of the owner's edge set (empty if none)."""
        return dict(self._edges.get(owner_id, {}))

    def set_edge(self, owner_id: str, from_id: str, to_id: str | None) -> EdgeWrite:
        """Write, remove, or drop a single edge.

        Args:
            owner_id: Item owning the edge set
            from_id: Source id; must have a defined value
            to_id: Target id, or None to remove the from_id edge

        Returns:
            EdgeWrite describing what happened
        """
        if not self._values.has(from_id):
            logger.debug(
                "Dropped edge: missing source",
                extra={"owner_id": owner_id, "from": from_id, "to": to_id},
            )
            return EdgeWrite.DROPPED_MISSING_SOURCE

        if to_id is None:
            edges = self._edges.get(owner_id)
            if edges is not None:
                edges.pop(from_id, None)
                if not edges:
                    del self._edges[owner_id]
            return EdgeWrite.REMOVED

        if not self._values.has(to_id):
            logger.debug(
                "Dropped edge: missing target",
                extra={"owner_id": owner_id, "from": from_id, "to": to_id},
            )
            return EdgeWrite.DROPPED_MISSING_TARGET

        self._edges.setdefault(owner_id, {})[from_id] = to_id
        return EdgeWrite.WRITTEN

    def set_edges_from_map(
        self,
        owner_id: str,
        edge_map: Mapping[str, str | None] | None = None,
    ) -> list[EdgeWrite]:
        """Apply set_edge once per entry, in iteration order."""
        return [
            self.set_edge(owner_id, from_id, to_id)
            for from_id, to_id in (edge_map or {}).items()
        ]

    def clear_edges(self, owner_id: str) -> None:
        self._edges.pop(owner_id, None)

    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._edges.values())

    def snapshot(self) -> dict[str, dict[str, str]]:
        return {owner_id: dict(edges) for owner_id, edges in self._edges.items()}

    def clear(self) -> None:
        self._edges.clear()

    def __len__(self) -> int:
        return len(self._edges)
