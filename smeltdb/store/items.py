"""
Item layer for SmeltDB.

An item is the atomic unit of the graph: an id, an optional scalar value,
and the edge set it owns. ItemStore is the only component that reads or
writes the value and connection tables directly.

Invariants:
    - Ids are generated on creation and never reused
    - read_item never fails; unknown ids read as value=None, edges={}
    - delete_item is idempotent
    - An item has no role tag; whether it is a key, a value, an object or a
      relation field is decided only by how edges reference it

How to change safely:
    - Keep the codec layers talking to ItemStore, never to the tables
    - Keep id generation injectable so tests can use deterministic ids
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .tables import ConnectionTable, EdgeWrite, ValueTable

logger = logging.getLogger(__name__)


def generate_item_id(prefix: str = "") -> str:
    """Generate a new item id (UUID4, optionally prefixed)."""
    return f"{prefix}{uuid.uuid4()}"


@dataclass
class Item:
    """A single item as read from the store.

    Attributes:
        id: Opaque item identifier
        value: Scalar payload, or None when absent
        edges: Owned edge set (from_id -> to_id)
    """

    id: str
    value: str | None = None
    edges: dict[str, str] = field(default_factory=dict)


class ItemStore:
    """CRUD over single items backed by a value table and a connection table.

    Each instance owns independent tables unless tables are passed in, so
    separate stores never share state.

    Example:
        >>> items = ItemStore()
        >>> key = items.create_item("firstName")
        >>> value = items.create_item("Ryan")
        >>> obj = items.create_item("2024-01-01T00:00:00.000Z")
        >>> _ = items.update_item(obj.id, edges={key.id: value.id})
        >>> items.read_item(obj.id).edges == {key.id: value.id}
        True
    """

    def __init__(
        self,
        values: ValueTable | None = None,
        connections: ConnectionTable | None = None,
        id_factory: Callable[[], str] | None = None,
        id_prefix: str = "",
    ) -> None:
        """Initialize the item store.

        Args:
            values: Value table (a fresh one is created if not provided)
            connections: Connection table bound to ``values``
            id_factory: Callable returning new ids (defaults to prefixed UUID4)
            id_prefix: Prefix used by the default id factory
        """
        self._values = values if values is not None else ValueTable()
        self._connections = (
            connections if connections is not None else ConnectionTable(self._values)
        )
        self._id_factory = id_factory or (lambda: generate_item_id(id_prefix))

    def create_item(self, value: str | None) -> Item:
        """Allocate a fresh id and store ``value`` under it."""
        item_id = self._id_factory()
        self._values.set(item_id, value)

        logger.debug("Created item", extra={"item_id": item_id})

        return Item(id=item_id, value=value, edges={})

    def read_item(self, item_id: str) -> Item:
        return Item(
            id=item_id,
            value=self._values.get(item_id),
            edges=self._connections.get_edges(item_id),
        )

    def get_connected_items(self, item_id: str) -> list[Item]:
        """Read every item targeted by ``item_id``'s own edges (one hop)."""
        return [self.read_item(to_id) for to_id in self._connections.get_edges(item_id).values()]

    def update_item(
        self,
        item_id: str | None,
        value: str | None = None,
        edges: Mapping[str, str | None] | None = None,
    ) -> list[EdgeWrite]:
        """Update an item's value and/or edges.

        Args:
            item_id: Item to update; a falsy id makes the call a no-op
            value: New value; None leaves the current value untouched,
                while "" is a valid value and is written
            edges: Edge map applied via set_edges_from_map; a None target
                removes that edge

        Returns:
            One EdgeWrite per applied edge entry
        """
        if not item_id:
            return []

        if value is not None:
            self._values.set(item_id, value)

        return self._connections.set_edges_from_map(item_id, edges)

    def set_edge(self, owner_id: str, from_id: str, to_id: str | None) -> EdgeWrite:
        return self._connections.set_edge(owner_id, from_id, to_id)

    def delete_item(self, item_id: str) -> None:
        """Clear the item's value and its owned edge set."""
        self._values.set(item_id, None)
        self._connections.clear_edges(item_id)

        logger.debug("Deleted item", extra={"item_id": item_id})

    def exists(self, item_id: str | None) -> bool:
        return self._values.has(item_id)

    def dump(self) -> dict[str, Any]:
        """Return both tables as plain dicts (debug view)."""
        return {
            "values": self._values.snapshot(),
            "connections": self._connections.snapshot(),
        }

    def stats(self) -> dict[str, int]:
        return {
            "items": len(self._values),
            "owners": len(self._connections),
            "edges": self._connections.edge_count(),
        }

    def clear(self) -> None:
        """Drop all items and edges."""
        self._values.clear()
        self._connections.clear()
