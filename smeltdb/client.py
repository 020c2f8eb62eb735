"""
Object store for SmeltDB.

This module provides the programmatic API used by presentation code:
- ObjectStore: records and relations over one in-memory item graph

Example:
    >>> with ObjectStore() as db:
    ...     contact = db.create_object({"firstName": "Ryan", "lastName": "X"})
    ...     address = db.create_object({"city": "Large Soda"})
    ...     db.relate_objects(contact["id"], {"address": address["id"]})
    ...     db.get_related_objects(contact["id"], {"address"})["address"][0]["id"] == address["id"]
    True

Invariants:
    - Every ObjectStore owns its own tables unless an ItemStore is passed in
    - Operations are synchronous and not atomic; a failure part way through
      a multi-item operation leaves the items written so far in place
    - Missing ids never raise; they read as empty records
"""

from __future__ import annotations

import logging
from collections.abc import Container, Mapping
from typing import Any

from .codec import ObjectCodec, Record, RelationManager
from .codec.relations import MemberIds
from .config import StoreSettings
from .store import ItemStore

logger = logging.getLogger(__name__)


class ObjectStore:
    """Create, read, update, delete and relate records.

    Attributes:
        settings: Effective store settings
        items: Item layer holding both tables
        codec: Record encoder/decoder
        relations: Relation manager
    """

    def __init__(
        self,
        settings: StoreSettings | None = None,
        items: ItemStore | None = None,
    ) -> None:
        """Initialize the object store.

        Args:
            settings: Optional settings (loaded from env if not provided)
            items: Optional item store to build on (fresh one if not provided)
        """
        self.settings = settings or StoreSettings()
        self.items = items or ItemStore(id_prefix=self.settings.id_prefix)
        self.codec = ObjectCodec(self.items)
        self.relations = RelationManager(
            self.items,
            self.codec,
            cardinality=self.settings.relation_cardinality,
            scalar_unrelate=self.settings.scalar_unrelate,
        )

    def __enter__(self) -> ObjectStore:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.clear()

    def create_object(self, fields: Mapping[str, str], tags: list[str] | None = None) -> Record:
        return self.codec.create_object(fields, tags)

    def read_object(self, object_id: str) -> Record:
        return self.codec.read_object(object_id)

    def read_object_tags(self, object_id: str) -> list[str]:
        return self.codec.read_object_tags(object_id)

    def update_object(self, record: Mapping[str, Any]) -> None:
        self.codec.update_object(record)

    def delete_object(self, object_id: str, deep: bool = False) -> None:
        """Delete an object.

        Args:
            object_id: Object to delete
            deep: When False (default) only the object's own items are
                deleted and related objects survive. When True, related
                objects are deleted recursively first (cycles are visited
                once).
        """
        if deep:
            self._delete_deep(object_id, set())
        else:
            self.codec.delete_object(object_id)

    def relate_objects(
        self,
        object_id: str,
        relation_map: Mapping[str, MemberIds] | None = None,
    ) -> None:
        self.relations.relate_objects(object_id, relation_map)

    def unrelate_objects(
        self,
        object_id: str,
        relation_map: Mapping[str, MemberIds] | None = None,
    ) -> None:
        self.relations.unrelate_objects(object_id, relation_map)

    def get_related_objects(
        self,
        object_id: str,
        field_filter: Container[str] | None = None,
    ) -> dict[str, Any]:
        return self.relations.get_related_objects(object_id, field_filter)

    def dump(self) -> dict[str, Any]:
        return self.items.dump()

    def stats(self) -> dict[str, int]:
        return self.items.stats()

    def clear(self) -> None:
        self.items.clear()

    def _delete_deep(self, object_id: str, visited: set[str]) -> None:
        if object_id in visited:
            return
        visited.add(object_id)

        for member_ids in self.relations.get_related_object_ids(object_id).values():
            for member_id in member_ids:
                self._delete_deep(member_id, visited)

        self.codec.delete_object(object_id)
        logger.debug("Deep-deleted object", extra={"object_id": object_id})
