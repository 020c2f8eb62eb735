"""
Object codec for SmeltDB.

Encodes a flat record of scalar fields into a constellation of items and
decodes it back:

    object item     value = tags joined by newline (default: creation time)
      |- key item   value = field name      \
      |                                      > one AttributeEdge per field
      |- value item value = field value     /
      |- relation-field item (RelationEdge, managed by RelationManager)

Invariants:
    - read_object never surfaces relation data
    - read_object always sets record["id"] to the requested id
    - update_object keeps existing value items (field identity is preserved)
    - update_object never turns a relational field into a scalar one
    - delete_object is a shallow cascade: it deletes the endpoints of the
      object's own edges and nothing reachable beyond them

How to change safely:
    - Go through ItemStore only; never touch the tables
    - A deep delete belongs to the object store facade, not here
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from ..store import ItemStore
from .edges import AttributeEdge, attribute_edges, decode_edges, relation_edges

logger = logging.getLogger(__name__)

ID_FIELD = "id"
TAG_SEPARATOR = "\n"

Record = dict[str, Any]


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ObjectCodec:
    """Create/read/update/delete records stored as item constellations.

    Example:
        >>> codec = ObjectCodec(ItemStore())
        >>> created = codec.create_object({"firstName": "Ryan"})
        >>> codec.read_object(created["id"])["firstName"]
        'Ryan'
    """

    def __init__(self, items: ItemStore) -> None:
        self.items = items

    def create_object(
        self,
        fields: Mapping[str, str],
        tags: list[str] | None = None,
    ) -> Record:
        """Create an object item plus one key/value item pair per field.

        Args:
            fields: Field name -> scalar value; an "id" entry is not stored
            tags: Tag strings for the object item (default: [creation time])

        Returns:
            The input fields merged with the new object id
        """
        if tags is None:
            tags = [utc_timestamp()]

        object_item = self.items.create_item(TAG_SEPARATOR.join(tags))

        for name, value in fields.items():
            if name == ID_FIELD:
                continue
            key_item = self.items.create_item(name)
            value_item = self.items.create_item(value)
            self.items.set_edge(object_item.id, *AttributeEdge(key_item.id, value_item.id).to_pair())

        logger.debug(
            "Created object",
            extra={"object_id": object_item.id, "fields": len(fields)},
        )

        return {**fields, ID_FIELD: object_item.id}

    def read_object(self, object_id: str) -> Record:
        """Decode an object's scalar fields.

        Key items that no longer have a value are skipped; value items that
        no longer have a value read as None.
        """
        record: Record = {}

        for edge in attribute_edges(self.items.read_item(object_id).edges):
            name = self.items.read_item(edge.key_id).value
            if name is None:
                continue
            record[name] = self.items.read_item(edge.value_id).value

        record[ID_FIELD] = object_id
        return record

    def read_object_tags(self, object_id: str) -> list[str]:
        """Split the object item's payload back into its tags."""
        value = self.items.read_item(object_id).value
        if value is None:
            return []
        return value.split(TAG_SEPARATOR)

    def get_object_value_item_id_map(self, object_id: str) -> dict[str, str]:
        """Map each scalar field name to its value item id."""
        value_item_ids: dict[str, str] = {}

        for edge in attribute_edges(self.items.read_item(object_id).edges):
            name = self.items.read_item(edge.key_id).value
            if name is not None:
                value_item_ids[name] = edge.value_id

        return value_item_ids

    def update_object(self, record: Mapping[str, Any]) -> None:
        """Apply a partial update by field name.

        Existing fields are overwritten in place. Unknown fields are added
        as new key/value pairs unless the name belongs to a relational
        field, in which case they are skipped.
        """
        object_id = record.get(ID_FIELD)
        if not object_id:
            return

        value_item_ids = self.get_object_value_item_id_map(object_id)
        relational_names = self._relational_field_names(object_id)

        for name, value in record.items():
            if name == ID_FIELD:
                continue

            value_item_id = value_item_ids.get(name)
            if value_item_id:
                self.items.update_item(value_item_id, value=value)
            elif name not in relational_names:
                key_item = self.items.create_item(name)
                value_item = self.items.create_item(value)
                self.items.set_edge(object_id, *AttributeEdge(key_item.id, value_item.id).to_pair())
            else:
                logger.debug(
                    "Skipped update of relational field",
                    extra={"object_id": object_id, "field": name},
                )

    def delete_object(self, object_id: str) -> None:
        """Delete the object item and both endpoints of each of its edges."""
        for edge in decode_edges(self.items.read_item(object_id).edges):
            from_id, to_id = edge.to_pair()
            self.items.delete_item(from_id)
            self.items.delete_item(to_id)

        self.items.delete_item(object_id)

        logger.debug("Deleted object", extra={"object_id": object_id})

    def _relational_field_names(self, object_id: str) -> set[str]:
        names = set()
        for edge in relation_edges(self.items.read_item(object_id).edges):
            name = self.items.read_item(edge.member_id).value
            if name is not None:
                names.add(name)
        return names
