"""
Relation manager for SmeltDB.

Relations reuse the object's edge set, marked with self-loop edges:

    object item
      |- relation-field item  (field_item_id -> field_item_id)
           value = field name
           |- member_id -> member_id   for every related object

Invariants:
    - A field name that is a scalar field of the object is never related
    - At most one relation-field item exists per field name and object
    - A relation-field item with no members is deleted, and its edge is
      removed from the object before the item itself is deleted
    - Member edges to objects deleted later are left in place

How to change safely:
    - Keep the self-loop encoding; read_object relies on it to skip
      relation data
    - The scalar-unrelate and cardinality modes are compatibility switches;
      keep the defaults stable
"""

from __future__ import annotations

import logging
from collections.abc import Container, Iterable, Mapping
from typing import Any, Union

from ..config import RelationCardinality, ScalarUnrelate
from ..store import ItemStore
from .edges import relation_edge_map, relation_edges
from .objects import ObjectCodec, Record

logger = logging.getLogger(__name__)

MemberIds = Union[str, Iterable[str]]


def normalize_member_ids(members: MemberIds | None) -> list[str]:
    """Turn a single id or an iterable of ids into a de-duplicated list."""
    if members is None:
        return []
    if isinstance(members, str):
        return [members] if members else []
    return list(dict.fromkeys(member for member in members if member))


class RelationManager:
    """Adds, removes and resolves relations between objects.

    Attributes:
        items: Backing item store
        codec: Object codec used to read related objects
        cardinality: Result shape for get_related_objects
        scalar_unrelate: Meaning of a single id passed to unrelate_objects

    Example:
        >>> items = ItemStore()
        >>> codec = ObjectCodec(items)
        >>> relations = RelationManager(items, codec)
        >>> contact = codec.create_object({"firstName": "Ryan"})
        >>> address = codec.create_object({"city": "Large Soda"})
        >>> relations.relate_objects(contact["id"], {"address": address["id"]})
        >>> relations.get_related_objects(contact["id"])["address"][0]["city"]
        'Large Soda'
    """

    def __init__(
        self,
        items: ItemStore,
        codec: ObjectCodec,
        cardinality: RelationCardinality = RelationCardinality.LIST,
        scalar_unrelate: ScalarUnrelate = ScalarUnrelate.CLEAR_FIELD,
    ) -> None:
        self.items = items
        self.codec = codec
        self.cardinality = cardinality
        self.scalar_unrelate = scalar_unrelate

    def get_object_relational_field_item_id_map(
        self,
        object_id: str,
        field_filter: Container[str] | None = None,
    ) -> dict[str, str]:
        """Map relational field names to their relation-field item ids.

        Args:
            object_id: Object to scan
            field_filter: Field names to include (a set, list or mapping);
                None includes every field

        Returns:
            Field name -> relation-field item id
        """
        field_item_ids: dict[str, str] = {}

        for edge in relation_edges(self.items.read_item(object_id).edges):
            name = self.items.read_item(edge.member_id).value
            if name is None:
                continue
            if field_filter is None or name in field_filter:
                field_item_ids[name] = edge.member_id

        return field_item_ids

    def relate_objects(
        self,
        object_id: str,
        relation_map: Mapping[str, MemberIds] | None = None,
    ) -> None:
        """Relate an object to other objects, per field.

        Members are added to the field's existing relation-field item when
        there is one; otherwise a new relation-field item is created and
        attached. Member ids that do not exist are dropped by the edge
        guard, and a newly created field that ends up with no members is
        removed again.

        Args:
            object_id: Object owning the relations
            relation_map: Field name -> member id or list of member ids
        """
        if not self.items.exists(object_id):
            logger.debug("Skipped relate on missing object", extra={"object_id": object_id})
            return

        value_item_ids = self.codec.get_object_value_item_id_map(object_id)
        field_item_ids = self.get_object_relational_field_item_id_map(object_id)

        for name, members in (relation_map or {}).items():
            if name in value_item_ids:
                logger.debug(
                    "Skipped relate on scalar field",
                    extra={"object_id": object_id, "field": name},
                )
                continue

            member_ids = normalize_member_ids(members)
            if not member_ids:
                continue

            field_item_id = field_item_ids.get(name)
            created = field_item_id is None
            if created:
                field_item_id = self.items.create_item(name).id
                self.items.update_item(object_id, edges=relation_edge_map([field_item_id]))
                field_item_ids[name] = field_item_id

            self.items.update_item(field_item_id, edges=relation_edge_map(member_ids))

            if created and not self.items.read_item(field_item_id).edges:
                self._remove_field(object_id, field_item_id)
                del field_item_ids[name]

            logger.debug(
                "Related objects",
                extra={"object_id": object_id, "field": name, "members": member_ids},
            )

    def unrelate_objects(
        self,
        object_id: str,
        relation_map: Mapping[str, MemberIds] | None = None,
    ) -> None:
        """Remove relations from an object, per field.

        A list of ids removes those members; once the field has no members
        left, the relation-field item is deleted. A single id clears the
        whole field when ``scalar_unrelate`` is CLEAR_FIELD (the default),
        or removes only that member when it is REMOVE_MEMBER.

        Fields that are not relational fields of the object are ignored.
        """
        field_item_ids = self.get_object_relational_field_item_id_map(object_id)

        for name, members in (relation_map or {}).items():
            field_item_id = field_item_ids.get(name)
            if field_item_id is None:
                continue

            if isinstance(members, str) and self.scalar_unrelate is ScalarUnrelate.CLEAR_FIELD:
                remove_field = True
            else:
                member_ids = normalize_member_ids(members)
                if not member_ids:
                    continue
                self.items.update_item(
                    field_item_id,
                    edges={member_id: None for member_id in member_ids},
                )
                remove_field = not self.items.read_item(field_item_id).edges

            if remove_field:
                self._remove_field(object_id, field_item_id)

            logger.debug(
                "Unrelated objects",
                extra={"object_id": object_id, "field": name, "field_removed": remove_field},
            )

    def get_related_object_ids(
        self,
        object_id: str,
        field_filter: Container[str] | None = None,
    ) -> dict[str, list[str]]:
        """Map each relational field name to its member ids."""
        return {
            name: [
                edge.member_id
                for edge in relation_edges(self.items.read_item(field_item_id).edges)
            ]
            for name, field_item_id in self.get_object_relational_field_item_id_map(
                object_id, field_filter
            ).items()
        }

    def get_related_objects(
        self,
        object_id: str,
        field_filter: Container[str] | None = None,
    ) -> dict[str, Any]:
        """Read every related object, grouped by field name.

        With LIST cardinality each field maps to a list of records. With
        COLLAPSE a field with exactly one member maps to the bare record.
        """
        related: dict[str, list[Record] | Record] = {}

        for name, member_ids in self.get_related_object_ids(object_id, field_filter).items():
            records = [self.codec.read_object(member_id) for member_id in member_ids]
            if self.cardinality is RelationCardinality.COLLAPSE and len(records) == 1:
                related[name] = records[0]
            else:
                related[name] = records

        return related

    def _remove_field(self, object_id: str, field_item_id: str) -> None:
        # The object's edge must go first: removal needs the field item's value.
        self.items.set_edge(object_id, field_item_id, None)
        self.items.delete_item(field_item_id)
