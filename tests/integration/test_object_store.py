"""
Integration tests for the ObjectStore API.

Tests cover:
- The contact/address scenario end to end
- Shallow and deep delete
- Settings-driven behaviour
- Referential guard through the public API
"""

import pytest

from smeltdb import ObjectStore, RelationCardinality, ScalarUnrelate, StoreSettings


@pytest.fixture
def contact_with_address(db):
    contact = db.create_object({"firstName": "Ryan", "lastName": "X"})
    address = db.create_object({"city": "Y"})
    db.relate_objects(contact["id"], {"address": address["id"]})
    return contact["id"], address["id"]


class TestContactScenario:
    """The contact/address flow."""

    def test_related_address(self, db, contact_with_address):
        """Related address resolves to B."""
        a, b = contact_with_address
        assert db.get_related_objects(a, {"address": True})["address"][0]["id"] == b

    def test_contact_has_no_address_key(self, db, contact_with_address):
        """read_object never contains the relation."""
        a, _ = contact_with_address
        assert db.read_object(a) == {"firstName": "Ryan", "lastName": "X", "id": a}

    def test_delete_contact_keeps_address(self, db, contact_with_address):
        """Shallow delete removes A's items and the field item, not B."""
        a, b = contact_with_address
        field_item_id = db.relations.get_object_relational_field_item_id_map(a)["address"]
        value_item_ids = db.codec.get_object_value_item_id_map(a)

        db.delete_object(a)

        assert db.read_object(a) == {"id": a}
        assert not db.items.exists(field_item_id)
        assert not any(db.items.exists(i) for i in value_item_ids.values())
        assert db.read_object(b) == {"city": "Y", "id": b}

    def test_update_keeps_relation(self, db, contact_with_address):
        """Updating scalar fields leaves relations alone."""
        a, b = contact_with_address

        db.update_object({"id": a, "firstName": "Ann", "address": "nope"})

        assert db.read_object(a)["firstName"] == "Ann"
        assert db.get_related_objects(a)["address"][0]["id"] == b

    def test_unrelate_last_member(self, db, contact_with_address):
        """Array unrelate of the last member removes the field."""
        a, b = contact_with_address

        db.unrelate_objects(a, {"address": [b]})

        assert db.get_related_objects(a) == {}
        assert db.relations.get_object_relational_field_item_id_map(a) == {}


class TestDeepDelete:
    """Tests for delete_object(deep=True)."""

    def test_deep_delete_removes_related(self, db, contact_with_address):
        """Related objects are deleted too."""
        a, b = contact_with_address

        db.delete_object(a, deep=True)

        assert db.read_object(b) == {"id": b}
        assert db.stats() == {"items": 0, "owners": 0, "edges": 0}

    def test_deep_delete_handles_cycles(self, db):
        """Mutually related objects are each deleted once."""
        first = db.create_object({"name": "first"})
        second = db.create_object({"name": "second"})
        db.relate_objects(first["id"], {"friend": second["id"]})
        db.relate_objects(second["id"], {"friend": first["id"]})

        db.delete_object(first["id"], deep=True)

        assert db.stats() == {"items": 0, "owners": 0, "edges": 0}


class TestReferentialGuard:
    """Edges to deleted objects are never created."""

    def test_relate_to_deleted_object(self, db):
        contact = db.create_object({"name": "n"})
        gone = db.create_object({"name": "gone"})
        db.delete_object(gone["id"])
        before = db.dump()

        db.relate_objects(contact["id"], {"friend": gone["id"]})

        assert db.dump() == before

    def test_stale_member_reads_empty(self, db, contact_with_address):
        """A member deleted later is still listed, as an empty record."""
        a, b = contact_with_address

        db.delete_object(b)

        assert db.get_related_objects(a)["address"] == [{"id": b}]


class TestSettings:
    """Settings-driven behaviour."""

    def test_defaults(self):
        settings = StoreSettings()
        assert settings.relation_cardinality is RelationCardinality.LIST
        assert settings.scalar_unrelate is ScalarUnrelate.CLEAR_FIELD
        assert settings.id_prefix == ""

    def test_from_environment(self, monkeypatch):
        """SMELTDB_ variables configure the store."""
        monkeypatch.setenv("SMELTDB_ID_PREFIX", "itm_")
        monkeypatch.setenv("SMELTDB_RELATION_CARDINALITY", "collapse")

        with ObjectStore() as db:
            contact = db.create_object({"name": "n"})
            address = db.create_object({"city": "Y"})
            db.relate_objects(contact["id"], {"address": address["id"]})

            assert contact["id"].startswith("itm_")
            assert db.get_related_objects(contact["id"])["address"]["id"] == address["id"]

    def test_invalid_environment(self, monkeypatch):
        """Unknown enum values are rejected."""
        from pydantic import ValidationError

        monkeypatch.setenv("SMELTDB_SCALAR_UNRELATE", "sometimes")
        with pytest.raises(ValidationError):
            StoreSettings()

    def test_context_manager_clears(self):
        """Leaving the with block tears the store down."""
        with ObjectStore(StoreSettings()) as db:
            db.create_object({"a": "b"})
        assert db.stats() == {"items": 0, "owners": 0, "edges": 0}
