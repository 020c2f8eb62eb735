"""Shared pytest fixtures for SmeltDB tests."""

import itertools

import pytest

from smeltdb import ObjectStore, StoreSettings
from smeltdb.codec import ObjectCodec, RelationManager
from smeltdb.store import ItemStore


@pytest.fixture
def items():
    """Item store with deterministic ids."""
    counter = itertools.count(1)
    return ItemStore(id_factory=lambda: f"item_{next(counter)}")


@pytest.fixture
def codec(items):
    """Object codec over the item store."""
    return ObjectCodec(items)


@pytest.fixture
def relations(items, codec):
    """Relation manager with default settings."""
    return RelationManager(items, codec)


@pytest.fixture
def db():
    """Object store with default settings, cleared after the test."""
    with ObjectStore(StoreSettings()) as store:
        yield store
