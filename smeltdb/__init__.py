"""
SmeltDB - a schemaless item/connection graph with an object codec.

This package implements a small in-memory store built on:
- Items: an opaque id, an optional scalar value, and an owned edge set
- Two primitive tables: values (id -> value) and connections
  (owner id -> {from id: to id})
- Objects: records "smelted" into a cluster of items, with scalar fields
  stored as key/value edges and relations stored as self-loop edges

Architecture:
    ┌──────────────────┐
    │   ObjectStore    │  create/read/update/delete/relate
    └────────┬─────────┘
             │
    ┌────────┴─────────┐
    ▼                  ▼
┌─────────────┐  ┌─────────────────┐
│ ObjectCodec │  │ RelationManager │
└──────┬──────┘  └────────┬────────┘
       └────────┬─────────┘
                ▼
         ┌────────────┐
         │ ItemStore  │
         └─────┬──────┘
        ┌──────┴───────┐
        ▼              ▼
  ┌──────────┐  ┌─────────────────┐
  │  values  │  │   connections   │
  └──────────┘  └─────────────────┘

Invariants:
    - Edges are only written between items that currently have a value
    - An edge is a relation edge exactly when its endpoints are equal
    - Items carry no role tag; role is inferred from edge shape
    - Single writer, single process, synchronous, memory-resident

How to change safely:
    - Keep the table encoding stable; debug dumps depend on it
    - Add behaviour behind settings with backward compatible defaults
"""

from ._version import __version__
from .client import ObjectStore
from .config import RelationCardinality, ScalarUnrelate, StoreSettings
from .store import EdgeWrite, Item, ItemStore

__all__ = [
    "__version__",
    "ObjectStore",
    "RelationCardinality",
    "ScalarUnrelate",
    "StoreSettings",
    "EdgeWrite",
    "Item",
    "ItemStore",
]
