"""
SmeltDB Test Suite.

This package contains:
- unit/: Unit tests for tables, items, edge decoding, codec and relations
- integration/: Scenarios through the ObjectStore API and the CLI
"""
