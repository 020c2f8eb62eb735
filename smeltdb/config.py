"""
Configuration for SmeltDB.

Uses pydantic-settings for environment variable loading. Every setting has a
default suitable for tests and local use, so ``StoreSettings()`` always works.

Invariants:
    - Settings never change the on-table encoding (self-loop relation edges)
    - Compatibility modes only affect how results are shaped or how
      ambiguous input is interpreted

How to change safely:
    - Add new settings with defaults that keep existing behaviour
    - Keep enum values stable, they are read from the environment
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class RelationCardinality(str, Enum):
    """How get_related_objects shapes each field's members."""

    LIST = "list"
    COLLAPSE = "collapse"


class ScalarUnrelate(str, Enum):
    """How unrelate_objects treats a single (non-list) member id."""

    CLEAR_FIELD = "clear_field"
    REMOVE_MEMBER = "remove_member"


class StoreSettings(BaseSettings):
    """Store configuration loaded from environment."""

    # Item ids
    id_prefix: str = Field(default="", description="Prefix prepended to generated item ids")

    # Relation behaviour
    relation_cardinality: RelationCardinality = Field(
        default=RelationCardinality.LIST,
        description="'list' always returns lists; 'collapse' returns a bare object for one member",
    )
    scalar_unrelate: ScalarUnrelate = Field(
        default=ScalarUnrelate.CLEAR_FIELD,
        description="'clear_field' drops the whole field; 'remove_member' removes only that id",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: str = Field(default="text", description="Log format (text, json)")

    model_config = {"env_prefix": "SMELTDB_"}

    def log_config(self) -> None:
        """Log the effective configuration."""
        logger.info(
            "Store configuration loaded",
            extra={
                "id_prefix": self.id_prefix,
                "relation_cardinality": self.relation_cardinality.value,
                "scalar_unrelate": self.scalar_unrelate.value,
                "log_level": self.log_level,
                "log_format": self.log_format,
            },
        )
