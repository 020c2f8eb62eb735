"""
Command line tool for SmeltDB.

The store is memory-resident, so every command runs against a fresh store
inside the process:
- demo: Create contacts with related addresses and print the records
  together with a dump of both tables
- config: Print the effective settings

Usage:
    smeltdb demo --count 2
    smeltdb demo --delete-first
    SMELTDB_RELATION_CARDINALITY=collapse smeltdb demo
    smeltdb config

How to change safely:
    - Keep JSON output sorted and stable; it is used in tests
    - Add new commands, don't change existing output keys
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import uuid
from typing import Any

import json_log_formatter
from pydantic import ValidationError

from ..client import ObjectStore
from ..config import StoreSettings

logger = logging.getLogger(__name__)

DEMO_CONTACT = {"firstName": "Ryan"}
DEMO_ADDRESS = {
    "streetNumber": "44",
    "streetName": "Junk Bot Dr.",
    "city": "Large Soda",
    "state": "CA",
    "zip": "09243",
}


def setup_logging(settings: StoreSettings) -> None:
    """Configure logging based on settings.

    Args:
        settings: Store settings
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    if settings.log_format == "json":
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]


class SmeltCLI:
    """CLI commands for SmeltDB.

    Example:
        >>> cli = SmeltCLI(StoreSettings())
        >>> result = cli.demo(count=1)
        >>> sorted(result)
        ['contacts', 'stats', 'tables']
    """

    def __init__(self, settings: StoreSettings) -> None:
        self.settings = settings

    def demo(self, count: int = 1, delete_first: bool = False) -> dict[str, Any]:
        """Run the contact/address scenario.

        Args:
            count: Number of contacts to create
            delete_first: Delete the first contact (shallow) before reading

        Returns:
            Contacts with their related address, the table dump and stats
        """
        db = ObjectStore(self.settings)
        contact_ids = []

        for _ in range(count):
            contact = db.create_object({**DEMO_CONTACT, "lastName": str(uuid.uuid4())})
            address = db.create_object(DEMO_ADDRESS)
            db.relate_objects(contact["id"], {"address": address["id"]})
            contact_ids.append(contact["id"])

        if delete_first and contact_ids:
            db.delete_object(contact_ids.pop(0))

        contacts = []
        for contact_id in contact_ids:
            record = db.read_object(contact_id)
            record["address"] = db.get_related_objects(contact_id, {"address"}).get("address")
            contacts.append(record)

        return {"contacts": contacts, "tables": db.dump(), "stats": db.stats()}

    def config(self) -> dict[str, Any]:
        return self.settings.model_dump(mode="json")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="SmeltDB item graph tool")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # demo command
    demo_parser = subparsers.add_parser("demo", help="Run the contact/address demo")
    demo_parser.add_argument("--count", "-n", type=int, default=1, help="Contacts to create")
    demo_parser.add_argument(
        "--delete-first", action="store_true", help="Delete the first contact before reading"
    )

    # config command
    subparsers.add_parser("config", help="Print effective settings")

    args = parser.parse_args(argv)

    try:
        settings = StoreSettings()
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        sys.exit(2)

    setup_logging(settings)
    settings.log_config()
    cli = SmeltCLI(settings)

    if args.command == "demo":
        output = cli.demo(count=args.count, delete_first=args.delete_first)
    elif args.command == "config":
        output = cli.config()

    print(json.dumps(output, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
