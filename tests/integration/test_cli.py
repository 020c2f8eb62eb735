"""
Integration tests for the smeltdb command line tool.

Tests cover:
- demo output shape
- demo with deletion
- config output
"""

import json
import logging

import pytest

from smeltdb.config import StoreSettings
from smeltdb.tools.cli import DEMO_ADDRESS, SmeltCLI, main


class TestSmeltCLI:
    """Tests for SmeltCLI."""

    @pytest.fixture
    def cli(self):
        return SmeltCLI(StoreSettings())

    def test_demo(self, cli):
        """Each contact carries its related address."""
        result = cli.demo(count=2)

        assert len(result["contacts"]) == 2
        for contact in result["contacts"]:
            assert contact["firstName"] == "Ryan"
            (address,) = contact["address"]
            assert {k: address[k] for k in DEMO_ADDRESS} == DEMO_ADDRESS

    def test_demo_stats(self, cli):
        """Two objects, eleven field items and one relation field per contact."""
        result = cli.demo(count=1)

        # contact: 1 + 2*2, address: 1 + 5*2, relation field: 1
        assert result["stats"]["items"] == 17
        assert len(result["tables"]["values"]) == 17

    def test_demo_delete_first(self, cli):
        """Deleted contacts are gone; their addresses stay."""
        result = cli.demo(count=2, delete_first=True)

        assert len(result["contacts"]) == 1
        values = result["tables"]["values"].values()
        assert sum(1 for v in values if v == "Large Soda") == 2

    def test_config(self, cli):
        assert cli.config()["relation_cardinality"] == "list"


class TestMain:
    """Tests for the entry point."""

    @pytest.fixture(autouse=True)
    def restore_root_logging(self):
        """main() replaces root handlers; put them back."""
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers = handlers
        root.setLevel(level)

    def test_demo_prints_json(self, capsys):
        main(["demo", "--count", "1"])
        output = json.loads(capsys.readouterr().out)
        assert set(output) == {"contacts", "stats", "tables"}

    def test_config_prints_json(self, capsys, monkeypatch):
        monkeypatch.setenv("SMELTDB_SCALAR_UNRELATE", "remove_member")
        main(["config"])
        output = json.loads(capsys.readouterr().out)
        assert output["scalar_unrelate"] == "remove_member"

    def test_invalid_config_exits(self, monkeypatch):
        monkeypatch.setenv("SMELTDB_RELATION_CARDINALITY", "bogus")
        with pytest.raises(SystemExit) as exc_info:
            main(["config"])
        assert exc_info.value.code == 2
