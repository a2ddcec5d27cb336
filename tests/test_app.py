"""Tests for the command line entry point."""

import json
from unittest.mock import patch

import pytest

from reminder_sections import app
from reminder_sections.app import format_sections, main

from conftest import membership_payload, build_store


class TestFormatSections:
    """Tests for format_sections."""

    def test_tab_separated_sorted(self):
        """Test plain output is sorted by identifier."""
        text = format_sections({"ek-2": "Hardware", "ek-1": "Groceries"})
        assert text == "ek-1\tGroceries\nek-2\tHardware"

    def test_json(self):
        """Test JSON output."""
        text = format_sections({"ek-1": "Épicerie"}, as_json=True)
        assert json.loads(text) == {"ek-1": "Épicerie"}
        assert "Épicerie" in text


class TestMain:
    """Tests for main."""

    def test_explicit_store(self, groceries_store, tmp_path, capsys):
        """Test dumping a given store file."""
        assert main(["--config-dir", str(tmp_path / "cfg"), "--store", str(groceries_store)]) == 0
        assert capsys.readouterr().out.strip() == "ek-abc\tGroceries"

    def test_stores_dir_json(self, tmp_path, capsys):
        """Test searching a directory and printing JSON."""
        stores = tmp_path / "Stores"
        stores.mkdir()
        build_store(
            stores / "Data-1.sqlite",
            sections=[("S1", "Groceries")],
            reminders=[("R1", "ek-abc")],
            payloads=[membership_payload(("R1", "S1"))],
        )

        code = main(["--config-dir", str(tmp_path / "cfg"), "--stores-dir", str(stores), "--json"])

        assert code == 0
        assert json.loads(capsys.readouterr().out) == {"ek-abc": "Groceries"}

    def test_nothing_found(self, tmp_path, capsys):
        """Test the notice printed when nothing resolves."""
        code = main(["--config-dir", str(tmp_path / "cfg"), "--stores-dir", str(tmp_path)])

        captured = capsys.readouterr()
        assert code == 0
        assert captured.out == ""
        assert "No reminder sections found" in captured.err

    def test_timeout_uses_watchdog(self, tmp_path, capsys):
        """Test that --timeout goes through resolve_sections_within."""
        with patch.object(app, "resolve_sections_within", return_value={"ek-1": "Inbox"}) as within:
            main(["--config-dir", str(tmp_path / "cfg"), "--timeout", "2"])

        assert within.call_args[0][0] == 2.0
        assert capsys.readouterr().out.strip() == "ek-1\tInbox"

    def test_init_config(self, tmp_path, capsys):
        """Test writing the example config."""
        config_dir = tmp_path / "cfg"

        assert main(["--config-dir", str(config_dir), "--init-config"]) == 0
        assert (config_dir / "config.toml").exists()
        assert "Created example config" in capsys.readouterr().out

    def test_store_with_timeout_rejected(self, groceries_store, tmp_path, capsys):
        """Test that --timeout together with --store is a usage error."""
        with pytest.raises(SystemExit) as excinfo:
            main(["--config-dir", str(tmp_path / "cfg"), "--store", str(groceries_store), "--timeout", "1"])

        assert excinfo.value.code == 2
        assert "--timeout cannot be combined with --store" in capsys.readouterr().err
