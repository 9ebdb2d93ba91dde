"""Tests for the database management CLI."""

import pytest

import manage


class TestManageCLI:
    def test_setup_db_dispatch(self, monkeypatch):
        calls = []
        monkeypatch.setattr(manage, "setup_databases", lambda: calls.append("setup"))
        manage.main(["setup-db"])
        assert calls == ["setup"]

    def test_drop_db_dispatch(self, monkeypatch):
        calls = []
        monkeypatch.setattr(manage, "drop_databases", lambda: calls.append("drop"))
        manage.main(["drop-db"])
        assert calls == ["drop"]

    def test_command_is_required(self):
        with pytest.raises(SystemExit):
            manage.main([])

    def test_unknown_command(self):
        with pytest.raises(SystemExit):
            manage.main(["migrate"])
