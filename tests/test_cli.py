"""Tests for the CLI entry point."""

import sys

import pytest

import cli
from core.config import Config


@pytest.fixture
def served(monkeypatch):
    """Stub config loading and serving; record what would be served."""
    calls = []
    monkeypatch.setattr(cli, "load_config", lambda: Config())
    monkeypatch.setattr(cli, "_serve", lambda config, headless: calls.append((config, headless)))
    return calls


def run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["proxx", *args])
    cli.main()


class TestMain:
    """Tests for argument handling."""

    def test_defaults(self, monkeypatch, served):
        run(monkeypatch)

        config, headless = served[0]
        assert config.routing.mode == "prefix"
        assert headless is False

    def test_overrides(self, monkeypatch, served):
        run(monkeypatch, "--mode", "bare", "--port", "9000", "--no-dashboard")

        config, headless = served[0]
        assert config.routing.mode == "bare"
        assert config.proxy.port == 9000
        assert headless is True

    def test_config_location(self, monkeypatch, served, capsys):
        run(monkeypatch, "--config")

        assert served == []
        assert "config.json" in capsys.readouterr().out

    def test_help(self, monkeypatch, served, capsys):
        run(monkeypatch, "--help")

        assert served == []
        assert "--no-dashboard" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "args",
        [("--mode", "query"), ("--port", "http"), ("--mode",), ("--bogus",)],
    )
    def test_bad_arguments_exit(self, monkeypatch, served, args):
        with pytest.raises(SystemExit) as exc_info:
            run(monkeypatch, *args)

        assert exc_info.value.code == 2
        assert served == []
