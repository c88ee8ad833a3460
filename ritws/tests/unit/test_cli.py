"""
tests/unit/test_cli.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for the argparse CLI with the container patched to mock adapters.
"""
from __future__ import annotations

import json

import pytest

from ritws.config.settings import Settings
from ritws.domain.exceptions import ConfigurationError
from ritws.interfaces import cli


@pytest.fixture
def run_cli(monkeypatch, client, catalog):
    monkeypatch.setattr(cli, "get_client", lambda: client)
    monkeypatch.setattr(cli, "get_catalog", lambda: catalog)

    def _run(*argv: str) -> int:
        args = cli._build_parser().parse_args(["--lang", "pl-PL", *argv])
        return cli.run(args)

    return _run


def test_category_text(run_cli, capsys):
    assert run_cli("category", "C040") == 0
    out = capsys.readouterr().out
    assert out.startswith("[C040] Pokoje gościnne")
    assert "A087" in out and "A003" in out


def test_json_output(run_cli, capsys):
    assert run_cli("--json", "category", "C111", "--no-inherit") == 0
    data = json.loads(capsys.readouterr().out)
    assert data["code"] == "C111"
    assert data["attribute_codes"] == ["A051", "A001"]


def test_leaves_sorted(run_cli, capsys):
    assert run_cli("leaves") == 0
    lines = capsys.readouterr().out.split()
    assert lines == ["C040", "C111", "C200"]


def test_languages(run_cli, capsys):
    assert run_cli("languages") == 0
    assert "de-DE" in capsys.readouterr().out


def test_unknown_dictionary(run_cli, capsys):
    assert run_cli("dictionary", "D999") == 0
    assert "(not found)" in capsys.readouterr().out


def test_metadata_summary(run_cli, capsys):
    assert run_cli("metadata") == 0
    out = capsys.readouterr().out
    assert "'categories': 6" in out


def test_object_calls_search(run_cli, mock_webservice):
    assert run_cli("object", "486762") == 0
    service, _, request = mock_webservice.last_call
    assert service == "CollectTouristObjects"
    assert request["searchCondition"]["language"] == "pl-PL"


def test_configuration_error_exit_code(monkeypatch, capsys):
    def fail():
        raise ConfigurationError("RIT_USER is not set.")

    monkeypatch.setattr(cli, "get_client", fail)
    args = cli._build_parser().parse_args(["--lang", "pl-PL", "languages"])
    assert cli.run(args) == 1
    assert "RIT_USER" in capsys.readouterr().err


def test_invalid_environment_exit_code(monkeypatch, capsys):
    monkeypatch.setenv("RIT_TIMEOUT", "soon")
    monkeypatch.setattr(cli, "get_settings", Settings)
    args = cli._build_parser().parse_args(["languages"])
    assert cli.run(args) == 1
    assert "RIT_TIMEOUT" in capsys.readouterr().err
