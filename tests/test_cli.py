"""Tests for the bingmaps command-line interface."""

from __future__ import annotations

import argparse
import json
from urllib.parse import parse_qsl, urlsplit

import pytest

from bingmaps import cli
from bingmaps.client import Client
from bingmaps.common import CultureCode
from bingmaps.models import EntityType
from conftest import FakeResponse, MockHTTPClient

pytestmark = pytest.mark.usefixtures("clean_env", "restore_logging")


@pytest.fixture
def mock_http(monkeypatch):
    """Route CLI clients through a MockHTTPClient."""
    transport = MockHTTPClient()

    def make_client(api_key=None, config=None):
        return Client(api_key=api_key or "cli-key", config=config, http_client=transport)

    monkeypatch.setattr(cli, "Client", make_client)
    return transport


class TestArgumentParsing:
    """Tests for argument type helpers and parser layout."""

    def test_parse_float_list(self):
        assert cli._parse_float_list("47.6,-122.1") == [47.6, -122.1]

    def test_parse_float_list_rejects_text(self):
        with pytest.raises(argparse.ArgumentTypeError):
            cli._parse_float_list("north,south")

    def test_parse_culture_is_case_insensitive(self):
        assert cli._parse_culture("en-us") is CultureCode.EN_US
        assert cli._parse_culture("ZH-HANT") is CultureCode.ZH_HANT

    def test_parse_culture_rejects_unknown(self):
        with pytest.raises(argparse.ArgumentTypeError):
            cli._parse_culture("xx-YY")

    def test_parse_entity_types(self):
        assert cli._parse_entity_types("Address, Postcode1") == [
            EntityType.ADDRESS,
            EntityType.POSTCODE1,
        ]

    def test_parse_entity_types_rejects_unknown(self):
        with pytest.raises(argparse.ArgumentTypeError) as exc_info:
            cli._parse_entity_types("Address,Volcano")
        assert "PopulatedPlace" in str(exc_info.value)

    def test_subcommand_required(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.build_parser().parse_args([])
        assert exc_info.value.code == 2

    def test_point_arguments(self):
        args = cli.build_parser().parse_args(
            ["point", "47.64054", "-122.12934", "--neighborhood", "--format", "csv"]
        )
        assert args.command == "point"
        assert args.lat == 47.64054
        assert args.lng == -122.12934
        assert args.neighborhood is True
        assert args.ciso2 is False
        assert args.entity_types == []
        assert args.format == "csv"


class TestRunCli:
    """Tests for end-to-end command execution."""

    def test_query_prints_json(self, mock_http, envelope_payload, capsys):
        mock_http.responses.append(FakeResponse(body=envelope_payload))

        exit_code = cli.run_cli(["query", "1 Microsoft Way, Redmond WA", "--culture", "en-us"])

        assert exit_code == cli.EXIT_OK
        pairs = parse_qsl(urlsplit(mock_http.calls[0]["url"]).query)
        assert pairs == [("q", "1 Microsoft Way, Redmond WA"), ("c", "en-US"), ("key", "cli-key")]
        output = json.loads(capsys.readouterr().out)
        assert output[0]["entityType"] == "Address"
        assert output[0]["address"]["locality"] == "Redmond"

    def test_point_builds_path(self, mock_http):
        exit_code = cli.run_cli(["point", "47.64054", "-122.12934", "--api-key", "override"])

        assert exit_code == cli.EXIT_OK
        url = urlsplit(mock_http.calls[0]["url"])
        assert url.path.endswith("/Locations/47.64054,-122.12934")
        assert url.query == "key=override"

    def test_point_raw_with_options(self, mock_http):
        cli.run_cli(["point", "--raw", "47.6,-122.1", "--entity-types", "Address", "--ciso2"])

        url = urlsplit(mock_http.calls[0]["url"])
        assert url.path.endswith("/Locations/47.6,-122.1")
        assert parse_qsl(url.query) == [
            ("includeEntityTypes", "Address"),
            ("incl", "ciso2"),
            ("key", "cli-key"),
        ]

    def test_point_without_coordinates(self, mock_http):
        with pytest.raises(SystemExit) as exc_info:
            cli.run_cli(["point"])
        assert exc_info.value.code == 2
        assert mock_http.calls == []

    def test_csv_output(self, mock_http, envelope_payload, capsys):
        mock_http.responses.append(FakeResponse(body=envelope_payload))

        cli.run_cli(["query", "Redmond", "--format", "csv"])

        lines = capsys.readouterr().out.strip().splitlines()
        assert lines[0].startswith("name,latitude,longitude")
        assert len(lines) == 2

    def test_empty_result(self, mock_http, capsys):
        assert cli.run_cli(["query", "nowhere"]) == cli.EXIT_OK
        assert json.loads(capsys.readouterr().out) == []

    def test_overloaded_service(self, mock_http, capsys):
        mock_http.responses.append(
            FakeResponse(status_code=503, headers={"X-MS-BM-WS-INFO": ["1"]})
        )

        exit_code = cli.run_cli(["query", "Redmond"])

        assert exit_code == cli.EXIT_REQUEST_FAILED
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "overloaded" in captured.err

    def test_conversion_failure(self, mock_http):
        mock_http.responses.append(FakeResponse(body="not json"))
        assert cli.run_cli(["query", "Redmond"]) == cli.EXIT_CONVERSION_FAILED

    def test_missing_api_key(self, capsys):
        exit_code = cli.run_cli(["query", "Redmond"])

        assert exit_code == cli.EXIT_REQUEST_FAILED
        assert "Missing API key" in capsys.readouterr().err


class TestRunCliSettings:
    """Tests for settings flowing into the CLI client."""

    def test_settings_apply_when_key_comes_from_flag(self, mock_http, monkeypatch):
        monkeypatch.setenv("BING_MAPS_TIMEOUT", "5")
        monkeypatch.setenv("BING_MAPS_URL", "https://proxy.example.com/REST/v1")

        exit_code = cli.run_cli(["query", "Redmond", "--api-key", "abc"])

        assert exit_code == cli.EXIT_OK
        call = mock_http.calls[0]
        assert call["timeout"] == 5.0
        assert call["url"] == "https://proxy.example.com/REST/v1/Locations?q=Redmond&key=abc"

    def test_key_from_settings(self, mock_http, monkeypatch):
        monkeypatch.setenv("BING_MAPS_KEY", "settings-key")

        cli.run_cli(["query", "Redmond"])

        assert mock_http.calls[0]["url"].endswith("key=settings-key")

    def test_flag_overrides_settings_key(self, mock_http, monkeypatch):
        monkeypatch.setenv("BING_MAPS_KEY", "settings-key")

        cli.run_cli(["query", "Redmond", "--api-key", "flag-key"])

        assert mock_http.calls[0]["url"].endswith("key=flag-key")

    def test_invalid_settings_stop_before_request(self, mock_http, monkeypatch, capsys):
        monkeypatch.setenv("BING_MAPS_KEY", "abc")
        monkeypatch.setenv("BING_MAPS_URL", "http://proxy.internal/REST/v1")

        exit_code = cli.run_cli(["query", "Redmond"])

        assert exit_code == cli.EXIT_CONFIG_INVALID
        assert mock_http.calls == []
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Invalid configuration" in captured.err
