"""Shared pytest fixtures for bingmaps tests."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Generator, List, Optional, Union

import pytest

from bingmaps.config import reset_settings

ENV_VARS = [
    "BING_MAPS_KEY",
    "BINGMAPS_KEY",
    "BING_MAPS_API_KEY",
    "BING_MAPS_URL",
    "BING_MAPS_TIMEOUT",
    "BING_MAPS_VERIFY_TLS",
    "BING_MAPS_CA_BUNDLE",
    "LOG_LEVEL",
]


class FakeResponse:
    """In-memory ``HTTPResponse`` with optional body read failure."""

    def __init__(
        self,
        status_code: int = 200,
        body: Union[bytes, str, Dict[str, Any]] = b"",
        headers: Optional[Dict[str, List[str]]] = None,
        read_error: Optional[BaseException] = None,
    ) -> None:
        if isinstance(body, dict):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.status_code = status_code
        self._body = body
        self._headers = {name.lower(): values for name, values in (headers or {}).items()}
        self._read_error = read_error
        self.read_calls = 0
        self.closed = False

    def header_values(self, name: str) -> List[str]:
        return list(self._headers.get(name.lower(), []))

    def read(self) -> bytes:
        self.read_calls += 1
        if self._read_error is not None:
            raise self._read_error
        return self._body

    def close(self) -> None:
        self.closed = True


class MockHTTPClient:
    """Records requested URLs and replays canned responses or errors."""

    def __init__(self, responses: Optional[List[Union[FakeResponse, BaseException]]] = None):
        self.responses = list(responses or [])
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    def get(self, url: str, timeout: Optional[float]) -> FakeResponse:
        self.calls.append({"url": url, "timeout": timeout})
        if not self.responses:
            return FakeResponse(body={"resourceSets": []})
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def clean_env(monkeypatch, tmp_path) -> None:
    """Remove all Bing Maps env vars and run from an empty directory (no .env)."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset settings cache between tests to ensure isolation."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def location_payload() -> Dict[str, Any]:
    """A single Location resource as returned by the service."""
    return {
        "__type": "Location:http://schemas.microsoft.com/search/local/ws/rest/v1",
        "bbox": [47.636257744012461, -122.13735364288299, 47.643983179153814, -122.12206713944586],
        "name": "1 Microsoft Way, Redmond, WA 98052",
        "point": {"type": "Point", "coordinates": [47.640120461583138, -122.12971039116383]},
        "address": {
            "addressLine": "1 Microsoft Way",
            "adminDistrict": "WA",
            "adminDistrict2": "King Co.",
            "countryRegion": "United States",
            "formattedAddress": "1 Microsoft Way, Redmond, WA 98052",
            "locality": "Redmond",
            "postalCode": "98052",
        },
        "confidence": "High",
        "entityType": "Address",
        "geocodePoints": [
            {
                "type": "Point",
                "coordinates": [47.640120461583138, -122.12971039116383],
                "calculationMethod": "InterpolationOffset",
                "usageTypes": ["Display"],
            }
        ],
        "matchCodes": ["Good"],
    }


@pytest.fixture
def envelope_payload(location_payload: Dict[str, Any]) -> Dict[str, Any]:
    """Full response envelope wrapping one location."""
    return {
        "authenticationResultCode": "ValidCredentials",
        "brandLogoUri": "http://dev.virtualearth.net/Branding/logo_powered_by.png",
        "copyright": "Copyright © 2024 Microsoft and its suppliers.",
        "resourceSets": [{"estimatedTotal": 1, "resources": [location_payload]}],
        "statusCode": 200,
        "statusDescription": "OK",
        "traceId": "abc123|BN00001E1B|0.0.0.0",
    }


@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Undo root logger changes made by ``configure_logging``."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    noisy = {name: logging.getLogger(name).level for name in ("urllib3", "requests")}
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, noisy_level in noisy.items():
        logging.getLogger(name).setLevel(noisy_level)
