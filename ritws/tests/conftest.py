"""
tests/conftest.py
──────────────────────────────────────────────────────────────────────────────
Shared pytest fixtures and mock adapter implementations.

Mock adapters implement the Port Protocols via structural subtyping — they do
NOT inherit from any base class.  pytest uses them to test service logic
without any real SOAP endpoint or client certificate.

Fixture hierarchy:
  mock_webservice → implements WebservicePort (canned responses, call log)
  mock_files      → implements FileFetcherPort (in-memory files)
  client          → RITClient wired with both mocks and a frozen clock
  catalog         → MetadataCatalog over client
  metadata        → MetadataSnapshot decoded from RAW_METADATA
"""
from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import pytest

from ritws.config.settings import Settings
from ritws.domain.models import MetadataSnapshot
from ritws.services.client import RITClient
from ritws.services.metadata import MetadataCatalog


# ── Settings fixture ───────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def settings() -> Settings:
    """Return a Settings instance with sane test defaults."""
    return Settings(
        user="test_channel",
        password="",
        cert_path=None,
        instance="test",
        timeout=5,
        trace=False,
        user_agent="RIT_Webservices",
        language="pl-PL",
    )


FIXED_NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone(timedelta(hours=2)))


# ── Canned metadata ────────────────────────────────────────────────────────
# Hierarchy:
#   C001 Noclegi            ← C040 Pokoje gościnne
#   C100 Atrakcje           ← C110 Muzea ← C111 Muzea regionalne
#   C200 Inne (no parent, no children, no attributes)

RAW_METADATA: dict[str, Any] = {
    "lastModificationDate": "2024-04-30",
    "ritCategory": [
        {"code": "C001", "name": "Noclegi", "parentCode": None,
         "attributeCodes": {"attributeCode": ["A001", "A003"]}},
        {"code": "C040", "name": "Pokoje gościnne", "parentCode": "C001",
         "attributeCodes": {"attributeCode": ["A087", "A096"]}},
        {"code": "C100", "name": "Atrakcje",
         "attributeCodes": {"attributeCode": ["A001"]}},
        {"code": "C110", "name": "Muzea", "parentCode": "C100",
         "attributeCodes": {"attributeCode": ["A050"]}},
        {"code": "C111", "name": "Muzea regionalne", "parentCode": "C110",
         "attributeCodes": {"attributeCode": ["A051", "A001"]}},
        {"code": "C200", "name": "Inne", "attributeCodes": None},
    ],
    "ritAttribute": [
        {"code": "A001", "name": "Nazwa", "typeValidator": "SHORT_TEXT"},
        {"code": "A003", "name": "Krótki opis", "typeValidator": "LONG_TEXT"},
        {"code": "A009", "name": "Województwo", "typeValidator": "SINGLE_LIST"},
        {"code": "A012", "name": "Miejscowość", "typeValidator": "SHORT_TEXT"},
        {"code": "A018", "name": "Współrzędne", "typeValidator": "COMPLEX"},
        {"code": "A089", "name": "Liczba miejsc", "typeValidator": "NUMBER"},
        {"code": "A095", "name": "Udogodnienia", "typeValidator": "MULTIPLY_LIST",
         "dictionaryCode": "D020"},
    ],
    "ritDictionary": [
        {"code": "L001", "name": "Języki", "value": ["en-GB", "pl-PL", "de-DE"]},
        {"code": "D016", "name": "Rodzaje obiektów", "value": "Apartamenty"},
    ],
}


# ── Mock adapters ──────────────────────────────────────────────────────────

class MockWebserviceAdapter:
    """Records every call; answers from a {(service, operation): response} map.

    A response that is an Exception instance is raised instead.
    """

    def __init__(self, responses: Optional[dict] = None) -> None:
        self.responses: dict = responses or {}
        self.calls: list[tuple[str, str, dict]] = []
        self.last_request: Optional[str] = None
        self.last_response: Optional[str] = None

    def invoke(self, service: str, operation: str, request: dict) -> Any:
        self.calls.append((service, operation, request))
        response = self.responses.get((service, operation), {"result": "ok"})
        if isinstance(response, Exception):
            raise response
        self.last_request = f"<{operation}/>"
        self.last_response = f"<{operation}Response/>"
        return copy.deepcopy(response)

    @property
    def last_call(self) -> tuple[str, str, dict]:
        return self.calls[-1]


class MockFileFetcher:
    """In-memory files keyed by URL."""

    def __init__(self, files: Optional[dict[str, bytes]] = None) -> None:
        self.files = files or {}
        self.fetched: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.fetched.append(url)
        return self.files.get(url, b"")


# ── pytest fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def raw_metadata() -> dict:
    return copy.deepcopy(RAW_METADATA)


@pytest.fixture
def metadata(raw_metadata) -> MetadataSnapshot:
    return MetadataSnapshot.from_response(raw_metadata, "pl-PL")


@pytest.fixture
def mock_webservice(raw_metadata):
    return MockWebserviceAdapter(
        {("MetadataOfRIT", "getMetadataOfRIT"): raw_metadata}
    )


@pytest.fixture
def mock_files():
    return MockFileFetcher({"https://example.org/photo.jpg?w=1&h=2": b"JPEG"})


@pytest.fixture
def client(mock_webservice, mock_files, settings) -> RITClient:
    return RITClient(
        webservice=mock_webservice,
        files=mock_files,
        settings=settings,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def catalog(client) -> MetadataCatalog:
    return MetadataCatalog(client)
