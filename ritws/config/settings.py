"""
config/settings.py
──────────────────────────────────────────────────────────────────────────────
Single source of truth for all tuneable parameters.

All values can be overridden via environment variables or a .env file placed
at the project root.  The frozen dataclass ensures settings are never mutated
at runtime.

Pointing the client at another RIT deployment needs no code edits:
  RIT_INSTANCE=production  → known instance name (see INSTANCES)
  RIT_INSTANCE=https://…/  → any other base URL, used as-is
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ritws.domain.exceptions import ConfigurationError

# Load .env from project root (two levels up from this file)
load_dotenv(Path(__file__).parent.parent.parent / ".env")

# Known RIT deployments.  Both currently resolve to the same server.
INSTANCES: dict[str, str] = {
    "production": "https://maps.pot.gov.pl/rit-soap-server/",
    "test":       "https://maps.pot.gov.pl/rit-soap-server/",
}


def _env(key: str, default: str) -> str:
    return os.getenv(key, default)


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key, str(default))
    try:
        return int(value)
    except ValueError as exc:
        raise ConfigurationError(f"{key} must be an integer, got '{value}'") from exc


def _env_bool(key: str, default: bool) -> bool:
    return os.getenv(key, str(default)).strip().lower() in ("1", "true", "yes", "on")


def _env_path(key: str) -> Optional[Path]:
    value = os.getenv(key, "")
    return Path(value) if value else None


@dataclass(frozen=True)
class Settings:
    """Immutable application settings loaded from environment variables."""

    # ── Credentials ────────────────────────────────────────────────────────
    # The login doubles as the distribution channel name in every request.
    user: str = field(default_factory=lambda: _env("RIT_USER", ""))
    # Passphrase of the client certificate's private key (may be empty).
    password: str = field(default_factory=lambda: _env("RIT_PASSWORD", ""))
    cert_path: Optional[Path] = field(default_factory=lambda: _env_path("RIT_CERT_PATH"))

    # ── Endpoint ───────────────────────────────────────────────────────────
    instance: str = field(default_factory=lambda: _env("RIT_INSTANCE", "production"))

    # ── Transport ──────────────────────────────────────────────────────────
    # Fetching every object in one language uncached has taken over 16 minutes.
    timeout: int = field(default_factory=lambda: _env_int("RIT_TIMEOUT", 1000))
    trace: bool = field(default_factory=lambda: _env_bool("RIT_TRACE", False))
    user_agent: str = field(default_factory=lambda: _env("RIT_USER_AGENT", "RIT_Webservices"))

    # ── Interfaces ─────────────────────────────────────────────────────────
    # Default language for the CLI only; library calls always pass one.
    language: str = field(default_factory=lambda: _env("RIT_LANGUAGE", "pl-PL"))

    @property
    def base_url(self) -> str:
        """Base URL of the selected instance (always ends with '/')."""
        url = INSTANCES.get(self.instance, self.instance)
        return url if url.endswith("/") else url + "/"

    def endpoint(self, service: str) -> str:
        """Address of a single webservice, e.g. ``…/MetadataOfRIT``."""
        return self.base_url + service

    def wsdl_url(self, service: str) -> str:
        return self.endpoint(service) + "?wsdl"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Returns a cached singleton Settings instance.

    Use this everywhere instead of instantiating Settings() directly —
    it guarantees a single object is shared across the entire process.
    """
    return Settings()
