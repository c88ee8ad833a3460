"""
services/container.py
──────────────────────────────────────────────────────────────────────────────
Dependency Injection container.

THIS IS THE ONLY FILE THAT NAMES CONCRETE ADAPTER CLASSES.

Wiring:
  Settings ─► requests.Session (client certificate)
                 ├─► ZeepWebserviceAdapter  (WebservicePort)
                 └─► RequestsFileFetcher    (FileFetcherPort)
  both ports ─► RITClient ─► MetadataCatalog

To replace the SOAP stack (e.g. with a recorded-response fake in a demo),
write another WebservicePort adapter and change _build_webservice().

Thread safety:
  @lru_cache(maxsize=1) makes get_client() return the same instance across
  calls.  zeep clients and requests sessions are not guaranteed thread-safe;
  threaded callers should build one RITClient per thread via build_client().
"""
from __future__ import annotations

import logging
from functools import lru_cache

import requests

from ritws.adapters.http_session import build_session
from ritws.adapters.requests_files import RequestsFileFetcher
from ritws.adapters.zeep_soap import ZeepWebserviceAdapter
from ritws.config.settings import INSTANCES, Settings, get_settings
from ritws.domain.exceptions import ConfigurationError
from ritws.ports.webservice_port import WebservicePort
from ritws.services.client import RITClient
from ritws.services.metadata import MetadataCatalog

logger = logging.getLogger(__name__)


def _validate(settings: Settings) -> None:
    if not settings.user:
        raise ConfigurationError("RIT_USER is not set. Add it to your .env file or environment.")
    if settings.instance not in INSTANCES and not settings.instance.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"Unknown RIT_INSTANCE '{settings.instance}'. "
            f"Valid values: {', '.join(sorted(INSTANCES))} or a base URL."
        )


def _build_webservice(settings: Settings, session: requests.Session) -> WebservicePort:
    return ZeepWebserviceAdapter(settings, session)


def build_client(settings: Settings) -> RITClient:
    """Build a fully wired RITClient for the given settings.

    Raises:
        ConfigurationError:  If the login or instance is missing/invalid.
        AuthenticationError: If the client certificate cannot be loaded.
    """
    _validate(settings)
    logger.info(
        "Building RITClient | instance=%s user=%s trace=%s",
        settings.instance,
        settings.user,
        settings.trace,
    )
    session = build_session(settings)
    return RITClient(
        webservice=_build_webservice(settings, session),
        files=RequestsFileFetcher(settings, session),
        settings=settings,
    )


@lru_cache(maxsize=1)
def get_client() -> RITClient:
    """Return the process-wide RITClient built from environment settings."""
    return build_client(get_settings())


@lru_cache(maxsize=1)
def get_catalog() -> MetadataCatalog:
    """Return the process-wide MetadataCatalog bound to get_client()."""
    return MetadataCatalog(get_client())
