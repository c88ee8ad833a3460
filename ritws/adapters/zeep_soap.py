"""
adapters/zeep_soap.py
──────────────────────────────────────────────────────────────────────────────
Implements WebservicePort using zeep.

Key behaviour:
  - One zeep.Client per webservice, built lazily on first use and reused
  - WSDL documents cached in memory for the life of the adapter
  - Only the WSDL's SOAP 1.1 binding is used; SOAP 1.2 bindings are skipped
  - The binding address is forced to ``<base><Service>``: the WSDLs served by
    RIT advertise internal host names that are not reachable from outside
  - Responses are converted to plain dicts/lists with serialize_object, so
    nothing downstream depends on zeep's CompoundValue types
  - Every zeep / requests failure surfaces as WebserviceError

Tracing:
  With RIT_TRACE enabled a HistoryPlugin records the envelopes, exposed as
  ``last_request`` / ``last_response``.  Subclasses can override
  ``store_trace_data`` to persist them, e.g.:

      class FileTracingAdapter(ZeepWebserviceAdapter):
          def store_trace_data(self, history):
              super().store_trace_data(history)
              stamp = int(time.time())
              Path(f"request_{stamp}.xml").write_text(self.last_request or "")
              Path(f"response_{stamp}.xml").write_text(self.last_response or "")
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests
from lxml import etree
from zeep import Client
from zeep import Settings as ZeepSettings
from zeep.cache import InMemoryCache
from zeep.exceptions import Error as ZeepError
from zeep.exceptions import Fault, TransportError
from zeep.helpers import serialize_object
from zeep.plugins import HistoryPlugin
from zeep.transports import Transport
from zeep.wsdl.bindings import Soap11Binding

from ritws.config.settings import Settings
from ritws.domain.exceptions import WebserviceError

logger = logging.getLogger(__name__)


class ZeepWebserviceAdapter:
    """zeep implementation of WebservicePort.

    Injected into RITClient via services/container.py.
    """

    def __init__(self, settings: Settings, session: requests.Session) -> None:
        self._settings = settings
        self._transport = Transport(
            session=session,
            cache=InMemoryCache(),
            timeout=settings.timeout,
            operation_timeout=settings.timeout,
        )
        # zeep replaces the session User-Agent with its own
        session.headers["User-Agent"] = settings.user_agent
        self._zeep_settings = ZeepSettings(strict=False, xml_huge_tree=True)
        self._history: Optional[HistoryPlugin] = HistoryPlugin() if settings.trace else None
        self._services: dict[str, Any] = {}
        self.last_request: Optional[str] = None
        self.last_response: Optional[str] = None
        logger.debug(
            "ZeepWebserviceAdapter ready | base_url=%s trace=%s",
            settings.base_url,
            settings.trace,
        )

    # ── WebservicePort implementation ──────────────────────────────────────

    def invoke(self, service: str, operation: str, request: dict) -> Any:
        """Call a SOAP operation and return the serialised response."""
        proxy = self._get_service(service)
        logger.info("SOAP call | %s.%s", service, operation)
        try:
            method = getattr(proxy, operation)
        except AttributeError as exc:
            raise WebserviceError(
                f"Webservice '{service}' has no operation '{operation}'",
                service=service,
                operation=operation,
            ) from exc

        try:
            result = method(**request)
        except Fault as exc:
            raise WebserviceError(
                f"{service}.{operation} returned SOAP fault: {exc.message}",
                service=service,
                operation=operation,
            ) from exc
        except TransportError as exc:
            raise WebserviceError(
                f"{service}.{operation} HTTP {exc.status_code}: {exc.message}",
                service=service,
                operation=operation,
            ) from exc
        except (ZeepError, requests.RequestException) as exc:
            raise WebserviceError(
                f"{service}.{operation} failed: {exc}",
                service=service,
                operation=operation,
            ) from exc

        if self._history is not None:
            self.store_trace_data(self._history)
        return serialize_object(result, target_cls=dict)

    # ── Tracing hook ───────────────────────────────────────────────────────

    def store_trace_data(self, history: HistoryPlugin) -> None:
        """Remember the last request/response envelopes as XML strings.

        Called after every successful call when tracing is enabled.
        Override to refine monitoring or debugging.
        """
        self.last_request = _envelope_to_str(history.last_sent)
        self.last_response = _envelope_to_str(history.last_received)

    # ── Private helpers ────────────────────────────────────────────────────

    def _get_service(self, service: str) -> Any:
        """Return a cached ServiceProxy bound to the service's endpoint."""
        if service not in self._services:
            self._services[service] = self._build_service(service)
        return self._services[service]

    def _build_service(self, service: str) -> Any:
        wsdl = self._settings.wsdl_url(service)
        address = self._settings.endpoint(service)
        logger.debug("Loading WSDL | %s", wsdl)
        try:
            client = Client(
                wsdl=wsdl,
                transport=self._transport,
                settings=self._zeep_settings,
                plugins=[self._history] if self._history is not None else [],
            )
        except (ZeepError, requests.RequestException) as exc:
            raise WebserviceError(
                f"Cannot load WSDL for '{service}': {exc}", service=service
            ) from exc

        binding_name = _soap11_binding(client.wsdl.bindings)
        if binding_name is None:
            raise WebserviceError(
                f"WSDL for '{service}' declares no SOAP 1.1 binding", service=service
            )
        return client.create_service(binding_name, address)


def _soap11_binding(bindings: dict) -> Optional[str]:
    """Name of the first SOAP 1.1 binding; RIT only speaks SOAP 1.1."""
    for name, binding in bindings.items():
        if isinstance(binding, Soap11Binding):
            return name
    return None


def _envelope_to_str(entry: Optional[dict]) -> Optional[str]:
    if not entry or entry.get("envelope") is None:
        return None
    return etree.tostring(entry["envelope"], encoding="unicode")
