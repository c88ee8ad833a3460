"""
ports/webservice_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the RIT SOAP webservices.

RIT exposes one WSDL per webservice (MetadataOfRIT, CollectTouristObjects,
GiveTouristObjects, …), each with a handful of operations.  The port hides
everything SOAP-specific behind a single call:

    invoke("MetadataOfRIT", "getMetadataOfRIT", {"metric": …, "language": …})

and hands back plain Python data (dicts, lists, scalars), so services and
tests never touch zeep objects.

Current implementation: ZeepWebserviceAdapter (zeep + requests)
To swap: write a new adapter implementing this Protocol and change container.py
"""
from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class WebservicePort(Protocol):
    """Contract for a RIT SOAP webservice backend."""

    @property
    def last_request(self) -> Optional[str]:
        """XML of the last request sent, or None when tracing is off."""
        ...

    @property
    def last_response(self) -> Optional[str]:
        """XML of the last response received, or None when tracing is off."""
        ...

    def invoke(self, service: str, operation: str, request: dict) -> Any:
        """Call ``operation`` on webservice ``service``.

        Args:
            service:   Webservice name, appended to the instance base URL.
            operation: SOAP operation name as declared in the WSDL.
            request:   Request body; keys are the schema's element names.

        Returns:
            The response converted to plain dicts/lists/scalars.

        Raises:
            WebserviceError: On SOAP fault, transport or WSDL failure.
        """
        ...
