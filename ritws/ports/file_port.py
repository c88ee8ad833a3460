"""
ports/file_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for plain HTTP file retrieval.

Object attachments are referenced by URL in search responses; fetching them
goes through the same client certificate as the SOAP calls.

Current implementation: RequestsFileFetcher
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FileFetcherPort(Protocol):
    """Contract for downloading a single file."""

    def fetch(self, url: str) -> bytes:
        """Download ``url`` and return its body.

        Raises:
            WebserviceError: On connection failure or non-2xx status.
        """
        ...
