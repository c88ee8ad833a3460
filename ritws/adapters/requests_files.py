"""
adapters/requests_files.py
──────────────────────────────────────────────────────────────────────────────
Implements FileFetcherPort with the shared requests.Session.

URLs embedded in SOAP responses arrive HTML-escaped (``&amp;``); they are
unescaped before the request is made.
"""
from __future__ import annotations

import html
import logging

import requests

from ritws.config.settings import Settings
from ritws.domain.exceptions import WebserviceError

logger = logging.getLogger(__name__)


class RequestsFileFetcher:
    """Plain GET downloader, redirects followed."""

    def __init__(self, settings: Settings, session: requests.Session) -> None:
        self._session = session
        self._timeout = settings.timeout

    def fetch(self, url: str) -> bytes:
        url = html.unescape(url)
        logger.info("Fetching file | %s", url)
        try:
            resp = self._session.get(url, timeout=self._timeout, allow_redirects=True)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise WebserviceError(f"Cannot fetch '{url}': {exc}") from exc
        return resp.content
