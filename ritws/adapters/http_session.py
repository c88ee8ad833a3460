"""
adapters/http_session.py
──────────────────────────────────────────────────────────────────────────────
Builds the requests.Session shared by the SOAP adapter and the file fetcher.

RIT authenticates callers by TLS client certificate (a PEM bundle holding
both the certificate and its private key, optionally passphrase-protected).
requests cannot pass a key passphrase through ``session.cert``, so the
certificate is loaded into an ssl.SSLContext and mounted via a custom
HTTPAdapter instead.

The server presents a self-signed chain; peer verification is disabled.
"""
from __future__ import annotations

import logging
import ssl
import warnings

import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import InsecureRequestWarning

from ritws.config.settings import Settings
from ritws.domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


class ClientCertAdapter(HTTPAdapter):
    """HTTPAdapter that uses a pre-built SSLContext for every pool."""

    def __init__(self, ssl_context: ssl.SSLContext, **kwargs) -> None:
        # Must be set before super().__init__, which builds the pool manager.
        self._ssl_context = ssl_context
        super().__init__(**kwargs)

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context
        return super().init_poolmanager(*args, **kwargs)

    def proxy_manager_for(self, *args, **kwargs):
        kwargs["ssl_context"] = self._ssl_context
        return super().proxy_manager_for(*args, **kwargs)

    def send(self, request, **kwargs):
        # RIT is called with peer verification disabled; urllib3 warns per request.
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", InsecureRequestWarning)
            return super().send(request, **kwargs)


def build_ssl_context(settings: Settings) -> ssl.SSLContext:
    """Create an SSLContext carrying the configured client certificate.

    Raises:
        AuthenticationError: If the certificate file is missing or cannot
                             be loaded (wrong passphrase, not PEM, …).
    """
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE

    if settings.cert_path is None:
        logger.warning("RIT_CERT_PATH is not set; connecting without a client certificate")
        return context

    if not settings.cert_path.is_file():
        raise AuthenticationError(
            f"Client certificate not found at '{settings.cert_path}'. "
            "Set the RIT_CERT_PATH environment variable."
        )
    try:
        context.load_cert_chain(
            certfile=str(settings.cert_path),
            password=settings.password or None,
        )
    except (ssl.SSLError, OSError) as exc:
        raise AuthenticationError(
            f"Cannot load client certificate '{settings.cert_path}': {exc}"
        ) from exc

    logger.debug("Client certificate loaded | path=%s", settings.cert_path)
    return context


def build_session(settings: Settings) -> requests.Session:
    """Return a Session with the client certificate mounted for HTTPS."""
    session = requests.Session()
    session.verify = False
    session.headers.update({
        "User-Agent": settings.user_agent,
        "Accept-Encoding": "gzip, deflate",
        "Connection": "close",
    })
    session.mount("https://", ClientCertAdapter(build_ssl_context(settings)))
    logger.debug("HTTP session ready | user_agent=%s", settings.user_agent)
    return session
