"""
tests/unit/test_http_session.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for the shared requests.Session and the file fetcher.
"""
from __future__ import annotations

import ssl
import warnings
from dataclasses import replace
from unittest.mock import MagicMock, patch

import pytest
import requests
from requests.adapters import HTTPAdapter
from urllib3.exceptions import InsecureRequestWarning

from ritws.adapters.http_session import ClientCertAdapter, build_session, build_ssl_context
from ritws.adapters.requests_files import RequestsFileFetcher
from ritws.domain.exceptions import AuthenticationError, WebserviceError


class TestSslContext:
    def test_without_certificate(self, settings, caplog):
        with caplog.at_level("WARNING"):
            ctx = build_ssl_context(settings)
        assert isinstance(ctx, ssl.SSLContext)
        assert ctx.verify_mode == ssl.CERT_NONE
        assert ctx.check_hostname is False
        assert "RIT_CERT_PATH" in caplog.text

    def test_missing_certificate_file(self, settings, tmp_path):
        with pytest.raises(AuthenticationError, match="not found"):
            build_ssl_context(replace(settings, cert_path=tmp_path / "absent.pem"))

    def test_unreadable_certificate(self, settings, tmp_path):
        bogus = tmp_path / "cert.pem"
        bogus.write_text("this is not a PEM bundle")
        with pytest.raises(AuthenticationError, match="Cannot load"):
            build_ssl_context(replace(settings, cert_path=bogus))


class TestSession:
    def test_headers(self, settings):
        session = build_session(settings)
        assert session.headers["User-Agent"] == "RIT_Webservices"
        assert session.headers["Connection"] == "close"
        assert session.verify is False

    def test_https_uses_client_cert_adapter(self, settings):
        session = build_session(settings)
        assert isinstance(session.get_adapter("https://maps.pot.gov.pl/"), ClientCertAdapter)

    def test_insecure_warning_silenced_only_inside_adapter(self, settings):
        def noisy_send(self, request, **kwargs):
            warnings.warn("unverified HTTPS request", InsecureRequestWarning)
            warnings.warn("something else", UserWarning)
            return "response"

        adapter = ClientCertAdapter(build_ssl_context(settings))
        with patch.object(HTTPAdapter, "send", noisy_send):
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter("always")
                assert adapter.send(requests.Request("GET", "https://x/").prepare()) == "response"
                warnings.warn("outside", InsecureRequestWarning)

        categories = [w.category for w in caught]
        assert categories.count(InsecureRequestWarning) == 1
        assert UserWarning in categories


class TestFileFetcher:
    def _response(self, content=b"", status=200):
        resp = requests.Response()
        resp.status_code = status
        resp._content = content
        resp.url = "https://example.org/x"
        return resp

    def test_unescapes_url(self, settings):
        session = MagicMock()
        session.get.return_value = self._response(b"IMG")
        fetcher = RequestsFileFetcher(settings, session)

        assert fetcher.fetch("https://example.org/p.jpg?a=1&amp;b=2") == b"IMG"
        session.get.assert_called_once_with(
            "https://example.org/p.jpg?a=1&b=2", timeout=5, allow_redirects=True
        )

    def test_http_error(self, settings):
        session = MagicMock()
        session.get.return_value = self._response(status=404)
        with pytest.raises(WebserviceError, match="Cannot fetch"):
            RequestsFileFetcher(settings, session).fetch("https://example.org/missing")

    def test_connection_error(self, settings):
        session = MagicMock()
        session.get.side_effect = requests.ConnectionError("down")
        with pytest.raises(WebserviceError):
            RequestsFileFetcher(settings, session).fetch("https://example.org/x")
