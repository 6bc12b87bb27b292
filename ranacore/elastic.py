"""Client that posts JSON documents to an Elasticsearch endpoint."""

from __future__ import annotations

import base64
import ssl
import threading
import urllib.error
import urllib.request
from typing import Optional, Union

ELK_TIMEOUT = 100  # seconds

Payload = Union[str, bytes]


class ElasticSearchError(Exception):
    """Raised when a document cannot be delivered to the server."""


class ElasticSearchClient:
    """Posts JSON payloads over HTTP(S) with optional basic authentication.

    Requests are serialised through a lock, so one client can be shared
    between threads. HTTP error statuses are returned, not raised; only
    transport failures raise ElasticSearchError.
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = ELK_TIMEOUT,
    ) -> None:
        self.url = url
        self.username = username
        self.password = password
        self.timeout = timeout
        self.recent_error = ""
        self._lock = threading.Lock()
        self._closed = False

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.username is not None:
            credentials = f"{self.username}:{self.password or ''}".encode("utf-8")
            encoded = base64.b64encode(credentials).decode("ascii")
            headers["Authorization"] = f"Basic {encoded}"
        return headers

    def _send(self, payload: Payload, url: str, verify: bool) -> int:
        body = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
        context = ssl.create_default_context()
        if not verify:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        request = urllib.request.Request(
            url, data=body, headers=self._headers(), method="POST"
        )
        with self._lock:
            if self._closed:
                raise ElasticSearchError("client is closed")
            try:
                with urllib.request.urlopen(
                    request, timeout=self.timeout, context=context
                ) as response:
                    response.read()
                    return response.status
            except urllib.error.HTTPError as exc:
                exc.read()
                return exc.code
            except (urllib.error.URLError, OSError, ValueError) as exc:
                self.recent_error = str(exc)
                raise ElasticSearchError(
                    f"could not post to {url}: {exc}"
                ) from exc

    def post(self, payload: Payload) -> int:
        """Post ``payload`` to the configured URL; return the HTTP status."""
        return self._send(payload, self.url, verify=True)

    def post_to(self, payload: Payload, url: str, verify: bool = False) -> int:
        """Post ``payload`` to ``url``; certificates are checked only with ``verify``."""
        return self._send(payload, url, verify)

    def close(self) -> None:
        """Refuse further posts."""
        with self._lock:
            self._closed = True

    def __enter__(self) -> "ElasticSearchClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()