"""HTTP client used to read from and write to Maven repositories."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Tuple, Union

import httpx
from bs4 import BeautifulSoup

from mavensync.logging_config import redact_headers

from .exceptions import (
    ConflictError,
    MissingContentError,
    MissingContentTypeError,
    TransportError,
    UnsupportedContentTypeError,
)

DEFAULT_USER_AGENT = "Gradle/8.7 (Linux;6.1;amd64) (Eclipse Adoptium;21.0.2;21.0.2+13-LTS)"


class MavenHttpClient:
    """Fetch listings and descriptors, stream assets down and up."""

    CHUNK_SIZE = 65536
    PROGRESS_BYTES = 5 * 1024 * 1024

    # content type -> BeautifulSoup tree builder
    DOCUMENT_PARSERS = {
        "text/html": "html.parser",
        "application/xml": "xml",
        "text/xml": "xml",
    }

    def __init__(
        self,
        *,
        credentials: Optional[Tuple[str, str]] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        log_http_headers: bool = False,
        timeout: float = 45.0,
        connect_timeout: float = 3.0,
        verify_tls: bool = True,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.log = logging.getLogger(__name__)
        self._auth = httpx.BasicAuth(*credentials) if credentials else None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            verify=verify_tls,
            follow_redirects=False,
        )
        self._client.headers["User-Agent"] = user_agent
        if log_http_headers:
            self._client.event_hooks = {
                "request": [self._log_request],
                "response": [self._log_response],
            }

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "MavenHttpClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------ reads
    def fetch_document(self, url: str) -> BeautifulSoup:
        """GET ``url`` and parse it as HTML or XML based on its Content-Type."""
        with self._wrap_errors("GET", url):
            response = self._client.get(url, auth=self._auth)
        self._raise_for_status(response)

        content_type = response.headers.get("content-type")
        if not content_type:
            raise MissingContentTypeError(
                f"Missing content type (GET {url})",
                url=url,
                method="GET",
                status_code=response.status_code,
            )
        mime = content_type.split(";", 1)[0].strip().lower()
        features = self.DOCUMENT_PARSERS.get(mime)
        if features is None:
            raise UnsupportedContentTypeError(
                f"No parser for content type {mime} (GET {url})",
                url=url,
                method="GET",
                status_code=response.status_code,
            )
        markup = response.content if features == "xml" else response.text
        return BeautifulSoup(markup, features)

    def download_to(self, url: str, sink: BinaryIO) -> int:
        """Stream the body of ``url`` into ``sink``; return the byte count."""
        start_time = time.perf_counter()
        downloaded = 0
        with self._wrap_errors("GET", url):
            with self._client.stream("GET", url, auth=self._auth) as response:
                self._raise_for_status(response)
                next_bytes_logged = self.PROGRESS_BYTES
                for chunk in response.iter_bytes(self.CHUNK_SIZE):
                    if not chunk:
                        continue
                    sink.write(chunk)
                    downloaded += len(chunk)
                    if downloaded >= next_bytes_logged:
                        self.log.debug("Download progress %s %d bytes", url, downloaded)
                        next_bytes_logged += self.PROGRESS_BYTES
        elapsed = max(time.perf_counter() - start_time, 1e-3)
        self.log.debug(
            "Downloaded %s (%d bytes, %.2f MB/s, %.2fs)",
            url,
            downloaded,
            (downloaded / 1024 / 1024) / elapsed,
            elapsed,
        )
        return downloaded

    # ------------------------------------------------------------------ writes
    def upload_from(self, url: str, source: Union[str, Path, BinaryIO]) -> None:
        """PUT a file (path or open binary handle) to ``url``."""
        if isinstance(source, (str, Path)):
            with open(source, "rb") as fh:
                self.upload_from(url, fh)
            return
        with self._wrap_errors("PUT", url):
            response = self._client.put(
                url,
                content=source,
                headers={"Content-Type": "application/octet-stream"},
                auth=self._auth,
            )
        self._raise_for_status(response)
        self.log.info(
            "Uploaded %s status=%s size=%s",
            url,
            response.status_code,
            response.request.headers.get("content-length", "-"),
        )

    def upload_text(self, url: str, content: str) -> None:
        """PUT an in-memory UTF-8 document to ``url``."""
        with self._wrap_errors("PUT", url):
            response = self._client.put(
                url,
                content=content.encode("utf-8"),
                headers={"Content-Type": "application/xml; charset=utf-8"},
                auth=self._auth,
            )
        self._raise_for_status(response)
        self.log.info("Uploaded %s status=%s", url, response.status_code)

    # ------------------------------------------------------------------ helpers
    @contextmanager
    def _wrap_errors(self, method: str, url: str) -> Iterator[None]:
        try:
            yield
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {url} failed: {exc}", url=url, method=method) from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        method = response.request.method
        url = str(response.request.url)
        status = response.status_code
        message = f"{method} {url}: {status} {response.reason_phrase}"
        kwargs = {"url": url, "method": method, "status_code": status}
        if status == 404:
            raise MissingContentError(f"Missing content ({message})", **kwargs)
        if status == 409:
            raise ConflictError(f"Conflict ({message})", **kwargs)
        raise TransportError(message, **kwargs)

    def _log_request(self, request: httpx.Request) -> None:
        self.log.info(
            "--> %s %s headers=%s",
            request.method,
            request.url,
            redact_headers(request.headers),
        )

    def _log_response(self, response: httpx.Response) -> None:
        self.log.info(
            "<-- %s %s %s headers=%s",
            response.status_code,
            response.request.method,
            response.request.url,
            redact_headers(response.headers),
        )
