from __future__ import annotations

import threading
from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import unquote

import httpx
import pytest

from mavensync.parsing import MavenMetadataXml
from mavensync.repository import MavenHttpRepository
from mavensync.transport import MavenHttpClient

LISTING_TEMPLATE = """<!DOCTYPE html>
<html>
<head><title>{path}</title></head>
<body>
<header><h1>{path}</h1></header>
<hr/>
<main>
<pre id="contents">
<a href="../">../</a>
{rows}</pre>
</main>
<hr/>
</body>
</html>
"""


def metadata_xml(group: str, artifact: str, versions: Iterable[str]) -> str:
    versions = list(versions)
    return MavenMetadataXml(
        group_id=group,
        artifact_id=artifact,
        latest=versions[-1] if versions else "",
        release=versions[-1] if versions else "",
        last_updated="20240101000000",
        versions=versions,
    ).to_xml()


class FakeRepositoryServer:
    """In-memory repository that serves Maven Central style listings and accepts PUTs."""

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url
        self.base_path = httpx.URL(base_url).path
        self.files: Dict[str, bytes] = {}
        self.statuses: Dict[Tuple[str, str], int] = {}
        self.requests: List[Tuple[str, str]] = []
        self.puts: List[str] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------ setup
    def add(self, path: str, content="") -> None:
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.files[path] = content

    def add_artifact(self, group: str, artifact: str, versions: Iterable[str], *, metadata: bool = True,
                     extensions: Iterable[str] = ("pom", "jar", "jar.sha1", "jar.asc")) -> None:
        versions = list(versions)
        prefix = "/".join(group.split(".") + [artifact])
        for version in versions:
            for extension in extensions:
                self.add(f"{prefix}/{version}/{artifact}-{version}.{extension}", f"{artifact}-{version}.{extension}")
        if metadata:
            self.add(f"{prefix}/maven-metadata.xml", metadata_xml(group, artifact, versions))

    def respond(self, method: str, path: str, status: int) -> None:
        """Force ``status`` for ``method path`` regardless of content."""
        self.statuses[(method, path)] = status

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handle))

    def repository(self) -> MavenHttpRepository:
        return MavenHttpRepository(self.base_url, MavenHttpClient(client=self.client()))

    def listing_requests(self) -> List[str]:
        return [path for method, path in self.requests if method == "GET" and (not path or path.endswith("/"))]

    # ------------------------------------------------------------------ handler
    def handle(self, request: httpx.Request) -> httpx.Response:
        path = unquote(request.url.path)
        assert path.startswith(self.base_path), path
        path = path[len(self.base_path):]
        with self._lock:
            self.requests.append((request.method, path))
            forced = self.statuses.get((request.method, path))
            if forced is not None:
                return httpx.Response(forced, text="forced")
            if request.method == "PUT":
                self.files[path] = request.content
                self.puts.append(path)
                return httpx.Response(201)
            if request.method != "GET":
                return httpx.Response(405)
            if not path or path.endswith("/"):
                return self._listing(path)
            if path not in self.files:
                return httpx.Response(404, text="not found")
            content_type = "application/xml" if path.endswith(".xml") else "application/octet-stream"
            return httpx.Response(200, content=self.files[path], headers={"Content-Type": content_type})

    def _listing(self, path: str) -> httpx.Response:
        entries: Dict[str, Optional[int]] = {}
        for name, content in self.files.items():
            if not name.startswith(path):
                continue
            head, sep, _ = name[len(path):].partition("/")
            if sep:
                entries[f"{head}/"] = None
            else:
                entries[head] = len(content)
        if path and not entries:
            return httpx.Response(404, text="not found")
        rows = "".join(
            f'<a href="{name}" title="{name}">{name}</a>{" " * max(1, 60 - len(name))}'
            f'2024-01-01 10:00 {"-" if size is None else size:>10}\n'
            for name, size in sorted(entries.items())
        )
        body = LISTING_TEMPLATE.format(path=f"{self.base_path}{path}", rows=rows)
        return httpx.Response(200, text=body, headers={"Content-Type": "text/html; charset=utf-8"})


@pytest.fixture
def source_server() -> FakeRepositoryServer:
    return FakeRepositoryServer("https://source.example/maven2/")


@pytest.fixture
def target_server() -> FakeRepositoryServer:
    return FakeRepositoryServer("https://target.example/releases/")
