"""Directory listing parsers.

Each parser turns a fetched index page into the absolute URLs of its
children. Links are kept only when they resolve strictly below the page URL,
so the crawler never wanders out of the repository tree. Parsers raise
``ListingParseError`` for layouts they do not recognise; the composite parser
tries them in order and reports every failure when none match.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Comment, NavigableString, Tag

from mavensync.exceptions import ListingParseError
from mavensync.urls import as_directory_url

log = logging.getLogger(__name__)

DIRECTORY_SIZE_MARKERS = ("", "-")


class DirectoryListingParser(Protocol):
    """Common interface for listing formats."""

    def parse(self, base_url: str, document: BeautifulSoup) -> List[str]:  # pragma: no cover - interface
        ...


def resolve_anchored_link(base_url: str, href: Optional[str]) -> Optional[str]:
    """Absolute form of ``href`` if it points strictly below ``base_url``."""
    if not href:
        return None
    link = urljoin(base_url, href.strip())
    if link == base_url or not link.startswith(base_url):
        return None
    parts = urlsplit(link)
    if parts.query or parts.fragment:
        return None
    return link


def _is_blank_text(node: object) -> bool:
    return isinstance(node, NavigableString) and not node.strip()


class DefaultDirectoryListingParser:
    """Index rendered as ``<pre>`` with alternating link / "date time size" text."""

    def parse(self, base_url: str, document: BeautifulSoup) -> List[str]:
        blocks = document.find_all("pre")
        if len(blocks) != 1:
            raise ListingParseError(f"Expected a single <pre> block, found {len(blocks)}", base_url)

        nodes = list(blocks[0].children)
        while nodes and _is_blank_text(nodes[0]):
            nodes.pop(0)
        if len(nodes) % 2 and not _is_blank_text(nodes[-1]):
            raise ListingParseError(f"Unpaired trailing node {nodes[-1]!r}", base_url)

        links: List[str] = []
        for link_node, text_node in zip(nodes[0::2], nodes[1::2]):
            if not isinstance(link_node, Tag) or link_node.name != "a":
                raise ListingParseError(f"Expected link element, got {link_node!r}", base_url)
            if not isinstance(text_node, NavigableString) or isinstance(text_node, Comment):
                raise ListingParseError(f"Expected text after link, got {text_node!r}", base_url)

            link = resolve_anchored_link(base_url, link_node.get("href"))
            if link is None:
                continue

            fields = text_node.split()
            if len(fields) != 3:
                raise ListingParseError(
                    f"Expected 3 fields (date, time, size), got {len(fields)} in {text_node.strip()!r}",
                    base_url,
                )
            # not every server suffixes directories with '/'; the size column tells
            if fields[2] in DIRECTORY_SIZE_MARKERS:
                link = as_directory_url(link)
            links.append(link)
        return links


class TableDirectoryListingParser:
    """Index rendered as a ``<table>`` with a "Size" header column."""

    def parse(self, base_url: str, document: BeautifulSoup) -> List[str]:
        size_index = self._size_column(document)
        if size_index is None:
            raise ListingParseError("No table with a Size column", base_url)

        links: List[str] = []
        linked_rows = 0
        for row in document.find_all("tr"):
            cells = row.find_all("td")
            if not cells:
                continue
            anchor = row.find("a", href=True)
            if anchor is None:
                continue
            # counted before anchoring so a parent-only listing is an empty directory
            linked_rows += 1
            link = resolve_anchored_link(base_url, anchor["href"])
            if link is None:
                continue
            if len(cells) <= size_index:
                raise ListingParseError(f"Row for {link} has no size cell", base_url)
            size = cells[size_index].get_text(strip=True)
            if size in DIRECTORY_SIZE_MARKERS:
                link = as_directory_url(link)
            links.append(link)
        if not linked_rows:
            raise ListingParseError("Table has a Size column but no linked rows", base_url)
        return links

    @staticmethod
    def _size_column(document: BeautifulSoup) -> Optional[int]:
        for row in document.find_all("tr"):
            headers = row.find_all("th")
            for index, header in enumerate(headers):
                if header.get_text(strip=True).lower() == "size":
                    return index
        return None


class CompositeDirectoryListingParser:
    """Try each parser in turn and return the first successful result."""

    def __init__(self, parsers: Sequence[DirectoryListingParser]) -> None:
        self.parsers = list(parsers)

    def parse(self, base_url: str, document: BeautifulSoup) -> List[str]:
        failures: List[Exception] = []
        for parser in self.parsers:
            try:
                return parser.parse(base_url, document)
            except Exception as exc:  # noqa: BLE001
                log.debug("%s rejected %s: %s", type(parser).__name__, base_url, exc)
                failures.append(exc)
        raise ListingParseError(
            f"No suitable directory listing parser found for {base_url}",
            base_url,
            failures,
        ) from (failures[-1] if failures else None)


def create_listing_parser() -> DirectoryListingParser:
    return CompositeDirectoryListingParser(
        [
            DefaultDirectoryListingParser(),
            TableDirectoryListingParser(),
        ]
    )
