"""Helpers for repository URLs (directories end with ``/``)."""

from __future__ import annotations

from typing import List
from urllib.parse import quote, unquote, urlsplit

from mavensync.domain import Filename


def as_directory_url(url: str) -> str:
    return url if url.endswith("/") else f"{url}/"


def is_directory(url: str) -> bool:
    return urlsplit(url).path.endswith("/")


def leaf_name(url: str) -> str:
    """Decoded last path segment, ignoring a trailing slash."""
    path = urlsplit(url).path.rstrip("/")
    return unquote(path.rsplit("/", 1)[-1])


def filename_of(url: str) -> Filename:
    return Filename(leaf_name(url))


def join_segments(base_url: str, segments: List[str], directory: bool = False) -> str:
    path = "/".join(quote(segment, safe="") for segment in segments)
    url = f"{as_directory_url(base_url)}{path}"
    return as_directory_url(url) if directory else url


def relative_segments(base_url: str, url: str) -> List[str]:
    """Decoded path segments of ``url`` below ``base_url``."""
    base_url = as_directory_url(base_url)
    if not url.startswith(base_url):
        raise ValueError(f"{url} is not below {base_url}")
    return [unquote(segment) for segment in url[len(base_url):].split("/") if segment]
