"""Logging setup for the command-line runner."""

from __future__ import annotations

import logging
import sys
from typing import Dict, Iterable, Mapping, Tuple, Union

LOG_FORMAT = "%(asctime)s %(levelname)-5s [%(threadName)s] %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

REDACTED = "***"
SENSITIVE_HEADERS = frozenset({"authorization", "proxy-authorization"})

HeaderSource = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def configure_logging(debug: bool = False) -> None:
    """Install a single console handler; ``debug`` widens mavensync to DEBUG."""
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root.addHandler(handler)
    root.setLevel(logging.INFO)

    logging.getLogger("mavensync").setLevel(logging.DEBUG if debug else logging.INFO)
    # the transport logs its own request lines; keep the libraries quiet
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)


def redact_headers(headers: HeaderSource) -> Dict[str, str]:
    """Return a printable copy of ``headers`` with credentials masked."""
    items = headers.items() if hasattr(headers, "items") else headers
    return {
        name: REDACTED if name.lower() in SENSITIVE_HEADERS else value
        for name, value in items
    }
