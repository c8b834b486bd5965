"""Command line entry point."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from mavensync.bootstrap import run_sync
from mavensync.logging_config import configure_logging
from mavensync.settings import Settings, load_settings

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mavensync",
        description="Copy released versions missing from a target Maven repository.",
    )
    parser.add_argument("config", nargs="*", help="JSON configuration files; later files win")
    parser.add_argument("--source-url", help="repository to crawl")
    parser.add_argument("--target-url", help="repository to upload to")
    parser.add_argument(
        "--path",
        dest="paths",
        action="append",
        metavar="PATH",
        help="only crawl below this source path (repeatable)",
    )
    parser.add_argument("--concurrency", type=int, help="number of artifacts synced in parallel")
    parser.add_argument("--no-checksums", action="store_true", help="skip .md5/.sha1/... files")
    parser.add_argument("--no-signatures", action="store_true", help="skip .asc files")
    parser.add_argument("--log-http-headers", action="store_true", help="log request and response headers")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    return parser


def _overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    source: Dict[str, Any] = {}
    target: Dict[str, Any] = {}
    if args.source_url:
        source["url"] = args.source_url
    if args.paths:
        source["paths"] = args.paths
    if args.target_url:
        target["url"] = args.target_url
    if args.log_http_headers:
        source["log_http_headers"] = True
        target["log_http_headers"] = True
    if source:
        overrides["source"] = source
    if target:
        overrides["target"] = target
    if args.concurrency is not None:
        overrides["artifact_concurrency"] = args.concurrency
    if args.no_checksums:
        overrides["transfer_checksums"] = False
    if args.no_signatures:
        overrides["transfer_signatures"] = False
    return overrides


def load_from_args(args: argparse.Namespace) -> Settings:
    return load_settings(args.config, _overrides(args))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(debug=args.debug)

    try:
        settings = load_from_args(args)
    except (ValidationError, ValueError, OSError) as exc:
        log.error("Invalid configuration: %s", exc)
        return 1
    log.info("Effective configuration: %s", json.dumps(settings.masked(), sort_keys=True))

    summary = run_sync(settings)
    if not summary.ok:
        for name, error in summary.failures:
            log.error("Failed: %s: %s", name, error)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
