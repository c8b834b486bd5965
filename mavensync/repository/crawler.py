"""Walk a repository's directory tree and emit one metadata record per artifact."""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterator, List, Optional, Sequence, Set, Tuple

from mavensync.domain import Artifact, ArtifactMetadata, ArtifactVersion, Group, is_version_token
from mavensync.exceptions import InvalidDescriptorError
from mavensync.urls import filename_of, is_directory, leaf_name

from .http_repository import MavenHttpRepository

log = logging.getLogger(__name__)

# (children still to visit, metadata found here); empty children ends the branch
_Visit = Tuple[List[str], Optional[ArtifactMetadata]]


class RepositoryCrawler:
    """Depth-first crawl using an explicit work list instead of recursion.

    A directory is terminal when it carries a descriptor with released
    versions, or when all of its subdirectories are version numbers (the
    descriptor is then synthesised from the directory names). Anything else is
    descended into. Failures are logged against the directory that caused
    them and the crawl moves on.
    """

    def __init__(
        self,
        repository: MavenHttpRepository,
        *,
        crawl_delay: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.repository = repository
        self.crawl_delay = crawl_delay
        self._sleep = sleep

    def crawl(self, paths: Sequence[str] = ()) -> Iterator[ArtifactMetadata]:
        start_urls = [self.repository.directory_url(path) for path in paths] or [self.repository.base_url]
        emitted: Set[Tuple[Group, Artifact]] = set()
        fetched = 0

        for start_url in start_urls:
            log.info("Crawling %s", start_url)
            pending = [start_url]
            while pending:
                url = pending.pop()
                if fetched and self.crawl_delay > 0:
                    self._sleep(self.crawl_delay)
                fetched += 1
                try:
                    children, metadata = self._visit(url)
                except Exception as exc:  # noqa: BLE001
                    log.exception("Failed to crawl %s: %s", url, exc)
                    continue

                if metadata is not None:
                    key = (metadata.group, metadata.artifact)
                    if key in emitted:
                        log.debug("Already emitted %s; skipping %s", metadata, url)
                        continue
                    emitted.add(key)
                    yield metadata
                    continue
                # reversed so the work list pops children in listing order
                pending.extend(reversed(children))

    def _visit(self, url: str) -> _Visit:
        log.info("Reading index: %s", url)
        links = self.repository.list_child_links(url)
        directories = [link for link in links if is_directory(link)]
        files = [link for link in links if not is_directory(link)]

        descriptor = next((link for link in files if filename_of(link).is_metadata), None)
        if descriptor is not None:
            metadata = self._read_descriptor(descriptor)
            if metadata is not None and metadata.versions:
                log.debug("Found %s with %d versions", metadata, len(metadata.versions))
                return [], metadata

        if directories:
            names = [leaf_name(link) for link in directories]
            if all(is_version_token(name) for name in names):
                return [], self._synthesize(url, names)

        for link in files:
            self._note_file(link)
        return directories, None

    def _read_descriptor(self, url: str) -> Optional[ArtifactMetadata]:
        try:
            return self.repository.read_metadata(url)
        except InvalidDescriptorError as exc:
            log.warning("Ignoring invalid descriptor %s: %s", url, exc)
            return None

    def _synthesize(self, url: str, names: List[str]) -> Optional[ArtifactMetadata]:
        segments = self.repository.relative_segments(url)
        if len(segments) < 2:
            log.warning("Version directories under %s but no group/artifact path; skipping", url)
            return None
        versions = sorted(
            version
            for version in (ArtifactVersion(name) for name in names)
            if not version.is_snapshot
        )
        if not versions:
            log.info("Only snapshot versions under %s; skipping", url)
            return None
        metadata = ArtifactMetadata(
            group=Group(".".join(segments[:-1])),
            artifact=Artifact(segments[-1]),
            versions=tuple(versions),
        )
        log.warning(
            "Missing maven-metadata.xml for %s; synthesized %d versions from %s",
            metadata,
            len(versions),
            url,
        )
        return metadata

    @staticmethod
    def _note_file(link: str) -> None:
        filename = filename_of(link)
        if (
            filename.is_checksum
            or filename.is_signature
            or filename.is_pom
            or filename.is_metadata
            or filename.is_ignored
        ):
            log.debug("Ignoring %s", link)
            return
        log.warning("Ignoring unknown artifact (likely missing maven-metadata.xml): %s", link)
