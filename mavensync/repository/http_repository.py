"""One side (source or target) of a sync, addressed over HTTP."""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from mavensync.domain import (
    MAVEN_METADATA_XML,
    Artifact,
    ArtifactMetadata,
    ArtifactVersionAsset,
    Coordinates,
    Group,
)
from mavensync.parsing import (
    DirectoryListingParser,
    MavenMetadataXml,
    MetadataReader,
    create_listing_parser,
    format_last_updated,
)
from mavensync.transport import MavenHttpClient, MissingContentError
from mavensync.urls import as_directory_url, filename_of, is_directory, join_segments, relative_segments

log = logging.getLogger(__name__)


class MavenHttpRepository:
    """Listing, descriptor and asset operations against one repository URL."""

    def __init__(
        self,
        url: str,
        client: MavenHttpClient,
        *,
        listing_parser: Optional[DirectoryListingParser] = None,
        metadata_reader: Optional[MetadataReader] = None,
    ) -> None:
        self.base_url = as_directory_url(url)
        self.client = client
        self.listing_parser = listing_parser or create_listing_parser()
        self.metadata_reader = metadata_reader or MetadataReader()

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "MavenHttpRepository":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MavenHttpRepository({self.base_url})"

    # ------------------------------------------------------------------ URLs
    def directory_url(self, path: str) -> str:
        """Start URL for a configured sub path such as ``org/apache``."""
        segments = [segment for segment in path.strip().split("/") if segment]
        if not segments:
            return self.base_url
        return join_segments(self.base_url, segments, directory=True)

    def version_url(self, coordinates: Coordinates) -> str:
        segments = coordinates.group.path_segments + [coordinates.artifact.value, coordinates.version.value]
        return join_segments(self.base_url, segments, directory=True)

    def asset_url(self, asset: ArtifactVersionAsset) -> str:
        return join_segments(self.version_url(asset.coordinates), [asset.filename.value])

    def metadata_url(self, group: Group, artifact: Artifact) -> str:
        return join_segments(self.base_url, group.path_segments + [artifact.value, MAVEN_METADATA_XML])

    def relative_segments(self, url: str) -> List[str]:
        return relative_segments(self.base_url, url)

    # ------------------------------------------------------------------ reads
    def list_child_links(self, url: str) -> List[str]:
        """Children of a directory; an absent directory has none."""
        try:
            document = self.client.fetch_document(url)
        except MissingContentError as exc:
            # happens when a descriptor lists a version whose directory is gone
            log.warning("Unable to read listing %s: %s; skipping", url, exc)
            return []
        return self.listing_parser.parse(url, document)

    def read_metadata(self, url: str, releases_only: bool = True) -> Optional[ArtifactMetadata]:
        """Parse the descriptor at ``url``; ``None`` when it does not exist."""
        try:
            document = self.client.fetch_document(url)
        except MissingContentError:
            log.debug("No descriptor at %s", url)
            return None
        return self.metadata_reader.parse(document, releases_only=releases_only)

    def query_artifact_metadata(
        self, group: Group, artifact: Artifact, releases_only: bool = True
    ) -> ArtifactMetadata:
        metadata = self.read_metadata(self.metadata_url(group, artifact), releases_only=releases_only)
        if metadata is None:
            return ArtifactMetadata(group, artifact)
        return ArtifactMetadata(group, artifact, metadata.versions)

    def list_artifact_version_assets(
        self,
        coordinates: Coordinates,
        include_checksums: bool,
        include_signatures: bool,
    ) -> List[ArtifactVersionAsset]:
        url = self.version_url(coordinates)
        log.debug("Listing assets for %s @ %s", coordinates, url)
        assets: List[ArtifactVersionAsset] = []
        for link in self.list_child_links(url):
            if is_directory(link):
                continue
            filename = filename_of(link)
            if not filename.value.startswith(coordinates.base_name):
                continue
            if filename.is_checksum and not include_checksums:
                continue
            if filename.is_signature and not include_signatures:
                continue
            assets.append(ArtifactVersionAsset(coordinates, filename))
        log.debug("Found %d assets for %s: %s", len(assets), coordinates, [str(a.filename) for a in assets])
        return assets

    # ------------------------------------------------------------------ writes
    def copy_asset(
        self,
        asset: ArtifactVersionAsset,
        target: "MavenHttpRepository",
        staging_dir: Optional[Path] = None,
    ) -> int:
        """Download ``asset`` to a staging file, then upload it to ``target``."""
        fd, staged = tempfile.mkstemp(prefix="mavensync-", suffix=".part", dir=staging_dir)
        staged_path = Path(staged)
        try:
            with os.fdopen(fd, "wb") as sink:
                size = self.client.download_to(self.asset_url(asset), sink)
            target.upload_asset(asset, staged_path)
        finally:
            staged_path.unlink(missing_ok=True)
        log.info("Copied %s (%d bytes)", asset, size)
        return size

    def upload_asset(self, asset: ArtifactVersionAsset, path: Path) -> None:
        self.client.upload_from(self.asset_url(asset), path)

    def release_version(self, coordinates: Coordinates, now: Optional[datetime] = None) -> None:
        """Publish a descriptor listing ``coordinates`` as latest and release.

        Versions already listed on this side, snapshots included, are kept.
        """
        current = self.query_artifact_metadata(coordinates.group, coordinates.artifact, releases_only=False)
        versions = [version.value for version in current.versions]
        if coordinates.version.value not in versions:
            versions.append(coordinates.version.value)

        descriptor = MavenMetadataXml(
            group_id=coordinates.group.value,
            artifact_id=coordinates.artifact.value,
            latest=coordinates.version.value,
            release=coordinates.version.value,
            last_updated=format_last_updated(now or datetime.now(timezone.utc)),
            versions=versions,
        )
        self.client.upload_text(
            self.metadata_url(coordinates.group, coordinates.artifact),
            descriptor.to_xml(),
        )
        log.info("Released %s (%d versions listed)", coordinates, len(versions))
