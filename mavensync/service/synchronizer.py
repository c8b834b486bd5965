"""Copy the versions a target is missing from the source, one artifact at a time."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from mavensync.domain import ArtifactMetadata, ArtifactVersion
from mavensync.repository import MavenHttpRepository

log = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ArtifactSyncResult:
    metadata: ArtifactMetadata
    transferred: List[ArtifactVersion] = field(default_factory=list)
    skipped: List[ArtifactVersion] = field(default_factory=list)
    assets_copied: int = 0


class ArtifactSynchronizer:
    """Diff one artifact against the target and transfer what is missing.

    Versions are handled strictly in sequence. A version's descriptor entry is
    published only after all of its assets have been uploaded, so an
    interrupted transfer is retried in full on the next run.
    """

    def __init__(
        self,
        source: MavenHttpRepository,
        target: MavenHttpRepository,
        *,
        transfer_checksums: bool = True,
        transfer_signatures: bool = True,
        download_delay: float = 0.0,
        staging_dir: Optional[Path] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.source = source
        self.target = target
        self.transfer_checksums = transfer_checksums
        self.transfer_signatures = transfer_signatures
        self.download_delay = download_delay
        self.staging_dir = staging_dir
        self._sleep = sleep
        self._clock = clock

    def sync(self, metadata: ArtifactMetadata) -> ArtifactSyncResult:
        result = ArtifactSyncResult(metadata=metadata)
        existing = self.target.query_artifact_metadata(metadata.group, metadata.artifact)
        missing = metadata.missing_from(existing)
        if not missing:
            log.debug("%s is up to date (%d versions)", metadata, len(metadata.versions))
            return result

        log.info(
            "Syncing %s missing=%d source=%d target=%d",
            metadata,
            len(missing),
            len(metadata.versions),
            len(existing.versions),
        )
        for index, version in enumerate(missing):
            if index and self.download_delay > 0:
                self._sleep(self.download_delay)
            copied = self._transfer_version(metadata, version)
            if copied is None:
                result.skipped.append(version)
                continue
            result.transferred.append(version)
            result.assets_copied += copied

        log.info(
            "Synced %s transferred=%d skipped=%d assets=%d",
            metadata,
            len(result.transferred),
            len(result.skipped),
            result.assets_copied,
        )
        return result

    def _transfer_version(self, metadata: ArtifactMetadata, version: ArtifactVersion) -> Optional[int]:
        coordinates = metadata.coordinates(version)
        assets = self.source.list_artifact_version_assets(
            coordinates,
            include_checksums=self.transfer_checksums,
            include_signatures=self.transfer_signatures,
        )
        if not assets:
            log.warning("No assets found for %s; not releasing it", coordinates)
            return None

        for asset in assets:
            self.source.copy_asset(asset, self.target, staging_dir=self.staging_dir)
        self.target.release_version(coordinates, now=self._clock())
        return len(assets)
