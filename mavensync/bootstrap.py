"""Wire the sync services from a ``Settings`` instance."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from mavensync.repository import MavenHttpRepository, RepositoryCrawler
from mavensync.service import ArtifactSynchronizer, PipelineCoordinator, SyncSummary
from mavensync.settings import RepositorySettings, Settings
from mavensync.transport import MavenHttpClient

log = logging.getLogger(__name__)


def _build_repository(repository: RepositorySettings, user_agent: str) -> MavenHttpRepository:
    client = MavenHttpClient(
        credentials=repository.credentials,
        user_agent=user_agent,
        log_http_headers=repository.log_http_headers,
        timeout=repository.timeout,
        connect_timeout=repository.connect_timeout,
        verify_tls=repository.verify_tls,
    )
    return MavenHttpRepository(repository.url, client)


@dataclass
class ServiceContainer:
    """Container that wires plain-Python services with shared settings."""

    settings: Settings
    source: MavenHttpRepository = field(init=False)
    target: MavenHttpRepository = field(init=False)
    crawler: RepositoryCrawler = field(init=False)
    synchronizer: ArtifactSynchronizer = field(init=False)
    coordinator: PipelineCoordinator = field(init=False)

    def __post_init__(self) -> None:
        settings = self.settings
        self.source = _build_repository(settings.source, settings.user_agent)
        self.target = _build_repository(settings.target, settings.user_agent)
        self.crawler = RepositoryCrawler(self.source, crawl_delay=settings.source.crawl_delay)
        self.synchronizer = ArtifactSynchronizer(
            self.source,
            self.target,
            transfer_checksums=settings.transfer_checksums,
            transfer_signatures=settings.transfer_signatures,
            download_delay=settings.source.download_delay,
            staging_dir=settings.staging_dir,
        )
        self.coordinator = PipelineCoordinator(
            self.crawler,
            self.synchronizer,
            concurrency=settings.artifact_concurrency,
            paths=settings.source.paths,
        )

    def close(self) -> None:
        self.source.close()
        self.target.close()

    def __enter__(self) -> "ServiceContainer":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def run_sync(settings: Settings) -> SyncSummary:
    """Run one full crawl-and-sync pass."""
    log.info("Syncing %s -> %s", settings.source.url, settings.target.url)
    with ServiceContainer(settings) as container:
        return container.coordinator.run()
