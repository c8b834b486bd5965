"""Crawl the source on the calling thread and sync artifacts on worker threads."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from queue import Queue
from typing import List, Optional, Sequence, Tuple

from mavensync.domain import ArtifactMetadata
from mavensync.repository import RepositoryCrawler

from .synchronizer import ArtifactSynchronizer, ArtifactSyncResult

log = logging.getLogger(__name__)

# one per worker; tells it the crawl is over
_STOP = object()


@dataclass
class SyncSummary:
    artifacts_seen: int = 0
    versions_transferred: int = 0
    assets_copied: int = 0
    failures: List[Tuple[str, BaseException]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def add(self, result: ArtifactSyncResult) -> None:
        self.versions_transferred += len(result.transferred)
        self.assets_copied += result.assets_copied


class SyncWorker(threading.Thread):
    """Worker thread that syncs queued artifacts until it receives a stop marker."""

    def __init__(self, *, index: int, synchronizer: ArtifactSynchronizer, queue: Queue) -> None:
        super().__init__(name=f"SyncWorker-{index}", daemon=True)
        self.synchronizer = synchronizer
        self.queue = queue
        self.results: List[ArtifactSyncResult] = []
        self.failures: List[Tuple[str, BaseException]] = []

    def run(self) -> None:
        log.debug("%s started", self.name)
        while True:
            item = self.queue.get()
            try:
                if item is _STOP:
                    break
                self._sync(item)
            finally:
                self.queue.task_done()
        log.debug("%s stopped", self.name)

    def _sync(self, metadata: ArtifactMetadata) -> None:
        try:
            self.results.append(self.synchronizer.sync(metadata))
        except Exception as exc:  # noqa: BLE001
            log.exception("Failed to sync %s: %s", metadata, exc)
            self.failures.append((str(metadata), exc))


class PipelineCoordinator:
    """Feed crawled artifacts to a fixed pool of workers through a bounded queue."""

    def __init__(
        self,
        crawler: RepositoryCrawler,
        synchronizer: ArtifactSynchronizer,
        *,
        concurrency: int = 4,
        paths: Sequence[str] = (),
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.crawler = crawler
        self.synchronizer = synchronizer
        self.concurrency = concurrency
        self.paths = list(paths)

    def run(self) -> SyncSummary:
        queue: Queue = Queue(maxsize=self.concurrency)
        workers = [
            SyncWorker(index=index, synchronizer=self.synchronizer, queue=queue)
            for index in range(self.concurrency)
        ]
        for worker in workers:
            worker.start()

        seen = 0
        crawl_error: Optional[BaseException] = None
        try:
            for metadata in self.crawler.crawl(self.paths):
                seen += 1
                queue.put(metadata)
        except Exception as exc:  # noqa: BLE001
            log.exception("Crawl aborted after %d artifacts: %s", seen, exc)
            crawl_error = exc
        finally:
            for _ in workers:
                queue.put(_STOP)
            for worker in workers:
                worker.join()

        summary = SyncSummary(artifacts_seen=seen)
        for worker in workers:
            for result in worker.results:
                summary.add(result)
            summary.failures.extend(worker.failures)
        if crawl_error is not None:
            summary.failures.append(("crawl", crawl_error))

        log.info(
            "Sync finished artifacts=%d versions=%d assets=%d failures=%d",
            summary.artifacts_seen,
            summary.versions_transferred,
            summary.assets_copied,
            len(summary.failures),
        )
        return summary
