"""
Collection Orchestrator - Run one authenticate -> fetch -> aggregate pass.

This is the main entry point for status collection. Each pass builds a
fresh CollectionResult; nothing is shared between passes, so concurrent
scrapes never observe each other's partial counts.
"""
from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import Dict, Optional, Sequence

from osstatus.core.aggregate import aggregate
from osstatus.core.config import ExporterConfig
from osstatus.core.schema import (
    DEFAULT_KINDS,
    CollectionResult,
    KindResult,
    ResourceKind,
)
from osstatus.openstack.errors import AuthError, FetchError
from osstatus.openstack.fetcher import ResourceFetcher
from osstatus.openstack.session import Session, SessionProvider

log = logging.getLogger(__name__)


class CollectionOrchestrator:
    """
    Orchestrate one collection pass.

    Coordinates:
    1. Authentication (one session shared by every kind)
    2. Listing each enabled resource kind, all pages
    3. Counting resources per status
    4. Folding per-kind outcomes into one health flag

    A failure listing one kind marks the pass degraded but never stops the
    remaining kinds. Only an authentication failure ends the pass early.

    Example:
        orchestrator = CollectionOrchestrator.from_config(ExporterConfig())
        result = orchestrator.collect()
        result.snapshot(ResourceKind.ROUTER)  # {"ACTIVE": 2, "DOWN": 1}
    """

    def __init__(
        self,
        session_provider: SessionProvider,
        *,
        fetcher: Optional[ResourceFetcher] = None,
        kinds: Sequence[ResourceKind] = DEFAULT_KINDS,
        max_workers: int = 1,
        timeout: Optional[float] = None,
    ):
        self._sessions = session_provider
        self._fetcher = fetcher or ResourceFetcher()
        self._kinds = tuple(dict.fromkeys(kinds))
        self._max_workers = max(1, max_workers)
        self._timeout = timeout

    @classmethod
    def from_config(cls, config: ExporterConfig) -> CollectionOrchestrator:
        provider = SessionProvider(
            cloud=config.cloud,
            region=config.region,
            api_timeout=config.api_timeout,
        )
        return cls(
            provider,
            kinds=config.enabled_kinds,
            max_workers=config.max_workers,
            timeout=config.collect_timeout,
        )

    @property
    def kinds(self) -> tuple[ResourceKind, ...]:
        return self._kinds

    def collect(self) -> CollectionResult:
        """
        Run a full collection pass.

        Never raises for provider failures: they are logged and reflected in
        ``operational`` and the per-kind results.

        Returns:
            CollectionResult with one KindResult per enabled kind, or none
            at all when authentication failed
        """
        started_at = datetime.now(timezone.utc)
        start_time = time.monotonic()

        # 1. Authenticate
        try:
            session = self._sessions.authenticate()
        except AuthError as e:
            log.error("Failed to authenticate: %s", e)
            return CollectionResult(
                operational=False,
                auth_error=str(e),
                started_at=started_at,
                duration_seconds=time.monotonic() - start_time,
            )

        # 2. Fetch and aggregate every kind
        try:
            if self._max_workers == 1 or len(self._kinds) <= 1:
                results = self._collect_sequential(session, start_time)
            else:
                results = self._collect_parallel(session, start_time)
        finally:
            session.close()

        # 3. Assemble
        operational = all(result.ok for result in results.values())
        duration = time.monotonic() - start_time
        log.info(
            "Collection %s in %.2fs: %s",
            "complete" if operational else "degraded",
            duration,
            ", ".join(
                f"{kind}={result.record_count if result.ok else 'failed'}"
                for kind, result in results.items()
            ),
        )
        return CollectionResult(
            operational=operational,
            results=results,
            started_at=started_at,
            duration_seconds=duration,
        )

    def collect_kind(
        self,
        session: Session,
        kind: ResourceKind,
        *,
        deadline: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> KindResult:
        """
        Fetch and count one kind.

        Records from a listing that fails part-way are discarded: the kind
        either reports every page or nothing. A listing still running at
        ``deadline``, or when ``cancel`` is set, fails the same way.
        """
        start_time = time.monotonic()
        try:
            records = list(
                self._fetcher.list(session, kind, deadline=deadline, cancel=cancel)
            )
        except FetchError as e:
            log.error("Failed to collect %s: %s", kind, e)
            return KindResult.failed(
                kind, str(e), duration_seconds=time.monotonic() - start_time
            )
        except Exception as e:
            log.exception("Unexpected error collecting %s", kind)
            return KindResult.failed(
                kind,
                f"{kind}: unexpected {type(e).__name__}: {e}",
                duration_seconds=time.monotonic() - start_time,
            )

        counts = aggregate(records)
        log.info("  %s: %d resources, %d statuses", kind, len(records), len(counts))
        return KindResult(
            kind=kind,
            counts=counts,
            record_count=len(records),
            duration_seconds=time.monotonic() - start_time,
        )

    def _collect_sequential(
        self, session: Session, start_time: float
    ) -> Dict[ResourceKind, KindResult]:
        results: Dict[ResourceKind, KindResult] = {}
        for kind in self._kinds:
            if self._deadline_passed(start_time):
                results[kind] = self._timed_out(kind)
                continue
            results[kind] = self.collect_kind(
                session, kind, deadline=self._deadline(start_time)
            )
        return results

    def _collect_parallel(
        self, session: Session, start_time: float
    ) -> Dict[ResourceKind, KindResult]:
        results: Dict[ResourceKind, KindResult] = {}
        cancel = threading.Event()
        deadline = self._deadline(start_time)
        executor = ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(self._kinds)),
            thread_name_prefix="osstatus-collect",
        )
        try:
            pending: Dict[Future, ResourceKind] = {
                executor.submit(
                    self.collect_kind, session, kind, deadline=deadline, cancel=cancel
                ): kind
                for kind in self._kinds
            }
            while pending:
                done, _ = wait(
                    pending,
                    timeout=self._remaining(start_time),
                    return_when=FIRST_COMPLETED,
                )
                if not done:
                    break
                for future in done:
                    kind = pending.pop(future)
                    results[kind] = future.result()

            for future, kind in pending.items():
                future.cancel()
                results[kind] = self._timed_out(kind)
        finally:
            # Listings still running stop at their next record
            cancel.set()
            executor.shutdown(wait=False, cancel_futures=True)

        return {kind: results[kind] for kind in self._kinds}

    def _deadline(self, start_time: float) -> Optional[float]:
        if self._timeout is None:
            return None
        return start_time + self._timeout

    def _remaining(self, start_time: float) -> Optional[float]:
        if self._timeout is None:
            return None
        return max(0.0, self._timeout - (time.monotonic() - start_time))

    def _deadline_passed(self, start_time: float) -> bool:
        remaining = self._remaining(start_time)
        return remaining is not None and remaining <= 0

    def _timed_out(self, kind: ResourceKind) -> KindResult:
        error = FetchError(str(kind), f"collection deadline of {self._timeout}s exceeded")
        log.error("Failed to collect %s: %s", kind, error)
        return KindResult.failed(kind, str(error), duration_seconds=self._timeout or 0.0)
