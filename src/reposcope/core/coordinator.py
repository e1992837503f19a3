# src/reposcope/core/coordinator.py
import asyncio
import inspect
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from .types import Repository, ScanMode, PathConflict, ScanOutcome, RefreshOutcome, ScanProgress
from .config import ReposcopeConfig
from .exceptions import (
    ConflictError,
    LockBusyError,
    ScanBackendError,
    PartialRefreshError,
    InvalidScanRequestError,
)
from .interfaces import ScanBackend, CacheBackend
from .conflicts import PathConflictDetector
from .merge import MergeEngine, sort_by_name, unique_by_path
from .aggregation import AggregationEngine
from .progress import ProgressChannel
from .state import StateStore
from .metrics import ScanMetrics
from ..utils import AsyncContextManagerMixin


logger = logging.getLogger(__name__)

ConflictConfirmer = Callable[[PathConflict], Union[bool, Awaitable[bool]]]


class ScanCoordinator(AsyncContextManagerMixin):
    """
    Single-flight orchestration of scans and refreshes.

    At most one scan or refresh runs at a time. A request made while the
    lock is held is rejected with LockBusyError rather than queued. The lock
    is an asyncio.Lock acquired through `async with`, so it is released on
    every exit path, including conflicts, backend errors and cancellation.
    All callers must share the event loop the coordinator runs on.
    """

    def __init__(
        self,
        state: StateStore,
        backend: ScanBackend,
        cache: Optional[CacheBackend] = None,
        config: Optional[ReposcopeConfig] = None,
        progress: Optional[ProgressChannel] = None,
    ):
        self.state = state
        self.backend = backend
        self.cache = cache
        self.config = config or ReposcopeConfig()
        self.progress = progress or ProgressChannel(self.config.progress_queue_size)

        self.detector = PathConflictDetector(self.config.path_separator)
        self.merger = MergeEngine()
        self.aggregator = AggregationEngine(
            largest_limit=self.config.largest_limit,
            most_active_limit=self.config.most_active_limit,
            attention_limit=self.config.attention_limit,
        )
        self.metrics = ScanMetrics()

        self._lock = asyncio.Lock()
        self._active_scan_id: Optional[str] = None
        self._active_path: Optional[str] = None
        self._progress_task: Optional[asyncio.Task] = None

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    async def initialize(self):
        """Start draining the progress channel"""
        if self._progress_task is None or self._progress_task.done():
            self._progress_task = asyncio.create_task(self._drain_progress())
            logger.debug("Progress drain task started")

    async def close(self):
        """Stop draining progress events"""
        if self._progress_task:
            self._progress_task.cancel()
            try:
                await self._progress_task
            except asyncio.CancelledError:
                pass
            self._progress_task = None
        logger.debug("Scan coordinator closed")

    def _ensure_idle(self, operation: str) -> None:
        if self._lock.locked():
            self.metrics.rejected_busy += 1
            self.state.set_status("Another scan is already in progress. Please wait...")
            logger.warning(f"Rejected {operation}: {self._active_path or 'a scan'} is in progress")
            raise LockBusyError(
                "Another scan is already in progress",
                details={'requested': operation, 'active_path': self._active_path},
            )

    @asynccontextmanager
    async def _single_flight(self, operation: str):
        """Hold the scan lock for the duration of `operation`, or fail fast."""
        self._ensure_idle(operation)
        # No await between the check and the acquire on an unlocked lock,
        # so nothing can slip in between on the same loop.
        async with self._lock:
            yield

    async def request_scan(
        self,
        path: str,
        mode: Union[ScanMode, str] = ScanMode.REPLACE,
        confirm: Optional[ConflictConfirmer] = None,
    ) -> ScanOutcome:
        """
        Scan `path` and merge the result into the state.

        Args:
            path: Directory to scan
            mode: ScanMode.REPLACE discards the current collection,
                ScanMode.ADD merges into it
            confirm: Called with the PathConflict when an add-mode scan
                overlaps an already scanned path; a truthy return overrides

        Raises:
            InvalidScanRequestError: empty path
            LockBusyError: another scan or refresh is in flight
            ConflictError: the overlap was not confirmed
            ScanBackendError: the backend failed; state is unchanged
        """
        if not path:
            raise InvalidScanRequestError("No directory given to scan")
        mode = ScanMode(mode)

        async with self._single_flight(f"scan of {path}"):
            if mode == ScanMode.ADD and self.state.scanned_paths:
                await self._check_conflicts(path, confirm)

            logger.info(f"Scanning {path} (mode: {mode.value})")
            self.metrics.total_scans += 1
            self.state.set_status("Scanning directories for repositories...")
            started = time.monotonic()

            found = await self._scan(path, add_mode=(mode == ScanMode.ADD))

            result = self.merger.merge(
                self.state.repositories,
                found,
                mode,
                scan_roots=self.state.scan_roots,
                path=path,
            )
            stats = self.aggregator.recompute(result.merged)
            if mode == ScanMode.ADD:
                scanned_paths = list(self.state.scanned_paths) + [path]
            else:
                scanned_paths = [path]

            self.state.commit(
                result.merged,
                stats,
                scan_roots=result.scan_roots,
                scanned_paths=scanned_paths,
            )
            if mode == ScanMode.REPLACE:
                self.state.current_path = path

            if mode == ScanMode.ADD:
                self.state.set_status(
                    f"Added {result.added_count} new repositories "
                    f"({result.duplicate_count} duplicates skipped)"
                )
            else:
                self.state.set_status(f"Found {len(found)} repositories")

            duration = time.monotonic() - started
            self.metrics.record_success(duration)
            logger.info(
                f"Scan of {path} complete in {duration:.2f}s: {len(found)} found, "
                f"{result.added_count} added, {len(result.merged)} total"
            )

            await self._persist()

            return ScanOutcome(
                path=path,
                mode=mode,
                found=len(found),
                added_count=result.added_count,
                duplicate_count=result.duplicate_count,
                total=len(result.merged),
            )

    async def refresh_all(self) -> RefreshOutcome:
        """
        Re-scan every scan root, one after another, and replace the collection.

        A failing root is recorded as a PartialRefreshError in the outcome and
        skipped. The new collection is committed once, after all roots were
        attempted. Only LockBusyError is raised.
        """
        self._ensure_idle("refresh")

        roots = list(self.state.scan_roots)
        if not roots:
            return await self._refresh_current_path()

        async with self._single_flight("refresh"):
            logger.info(f"Refreshing {len(roots)} scan roots")
            self.metrics.total_refreshes += 1
            self.state.set_status("Refreshing all directories...")
            outcome = RefreshOutcome(roots=roots)

            working: List[Repository] = []
            seen: set = set()
            for index, root in enumerate(roots, 1):
                self.state.set_status(f"Refreshing {index}/{len(roots)}: {root.rstrip('/').split('/')[-1]}")
                self.metrics.total_scans += 1
                started = time.monotonic()
                try:
                    found = await self._scan(root, add_mode=False)
                except ScanBackendError as e:
                    failure = PartialRefreshError(f"Failed to refresh {root}: {e}", root=root, details=e.__cause__)
                    logger.warning(str(failure))
                    self.metrics.failed_refresh_roots += 1
                    outcome.failures.append(failure)
                    continue
                self.metrics.record_success(time.monotonic() - started)
                working.extend(unique_by_path(found, seen))
                outcome.refreshed.append(root)

            merged = sort_by_name(working)
            self.state.commit(merged, self.aggregator.recompute(merged))
            outcome.total = len(merged)

            if outcome.failures:
                self.state.set_status(
                    f"Refresh completed with {len(outcome.failures)} of {len(roots)} directories failing"
                )
            else:
                self.state.set_status("Refresh completed!")
            logger.info(f"Refresh complete: {outcome.total} repositories from {len(outcome.refreshed)} roots")

            await self._persist()
            return outcome

    async def _refresh_current_path(self) -> RefreshOutcome:
        """Refresh when nothing was scanned yet: scan the current path, if any."""
        current = self.state.current_path
        if not current:
            self.state.set_status("Nothing to refresh yet. Select a directory to scan first.")
            logger.info("Refresh requested with no scan roots and no current path")
            return RefreshOutcome()

        outcome = RefreshOutcome(roots=[current])
        try:
            result = await self.request_scan(current, ScanMode.REPLACE)
        except ScanBackendError as e:
            outcome.failures.append(
                PartialRefreshError(f"Failed to refresh {current}: {e}", root=current, details=e.__cause__)
            )
            outcome.total = len(self.state.repositories)
            return outcome
        outcome.refreshed.append(current)
        outcome.total = result.total
        return outcome

    async def _check_conflicts(self, path: str, confirm: Optional[ConflictConfirmer]) -> None:
        conflict = self.detector.classify(path, self.state.scanned_paths)
        if conflict is None:
            return

        logger.warning(f"Path conflict ({conflict.kind.value}): {conflict.message}")
        confirmed = False
        if confirm is not None:
            answer = confirm(conflict)
            if inspect.isawaitable(answer):
                answer = await answer
            confirmed = bool(answer)

        if not confirmed:
            self.metrics.cancelled_conflicts += 1
            self.state.set_status("Scan cancelled due to path conflict")
            raise ConflictError(conflict.message, conflict)

        logger.info(f"Proceeding with {path} despite conflict with {conflict.conflicting_path}")

    async def _scan(self, path: str, add_mode: bool) -> List[Repository]:
        """Call the backend once, translating any failure into ScanBackendError."""
        scan_id = uuid.uuid4().hex[:12]
        self._active_scan_id = scan_id
        self._active_path = path
        try:
            raw = await self.backend.scan(path, add_mode, progress=self.progress.reporter(scan_id))
            return [
                r if isinstance(r, Repository) else Repository.model_validate(r)
                for r in raw
            ]
        except asyncio.CancelledError:
            raise
        except ValidationError as e:
            self._record_failure(e)
            logger.error(f"Scan of {path} returned malformed repositories: {e}")
            self.state.set_status("Scan failed!")
            raise ScanBackendError(f"Malformed scan result for {path}", path=path, details=e) from e
        except Exception as e:
            self._record_failure(e)
            logger.error(f"Failed to scan directory {path}: {e}")
            self.state.set_status("Scan failed!")
            raise ScanBackendError(f"Failed to scan directory {path}: {e}", path=path, details=e) from e
        finally:
            self._active_scan_id = None
            self._active_path = None
            self.state.progress = None

    def _record_failure(self, error: BaseException) -> None:
        self.metrics.failed_scans += 1
        self.metrics.record_error(error)

    async def _persist(self) -> None:
        if self.cache is None or not self.config.persist_after_scan:
            return
        try:
            await self.cache.save_cache(self.state.snapshot())
            logger.debug(f"Saved {len(self.state.repositories)} repositories to cache")
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Failed to save cache: {e}")

    async def _drain_progress(self) -> None:
        async for event in self.progress.events():
            self.apply_progress(event)

    def apply_progress(self, event: ScanProgress) -> bool:
        """Show a progress event if it belongs to the in-flight scan."""
        if event.scan_id is not None and event.scan_id != self._active_scan_id:
            logger.debug(f"Ignoring stale progress event for {event.current_directory}")
            return False

        self.state.progress = event
        total = event.total_count if event.total_count is not None else "?"
        self.state.set_status(f"Analyzing ({event.scanned_count}/{total}): {event.display_path}")
        logger.debug(f"Progress {event.scanned_count}/{total}: {event.current_directory}")
        return True

    def get_status(self) -> Dict[str, Any]:
        """Get the current status of the coordinator"""
        return {
            "busy": self.is_busy,
            "active_path": self._active_path,
            "repositories": len(self.state.repositories),
            "scan_roots": list(self.state.scan_roots),
            "scanned_paths": list(self.state.scanned_paths),
            "current_status": self.state.current_status,
            "pending_progress_events": self.progress.qsize(),
            "dropped_progress_events": self.progress.dropped,
            "metrics": self.metrics.to_dict(),
        }
