# src/reposcope/core/progress.py
"""
Bounded channel for scan progress events.

The backend pushes events whenever it likes; the coordinator drains them at
its own pace. When the channel is full the oldest event is discarded, which
only means the displayed count skips ahead.
"""

import asyncio
import logging
from typing import AsyncIterator, Callable, Optional

from .types import ScanProgress


logger = logging.getLogger(__name__)

ProgressReporter = Callable[[str, int, Optional[int]], None]


class ProgressChannel:
    """Bounded, lossy queue of ScanProgress events"""

    def __init__(self, maxsize: int = 100):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0

    def publish(self, event: ScanProgress) -> None:
        """Enqueue without blocking, evicting the oldest event when full."""
        while True:
            try:
                self._queue.put_nowait(event)
                return
            except asyncio.QueueFull:
                try:
                    self._queue.get_nowait()
                    self.dropped += 1
                except asyncio.QueueEmpty:
                    pass

    def reporter(self, scan_id: Optional[str] = None) -> ProgressReporter:
        """
        Callback for the backend, tagging every event with `scan_id`.

        The callback may be invoked from worker threads. Calls made off the
        loop that created the reporter are handed to that loop with
        `call_soon_threadsafe`, since the queue itself is not thread-safe.
        """
        try:
            loop: Optional[asyncio.AbstractEventLoop] = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        def report(current_directory: str, scanned_count: int, total_count: Optional[int] = None) -> None:
            event = ScanProgress(
                current_directory=current_directory,
                scanned_count=scanned_count,
                total_count=total_count,
                scan_id=scan_id,
            )
            if loop is None or _running_loop() is loop:
                self.publish(event)
                return
            try:
                loop.call_soon_threadsafe(self.publish, event)
            except RuntimeError:
                # Loop already closed; the scan is over
                logger.debug(f"Dropping progress event for {current_directory}, event loop closed")
        return report

    async def get(self) -> ScanProgress:
        return await self._queue.get()

    def drain_nowait(self) -> int:
        """Discard everything queued; returns the number of events dropped."""
        count = 0
        while not self._queue.empty():
            try:
                self._queue.get_nowait()
                count += 1
            except asyncio.QueueEmpty:
                break
        return count

    async def events(self) -> AsyncIterator[ScanProgress]:
        while True:
            yield await self._queue.get()

    def qsize(self) -> int:
        return self._queue.qsize()


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
