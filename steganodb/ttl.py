"""One-shot deferred callbacks for expiring cached values."""

import asyncio
import logging
import threading
from typing import Any, Callable, Dict

from .exceptions import StoreError

logger = logging.getLogger(__name__)


class TTLScheduler:
    """Runs callbacks once after a delay.

    Inside a running asyncio event loop the callback is scheduled on that
    loop with call_later; otherwise it runs on a daemon timer thread.
    Scheduled callbacks can't be cancelled individually: scheduling the
    same work twice runs it twice, each at its own time. shutdown() drops
    everything still pending.

    Example:
        scheduler = TTLScheduler()
        scheduler.schedule(0.5, lambda: print("expired"))
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: Dict[object, Any] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        """Whether shutdown() has been called."""
        return self._closed

    @property
    def pending(self) -> int:
        """Number of callbacks scheduled but not yet run."""
        with self._lock:
            return len(self._pending)

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        """Run callback once, delay seconds from now.

        Raises:
            StoreError: If the scheduler has been shut down
        """
        token = object()
        with self._lock:
            if self._closed:
                raise StoreError("TTL scheduler is shut down")

            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = None

            if loop is not None:
                handle = loop.call_later(delay, self._fire, token, callback)
            else:
                handle = threading.Timer(delay, self._fire, args=(token, callback))
                handle.daemon = True
                handle.start()
            self._pending[token] = handle

    def _fire(self, token: object, callback: Callable[[], None]) -> None:
        with self._lock:
            if self._pending.pop(token, None) is None:
                return

        try:
            callback()
        except Exception:
            logger.exception("Scheduled callback failed")

    def shutdown(self) -> None:
        """Drop every pending callback and refuse new ones."""
        with self._lock:
            handles = list(self._pending.values())
            self._pending.clear()
            self._closed = True

        for handle in handles:
            handle.cancel()
        if handles:
            logger.debug("Dropped %d pending TTL callback(s)", len(handles))
