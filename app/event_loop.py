"""Persistent asyncio loop shared by all request threads."""

import asyncio
import logging
import threading
from typing import Any, Awaitable, Optional

logger = logging.getLogger(__name__)


class BackgroundLoop:
    """
    Run coroutines on one long-lived event loop in a daemon thread.

    Flask serves requests on several threads; the async Gemini client keeps
    connections bound to the loop it was first used on, so every request
    submits its coroutine here and blocks on the result.
    """

    def __init__(self, name: str = "stylist-loop"):
        self.name = name
        self.loop = asyncio.new_event_loop()
        self._thread: Optional[threading.Thread] = None
        self._start_lock = threading.Lock()

    def _ensure_started(self) -> None:
        with self._start_lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._thread = threading.Thread(target=self.loop.run_forever, name=self.name, daemon=True)
            self._thread.start()
            logger.info("[BackgroundLoop] Started %s", self.name)

    def run(self, coro: Awaitable[Any]) -> Any:
        """Execute ``coro`` on the loop and return its result (or raise its error)."""
        self._ensure_started()
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        return future.result()

    def stop(self) -> None:
        if self._thread is None:
            return
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=5)
        self._thread = None
