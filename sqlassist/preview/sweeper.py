"""sqlassist.preview.sweeper

Background task that evicts expired previews on a fixed interval.

Owned explicitly (start/stop) instead of an ambient timer; tests call
`run_once()` rather than waiting on wall-clock time.
"""

from __future__ import annotations
import threading
from typing import Optional

from sqlassist.contracts.tool_base import PreviewStore


class PreviewSweeper:
    """Runs `store.sweep()` every `interval_seconds` on a daemon thread."""

    def __init__(self, store: PreviewStore, interval_seconds: float, logger):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.store = store
        self.interval_seconds = interval_seconds
        self.logger = logger
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> list[str]:
        evicted = self.store.sweep()
        if evicted:
            self.logger.info("Evicted %d expired preview(s)", len(evicted))
        return evicted

    def _loop(self) -> None:
        while not self._stop.wait(self.interval_seconds):
            try:
                self.run_once()
            except Exception:
                self.logger.exception("Preview sweep failed")

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="preview-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
