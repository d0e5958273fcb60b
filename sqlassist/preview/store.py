"""sqlassist.preview.store

Process-local preview store with TTL eviction.

Previews are lost on restart. Confirmation is best-effort within a session,
never a durable workflow step.
"""

from __future__ import annotations
import secrets
import threading
import time
from typing import Callable, Optional

from sqlassist.contracts.models import PendingPreview
from sqlassist.contracts.tool_base import PreviewStore
from sqlassist.errors import PreviewNotFoundError

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(n: int) -> str:
    if n <= 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_BASE36[r])
    return "".join(reversed(out))


def new_preview_id() -> str:
    """Time-based prefix plus a random suffix, e.g. `mgw1b3k2-Xc81_qPa0Ls`."""
    return f"{_base36(int(time.time() * 1000))}-{secrets.token_urlsafe(9)}"


class InMemoryPreviewStore(PreviewStore):
    """Thread-safe dict of PendingPreview keyed by id."""

    def __init__(
        self,
        ttl_seconds: float = 3600,
        clock: Callable[[], float] = time.monotonic,
        id_factory: Callable[[], str] = new_preview_id,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._id_factory = id_factory
        self._items: dict[str, PendingPreview] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _is_expired(self, item: PendingPreview, now: float) -> bool:
        return now - item.created_at > self.ttl_seconds

    def put(self, query: str, user_id: Optional[str] = None, user_role: Optional[str] = None) -> str:
        with self._lock:
            preview_id = self._id_factory()
            while preview_id in self._items:
                preview_id = self._id_factory()
            self._items[preview_id] = PendingPreview(
                id=preview_id,
                query=query,
                user_id=user_id,
                user_role=user_role,
                created_at=self._clock(),
            )
        return preview_id

    def get(self, preview_id: str) -> PendingPreview:
        with self._lock:
            item = self._items.get(preview_id)
        # an expired entry the sweep has not reached yet is already dead
        if item is None or self._is_expired(item, self._clock()):
            raise PreviewNotFoundError("Preview id not found or expired.")
        return item

    def take(self, preview_id: str) -> PendingPreview:
        with self._lock:
            item = self._items.pop(preview_id, None)
        if item is None or self._is_expired(item, self._clock()):
            raise PreviewNotFoundError("Preview id not found or expired.")
        return item

    def restore(self, item: PendingPreview) -> None:
        # keeps the original created_at, so the TTL is not extended
        with self._lock:
            self._items.setdefault(item.id, item)

    def delete(self, preview_id: str) -> None:
        with self._lock:
            self._items.pop(preview_id, None)

    def expired_ids(self, now: Optional[float] = None) -> list[str]:
        now = self._clock() if now is None else now
        with self._lock:
            return [pid for pid, item in self._items.items() if self._is_expired(item, now)]

    def sweep(self) -> list[str]:
        expired = self.expired_ids()
        for pid in expired:
            self.delete(pid)
        return expired
