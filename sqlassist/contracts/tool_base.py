"""sqlassist.contracts.tool_base

Interfaces for the collaborators the query pipeline depends on.
Concrete implementations live under sqlassist.tools, sqlassist.policy and sqlassist.preview.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from .models import AuditEntry, PendingPreview


class DataStore(ABC):
    @abstractmethod
    def run(self, sql: str, params: Optional[Sequence[Any]] = None) -> Any:
        """Run one statement. Row-returning statements give a list of dicts."""
        raise NotImplementedError


class ExplanationProvider(ABC):
    @abstractmethod
    def explain_sql(self, sql: str) -> str:
        raise NotImplementedError


class SqlFormatter(ABC):
    @abstractmethod
    def format(self, sql: str) -> str:
        raise NotImplementedError


class TableExtractor(ABC):
    @abstractmethod
    def extract(self, sql: str) -> set[str]:
        """Return lowercase names of the tables referenced by `sql`."""
        raise NotImplementedError


class PreviewStore(ABC):
    @abstractmethod
    def put(self, query: str, user_id: Optional[str] = None, user_role: Optional[str] = None) -> str:
        raise NotImplementedError

    @abstractmethod
    def get(self, preview_id: str) -> PendingPreview:
        """Return the preview or raise PreviewNotFoundError."""
        raise NotImplementedError

    @abstractmethod
    def take(self, preview_id: str) -> PendingPreview:
        """Atomically remove and return the preview, or raise PreviewNotFoundError.

        Only one caller can take a given id, so a preview is claimed before it runs.
        """
        raise NotImplementedError

    @abstractmethod
    def restore(self, item: PendingPreview) -> None:
        """Put back a taken preview whose execution never happened."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, preview_id: str) -> None:
        """Remove the preview. Deleting an absent id is a no-op."""
        raise NotImplementedError

    @abstractmethod
    def sweep(self) -> list[str]:
        """Evict expired previews and return their ids."""
        raise NotImplementedError


class AuditSink(ABC):
    @abstractmethod
    def record(self, entry: AuditEntry) -> bool:
        """Write one audit entry. Returns False instead of raising on failure."""
        raise NotImplementedError
