"""Abstract repository interface (port) for the audit log."""

from abc import ABC, abstractmethod

from eazyliens.domain.entities import AuditLogEntry


class AuditLogRepository(ABC):
    """Append-only store of record mutations."""

    @abstractmethod
    async def add(self, entry: AuditLogEntry) -> AuditLogEntry:
        ...

    @abstractmethod
    async def get_recent(self, limit: int = 500) -> list[AuditLogEntry]:
        """Newest entries first."""
        ...
