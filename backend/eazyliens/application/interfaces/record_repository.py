"""Abstract repository interface (port) for Record persistence."""

from abc import ABC, abstractmethod

from eazyliens.domain.entities import Record


class RecordRepository(ABC):
    """Port for record persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, record_id: int) -> Record | None:
        """Retrieve a single record by its ID."""
        ...

    @abstractmethod
    async def search(
        self,
        *,
        search: str = "",
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[Record], int]:
        """Return one page of records matching ``search`` (newest ID first) and the total match count.

        ``search`` is a case-insensitive substring matched against every column.
        """
        ...

    @abstractmethod
    async def create(self, record: Record) -> Record:
        """Persist a new record and return it with the generated ID."""
        ...

    @abstractmethod
    async def update_field(self, record_id: int, column: str, value: str | None) -> Record:
        """Write a single column of one record."""
        ...

    @abstractmethod
    async def update_colors(self, record_id: int, colors: dict[str, str]) -> Record:
        """Replace the manual color map of one record."""
        ...

    @abstractmethod
    async def delete(self, record_id: int) -> bool:
        """Delete a record. Returns True if deleted, False if not found."""
        ...
