"""Abstract repository interface (port) for dropdown option rows."""

from abc import ABC, abstractmethod

from eazyliens.domain.entities import DropdownOptionRow


class DropdownOptionRepository(ABC):
    """Port for option-table persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_all(self) -> list[DropdownOptionRow]:
        """Every option row, ordered by ID ascending."""
        ...

    @abstractmethod
    async def get_by_id(self, row_id: int) -> DropdownOptionRow | None:
        ...

    @abstractmethod
    async def create(self, row: DropdownOptionRow) -> DropdownOptionRow:
        ...

    @abstractmethod
    async def set_value(self, row_id: int, column: str, value: str | None) -> DropdownOptionRow:
        """Write (or clear, with None) one column slot of a row."""
        ...
