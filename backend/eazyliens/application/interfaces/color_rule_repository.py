"""Abstract repository interface (port) for fixed-value color rules."""

from abc import ABC, abstractmethod

from eazyliens.domain.coloring import ColorRule


class ColorRuleRepository(ABC):

    @abstractmethod
    async def list_all(self) -> list[ColorRule]:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def create(self, rule: ColorRule) -> ColorRule:
        ...
