"""Abstract repository interface (port) for users."""

from abc import ABC, abstractmethod

from eazyliens.domain.entities import User


class UserRepository(ABC):

    @abstractmethod
    async def get_by_username(self, username: str) -> User | None:
        ...

    @abstractmethod
    async def create(self, user: User) -> User:
        ...
