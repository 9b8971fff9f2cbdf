"""Concrete repository implementation for users backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eazyliens.application.interfaces import UserRepository
from eazyliens.domain.entities import Role, User
from eazyliens.infrastructure.database.models import UserModel


class SQLAlchemyUserRepository(UserRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            username=model.username,
            role=Role.parse(model.role),
            active=model.active,
        )

    async def get_by_username(self, username: str) -> User | None:
        result = await self._session.execute(
            select(UserModel).where(UserModel.username == username)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, user: User) -> User:
        model = UserModel(username=user.username, role=user.role.value, active=user.active)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)
