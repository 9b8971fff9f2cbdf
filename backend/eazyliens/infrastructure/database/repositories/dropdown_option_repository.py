"""Concrete repository implementation for dropdown option rows backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eazyliens.application.interfaces import DropdownOptionRepository
from eazyliens.domain.entities import DropdownOptionRow
from eazyliens.infrastructure.database.models import OPTION_ATTRIBUTES, DropdownOptionModel


class SQLAlchemyDropdownOptionRepository(DropdownOptionRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: DropdownOptionModel) -> DropdownOptionRow:
        return DropdownOptionRow(
            id=model.id,
            values={column: getattr(model, attr) for column, attr in OPTION_ATTRIBUTES.items()},
        )

    async def get_all(self) -> list[DropdownOptionRow]:
        result = await self._session.execute(
            select(DropdownOptionModel).order_by(DropdownOptionModel.id.asc())
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    async def get_by_id(self, row_id: int) -> DropdownOptionRow | None:
        model = await self._session.get(DropdownOptionModel, row_id)
        return self._to_entity(model) if model else None

    async def create(self, row: DropdownOptionRow) -> DropdownOptionRow:
        model = DropdownOptionModel()
        for column, attr in OPTION_ATTRIBUTES.items():
            setattr(model, attr, row.values.get(column))
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def set_value(self, row_id: int, column: str, value: str | None) -> DropdownOptionRow:
        model = await self._session.get(DropdownOptionModel, row_id)
        if model is None:
            raise ValueError(f"DropdownOptionRow {row_id} not found in database")
        setattr(model, OPTION_ATTRIBUTES[column], value)
        await self._session.flush()
        return self._to_entity(model)
