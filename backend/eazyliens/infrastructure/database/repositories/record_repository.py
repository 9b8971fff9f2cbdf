"""Concrete repository implementation for Record backed by SQLAlchemy."""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from eazyliens.application.interfaces import RecordRepository
from eazyliens.domain.entities import COLUMN_ATTRIBUTES, Record, parse_color_map
from eazyliens.infrastructure.database.models import RecordModel


class SQLAlchemyRecordRepository(RecordRepository):
    """Implements the RecordRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: RecordModel) -> Record:
        """Map ORM model → domain entity."""
        return Record(
            id=model.id,
            values={
                column: getattr(model, attr) for column, attr in COLUMN_ATTRIBUTES.items()
            },
            bg_color=parse_color_map(model.bg_color),
        )

    def _to_model(self, entity: Record) -> RecordModel:
        """Map domain entity → ORM model (for creation)."""
        model = RecordModel(bg_color=parse_color_map(entity.bg_color))
        for column, attr in COLUMN_ATTRIBUTES.items():
            setattr(model, attr, entity.values.get(column))
        return model

    @staticmethod
    def _search_clause(search: str):
        return or_(*[
            getattr(RecordModel, attr).icontains(search, autoescape=True)
            for attr in COLUMN_ATTRIBUTES.values()
        ])

    async def get_by_id(self, record_id: int) -> Record | None:
        result = await self._session.get(RecordModel, record_id)
        return self._to_entity(result) if result else None

    async def search(
        self,
        *,
        search: str = "",
        skip: int = 0,
        limit: int = 50,
    ) -> tuple[list[Record], int]:
        stmt = select(RecordModel)
        count_stmt = select(func.count()).select_from(RecordModel)

        if search:
            clause = self._search_clause(search)
            stmt = stmt.where(clause)
            count_stmt = count_stmt.where(clause)

        stmt = stmt.order_by(RecordModel.id.desc()).offset(skip).limit(limit)
        result = await self._session.execute(stmt)
        total = await self._session.scalar(count_stmt)
        return [self._to_entity(row) for row in result.scalars().all()], int(total or 0)

    async def create(self, record: Record) -> Record:
        model = self._to_model(record)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update_field(self, record_id: int, column: str, value: str | None) -> Record:
        model = await self._session.get(RecordModel, record_id)
        if model is None:
            raise ValueError(f"Record {record_id} not found in database")
        setattr(model, COLUMN_ATTRIBUTES[column], value)
        await self._session.flush()
        return self._to_entity(model)

    async def update_colors(self, record_id: int, colors: dict[str, str]) -> Record:
        model = await self._session.get(RecordModel, record_id)
        if model is None:
            raise ValueError(f"Record {record_id} not found in database")
        model.bg_color = parse_color_map(colors)
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, record_id: int) -> bool:
        model = await self._session.get(RecordModel, record_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
