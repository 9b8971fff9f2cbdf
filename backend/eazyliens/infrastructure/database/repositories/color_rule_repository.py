"""Concrete repository implementation for color rules backed by SQLAlchemy."""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eazyliens.application.interfaces import ColorRuleRepository
from eazyliens.domain.coloring import ColorRule
from eazyliens.domain.entities import COLUMN_ATTRIBUTES
from eazyliens.domain.entities.record import is_hex_color
from eazyliens.infrastructure.database.models import ListColorModel

logger = logging.getLogger(__name__)


class SQLAlchemyColorRuleRepository(ColorRuleRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_entity(model: ListColorModel) -> ColorRule | None:
        if model.column_name not in COLUMN_ATTRIBUTES:
            logger.warning("Skipping color rule %d for unknown column %r", model.id, model.column_name)
            return None
        if not (is_hex_color(model.bg_color) and is_hex_color(model.text_color)):
            logger.warning(
                "Skipping color rule %d with malformed colors %r/%r",
                model.id,
                model.bg_color,
                model.text_color,
            )
            return None
        return ColorRule(
            column=model.column_name,
            value=model.value,
            background=model.bg_color.upper(),
            text=model.text_color.upper(),
        )

    async def list_all(self) -> list[ColorRule]:
        result = await self._session.execute(select(ListColorModel).order_by(ListColorModel.id))
        rules = (self._to_entity(m) for m in result.scalars().all())
        return [rule for rule in rules if rule is not None]

    async def count(self) -> int:
        result = await self._session.execute(select(func.count()).select_from(ListColorModel))
        return result.scalar_one()

    async def create(self, rule: ColorRule) -> ColorRule:
        model = ListColorModel(
            column_name=rule.column,
            value=rule.value,
            bg_color=rule.background.upper(),
            text_color=rule.text.upper(),
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)
