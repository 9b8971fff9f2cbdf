"""SQLAlchemy ORM model for the fixed-value color assignments."""

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from eazyliens.infrastructure.database.base import Base


class ListColorModel(Base):
    """ORM model — maps to the 'list_colors' table, one row per (column, value)."""

    __tablename__ = "list_colors"
    __table_args__ = (UniqueConstraint("column_name", "value"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    column_name: Mapped[str] = mapped_column(String(50), nullable=False)
    value: Mapped[str] = mapped_column(String(255), nullable=False)
    bg_color: Mapped[str] = mapped_column(String(7), nullable=False)
    text_color: Mapped[str] = mapped_column(String(7), nullable=False)

    def __repr__(self) -> str:
        return f"<ListColorModel(column='{self.column_name}', value='{self.value}')>"
