"""SQLAlchemy ORM model for the Record entity."""

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from eazyliens.infrastructure.database.base import Base


class RecordModel(Base):
    """ORM model — maps to the 'records' table.

    Database column names are the grid's display names ("Law Firm", "T/F", ...);
    Python attributes use the snake_case names from COLUMN_ATTRIBUTES.
    """

    __tablename__ = "records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    tf: Mapped[str | None] = mapped_column("T/F", String(20), nullable=True)
    calls: Mapped[str | None] = mapped_column("Calls", String(255), nullable=True)
    date: Mapped[str | None] = mapped_column("Date", String(50), nullable=True)
    name: Mapped[str | None] = mapped_column("Name", String(255), nullable=True)
    status: Mapped[str | None] = mapped_column("Status", String(255), nullable=True)
    law_firm: Mapped[str | None] = mapped_column("Law Firm", String(255), nullable=True)
    point_of_contact: Mapped[str | None] = mapped_column("Point of Contact", String(255), nullable=True)
    specialty: Mapped[str | None] = mapped_column("Specialty", String(255), nullable=True)
    type: Mapped[str | None] = mapped_column("Type", String(255), nullable=True)
    facility: Mapped[str | None] = mapped_column("Facility", String(255), nullable=True)
    doctor: Mapped[str | None] = mapped_column("Doctor", String(255), nullable=True)
    location: Mapped[str | None] = mapped_column("Location", String(255), nullable=True)
    text: Mapped[str | None] = mapped_column("Text", Text, nullable=True)
    attorney: Mapped[str | None] = mapped_column("Attorney", String(255), nullable=True)
    employee: Mapped[str | None] = mapped_column("Employee", String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column("Notes", Text, nullable=True)
    bg_color: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<RecordModel(id={self.id}, name='{self.name}')>"
