"""SQLAlchemy ORM model for dropdown option rows."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from eazyliens.infrastructure.database.base import Base

# Column name → attribute name, for the list columns only
OPTION_ATTRIBUTES: dict[str, str] = {
    "Calls": "calls",
    "Status": "status",
    "Law Firm": "law_firm",
    "Specialty": "specialty",
    "Type": "type",
    "Facility": "facility",
    "Doctor": "doctor",
    "Employee": "employee",
}


class DropdownOptionModel(Base):
    """ORM model — maps to the 'dropdown_options' table."""

    __tablename__ = "dropdown_options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    calls: Mapped[str | None] = mapped_column("Calls", String(255), nullable=True)
    status: Mapped[str | None] = mapped_column("Status", String(255), nullable=True)
    law_firm: Mapped[str | None] = mapped_column("Law Firm", String(255), nullable=True)
    specialty: Mapped[str | None] = mapped_column("Specialty", String(255), nullable=True)
    type: Mapped[str | None] = mapped_column("Type", String(255), nullable=True)
    facility: Mapped[str | None] = mapped_column("Facility", String(255), nullable=True)
    doctor: Mapped[str | None] = mapped_column("Doctor", String(255), nullable=True)
    employee: Mapped[str | None] = mapped_column("Employee", String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<DropdownOptionModel(id={self.id})>"
