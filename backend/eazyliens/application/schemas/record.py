"""Pydantic DTOs (Data Transfer Objects) for the Record feature."""

from pydantic import BaseModel, Field, field_validator

from eazyliens.domain.entities import COLUMN_ATTRIBUTES
from eazyliens.domain.entities.record import is_hex_color


class RecordResponse(BaseModel):
    """Schema returned to the client."""

    id: int
    values: dict[str, str | None]
    bg_color: dict[str, str] = Field(default_factory=dict)

    model_config = {"from_attributes": True}


class RecordPageResponse(BaseModel):
    items: list[RecordResponse]
    total: int
    page: int
    page_size: int


class FieldUpdate(BaseModel):
    """Schema for writing a single column of a record."""

    column: str = Field(..., examples=["Law Firm"])
    value: str | None = Field(None, max_length=2000, examples=["Pish & Pish"])

    @field_validator("column")
    @classmethod
    def _known_column(cls, v: str) -> str:
        if v not in COLUMN_ATTRIBUTES:
            raise ValueError(f"unknown column '{v}'")
        return v


class ColorsUpdate(BaseModel):
    """Schema for replacing the manual color map of a record."""

    colors: dict[str, str] = Field(..., examples=[{"Notes": "#C6D9F0"}])

    @field_validator("colors")
    @classmethod
    def _valid_colors(cls, v: dict[str, str]) -> dict[str, str]:
        for column, color in v.items():
            if column not in COLUMN_ATTRIBUTES:
                raise ValueError(f"unknown column '{column}'")
            if not is_hex_color(color):
                raise ValueError(f"'{color}' is not a #RRGGBB color")
        return {column: color.upper() for column, color in v.items()}


class CellColorResponse(BaseModel):
    background: str
    text: str
    paintable: bool
    source: str
