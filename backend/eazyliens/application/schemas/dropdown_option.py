"""Pydantic DTOs for dropdown option administration."""

from pydantic import BaseModel, Field, field_validator

from eazyliens.domain.entities import LIST_COLUMNS


class DropdownOptionRowResponse(BaseModel):
    id: int
    values: dict[str, str | None]

    model_config = {"from_attributes": True}


class OptionWrite(BaseModel):
    """Schema for adding or renaming a single option value."""

    column: str = Field(..., examples=["Employee"])
    value: str = Field(..., max_length=255, examples=["Maria"])

    @field_validator("column")
    @classmethod
    def _list_column(cls, v: str) -> str:
        if v not in LIST_COLUMNS:
            raise ValueError(f"'{v}' has no option list")
        return v
