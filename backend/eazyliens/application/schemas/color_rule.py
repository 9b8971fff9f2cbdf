"""Pydantic DTOs for the fixed-value color rules."""

from pydantic import BaseModel, Field


class ColorRuleResponse(BaseModel):
    column: str = Field(..., examples=["Law Firm"])
    value: str = Field(..., examples=["Pish & Pish"])
    background: str = Field(..., examples=["#ADD8E6"])
    text: str = Field(..., examples=["#000000"])

    model_config = {"from_attributes": True}
