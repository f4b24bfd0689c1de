"""Pydantic models for expense and income records"""
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator


class Record(BaseModel):
    """
    Fields shared by every editable finance record.
    """
    id: str
    title: str
    amount: float = Field(allow_inf_nan=False)

    class Config:
        populate_by_name = True
        from_attributes = True


class Expense(Record):
    """A single expense (money out)."""
    description: str


class Income(Record):
    """A single income record (invoice). Description may be left empty."""
    description: Optional[str] = None


class RecordUpdate(BaseModel):
    """
    Decoded form payload for an update submission.

    All three fields are overwritten on every update; the identifier is never
    part of the payload.
    """
    title: str
    description: str
    amount: float = Field(allow_inf_nan=False)

    @field_validator("title", "description", "amount", mode="before")
    @classmethod
    def _submitted_as_text(cls, value: Any) -> Any:
        # Form fields arrive as text; anything else (files, lists) is rejected.
        if not isinstance(value, str):
            raise ValueError("must be submitted as text")
        return value

    @field_validator("amount", mode="before")
    @classmethod
    def _plain_decimal(cls, value: Any) -> Any:
        # Python float parsing accepts digit separators ("1_000"); form amounts must not.
        if isinstance(value, str) and "_" in value:
            raise ValueError("must be a plain decimal number")
        return value
