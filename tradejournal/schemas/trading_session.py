"""Pydantic schemas for TradingSession API."""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator


class TradingSessionCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    initial_capital: float = Field(ge=0, allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def _trim_name(cls, value: str) -> str:
        text = value.strip()
        if not text:
            raise ValueError("must not be empty")
        return text


class TradingSessionRead(BaseModel):
    id: int
    user_id: int
    name: str
    initial_capital: float
    current_capital: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
