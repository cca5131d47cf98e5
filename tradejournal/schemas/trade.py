"""Pydantic schemas for Trade API."""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator, model_validator

from tradejournal.models.trade import EntrySide
from tradejournal.services.statistics import calculate_roi

# Max allowed gap, in percentage points, between a client-sent roi and the derived one
ROI_TOLERANCE = 0.01


class TradeCreate(BaseModel):
    margin: float = Field(gt=0, allow_inf_nan=False)
    profit_loss: float = Field(allow_inf_nan=False)
    entry_side: EntrySide = EntrySide.LONG
    roi: float | None = Field(default=None, allow_inf_nan=False)
    comments: str | None = Field(default=None, max_length=1000)

    @field_validator("comments")
    @classmethod
    def _blank_comment_to_none(cls, value: str | None) -> str | None:
        if value is None:
            return None
        text = value.strip()
        return text or None

    @model_validator(mode="after")
    def _derive_roi(self):
        derived = calculate_roi(self.margin, self.profit_loss)
        if self.roi is not None and abs(self.roi - derived) > ROI_TOLERANCE:
            raise ValueError(
                f"roi {self.roi} is inconsistent with profit_loss/margin ({derived:.4f})"
            )
        self.roi = derived
        return self


class TradeRead(BaseModel):
    id: int
    session_id: int
    margin: float
    roi: float
    entry_side: EntrySide
    profit_loss: float
    comments: str | None
    created_at: datetime

    model_config = {"from_attributes": True}
