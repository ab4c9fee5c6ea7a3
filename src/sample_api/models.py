from __future__ import annotations

from datetime import UTC, datetime
from typing import Literal

from pydantic import AwareDatetime, BaseModel, Field, field_validator, model_validator


class BookingCreate(BaseModel):
    resource_id: str = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime

    @field_validator("start_time", "end_time")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        # naive times from clients are taken as UTC
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @model_validator(mode="after")
    def _check_window(self) -> BookingCreate:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class Booking(BaseModel):
    booking_id: str
    user_id: str
    resource_id: str
    start_time: AwareDatetime
    end_time: AwareDatetime
    status: Literal["active", "cancelled"] = "active"
