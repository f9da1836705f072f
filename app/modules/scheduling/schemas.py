from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import date, datetime, time
from app.core.scheduling import BookingStatus


def _local_time(value: Optional[time]) -> Optional[time]:
    # Slots are wall-clock times on scheduled_date in the church's own time
    if value is not None and value.tzinfo is not None:
        raise ValueError("Times must not carry a timezone offset")
    return value


class ScheduleBase(BaseModel):
    scheduled_date: date
    start_time: time
    end_time: time
    campus_id: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def reject_offsets(cls, value):
        return _local_time(value)


class ScheduleUpdateBase(BaseModel):
    scheduled_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    campus_id: Optional[str] = None
    status: Optional[BookingStatus] = None
    notes: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def reject_offsets(cls, value):
        return _local_time(value)


class ScheduleResponseBase(BaseModel):
    id: str
    scheduled_date: date
    start_time: time
    end_time: time
    campus_id: Optional[str] = None
    status: BookingStatus
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
