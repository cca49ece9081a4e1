from __future__ import annotations
from datetime import date, datetime, time
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator, model_validator

# ---------- Schedules ----------
class ScheduleIn(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    term_name: str = Field("", max_length=100)

class ScheduleOut(ScheduleIn):
    id: int
    created_at: datetime
    is_active: bool

# ---------- Courses ----------
class CourseIn(BaseModel):
    schedule_id: int
    name: str = Field(min_length=1, max_length=255)
    teacher: str = Field("", max_length=255)
    location: str = Field("", max_length=255)
    day_of_week: int = Field(ge=1, le=7)
    time_slot: int = Field(ge=1)
    duration: int = Field(1, ge=1)
    weeks: List[int] = Field(min_length=1)
    color: str = Field("#007AFF", pattern="^#[0-9A-Fa-f]{6}([0-9A-Fa-f]{2})?$")

    @field_validator("weeks")
    @classmethod
    def check_weeks(cls, v: List[int]) -> List[int]:
        bad = [w for w in v if w < 1]
        if bad:
            raise ValueError(f"week numbers must be >= 1, got {bad}")
        return sorted(set(v))

class CourseOut(CourseIn):
    id: int

# ---------- Time Slots ----------
class TimeSlotIn(BaseModel):
    order_no: int = Field(ge=1)
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def check_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be > start_time")
        return self

class TimeSlotOut(TimeSlotIn):
    id: int

# ---------- Settings ----------
class SettingsIn(BaseModel):
    week_start_day: int = Field(ge=1, le=7)
    semester_start_date: date

class SettingsOut(SettingsIn):
    updated_at: Optional[datetime] = None
