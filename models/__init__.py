from datetime import datetime, time, date

from sqlalchemy import (
    ForeignKey, UniqueConstraint, Index, Boolean, Date, DateTime, Time,
    Integer, String, JSON
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from extensions import db


# ---------- Core Entities ----------
class Schedule(db.Model):
    """A named set of courses for one term. At most one is active."""
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    term_name: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False, index=True)

    courses = relationship("Course", back_populates="schedule", cascade="all, delete-orphan",
                           order_by="Course.id")

    def __repr__(self):
        return f"<Schedule {self.name} active={self.is_active}>"


class Course(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    schedule_id: Mapped[int] = mapped_column(ForeignKey("schedule.id", ondelete="CASCADE"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    teacher: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    location: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)  # 1=Mon .. 7=Sun
    time_slot: Mapped[int] = mapped_column(Integer, nullable=False)    # TimeSlot.order_no
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    weeks: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    color: Mapped[str] = mapped_column(String(9), nullable=False, default="#007AFF")

    schedule = relationship("Schedule", back_populates="courses")

    __table_args__ = (
        Index("ix_course_schedule_day", "schedule_id", "day_of_week"),
    )

    def __repr__(self):
        return f"<Course {self.name} d{self.day_of_week} s{self.time_slot}>"


class TimeSlot(db.Model):
    """Period table: order_no -> clock times."""
    id: Mapped[int] = mapped_column(primary_key=True)
    order_no: Mapped[int] = mapped_column(Integer, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)

    __table_args__ = (
        UniqueConstraint("order_no", name="uq_timeslot_order_no"),
    )


class ScheduleSettings(db.Model):
    """Single-row settings: week start day and semester start."""
    id: Mapped[int] = mapped_column(primary_key=True)
    week_start_day: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    semester_start_date: Mapped[date] = mapped_column(Date, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
