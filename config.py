from __future__ import annotations
import os
from datetime import date
from pathlib import Path


def _env_date(name: str) -> date | None:
    raw = os.getenv(name)
    return date.fromisoformat(raw) if raw else None


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    BASE_DIR = Path(__file__).resolve().parent
    # SQLite file in project directory
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", f"sqlite:///{BASE_DIR / 'app.db'}")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # single local calendar, used only to read "now"
    TIMEZONE = os.getenv("SCHEDULE_TZ", "Asia/Shanghai")
    DEFAULT_WEEK_START_DAY = int(os.getenv("WEEK_START_DAY", "1"))
    SEMESTER_START_DATE = _env_date("SEMESTER_START_DATE")
    NEXT_COURSE_LOOKAHEAD_DAYS = 14
    IMPORT_MAX_ROWS = 2000


    # default period table (order_no, start, end)
    DEFAULT_TIME_SLOTS = [
        (1, "08:00", "08:40"), (2, "08:45", "09:25"), (3, "09:45", "10:25"),
        (4, "10:35", "11:15"), (5, "11:20", "12:00"), (6, "13:30", "14:10"),
        (7, "14:15", "14:55"), (8, "15:15", "15:55"), (9, "16:00", "16:40"),
        (10, "18:30", "19:10"), (11, "19:15", "19:55"), (12, "20:05", "20:45"),
    ]


class DevConfig(BaseConfig):
    DEBUG = True
    SEED_TIME_SLOTS = True


class ProdConfig(BaseConfig):
    DEBUG = False
    JSON_SORT_KEYS = False
    SEED_TIME_SLOTS = False


config_map = {
    "dev": DevConfig,
    "prod": ProdConfig,
    "default": DevConfig,
}
