# blueprints/import_export/services.py
from __future__ import annotations
from dataclasses import dataclass, field
from io import StringIO
import csv
import logging
from typing import Any, Dict, List

from pydantic import ValidationError

from extensions import db
from models import Course
from blueprints.directory.schemas import CourseIn
from blueprints.directory.validators import parse_weeks

log = logging.getLogger(__name__)

COURSE_KEYS = ["name", "teacher", "location", "weeks", "day_of_week", "time_slot", "duration", "color"]
REQUIRED_KEYS = ["name", "weeks", "day_of_week", "time_slot"]

# ---------- util: CSV reading with delimiter sniffing
def read_csv_text(text: str) -> tuple[list[str], list[list[str]]]:
    lines = text.splitlines()
    if not lines:
        return [], []
    # guess the delimiter from the header, fall back to ',' then ';'
    try:
        dialect = csv.Sniffer().sniff(lines[0], delimiters=",;\t")
        delim = dialect.delimiter
    except csv.Error:
        delim = "," if ("," in lines[0]) else ";"
    reader = csv.reader(StringIO(text), delimiter=delim)
    rows = [r for r in reader if any(cell.strip() for cell in r)]
    if not rows:
        return [], []
    header, data = rows[0], rows[1:]
    return [h.strip() for h in header], [list(map(str.strip, r)) for r in data]

# ---------- header mapping detection
HEADER_SYNONYMS: dict[str, list[str]] = {
    "name": ["name", "course", "course_name", "课程", "课程名称"],
    "teacher": ["teacher", "instructor", "教师", "老师"],
    "location": ["location", "room", "place", "地点", "教室"],
    "weeks": ["weeks", "week", "周次"],
    "day_of_week": ["day_of_week", "day", "weekday", "星期"],
    "time_slot": ["time_slot", "slot", "period", "节次"],
    "duration": ["duration", "length", "节数"],
    "color": ["color", "colour", "颜色"],
}

def detect_mapping(header: list[str], keys: list[str]) -> dict[str, str]:
    h_lower = [h.strip().lower() for h in header]
    mapping: dict[str, str] = {}
    for key in keys:
        for c in HEADER_SYNONYMS.get(key, [key]):
            if c.lower() in h_lower:
                mapping[key] = header[h_lower.index(c.lower())]
                break
    return mapping

def rows_from_csv(text: str) -> tuple[list[dict[str, Any]], list[str]]:
    """CSV text -> course dicts keyed by canonical field names, plus missing required headers."""
    header, data = read_csv_text(text)
    mapping = detect_mapping(header, COURSE_KEYS)
    missing = [k for k in REQUIRED_KEYS if k not in mapping]
    idx = {key: header.index(src) for key, src in mapping.items()}
    rows = []
    for r in data:
        rows.append({key: (r[i] if i < len(r) else "") for key, i in idx.items()})
    return rows, missing

# ---------- validation
@dataclass
class ImportReport:
    accepted: List[CourseIn] = field(default_factory=list)
    row_errors: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.row_errors

    def to_dict(self) -> dict:
        return {"ok": self.ok, "accepted": len(self.accepted), "row_errors": self.row_errors}

def _blank_to_default(row: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in row.items() if not (isinstance(v, str) and v.strip() == "")}

def validate_course_rows(rows: List[Dict[str, Any]], schedule_id: int, first_row: int = 1) -> ImportReport:
    report = ImportReport()
    for n, raw in enumerate(rows, start=first_row):
        row = _blank_to_default(dict(raw))
        row["schedule_id"] = schedule_id
        if "weeks" in row:
            try:
                row["weeks"] = parse_weeks(row["weeks"])
            except (TypeError, ValueError) as ex:
                report.row_errors.append({"row": n, "field": "weeks", "code": "INVALID_WEEKS",
                                          "value": raw.get("weeks"), "msg": str(ex)})
                continue
        try:
            report.accepted.append(CourseIn.model_validate(row))
        except ValidationError as ve:
            for e in ve.errors():
                loc = e.get("loc") or ("",)
                report.row_errors.append({"row": n, "field": str(loc[0]), "code": e.get("type", "invalid"),
                                          "msg": e.get("msg", "")})
    return report

def commit_courses(schedule_id: int, courses: List[CourseIn], replace: bool = False) -> int:
    if replace:
        Course.query.filter_by(schedule_id=schedule_id).delete(synchronize_session=False)
    for parsed in courses:
        db.session.add(Course(
            schedule_id=schedule_id,
            name=parsed.name.strip(),
            teacher=parsed.teacher,
            location=parsed.location,
            day_of_week=parsed.day_of_week,
            time_slot=parsed.time_slot,
            duration=parsed.duration,
            weeks=list(parsed.weeks),
            color=parsed.color.upper(),
        ))
    db.session.commit()
    log.info("imported %d courses into schedule %s (replace=%s)", len(courses), schedule_id, replace)
    return len(courses)
