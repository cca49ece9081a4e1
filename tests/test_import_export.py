# tests/test_import_export.py
from io import BytesIO
import pytest
from app import create_app
from extensions import db
from models import Course, Schedule
from blueprints.directory.validators import parse_weeks


def _csrf(client):
    r = client.get("/api/v1/csrf")
    return (r.get_json() or {}).get("csrf", "")


@pytest.fixture()
def client():
    app = create_app("dev")
    app.config.update(TESTING=True)
    with app.app_context():
        db.create_all()
        db.session.add(Schedule(name="IMP", term_name="2025-1"))
        db.session.commit()
        with app.test_client() as c:
            yield c
        db.session.remove()
        db.drop_all()


@pytest.mark.parametrize("raw, expected", [
    ("1-4", [1, 2, 3, 4]),
    ("1,3,5", [1, 3, 5]),
    ("2-8/2", [2, 4, 6, 8]),
    ("1-3, 7 9-13/2", [1, 2, 3, 7, 9, 11, 13]),
    ([5, 1, 5], [1, 5]),
])
def test_parse_weeks(raw, expected):
    assert parse_weeks(raw) == expected


@pytest.mark.parametrize("raw", ["", "0-3", "5-1", "odd", "1-4/0", [0]])
def test_parse_weeks_rejects(raw):
    with pytest.raises(ValueError):
        parse_weeks(raw)


def _csv(text: str):
    return {"file": (BytesIO(text.encode("utf-8")), "courses.csv")}


def test_import_csv_validate_then_commit(client):
    csv_text = (
        "name;teacher;room;weeks;day;slot;duration\n"
        "Data Structures;Prof. Wang;CS-506;1-16;1;2;2\n"
        "Linear Algebra;Ms. Li;SCI-208;1-16/2;1;4;\n"
    )
    t = _csrf(client)
    r = client.post("/api/v1/import/courses?schedule_id=1&mode=validate",
                    data=_csv(csv_text), headers={"X-CSRF-Token": t},
                    content_type="multipart/form-data")
    assert r.status_code == 200
    assert r.get_json() == {"ok": True, "accepted": 2, "row_errors": []}
    assert Course.query.count() == 0

    r = client.post("/api/v1/import/courses?schedule_id=1&mode=commit",
                    data=_csv(csv_text), headers={"X-CSRF-Token": t},
                    content_type="multipart/form-data")
    assert r.status_code == 201
    assert r.get_json()["created"] == 2
    la = Course.query.filter_by(name="Linear Algebra").one()
    assert la.weeks == list(range(1, 17, 2))
    assert la.duration == 1
    assert la.location == "SCI-208"


def test_import_csv_chinese_headers(client):
    csv_text = "课程,教师,地点,周次,星期,节次,节数\n数据结构,王教授,计算机楼506,1-16,1,2,2\n"
    r = client.post("/api/v1/import/courses?schedule_id=1&mode=commit",
                    data=_csv(csv_text), headers={"X-CSRF-Token": _csrf(client)},
                    content_type="multipart/form-data")
    assert r.status_code == 201
    c = Course.query.one()
    assert (c.name, c.teacher, c.day_of_week, c.time_slot, c.duration) == ("数据结构", "王教授", 1, 2, 2)


def test_import_csv_missing_columns(client):
    r = client.post("/api/v1/import/courses?schedule_id=1",
                    data=_csv("name,teacher\nX,Y\n"), headers={"X-CSRF-Token": _csrf(client)},
                    content_type="multipart/form-data")
    assert r.status_code == 400
    js = r.get_json()
    assert js["code"] == "MISSING_COLUMNS"
    assert set(js["missing"]) == {"weeks", "day_of_week", "time_slot"}


def test_import_json_row_errors_block_commit(client):
    body = {"courses": [
        {"name": "OK", "weeks": "1-8", "day_of_week": 2, "time_slot": 1},
        {"name": "Bad day", "weeks": [1], "day_of_week": 9, "time_slot": 1},
        {"name": "Bad weeks", "weeks": "x-y", "day_of_week": 2, "time_slot": 3},
    ]}
    r = client.post("/api/v1/import/courses?schedule_id=1&mode=commit",
                    json=body, headers={"X-CSRF-Token": _csrf(client)})
    assert r.status_code == 400
    js = r.get_json()
    assert js["ok"] is False and js["accepted"] == 1
    assert [(e["row"], e["field"]) for e in js["row_errors"]] == [(2, "day_of_week"), (3, "weeks")]
    assert js["row_errors"][1]["code"] == "INVALID_WEEKS"
    assert Course.query.count() == 0


def test_import_json_replace(client):
    t = _csrf(client)
    first = {"courses": [{"name": "Old", "weeks": [1], "day_of_week": 1, "time_slot": 1}]}
    second = {"courses": [{"name": "New", "weeks": [1, 2], "day_of_week": 1, "time_slot": 1}]}
    assert client.post("/api/v1/import/courses?schedule_id=1&mode=commit", json=first,
                       headers={"X-CSRF-Token": t}).status_code == 201
    assert client.post("/api/v1/import/courses?schedule_id=1&mode=commit&replace=1", json=second,
                       headers={"X-CSRF-Token": t}).status_code == 201
    assert [c.name for c in Course.query.all()] == ["New"]


def test_import_unknown_schedule_and_bad_mode(client):
    t = _csrf(client)
    body = {"courses": []}
    r = client.post("/api/v1/import/courses?schedule_id=99", json=body, headers={"X-CSRF-Token": t})
    assert r.status_code == 404
    r = client.post("/api/v1/import/courses?schedule_id=1&mode=merge", json=body, headers={"X-CSRF-Token": t})
    assert r.status_code == 400


def test_import_too_many_rows(client):
    client.application.config["IMPORT_MAX_ROWS"] = 2
    rows = [{"name": f"C{i}", "weeks": [1], "day_of_week": 1, "time_slot": i + 1} for i in range(3)]
    r = client.post("/api/v1/import/courses?schedule_id=1", json={"courses": rows},
                    headers={"X-CSRF-Token": _csrf(client)})
    assert r.status_code == 400
    assert r.get_json()["code"] == "TOO_MANY_ROWS"
