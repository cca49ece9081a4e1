# scripts/dev_db_init.py
from app import create_app
from extensions import db
from fixtures.demo_timetable import load_time_slots


if __name__ == "__main__":
    app = create_app("dev")
    with app.app_context():
        db.create_all()
        load_time_slots(app.config["DEFAULT_TIME_SLOTS"])
        db.session.commit()
        print("DB initialized, period table loaded")
