from __future__ import annotations
import os
from datetime import time
from importlib import import_module
from flask import Flask
from config import config_map
from extensions import db, migrate, csrf
from sqlalchemy import inspect

from blueprints.schedule.engine import check_week_start_day


def _parse_hhmm(s: str) -> time:
    h, m = s.split(":")
    return time(int(h), int(m))


def _seed_from_config(app):
    if not app.config.get("SEED_TIME_SLOTS"):
        return
    with app.app_context():
        # table may not exist yet (alembic upgrade, tests before create_all)
        if not inspect(db.engine).has_table("time_slot"):
            return

        from models import TimeSlot  # local import avoids cycles
        if TimeSlot.query.first():
            return
        for order_no, start, end in app.config.get("DEFAULT_TIME_SLOTS", []):
            db.session.add(TimeSlot(order_no=order_no, start_time=_parse_hhmm(start), end_time=_parse_hhmm(end)))
        db.session.commit()


def register_blueprints(app: Flask) -> None:
    # core routes must be imported before taking bp
    import_module("blueprints.core.routes")
    from blueprints.core import bp as core_bp, api_bp as core_api_bp
    from blueprints.schedule.routes import api_bp as schedule_api_bp
    from blueprints.directory import bp as directory_bp
    from blueprints.import_export.routes import api_bp as import_export_api_bp

    # core without a prefix so /health sits at the root
    app.register_blueprint(core_bp)
    app.register_blueprint(directory_bp, url_prefix="/directory")
    app.register_blueprint(core_api_bp, url_prefix="/api/v1")
    app.register_blueprint(schedule_api_bp, url_prefix="/api/v1")
    app.register_blueprint(import_export_api_bp, url_prefix="/api/v1")


def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.setdefault("SECRET_KEY", "change-me-in-prod")
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    # pytest always sets PYTEST_CURRENT_TEST: keep every test on its own in-memory DB
    if os.environ.get("PYTEST_CURRENT_TEST"):
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {"connect_args": {"check_same_thread": False}})
    app.config.setdefault("WTF_CSRF_TIME_LIMIT", None)
    app.config.setdefault("WTF_CSRF_HEADERS", ["X-CSRF-Token", "X-CSRFToken"])

    # a bad default week start is a programming error: fail at startup
    check_week_start_day(app.config["DEFAULT_WEEK_START_DAY"])

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    register_blueprints(app)
    _seed_from_config(app)
    return app
