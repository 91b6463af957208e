from __future__ import annotations
import logging
import os
from flask import Flask
from config import config_map
from extensions import db, migrate
from sqlalchemy import inspect

log = logging.getLogger(__name__)

def _seed_from_config(app):
    if not app.config.get("SEED_TEST_DATA"):
        return
    with app.app_context():
        # tables may not exist yet (before `flask db upgrade`)
        if not inspect(db.engine).has_table("class_schedule"):
            return

        from models import Tutor  # local import to avoid cycles
        from blueprints.classes.services import ClassRegistrationService
        from blueprints.classes.store import SqlScheduleStore

        svc = ClassRegistrationService(SqlScheduleStore(db.session))
        created = 0
        for item in app.config.get("DEMO_CLASSES", []):
            if Tutor.query.filter_by(name=item["tutor"]["name"]).first():
                continue
            svc.register(item["tutor"], item["class"], item["schedule"])
            created += 1
        if created:
            log.info("seeded %d demo classes", created, extra={"event": "seed"})

def register_blueprints(app: Flask) -> None:
    from blueprints.core import bp as core_bp
    from blueprints.classes import bp as classes_bp

    # no prefixes: /health and /classes live at the root
    app.register_blueprint(core_bp)
    app.register_blueprint(classes_bp)

def create_app(config_name: str | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    # pytest always sets PYTEST_CURRENT_TEST: keep every test on its own in-memory DB
    if os.environ.get("PYTEST_CURRENT_TEST"):
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {"connect_args": {"check_same_thread": False}})

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    register_blueprints(app)
    _seed_from_config(app)
    return app
