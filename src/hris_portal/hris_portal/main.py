from __future__ import annotations

import importlib
import logging
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .core.constants import DEFAULT_HISTORY_DAYS, DEFAULT_SESSION_DAYS, REPORT_LOG_LIMIT
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .reports.controller import register as register_reports
from .requests.controller import register as register_requests
from .schedules.controller import register as register_schedules
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    A prebuilt ``container`` skips every database step, which is how tests
    run the HTTP layer over in-memory repositories.
    """

    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)
            logger.info("Demo users ready")

        container = build_container(
            db_config=db_config,
            history_days=int(getattr(settings, "HISTORY_DAYS", DEFAULT_HISTORY_DAYS)),
            report_log_limit=int(getattr(settings, "REPORT_LOG_LIMIT", REPORT_LOG_LIMIT)),
        )

    app.extensions["hris_container"] = container

    register_users(app, container)
    register_attendance(app, container)
    register_requests(app, container)
    register_schedules(app, container)
    register_reports(app, container)

    @app.cli.command("reapply-adjustments")
    def reapply_adjustments_command():
        """Write approved time adjustments that never reached their TimeLog."""
        applied = container.request_service.reapply_pending_adjustments(system=True)
        print(f"Reapplied {applied} time adjustment(s)")

    if bool(getattr(settings, "ENABLE_MIDNIGHT_ROLLOVER", False)):
        container.rollover.start()

    return app
