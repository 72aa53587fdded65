from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .database.bootstrap import apply_schema, list_tables

from .common.web import register_error_handlers
from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .breaks.controller import register as register_breaks
from .leaves.controller import register as register_leaves
from .organizations.controller import register as register_organizations
from .payroll.controller import register as register_payroll
from .users.controller import register as register_users
from .wifi.controller import register as register_wifi

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory. Pass ``container`` to run over repositories other than MySQL."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    level = getattr(settings, "LOG_LEVEL", "DEBUG" if app.config["DEBUG"] else "INFO")
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        container = build_container(
            db_config=db_config,
            minimum_hours=float(getattr(settings, "MINIMUM_VALID_HOURS", 6)),
        )

    register_error_handlers(app)
    register_users(app, container)
    register_organizations(app, container)
    register_attendance(app, container)
    register_breaks(app, container)
    register_leaves(app, container)
    register_payroll(app, container)
    register_wifi(app, container)

    return app
