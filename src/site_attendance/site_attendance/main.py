from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .bins.controller import register as register_bins
from .common.datetime_utils import get_local_zone, get_zone
from .common.web import register_error_handlers
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .leaves.controller import register as register_leaves
from .reports.controller import register as register_reports
from .sites.controller import register as register_sites
from .users.controller import register as register_users
from .waste_forms.controller import register as register_waste_forms
from .wfh.controller import register as register_wfh

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def load_settings():
    settings_module = get_settings_module()
    return settings_module, importlib.import_module(settings_module)


def configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def register_routes(app: Flask, container: Container) -> None:
    register_error_handlers(app)
    register_users(app, container)
    register_sites(app, container)
    register_attendance(app, container)
    register_wfh(app, container)
    register_leaves(app, container)
    register_reports(app, container)
    register_bins(app, container)
    register_waste_forms(app, container)


def create_app(container: Container | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module, settings = load_settings()
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"), db_config.get("host"), db_config.get("port", 3306), db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            admin_password = getattr(settings, "ADMIN_PASSWORD", "")
            if admin_password:
                ensure_admin_user(
                    db_config,
                    username=getattr(settings, "ADMIN_USERNAME", "admin"),
                    password=admin_password,
                )
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            zone=get_zone(getattr(settings, "EVENT_TIMEZONE", "UTC")),
            local_zone=get_local_zone(getattr(settings, "LOCAL_TIMEZONE", "")),
            max_retries=int(getattr(settings, "REQUEST_MAX_RETRIES", 3)),
            temp_email_domain=getattr(settings, "TEMP_EMAIL_DOMAIN", "temp.local"),
        )

    register_routes(app, container)
    return app
