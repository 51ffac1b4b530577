from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .branches.controller import register as register_branches
from .common.web import register_error_handlers
from .container import Container, build_container
from .presence.controller import register as register_presence
from .roster.controller import register as register_roster

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    api_config = getattr(settings, "API_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("settings=%s backend=%s", settings_module, api_config.get("base_url"))

    if container is None:
        container = build_container(
            api_config=api_config,
            student_role=getattr(settings, "STUDENT_ROLE", "Student"),
            poll_interval_seconds=float(getattr(settings, "POLL_INTERVAL_SECONDS", 0)),
        )
    app.extensions["attendance_hub"] = container

    register_error_handlers(app)
    register_branches(app, container)
    register_roster(app, container)
    register_attendance(app, container)
    register_presence(app, container)

    return app
