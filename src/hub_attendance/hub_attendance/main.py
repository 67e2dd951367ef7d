from __future__ import annotations

import importlib
import logging
from typing import Any, Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .config import get_settings_module
from .container import Container, build_container
from .core.logging import configure_logging
from .database.bootstrap import apply_schema
from .people.controller import register as register_people

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Any] = None, *, container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    if settings is None:
        settings = importlib.import_module(get_settings_module())

    configure_logging(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")),
        fmt=str(getattr(settings, "LOG_FORMAT", "standard")),
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["STREAM_KEEPALIVE_SECONDS"] = float(getattr(settings, "STREAM_KEEPALIVE_SECONDS", 15.0))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
        container = build_container(settings=settings)

    logger.info(
        "hub at (%s, %s) radius=%sm tz=%s",
        container.geofence.hub.lat,
        container.geofence.hub.lng,
        container.geofence.radius_m,
        container.days.tz_name,
    )

    app.extensions["hub_attendance"] = container
    register_attendance(app, container)
    register_people(app, container)

    return app
