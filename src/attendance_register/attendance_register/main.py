from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container, build_storage
from .exports.controller import register as register_exports
from .register.controller import register as register_register
from .storage.repository import KeyValueStorage

logger = logging.getLogger(__name__)


def create_app(*, settings_module: Optional[str] = None, storage: Optional[KeyValueStorage] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["ENFORCE_WEEKDAYS"] = bool(getattr(settings, "ENFORCE_WEEKDAYS", True))
    app.config["MAX_CONTENT_LENGTH"] = int(getattr(settings, "MAX_IMPORT_BYTES", 5 * 1024 * 1024))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if storage is None:
        backend = getattr(settings, "STORAGE_BACKEND", "file")
        storage = build_storage(
            backend,
            storage_path=getattr(settings, "STORAGE_PATH", None),
            db_config=getattr(settings, "DB_CONFIG", None),
        )
        logger.info("settings=%s storage=%s", settings_module, backend)

    container = build_container(storage=storage)
    # Unreadable stored data was dropped at load; surface it once at startup.
    for notice in container.register_store.load_notices:
        logger.warning("Startup notice: %s", notice)
    app.extensions["attendance_register"] = container

    register_register(app, container)
    register_exports(app, container)

    return app
