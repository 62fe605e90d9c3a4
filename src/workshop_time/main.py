from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .database.bootstrap import apply_schema, apply_seed_sql, list_tables
from .engine.controller import register as register_engine

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[2] / "database"


def create_app(settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    db_config = getattr(settings, "DB_CONFIG", None)
    store_backend = str(getattr(settings, "STORE_BACKEND", "mysql"))
    logger.info("settings=%s store=%s", settings_module, store_backend)

    if store_backend == "mysql":
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
            logger.info("demo seed ready")

    container = build_container(
        db_config=db_config,
        store_backend=store_backend,
        lock_timeout=float(getattr(settings, "LOCK_TIMEOUT_SECONDS", 5.0)),
        memory_targets=getattr(settings, "MEMORY_TARGETS", None),
        memory_credentials=getattr(settings, "MEMORY_CREDENTIALS", None),
    )
    app.extensions["workshop_time"] = container

    register_engine(app, container)

    return app
