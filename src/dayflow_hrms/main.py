from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from pymongo.errors import PyMongoError

from .analytics.controller import register as register_analytics
from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .companies.controller import register as register_companies
from .container import Container, build_container
from .database.bootstrap import ensure_demo_users, ensure_indexes
from .leaves.controller import register as register_leaves
from .payroll.controller import register as register_payroll
from .settings import get_settings_module
from .sync.controller import register as register_sync
from .teams.controller import register as register_teams
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _start_store(container: Container, *, auto_seed: bool, sync_enabled: bool, interval: float) -> None:
    """Ping the store, then create indexes, seed and start the mirror timer."""
    try:
        container.conn.ping()
    except PyMongoError:
        logger.exception("Record store unreachable at startup; mirror sync not started")
        return

    ensure_indexes(container.conn)
    if auto_seed:
        ensure_demo_users(container.users_repo)
    if sync_enabled:
        container.periodic_sync.start(interval)


def create_app(container: Optional[Container] = None) -> Flask:
    """App factory. Passing a container skips store bootstrap (used by tests)."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    sync_enabled = bool(getattr(settings, "SYNC_ENABLED", True))
    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s/%s", settings_module, db_config.get("uri"), db_config.get("database"))
        container = build_container(
            db_config=db_config,
            mirror_data_dir=getattr(settings, "MIRROR_DATA_DIR", "data"),
            sync_enabled=sync_enabled,
        )
        _start_store(
            container,
            auto_seed=bool(getattr(settings, "AUTO_SEED_DB", False)),
            sync_enabled=sync_enabled,
            interval=float(getattr(settings, "SYNC_INTERVAL_MINUTES", 5)),
        )

    app.extensions["container"] = container

    register_error_handlers(app)
    register_users(app, container)
    register_companies(app, container)
    register_teams(app, container)
    register_attendance(app, container)
    register_leaves(app, container)
    register_payroll(app, container)
    register_analytics(app, container)
    register_sync(app, container)

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    return app
