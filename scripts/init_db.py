from __future__ import annotations

import importlib

from dotenv import load_dotenv

from dayflow_hrms.container import build_container
from dayflow_hrms.database.bootstrap import ensure_indexes
from dayflow_hrms.settings import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    container = build_container(db_config=db_config, mirror_data_dir=settings.MIRROR_DATA_DIR, sync_enabled=False)
    container.conn.ping()
    ensure_indexes(container.conn)
    print(f"OK: Indexes ready -> {db_config.get('uri')}/{db_config.get('database')}")


if __name__ == "__main__":
    main()
