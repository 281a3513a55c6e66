"""Rebuild the JSON mirror once, outside the web process."""

from __future__ import annotations

import importlib
import logging
import sys

from dotenv import load_dotenv

from dayflow_hrms.container import build_container
from dayflow_hrms.settings import get_settings_module
from dayflow_hrms.sync.model import MirrorCollection
from dayflow_hrms.sync.reader import MirrorReader


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO))

    container = build_container(db_config=dict(settings.DB_CONFIG), mirror_data_dir=settings.MIRROR_DATA_DIR)
    result = container.mirror_engine.sync_all()
    reader = MirrorReader(settings.MIRROR_DATA_DIR)
    for name in MirrorCollection:
        print(f"{name.value}.json: {len(reader.read(name))} records")
    if not result.success:
        print(f"FAILED: {result.error}")
        return 1
    print(f"OK: Mirror written to {settings.MIRROR_DATA_DIR} {result.counts}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
