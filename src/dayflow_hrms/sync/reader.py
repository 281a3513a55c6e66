from __future__ import annotations

import json
import logging
import os

from .model import MirrorCollection

logger = logging.getLogger(__name__)


def mirror_path(data_dir: str, name: MirrorCollection) -> str:
    return os.path.join(data_dir, f"{MirrorCollection(name).value}.json")


class MirrorReader:
    """Reads mirror files back. A missing or corrupt file reads as empty."""

    def __init__(self, data_dir: str):
        self._data_dir = data_dir

    def read(self, name: MirrorCollection) -> list[dict]:
        path = mirror_path(self._data_dir, name)
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.info("Mirror file %s does not exist yet", path)
            return []
        except (OSError, ValueError):
            logger.exception("Error reading mirror file %s", path)
            return []
        if not isinstance(data, list):
            logger.error("Mirror file %s does not hold a JSON array", path)
            return []
        return data
