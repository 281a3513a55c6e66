from __future__ import annotations

import json
import os
import tempfile

from ..core.exceptions import PersistenceError


def serialize(records: list[dict]) -> bytes:
    return json.dumps(records, indent=2, ensure_ascii=False).encode("utf-8")


def write_json_atomic(path: str, records: list[dict]) -> None:
    """Replace ``path`` with the JSON array, or leave the old file untouched.

    Serialization happens before any file is opened; the new content goes to a
    temp file in the same directory and is renamed over the target.
    """
    try:
        payload = serialize(records)
    except (TypeError, ValueError) as e:
        raise PersistenceError(f"Cannot serialize mirror {os.path.basename(path)}: {e}") from e

    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".tmp-", suffix=".json", dir=directory)
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        raise PersistenceError(f"Cannot write mirror {path}: {e}") from e
    finally:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)
