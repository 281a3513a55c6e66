from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required
from ..container import Container
from ..core.exceptions import NotFoundError
from .model import MirrorCollection
from .reader import MirrorReader


def register(app: Flask, container: Container) -> None:
    reader = MirrorReader(container.mirror_engine.data_dir)

    @app.post("/api/sync")
    @admin_required
    def sync_now():
        result = container.mirror_engine.sync_all()
        return jsonify(result.to_dict()), (200 if result.success else 503)

    @app.get("/api/sync/<collection>")
    @admin_required
    def read_mirror(collection: str):
        try:
            name = MirrorCollection(collection)
        except ValueError:
            raise NotFoundError(f"No mirror named {collection}")
        return jsonify(reader.read(name))
