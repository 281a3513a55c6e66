from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database

from ..core.constants import DEFAULT_STORE_TIMEOUT_MS


@dataclass
class DBConfig:
    uri: str
    database: str
    timeout_ms: int = DEFAULT_STORE_TIMEOUT_MS


class DatabaseConnection:
    """Lazy MongoDB client owner.

    Note: MongoClient keeps its own connection pool and is safe to share across
    request threads, so one instance lives in the container.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._client: Optional[MongoClient] = None

    @property
    def config(self) -> DBConfig:
        return self._config

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            self._client = MongoClient(
                self._config.uri,
                serverSelectionTimeoutMS=int(self._config.timeout_ms),
                socketTimeoutMS=45000,
                tz_aware=False,
            )
        return self._client

    def database(self) -> Database:
        return self.client[self._config.database]

    def ping(self) -> None:
        self.client.admin.command("ping")

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
