"""On-device key/value storage, the counterpart of the browser's localStorage.

Two backends: a JSON file under the user's home directory (default) and a
local Redis instance. Values are JSON strings, as localStorage holds them.
"""
import json
import logging
import os
import threading
from typing import Dict, Optional

import redis

from config import LOCAL_STORE_BACKEND, LOCAL_STORE_PATH, REDIS_URL
from iwems.exceptions import LocalStoreError


class FileLocalStore:
    """All keys live in one JSON object on disk; every write rewrites the file."""

    def __init__(self, path: str = LOCAL_STORE_PATH):
        self.path = path
        self._lock = threading.Lock()

    @property
    def backend(self) -> str:
        return "file"

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise LocalStoreError(f"Cannot read local storage at {self.path}: {e}") from e

    def _write_all(self, items: Dict[str, str]) -> None:
        directory = os.path.dirname(self.path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            tmp_path = f"{self.path}.tmp"
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(items, f)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise LocalStoreError(f"Cannot write local storage at {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            items = self._read_all()
            items[key] = value
            self._write_all(items)
        logging.debug(f"FileLocalStore: stored key {key} ({len(value)} chars)")

    def remove_item(self, key: str) -> None:
        with self._lock:
            items = self._read_all()
            if items.pop(key, None) is not None:
                self._write_all(items)
        logging.debug(f"FileLocalStore: removed key {key}")


class RedisLocalStore:
    """Keys stored in a Redis instance on this machine, without expiry."""

    def __init__(self, url: str = REDIS_URL, client: Optional[redis.Redis] = None):
        # `decode_responses=True` makes Redis return strings, not bytes.
        self.client = client or redis.from_url(url, decode_responses=True)

    @property
    def backend(self) -> str:
        return "redis"

    def get_item(self, key: str) -> Optional[str]:
        try:
            return self.client.get(key)
        except redis.exceptions.RedisError as e:
            raise LocalStoreError(f"Cannot read key {key} from Redis: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            self.client.set(key, value)
        except redis.exceptions.RedisError as e:
            raise LocalStoreError(f"Cannot write key {key} to Redis: {e}") from e
        logging.debug(f"RedisLocalStore: stored key {key}")

    def remove_item(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.exceptions.RedisError as e:
            raise LocalStoreError(f"Cannot delete key {key} from Redis: {e}") from e
        logging.debug(f"RedisLocalStore: removed key {key}")


def create_local_store(backend: str = LOCAL_STORE_BACKEND):
    if backend == "redis":
        logging.info(f"Using Redis local storage at {REDIS_URL}")
        return RedisLocalStore()
    if backend != "file":
        logging.warning(f"Unknown LOCAL_STORE_BACKEND {backend!r}, using the file backend")
    logging.info(f"Using file local storage at {LOCAL_STORE_PATH}")
    return FileLocalStore()
