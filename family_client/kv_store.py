"""Local key/value persistence, one string value per key."""

import json
import logging
import os

logger = logging.getLogger(__name__)


class MemoryKeyValueStore:
    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value: str):
        self._data[key] = value


class JsonFileKeyValueStore:
    """Keeps every key in a single JSON object on disk; the whole file is rewritten on each change."""

    def __init__(self, path: str):
        self.path = path

    def _read(self) -> dict:
        if not os.path.isfile(self.path):
            return {}
        try:
            with open(self.path, encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning("Could not read local store %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as fh:
            json.dump(data, fh)
        os.replace(tmp_path, self.path)

    def get(self, key):
        return self._read().get(key)

    def set(self, key, value: str):
        data = self._read()
        data[key] = value
        self._write(data)
