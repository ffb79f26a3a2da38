"""
Key/value stores backing the session.

DurableStore   → JSON file on disk, survives restarts ("remember me")
EphemeralStore → in-process dict, gone when the console exits

Both expose get/set/remove with string values only.
"""

import json
import threading

from .config import log


class EphemeralStore:
    def __init__(self):
        self._data = {}

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = str(value)

    def remove(self, key):
        self._data.pop(key, None)


class DurableStore:
    """
    Flat JSON object in a single file. Every write rewrites the file.
    A corrupt file reads as empty and is overwritten on the next write.
    """

    def __init__(self, path):
        self._path = path
        self._lock = threading.Lock()

    def _read(self):
        try:
            if not self._path.exists():
                return {}
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Session file %s unreadable: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data):
        if data:
            self._path.write_text(json.dumps(data), encoding="utf-8")
        else:
            self._path.unlink(missing_ok=True)

    def get(self, key):
        with self._lock:
            value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key, value):
        with self._lock:
            data = self._read()
            data[key] = str(value)
            self._write(data)

    def remove(self, key):
        with self._lock:
            data = self._read()
            if key in data:
                del data[key]
                self._write(data)
