"""
DocumentStore — the persisted settings document.

A single JSON object held in memory and rewritten in full on every change.
Exactly one Nebula process owns the file, so the last write wins.
"""
import os
import logging
from pathlib import Path
from typing import Any, Union

import orjson

logger = logging.getLogger("nebula.store")


class DocumentStore:
    """Opaque get/set map persisted as one JSON document."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        self._data: dict[str, Any] = {}
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Read the whole document from disk.

        A missing file is an empty document. An unreadable one is logged and
        replaced by an empty document on the next write.
        """
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            self._data = {}
            return
        try:
            parsed = orjson.loads(raw)
        except orjson.JSONDecodeError as err:
            logger.error("Settings document %s is corrupt: %s", self._path, err)
            self._data = {}
            return
        if not isinstance(parsed, dict):
            logger.error("Settings document %s is not an object", self._path)
            parsed = {}
        self._data = parsed

    def flush(self) -> None:
        """Rewrite the whole document through a temporary file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_bytes(orjson.dumps(self._data, option=orjson.OPT_INDENT_2))
        os.replace(tmp, self._path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.flush()

    def delete(self, key: str) -> None:
        if self._data.pop(key, None) is not None:
            self.flush()

    def __contains__(self, key: object) -> bool:
        return key in self._data
