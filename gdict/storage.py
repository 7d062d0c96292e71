from __future__ import annotations
import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)

class StorageError(Exception):
    pass

class Storage(Protocol):
    """String key/value store with localStorage semantics."""

    def get_item(self, key: str) -> Optional[str]: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...

class MemoryStorage:
    def __init__(self, items: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)

class JsonFileStorage:
    """All keys in one JSON object on disk, rewritten on every change."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._items: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._items is not None:
            return self._items
        if not self.path.exists():
            self._items = {}
            return self._items
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            # Unreadable file counts as empty; the next write replaces it
            self._items = {}
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            self._items = {}
            raise StorageError(f"Unexpected content in {self.path}")
        self._items = {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}
        return self._items

    def _save(self) -> None:
        tmp_path = self.path.with_suffix('.tmp')
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(self._items, f, ensure_ascii=False, sort_keys=True)
            os.replace(tmp_path, self.path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self._load()[key] = value
        self._save()

    def remove_item(self, key: str) -> None:
        items = self._load()
        if key in items:
            del items[key]
            self._save()
