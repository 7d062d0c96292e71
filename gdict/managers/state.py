from __future__ import annotations
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from ..client import ApiError
from ..schemas import AppSettings, DictionaryEntry, FavoriteItem, HistoryItem, WordOfTheDay
from ..storage import Storage, StorageError

logger = logging.getLogger(__name__)

SETTINGS_KEY = 'gemini_dict_settings'
DENSITY_KEY = 'ui_density'
FAVORITES_KEY = 'gemini_dict_favorites'
HISTORY_KEY = 'gemini_dict_history'
WOTD_DATA_KEY = 'gemini_wotd_data'
WOTD_DATE_KEY = 'gemini_wotd_date'
WELCOME_KEY = 'has_seen_welcome_banner'

HISTORY_LIMIT = 20
DENSITIES = ('14px', '15px', '16px')
LEGACY_FREQUENCY = 50
LEGACY_FAVORITE_POS = '?'
LEGACY_HISTORY_POS = 'Unknown'
NO_FAVORITES_NOTICE = 'No favorites to export.'

DEFAULT_SETTINGS = AppSettings()

M = TypeVar('M', bound=BaseModel)

def _epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)

def decode_items(raw: Any, model: Type[M], legacy: Callable[[str], M]) -> Optional[List[M]]:
    """Decode a stored list as the current item schema, else as bare strings.

    Returns None when the value is neither, which callers treat as no data.
    Decoding already-structured output again yields the same items.
    """
    if not isinstance(raw, list):
        return None
    try:
        return TypeAdapter(List[model]).validate_python(raw)
    except ValidationError:
        pass
    if all(isinstance(item, str) for item in raw):
        return [legacy(item) for item in raw]
    return None

def migrate_favorites(raw: Any) -> Optional[List[FavoriteItem]]:
    return decode_items(raw, FavoriteItem, lambda word: FavoriteItem(
        word=word, part_of_speech=LEGACY_FAVORITE_POS, frequency_score=LEGACY_FREQUENCY,
    ))

def migrate_history(raw: Any, now: datetime) -> Optional[List[HistoryItem]]:
    timestamp = _epoch_ms(now)
    return decode_items(raw, HistoryItem, lambda word: HistoryItem(
        word=word, timestamp=timestamp, frequency_score=LEGACY_FREQUENCY, part_of_speech=LEGACY_HISTORY_POS,
    ))

def merge_settings(stored: Any, density: Optional[str] = None) -> AppSettings:
    """Defaults, overridden key by key by the stored object, then by the density key."""
    merged: Dict[str, Any] = DEFAULT_SETTINGS.model_dump()
    if isinstance(stored, dict):
        for key, value in stored.items():
            if key not in merged:
                continue
            try:
                AppSettings.model_validate({**merged, key: value})
            except ValidationError:
                logger.warning("Ignoring invalid stored setting %s=%r", key, value)
                continue
            merged[key] = value
    if density in DENSITIES:
        merged['uiDensity'] = density
    return AppSettings.model_validate(merged)

class PersistedAppState:
    """Durable client state: settings, favorites, history, word of the day.

    This is the only writer of the storage. Every mutation rewrites the whole
    structure it touches. Read failures are logged and treated as absent data.
    """

    def __init__(
        self,
        storage: Storage,
        clock: Callable[[], datetime] = datetime.now,
        prefers_dark: Callable[[], bool] = lambda: False,
    ):
        self.storage = storage
        self.clock = clock
        self.prefers_dark = prefers_dark
        self.settings: AppSettings = DEFAULT_SETTINGS
        self.favorites: List[FavoriteItem] = []
        self.history: List[HistoryItem] = []
        self.word_of_the_day: Optional[WordOfTheDay] = None

    @classmethod
    def load(
        cls,
        storage: Storage,
        clock: Callable[[], datetime] = datetime.now,
        prefers_dark: Callable[[], bool] = lambda: False,
    ) -> 'PersistedAppState':
        state = cls(storage, clock, prefers_dark)
        state.settings = state._load_settings()
        state.favorites = migrate_favorites(state._read_json(FAVORITES_KEY)) or []
        state.history = (migrate_history(state._read_json(HISTORY_KEY), clock()) or [])[:HISTORY_LIMIT]
        state._save_settings()
        return state

    # ---- storage access ----
    def _read(self, key: str) -> Optional[str]:
        try:
            return self.storage.get_item(key)
        except StorageError as e:
            logger.error("Failed to read %s from storage: %s", key, e)
            return None

    def _read_json(self, key: str) -> Any:
        raw = self._read(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.error("Failed to parse stored %s: %s", key, e)
            return None

    def _read_text(self, key: str) -> Optional[str]:
        # Plain-string keys are written raw; tolerate JSON-quoted values too
        raw = self._read(key)
        if raw is not None and raw.startswith('"'):
            try:
                value = json.loads(raw)
            except ValueError:
                return raw
            return value if isinstance(value, str) else None
        return raw

    def _write(self, key: str, value: str) -> None:
        try:
            self.storage.set_item(key, value)
        except StorageError as e:
            logger.error("Failed to write %s to storage: %s", key, e)

    def _write_json(self, key: str, value: Any) -> None:
        self._write(key, json.dumps(value, ensure_ascii=False))

    def _remove(self, key: str) -> None:
        try:
            self.storage.remove_item(key)
        except StorageError as e:
            logger.error("Failed to remove %s from storage: %s", key, e)

    # ---- settings ----
    def _load_settings(self) -> AppSettings:
        has_stored = self._read(SETTINGS_KEY) is not None
        settings = merge_settings(self._read_json(SETTINGS_KEY), self._read_text(DENSITY_KEY))
        if not has_stored and self.prefers_dark():
            settings = settings.model_copy(update={'theme': 'dark'})
        return settings

    def _save_settings(self) -> None:
        self._write_json(SETTINGS_KEY, self.settings.model_dump())
        self._write(DENSITY_KEY, self.settings.uiDensity)

    def update_settings(self, **changes: Any) -> AppSettings:
        self.settings = AppSettings.model_validate({**self.settings.model_dump(), **changes})
        self._save_settings()
        return self.settings

    # ---- history ----
    def _save_history(self) -> None:
        self._write_json(HISTORY_KEY, [item.model_dump() for item in self.history])

    def add_to_history(self, entry: DictionaryEntry) -> None:
        if not entry.is_resolved:
            return
        key = entry.word.lower()
        kept = [item for item in self.history if item.word.lower() != key]
        item = HistoryItem(
            word=entry.word,
            timestamp=_epoch_ms(self.clock()),
            frequency_score=entry.frequency_score,
            part_of_speech=entry.part_of_speech,
        )
        self.history = [item, *kept][:HISTORY_LIMIT]
        self._save_history()

    def remove_from_history(self, word: str) -> None:
        self.history = [item for item in self.history if item.word != word]
        self._save_history()

    def clear_history(self) -> None:
        self.history = []
        self._remove(HISTORY_KEY)

    # ---- favorites ----
    def _save_favorites(self) -> None:
        self._write_json(FAVORITES_KEY, [item.model_dump() for item in self.favorites])

    def is_favorite(self, word: str) -> bool:
        return any(item.word == word for item in self.favorites)

    def toggle_favorite(self, entry: DictionaryEntry) -> bool:
        """Add the entry's word if absent, remove it if present; return the new membership."""
        if self.is_favorite(entry.word):
            self.favorites = [item for item in self.favorites if item.word != entry.word]
            added = False
        else:
            item = FavoriteItem(
                word=entry.word,
                part_of_speech=entry.part_of_speech,
                frequency_score=entry.frequency_score,
            )
            self.favorites = [item, *self.favorites]
            added = True
        self._save_favorites()
        return added

    def remove_from_favorites(self, word: str) -> None:
        self.favorites = [item for item in self.favorites if item.word != word]
        self._save_favorites()

    def favorites_text(self) -> str:
        return '\n'.join(item.word for item in self.favorites)

    def export_favorites(self, directory: Path, notify: Callable[[str], None]) -> Optional[Path]:
        if not self.favorites:
            notify(NO_FAVORITES_NOTICE)
            return None
        path = Path(directory) / f"gdict_favorites_{self.today()}.txt"
        path.write_text(self.favorites_text(), encoding='utf-8')
        logger.info("Exported %d favorites to %s", len(self.favorites), path)
        return path

    # ---- word of the day ----
    def today(self) -> str:
        return self.clock().date().isoformat()

    async def load_word_of_the_day(self, fetch: Callable[[], Awaitable[WordOfTheDay]]) -> Optional[WordOfTheDay]:
        today = self.today()
        if self._read_text(WOTD_DATE_KEY) == today:
            cached = self._read_json(WOTD_DATA_KEY)
            try:
                self.word_of_the_day = WordOfTheDay.model_validate(cached)
                return self.word_of_the_day
            except ValidationError:
                logger.warning("Cached word of the day is unusable, refetching")
        try:
            word = await fetch()
        except ApiError as e:
            logger.error("Failed to fetch word of the day: %s", e)
            return None
        self._write(WOTD_DATE_KEY, today)
        self._write_json(WOTD_DATA_KEY, word.model_dump())
        self.word_of_the_day = word
        return word

    # ---- welcome banner ----
    def should_show_welcome(self) -> bool:
        return not self._read(WELCOME_KEY)

    def dismiss_welcome(self) -> None:
        self._write(WELCOME_KEY, 'true')
