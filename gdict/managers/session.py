from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Literal, Optional

from ..appearance import theme_variables
from ..client import ApiClient
from ..config import Settings, get_settings
from ..schemas import DictionaryEntry, GrammarAnalysis, SearchState, Tab, WordOfTheDay
from ..storage import JsonFileStorage
from .state import PersistedAppState

logger = logging.getLogger(__name__)

SUGGESTED_TAGS = ('Ubiquitous', 'Serendipity', 'Collocation', 'Phrasal Verb')
GENERIC_ERROR = 'An unexpected error occurred. Please try again.'
API_KEY_ERROR = 'API Configuration Error: API Key is missing.'
ANALYSIS_FAILED = 'Analysis failed. Please try again.'

StatusTone = Literal['success', 'critical', 'warning']

def search_error_message(error: Exception) -> str:
    message = str(error)
    if 'API Key' in message:
        return API_KEY_ERROR
    return message or GENERIC_ERROR

def status_tone(status: str) -> StatusTone:
    s = status.lower()
    if 'mükemmel' in s or 'perfect' in s:
        return 'success'
    if 'kritik' in s or 'critical' in s:
        return 'critical'
    return 'warning'

class CoachSession:
    """Writing Coach tab: one grammar analysis at a time."""

    def __init__(self, api: ApiClient):
        self.api = api
        self.input_text = ''
        self.analysis: Optional[GrammarAnalysis] = None
        self.loading = False
        self.error: Optional[str] = None

    @property
    def can_submit(self) -> bool:
        return not self.loading and bool(self.input_text.strip())

    @property
    def tone(self) -> Optional[StatusTone]:
        return status_tone(self.analysis.analysis_status) if self.analysis else None

    async def analyze(self, text: Optional[str] = None) -> Optional[GrammarAnalysis]:
        if text is not None:
            self.input_text = text
        if not self.can_submit:
            return None
        self.loading = True
        self.analysis = None
        self.error = None
        try:
            self.analysis = await self.api.check_grammar(self.input_text)
        except Exception as e:
            logger.error("Grammar analysis failed: %s", e)
            self.error = ANALYSIS_FAILED
        finally:
            self.loading = False
        return self.analysis

class SessionController:
    """In-memory view state and the intents that change it.

    Owns the SearchState. Durable changes go through PersistedAppState, as a
    side effect of a successful lookup or of an explicit user action.
    """

    def __init__(self, api: ApiClient, state: PersistedAppState):
        self.api = api
        self.state = state
        self.search_state = SearchState()
        self.active_tab: Tab = 'dictionary'
        self.sidebar_open = False
        self.settings_open = False
        self.show_welcome_banner = state.should_show_welcome()
        self.coach = CoachSession(api)

    async def start(self) -> Optional[WordOfTheDay]:
        return await self.state.load_word_of_the_day(self.api.get_daily_word)

    # ---- derived flags ----
    @property
    def word_of_the_day(self) -> Optional[WordOfTheDay]:
        return self.state.word_of_the_day

    @property
    def is_loading(self) -> bool:
        return self.search_state.status == 'loading'

    @property
    def show_suggestions(self) -> bool:
        return self.active_tab == 'dictionary' and self.search_state.status == 'idle'

    @property
    def show_word_of_the_day(self) -> bool:
        return self.show_suggestions and self.word_of_the_day is not None

    @property
    def show_result_card(self) -> bool:
        data = self.search_state.data
        return self.search_state.status == 'success' and data is not None and data.is_resolved

    @property
    def did_you_mean(self) -> Optional[str]:
        data = self.search_state.data
        if self.search_state.status == 'success' and data is not None and data.correction:
            return data.correction
        return None

    @property
    def current_is_favorite(self) -> bool:
        data = self.search_state.data
        return data is not None and self.state.is_favorite(data.word)

    def theme_variables(self) -> Dict[str, str]:
        return theme_variables(self.state.settings)

    # ---- search ----
    async def search(self, word: str) -> SearchState:
        word = word.strip()
        # Input is disabled while a lookup is in flight
        if not word or self.is_loading:
            return self.search_state
        if self.active_tab == 'coach':
            self.active_tab = 'dictionary'
        self.search_state = SearchState(status='loading')
        self.sidebar_open = False
        try:
            entry = await self.api.lookup_word(word)
        except Exception as e:
            logger.error("Search for %r failed: %s", word, e)
            self.search_state = SearchState(status='error', error=search_error_message(e))
            return self.search_state
        self.search_state = SearchState(status='success', data=entry)
        if entry.is_resolved:
            self.state.add_to_history(entry)
        return self.search_state

    async def search_correction(self) -> SearchState:
        correction = self.did_you_mean
        if correction is None:
            return self.search_state
        return await self.search(correction)

    async def explore_word_of_the_day(self) -> SearchState:
        if self.word_of_the_day is None:
            return self.search_state
        return await self.search(self.word_of_the_day.word)

    # ---- favorites and history ----
    def toggle_favorite(self, entry: Optional[DictionaryEntry] = None) -> bool:
        entry = entry or self.search_state.data
        if entry is None or not entry.is_resolved:
            return False
        return self.state.toggle_favorite(entry)

    def remove_from_favorites(self, word: str) -> None:
        self.state.remove_from_favorites(word)

    def remove_from_history(self, word: str) -> None:
        self.state.remove_from_history(word)

    def clear_history(self) -> None:
        self.state.clear_history()
        self.settings_open = False

    def export_favorites(self, directory: Path, notify: Callable[[str], None]) -> Optional[Path]:
        return self.state.export_favorites(directory, notify)

    # ---- settings and chrome ----
    def update_settings(self, **changes: Any) -> None:
        self.state.update_settings(**changes)

    def select_tab(self, tab: Tab) -> None:
        self.active_tab = tab

    def open_sidebar(self) -> None:
        self.sidebar_open = True

    def close_sidebar(self) -> None:
        self.sidebar_open = False

    def open_settings(self) -> None:
        self.settings_open = True

    def close_settings(self) -> None:
        self.settings_open = False

    def dismiss_welcome(self) -> None:
        self.show_welcome_banner = False
        self.state.dismiss_welcome()

def create_session(settings: Optional[Settings] = None, prefers_dark: Callable[[], bool] = lambda: False) -> SessionController:
    settings = settings or get_settings()
    api = ApiClient(settings.api_url, timeout=settings.client_timeout)
    state = PersistedAppState.load(JsonFileStorage(settings.state_file), prefers_dark=prefers_dark)
    return SessionController(api, state)
