import asyncio

import httpx
import pytest

from gdict.client import ApiClient
from gdict.dictionary import DictionaryService, get_service
from gdict.generator import GenerationError
from gdict.main import app
from gdict.managers.session import (
    API_KEY_ERROR, SessionController, search_error_message, status_tone,
)
from gdict.managers.state import PersistedAppState

from conftest import DAILY_WORD, ELEPHANT, GRAMMAR, UNKNOWN_WORD, FakeGenerator

@pytest.fixture
def backend():
    """Session wired to the real proxy app, with the model stubbed out."""
    generator = FakeGenerator()
    app.dependency_overrides[get_service] = lambda: DictionaryService(generator)
    yield generator
    app.dependency_overrides.clear()

@pytest.fixture
def session(backend, storage, clock):
    api = ApiClient('http://gdict.test/api', transport=httpx.ASGITransport(app=app))
    return SessionController(api, PersistedAppState.load(storage, clock=clock))

def test_corrected_lookup_records_corrected_word(session, backend):
    backend.outputs.append(ELEPHANT)
    result = asyncio.run(session.search('eliphant'))
    assert result.status == 'success'
    assert result.data.word == 'elephant'
    assert result.data.correction == 'elephant'
    assert [h.word for h in session.state.history] == ['elephant']
    assert session.show_result_card
    assert session.did_you_mean == 'elephant'

def test_unresolved_word_is_not_recorded_or_shown(session, backend):
    backend.outputs.append(dict(UNKNOWN_WORD, collocations=['a', 'b'], synonyms=['c']))
    result = asyncio.run(session.search('xqzzt'))
    assert result.status == 'success'
    assert session.state.history == []
    assert not session.show_result_card

def test_backend_failure_sets_error_state(session, backend):
    backend.outputs.append(GenerationError('quota exceeded'))
    result = asyncio.run(session.search('cat'))
    assert result.status == 'error'
    assert result.data is None
    assert result.error == 'quota exceeded'
    assert session.state.history == []

def test_missing_api_key_maps_to_configuration_message(session, backend):
    backend.outputs.append(GenerationError('API Key is missing'))
    result = asyncio.run(session.search('cat'))
    assert result.error == API_KEY_ERROR

def test_blank_search_is_ignored(session, backend):
    result = asyncio.run(session.search('   '))
    assert result.status == 'idle'
    assert backend.prompts == []

def test_search_while_loading_is_ignored(session, backend):
    session.search_state = session.search_state.model_copy(update={'status': 'loading'})
    asyncio.run(session.search('cat'))
    assert backend.prompts == []

def test_search_from_coach_switches_tab_and_closes_sidebar(session, backend):
    backend.outputs.append(ELEPHANT)
    session.select_tab('coach')
    session.open_sidebar()
    asyncio.run(session.search('elephant'))
    assert session.active_tab == 'dictionary'
    assert not session.sidebar_open

def test_start_loads_word_of_the_day_once(session, backend, storage, clock):
    backend.outputs.append(DAILY_WORD)
    word = asyncio.run(session.start())
    assert word.word == 'Ephemeral'
    assert session.show_word_of_the_day
    again = SessionController(session.api, PersistedAppState.load(storage, clock=clock))
    asyncio.run(again.start())
    assert len(backend.prompts) == 1
    assert again.word_of_the_day.word == 'Ephemeral'

def test_start_uses_fallback_when_model_fails(session, backend):
    backend.outputs.append(GenerationError('down'))
    word = asyncio.run(session.start())
    assert word.word == 'Serendipity'

def test_explore_word_of_the_day(session, backend):
    backend.outputs.extend([DAILY_WORD, dict(ELEPHANT, word='Ephemeral', correction=None)])
    asyncio.run(session.start())
    result = asyncio.run(session.explore_word_of_the_day())
    assert result.data.word == 'Ephemeral'
    assert not session.show_word_of_the_day

def test_search_correction(session, backend):
    misspelt = dict(UNKNOWN_WORD, word='recieve', correction='receive')
    backend.outputs.extend([misspelt, dict(ELEPHANT, word='receive', correction=None)])
    asyncio.run(session.search('recieve'))
    assert session.did_you_mean == 'receive'
    asyncio.run(session.search_correction())
    assert session.search_state.data.word == 'receive'
    assert [h.word for h in session.state.history] == ['receive']

def test_toggle_favorite_for_current_entry(session, backend):
    backend.outputs.append(ELEPHANT)
    asyncio.run(session.search('elephant'))
    assert session.toggle_favorite() is True
    assert session.current_is_favorite
    assert session.toggle_favorite() is False
    assert session.state.favorites == []

def test_toggle_favorite_without_entry(session):
    assert session.toggle_favorite() is False

def test_clear_history_closes_settings(session, backend):
    backend.outputs.append(ELEPHANT)
    asyncio.run(session.search('elephant'))
    session.open_settings()
    session.clear_history()
    assert session.state.history == []
    assert not session.settings_open

def test_dismiss_welcome(session, storage, clock):
    assert session.show_welcome_banner
    session.dismiss_welcome()
    assert not session.show_welcome_banner
    assert not SessionController(session.api, PersistedAppState.load(storage, clock=clock)).show_welcome_banner

def test_update_settings_changes_theme_variables(session):
    session.update_settings(accentColor='#F43F5E', uiDensity='16px', theme='dark')
    variables = session.theme_variables()
    assert variables['--p-accent-rgb'] == '244, 63, 94'
    assert variables['font-size'] == '16px'
    assert variables['color-scheme'] == 'dark'

def test_coach_analysis(session, backend):
    backend.outputs.append(GRAMMAR)
    analysis = asyncio.run(session.coach.analyze('I go to school yesterday.'))
    assert analysis.suggested_revision == 'I went to school yesterday.'
    assert session.coach.tone == 'warning'
    assert not session.coach.loading
    assert session.coach.error is None

def test_coach_failure(session, backend):
    backend.outputs.append(GenerationError('boom'))
    assert asyncio.run(session.coach.analyze('Hello there')) is None
    assert session.coach.error == 'Analysis failed. Please try again.'
    assert not session.coach.loading

def test_coach_ignores_blank_input(session, backend):
    assert asyncio.run(session.coach.analyze('  \n ')) is None
    assert backend.prompts == []
    assert not session.coach.can_submit

@pytest.mark.parametrize('status, tone', [
    ('Mükemmel', 'success'),
    ('Perfect', 'success'),
    ('Kritik Hata', 'critical'),
    ('Minor Hata', 'warning'),
])
def test_status_tone(status, tone):
    assert status_tone(status) == tone

def test_search_error_message_defaults():
    assert search_error_message(ValueError('')) == 'An unexpected error occurred. Please try again.'
    assert search_error_message(ValueError('Bad things')) == 'Bad things'

def test_unresolved_entry_cannot_be_favorited(session, backend):
    backend.outputs.append(UNKNOWN_WORD)
    asyncio.run(session.search('xqzzt'))
    assert session.toggle_favorite() is False
    assert session.state.favorites == []

def broken_session(storage, clock) -> SessionController:
    def handler(request):
        raise OSError('socket closed')

    api = ApiClient('http://gdict.test/api', transport=httpx.MockTransport(handler))
    return SessionController(api, PersistedAppState.load(storage, clock=clock))

def test_unexpected_lookup_failure_does_not_leave_search_loading(storage, clock):
    session = broken_session(storage, clock)
    result = asyncio.run(session.search('cat'))
    assert result.status == 'error'
    assert result.error == 'socket closed'
    assert not session.is_loading
    # next search still runs instead of being ignored
    asyncio.run(session.search('dog'))
    assert session.search_state.status == 'error'

def test_unexpected_coach_failure_sets_error(storage, clock):
    session = broken_session(storage, clock)
    assert asyncio.run(session.coach.analyze('Hello there')) is None
    assert session.coach.error == 'Analysis failed. Please try again.'
    assert not session.coach.loading
