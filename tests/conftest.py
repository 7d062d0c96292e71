import json
from datetime import datetime
from typing import List, Optional, Union

import pytest
from fastapi.testclient import TestClient

from gdict.config import Settings
from gdict.dictionary import DictionaryService, get_service
from gdict.generator import GenerationError, Generator
from gdict.main import app
from gdict.storage import MemoryStorage

ELEPHANT = {
    'word': 'elephant',
    'correction': 'elephant',
    'pronunciation': '/ˈel.ɪ.fənt/',
    'level': 'A2',
    'frequency_score': 62,
    'frequency_label': 'Common',
    'word_family': {'noun': 'elephant', 'verb': None, 'adjective': 'elephantine', 'adverb': None},
    'idioms_slang': [{'phrase': 'the elephant in the room', 'meaning_tr': 'herkesin bildiği ama konuşmadığı sorun'}],
    'collocations': ['African elephant', 'herd of elephants', 'elephant tusk', 'baby elephant'],
    'synonyms': ['pachyderm'],
    'meanings': [{
        'type': 'noun',
        'definition_tr': 'fil',
        'example_en': 'The elephant raised its trunk.',
        'example_tr': 'Fil hortumunu kaldırdı.',
    }],
}

UNKNOWN_WORD = {
    'word': 'xqzzt',
    'correction': None,
    'pronunciation': '',
    'level': 'C2',
    'frequency_score': 0,
    'frequency_label': 'Unknown',
    'collocations': [],
    'synonyms': [],
    'meanings': [],
}

DAILY_WORD = {
    'word': 'Ephemeral',
    'definition_tr': 'Kısa ömürlü',
    'context': 'Fame on the internet is often ephemeral.',
}

GRAMMAR = {
    'analysis_status': 'Minor Hata',
    'overall_summary': 'Metin anlaşılır ama bir zaman hatası var.',
    'tone': 'Informal',
    'errors': [{
        'type': 'Tense',
        'error_text': 'I go yesterday',
        'explanation': 'Geçmiş zaman gerekir.',
        'suggestion': 'I went yesterday',
    }],
    'suggested_revision': 'I went to school yesterday.',
}

class FakeGenerator(Generator):
    """Plays back canned outputs instead of calling the service."""

    def __init__(self, outputs: Optional[List[Union[str, dict, Exception]]] = None):
        super().__init__(Settings(api_key='test-key'))
        self.outputs = list(outputs or [])
        self.prompts: List[str] = []

    async def generate_text(self, prompt, shape=None, name='response'):
        self.prompts.append(prompt)
        if not self.outputs:
            raise GenerationError("No response from AI")
        output = self.outputs.pop(0)
        if isinstance(output, Exception):
            raise output
        if isinstance(output, dict):
            return json.dumps(output)
        return output

class FixedClock:
    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

@pytest.fixture
def generator():
    return FakeGenerator()

@pytest.fixture
def api(generator):
    app.dependency_overrides[get_service] = lambda: DictionaryService(generator)
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()

@pytest.fixture
def storage():
    return MemoryStorage()

@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 10, 17, 9, 30))
