from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import List, Literal, Optional

Theme = Literal['light', 'dark']
TtsAccent = Literal['en-US', 'en-GB']
UiDensity = Literal['14px', '15px', '16px']
SearchStatus = Literal['idle', 'loading', 'success', 'error']
Tab = Literal['dictionary', 'coach']

UNKNOWN_POS = 'Unknown'

class Meaning(BaseModel):
    type: str
    definition_tr: str
    example_en: str
    example_tr: str

class WordFamily(BaseModel):
    noun: Optional[str] = None
    verb: Optional[str] = None
    adjective: Optional[str] = None
    adverb: Optional[str] = None

class IdiomSlang(BaseModel):
    phrase: str
    meaning_tr: str

class DictionaryEntry(BaseModel):
    word: str
    pronunciation: str
    level: str
    frequency_score: int = Field(ge=0, le=100)
    frequency_label: str
    correction: Optional[str] = None
    word_family: Optional[WordFamily] = None
    idioms_slang: List[IdiomSlang] = []
    collocations: List[str] = []
    synonyms: List[str] = []
    meanings: List[Meaning] = []

    @field_validator('idioms_slang', mode='before')
    @classmethod
    def _null_idioms(cls, value):
        # The model may send null for "no idioms"
        return [] if value is None else value

    @property
    def is_resolved(self) -> bool:
        # An empty meanings list is how the model says "no such word"
        return len(self.meanings) > 0

    @property
    def part_of_speech(self) -> str:
        return self.meanings[0].type if self.meanings else UNKNOWN_POS

class WordOfTheDay(BaseModel):
    word: str
    definition_tr: str
    context: str

FALLBACK_WORD_OF_THE_DAY = WordOfTheDay(
    word='Serendipity',
    definition_tr='Mutlu tesadüf',
    context='Finding this app was pure serendipity.',
)

class GrammarError(BaseModel):
    type: str
    error_text: str
    explanation: str
    suggestion: str

class GrammarAnalysis(BaseModel):
    analysis_status: str
    overall_summary: str
    tone: str
    errors: List[GrammarError] = []
    suggested_revision: str

class HistoryItem(BaseModel):
    word: str
    # epoch milliseconds
    timestamp: int
    frequency_score: int
    part_of_speech: str

class FavoriteItem(BaseModel):
    word: str
    part_of_speech: str
    frequency_score: int

class AppSettings(BaseModel):
    theme: Theme = 'light'
    accentColor: str = '#6366F1'
    tts_accent: TtsAccent = 'en-US'
    uiDensity: UiDensity = '14px'
    showMorphology: bool = True
    showFrequency: bool = True
    showIdioms: bool = True

class SearchState(BaseModel):
    status: SearchStatus = 'idle'
    data: Optional[DictionaryEntry] = None
    error: Optional[str] = None

# Request bodies for the proxy. Fields are optional so a missing value
# reaches the handler and gets the 400 the clients expect.
class LookupRequest(BaseModel):
    word: Optional[str] = None

class GrammarRequest(BaseModel):
    text: Optional[str] = None

class GenerateRequest(BaseModel):
    prompt: Optional[str] = None

class GenerateResponse(BaseModel):
    text: str
