from __future__ import annotations
import logging
from typing import Any, Dict, Optional

from . import prompts, shapes
from .config import get_settings
from .generator import GenerationError, Generator
from .schemas import FALLBACK_WORD_OF_THE_DAY, DictionaryEntry, GrammarAnalysis, WordOfTheDay

logger = logging.getLogger(__name__)

# Dictionary service backed by the generation service. Each operation builds
# one prompt, makes one call and returns the checked JSON as-is.

class DictionaryService:
    def __init__(self, generator: Generator):
        self.generator = generator

    async def lookup(self, word: str) -> Dict[str, Any]:
        return await self.generator.generate_json(
            prompts.lookup_prompt(word), shapes.DICTIONARY_ENTRY, DictionaryEntry, 'dictionary_entry'
        )

    async def daily_word(self) -> Dict[str, Any]:
        # Decorative feature: never let a model failure reach the caller
        try:
            return await self.generator.generate_json(
                prompts.daily_word_prompt(), shapes.WORD_OF_THE_DAY, WordOfTheDay, 'word_of_the_day'
            )
        except GenerationError as e:
            logger.warning("Daily word generation failed, using fallback: %s", e)
            return FALLBACK_WORD_OF_THE_DAY.model_dump()

    async def check_grammar(self, text: str) -> Dict[str, Any]:
        return await self.generator.generate_json(
            prompts.grammar_prompt(text), shapes.GRAMMAR_ANALYSIS, GrammarAnalysis, 'grammar_analysis'
        )

    async def generate(self, prompt: str) -> str:
        return await self.generator.generate_text(prompt)

_service: Optional[DictionaryService] = None

def get_service() -> DictionaryService:
    global _service
    if _service is None:
        _service = DictionaryService(Generator(get_settings()))
    return _service
