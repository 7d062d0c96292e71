from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from .schemas import FALLBACK_WORD_OF_THE_DAY, DictionaryEntry, GrammarAnalysis, WordOfTheDay

logger = logging.getLogger(__name__)

class ApiError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

class ApiClient:
    """Typed access to the GDict backend.

    lookup_word and check_grammar raise ApiError on transport, status and
    parse failures. get_daily_word never raises and falls back to a
    constant entry.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self._transport)

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        try:
            async with self._client() as client:
                response = await client.request(method, path, json=payload)
        except httpx.HTTPError as e:
            raise ApiError(str(e) or type(e).__name__) from e
        if not response.is_success:
            raise ApiError(_error_message(response), response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"Invalid JSON in response from {path}", response.status_code) from e

    async def lookup_word(self, word: str) -> DictionaryEntry:
        try:
            data = await self._request('POST', '/lookup', {'word': word})
            return _parse(DictionaryEntry, data)
        except ApiError as e:
            logger.error("Lookup failed: %s", e)
            raise

    async def get_daily_word(self) -> WordOfTheDay:
        try:
            data = await self._request('GET', '/daily-word')
            return _parse(WordOfTheDay, data)
        except Exception as e:
            # Any failure, transport included, means the fallback
            logger.error("Daily word fetch failed: %s", e)
            return FALLBACK_WORD_OF_THE_DAY.model_copy()

    async def check_grammar(self, text: str) -> GrammarAnalysis:
        try:
            data = await self._request('POST', '/grammar', {'text': text})
            return _parse(GrammarAnalysis, data)
        except ApiError as e:
            logger.error("Grammar check failed: %s", e)
            raise

def _error_message(response: httpx.Response) -> str:
    fallback = f"HTTP error! status: {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and body.get('error'):
        return str(body['error'])
    return fallback

def _parse(model, data: Any):
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ApiError(f"Unexpected response shape for {model.__name__}: {e.error_count()} error(s)") from e
