from __future__ import annotations
import json
import logging
from typing import Any, Dict, Optional, Type

from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from .config import Settings
from .shapes import Shape

logger = logging.getLogger(__name__)

class GenerationError(Exception):
    """The generation service failed or returned nothing usable."""

class MalformedOutputError(GenerationError):
    """The service answered, but not with JSON of the requested shape."""

class Generator:
    """Single-shot calls to a chat-completions style generation service.

    The service is reached through the OpenAI client; by default it points at
    Gemini's OpenAI-compatible endpoint. There is no retry: one failed call is
    a failed request.
    """

    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.settings.api_key:
                raise GenerationError("API Key is missing")
            self._client = AsyncOpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.llm_base_url,
                timeout=self.settings.llm_timeout,
                max_retries=0,
            )
        return self._client

    async def generate_text(self, prompt: str, shape: Optional[Shape] = None, name: str = 'response') -> str:
        kwargs: Dict[str, Any] = {}
        if shape is not None:
            kwargs['response_format'] = {
                'type': 'json_schema',
                'json_schema': {'name': name, 'schema': shape.to_json_schema()},
            }
        model = self.settings.model
        logger.info("Calling generation service with model: %s", model)
        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{'role': 'user', 'content': prompt}],
                **kwargs,
            )
        except OpenAIError as e:
            logger.error("Generation service error: %s", e)
            raise GenerationError(str(e)) from e
        text = response.choices[0].message.content if response.choices else None
        if not text:
            raise GenerationError("No response from AI")
        logger.info("Generation service response received (%d chars)", len(text))
        return text

    async def generate_json(self, prompt: str, shape: Shape, model: Type[BaseModel], name: str) -> Dict[str, Any]:
        text = await self.generate_text(prompt, shape, name)
        return parse_output(text, model)

def parse_output(text: str, model: Type[BaseModel]) -> Dict[str, Any]:
    """Decode a JSON reply and check it against the model the client parses with.

    The decoded JSON is returned untouched; the model is only the gate.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedOutputError(f"Model output is not valid JSON: {e}") from e
    try:
        model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        where = '.'.join(str(part) for part in first['loc']) or '$'
        raise MalformedOutputError(f"Model output does not match the expected shape: {where}: {first['msg']}") from e
    return data
