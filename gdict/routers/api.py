from __future__ import annotations
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..dictionary import DictionaryService, get_service
from ..generator import GenerationError
from ..schemas import GenerateRequest, GenerateResponse, GrammarRequest, LookupRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api')

def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({'error': message}, status_code=status_code)

@router.post('/lookup')
async def lookup(body: Optional[LookupRequest] = None, service: DictionaryService = Depends(get_service)):
    word = (body.word or '').strip() if body else ''
    if not word:
        return error_response(400, 'Word is required')
    try:
        return await service.lookup(word)
    except GenerationError as e:
        logger.error("Error in /api/lookup: %s", e)
        return error_response(500, str(e))

@router.get('/daily-word')
async def daily_word(service: DictionaryService = Depends(get_service)):
    return await service.daily_word()

@router.post('/grammar')
async def grammar(body: Optional[GrammarRequest] = None, service: DictionaryService = Depends(get_service)):
    text = body.text if body else None
    if not text or not text.strip():
        return error_response(400, 'Text is required')
    try:
        return await service.check_grammar(text)
    except GenerationError as e:
        logger.error("Error in /api/grammar: %s", e)
        return error_response(500, str(e))

@router.post('/generate')
async def generate(body: Optional[GenerateRequest] = None, service: DictionaryService = Depends(get_service)):
    prompt = body.prompt if body else None
    if not prompt or not prompt.strip():
        return error_response(400, 'Prompt is required')
    try:
        text = await service.generate(prompt)
    except GenerationError as e:
        logger.error("Error in /api/generate: %s", e)
        return error_response(500, str(e))
    return GenerateResponse(text=text)
