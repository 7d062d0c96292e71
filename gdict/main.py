from __future__ import annotations
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .config import get_settings
from .log import configure_logging
from .routers.api import router as api_router

configure_logging(get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="GDict API", version="0.1.0")

# CORS for the browser UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.include_router(api_router)

@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    # Clients read `error`, not FastAPI's `detail`
    logger.warning("Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse({'error': 'Invalid request body'}, status_code=400)

@app.get('/', response_class=PlainTextResponse)
async def root() -> str:
    return 'Gdict API is running'

# For local running: uvicorn gdict.main:app --reload --port 3001
