from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Checked in order; the first file that yields an API key wins
ENV_FILES = (
    PROJECT_ROOT / '.env.local',
    PROJECT_ROOT / '.env',
    Path(__file__).resolve().parent / '.env',
)

GEMINI_OPENAI_BASE_URL = 'https://generativelanguage.googleapis.com/v1beta/openai/'

@dataclass(frozen=True)
class Settings:
    api_key: Optional[str] = None
    model: str = 'gemini-2.5-flash'
    llm_base_url: str = GEMINI_OPENAI_BASE_URL
    llm_timeout: float = 60.0
    api_url: str = 'http://localhost:3001/api'
    client_timeout: float = 30.0
    state_file: Path = Path.home() / '.gdict' / 'state.json'
    log_level: str = 'INFO'
    port: int = 3001

def load_env_files() -> None:
    for path in ENV_FILES:
        if _api_key_from_env():
            return
        logger.debug("Attempting to load .env from: %s", path)
        load_dotenv(path)

def _api_key_from_env() -> Optional[str]:
    return os.getenv('GEMINI_API_KEY') or os.getenv('API_KEY')

def settings_from_env() -> Settings:
    defaults = Settings()
    return Settings(
        api_key=_api_key_from_env(),
        model=os.getenv('GDICT_MODEL', defaults.model),
        llm_base_url=os.getenv('GDICT_LLM_BASE_URL', defaults.llm_base_url),
        llm_timeout=float(os.getenv('GDICT_LLM_TIMEOUT', defaults.llm_timeout)),
        api_url=os.getenv('GDICT_API_URL', defaults.api_url).rstrip('/'),
        client_timeout=float(os.getenv('GDICT_CLIENT_TIMEOUT', defaults.client_timeout)),
        state_file=Path(os.getenv('GDICT_STATE_FILE', str(defaults.state_file))).expanduser(),
        log_level=os.getenv('GDICT_LOG_LEVEL', defaults.log_level).upper(),
        port=int(os.getenv('PORT', defaults.port)),
    )

@lru_cache(maxsize=1)
def get_settings() -> Settings:
    load_env_files()
    settings = settings_from_env()
    if not settings.api_key:
        logger.error("API_KEY not found in environment variables")
    return settings
