import os
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_GEMINI_MODEL = "gemini-2.0-flash-exp"


@lru_cache
def get_env_filename():
    runtime_env = os.getenv("ENV")
    return f".env.{runtime_env}" if runtime_env else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=get_env_filename(), extra="ignore")

    APP_NAME: str = "OpenSCAD Copilot Backend"

    GEMINI_MODEL: str = DEFAULT_GEMINI_MODEL
    GEMINI_TEMPERATURE: float = 0.7

    # Prompt size bounds for the conversation transcript
    HISTORY_WINDOW: int = 4
    HISTORY_CODE_PREVIEW_CHARS: int = 200

    LLM_LOG_ENABLED: bool = True
    LLM_LOG_PATH: Optional[str] = None

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]


@lru_cache
def get_settings():
    return Settings()
