import os
import logging

import streamlit as st
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from swasthya.application.schemas import GenerationOptions


load_dotenv()

logger = logging.getLogger(__name__)


DEFAULT_MODEL = "mistral-large-latest"


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets when a secrets file exists
    try:
        if name in st.secrets:
            return str(st.secrets.get(name))
    except Exception as e:
        logger.debug("Streamlit secrets unavailable for %s: %s", name, e)
    # Fallback to environment variables
    return os.environ.get(name, default)


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class Settings:
    @property
    def mistral_api_key(self) -> str | None:
        return get_secret("MISTRAL_API_KEY")

    @property
    def mistral_model(self) -> str:
        return get_secret("MISTRAL_MODEL", DEFAULT_MODEL) or DEFAULT_MODEL

    @property
    def temperature(self) -> float:
        return float(get_secret("LLM_TEMPERATURE", "0.7") or 0.7)

    @property
    def max_output_tokens(self) -> int:
        return int(get_secret("LLM_MAX_OUTPUT_TOKENS", "1024") or 1024)

    @property
    def safe_prompt(self) -> bool:
        return _as_bool(get_secret("LLM_SAFE_PROMPT"), True)

    @property
    def app_env(self) -> str:
        return (get_secret("APP_ENV", "production") or "production").lower()

    @property
    def port(self) -> int:
        return int(get_secret("PORT", "3000") or 3000)

    @property
    def log_level(self) -> str:
        return (get_secret("LOG_LEVEL", "INFO") or "INFO").upper()


class ProviderConfig(BaseModel):
    """Everything the provider adapter needs, read once at start-up."""

    model_config = ConfigDict(frozen=True)

    api_key: str | None = None
    model: str = DEFAULT_MODEL
    options: GenerationOptions = GenerationOptions()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderConfig":
        return cls(
            api_key=settings.mistral_api_key,
            model=settings.mistral_model,
            options=GenerationOptions(
                temperature=settings.temperature,
                max_output_tokens=settings.max_output_tokens,
                safety_filters=settings.safe_prompt,
            ),
        )
