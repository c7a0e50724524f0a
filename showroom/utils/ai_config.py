import enum
import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

from constants import AI_MAX_TOKENS, AI_PROVIDER, AI_REQUEST_TIMEOUT, AI_TEMPERATURE

logger = logging.getLogger(__name__)


class AIProviderName(str, enum.Enum):
    grok = "grok"
    groq = "groq"
    openrouter = "openrouter"
    gemini = "gemini"
    ollama = "ollama"


# provider: (base url, model)
PROVIDER_DEFAULTS = {
    AIProviderName.grok: ("https://api.x.ai/v1", "grok-beta"),
    AIProviderName.groq: ("https://api.groq.com/openai/v1", "mixtral-8x7b-32768"),
    AIProviderName.openrouter: ("https://openrouter.ai/api/v1", "openai/gpt-3.5-turbo"),
    AIProviderName.gemini: ("https://generativelanguage.googleapis.com/v1beta", "gemini-pro"),
    AIProviderName.ollama: ("http://localhost:11434", "llama2"),
}


class UnsupportedProviderError(ValueError):
    pass


class AIConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: AIProviderName
    base_url: str
    model: str
    api_key: Optional[str] = None
    timeout: float = AI_REQUEST_TIMEOUT
    max_tokens: int = AI_MAX_TOKENS
    temperature: float = AI_TEMPERATURE


def load_ai_config(provider: str = None, environ: Mapping[str, str] = None) -> AIConfig:
    """
    Resolve the configuration of a text-generation provider.

    Per provider the environment may override the defaults with
    <PROVIDER>_BASE_URL, <PROVIDER>_MODEL and carry <PROVIDER>_API_KEY.

    @param provider: Provider name, defaults to the AI_PROVIDER setting.
    @param environ: Variables to read, defaults to the process environment.
    @return: The immutable provider configuration.
    @raise UnsupportedProviderError: When the name is not a known provider.
    """
    environ = os.environ if environ is None else environ
    name = (provider or AI_PROVIDER).strip().lower()
    try:
        provider_name = AIProviderName(name)
    except ValueError:
        raise UnsupportedProviderError(
            f"Unsupported AI provider: {name}. "
            f"Expected one of: {', '.join(option.value for option in AIProviderName)}"
        )

    base_url, model = PROVIDER_DEFAULTS[provider_name]
    prefix = provider_name.value.upper()
    config = AIConfig(
        provider=provider_name,
        base_url=environ.get(f"{prefix}_BASE_URL", base_url).rstrip("/"),
        model=environ.get(f"{prefix}_MODEL", model),
        api_key=environ.get(f"{prefix}_API_KEY") or None,
    )
    logger.info(f"AI provider {config.provider.value} selected, model {config.model}")
    return config
