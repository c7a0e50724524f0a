from typing import Any, Optional

from pydantic import BaseModel

from showroom.utils.ai_config import AIConfig, AIProviderName, UnsupportedProviderError

SYSTEM_PROMPT = (
    "You are a professional automotive sales copywriter specializing in creating "
    "compelling vehicle descriptions that drive sales."
)
SHORT_SYSTEM_PROMPT = "You are a professional automotive sales copywriter."


class ProviderRequest(BaseModel):
    url: str
    headers: dict[str, str] = {}
    params: dict[str, str] = {}
    json_body: dict[str, Any]


class AIProvider:
    """
    One request/response envelope of a text-generation API.

    Subclasses turn a prompt into the HTTP request their API expects and pull
    the generated text back out of the decoded JSON response.
    """

    def __init__(self, config: AIConfig):
        self.config = config

    def build_request(self, prompt: str) -> ProviderRequest:
        raise NotImplementedError

    def parse_response(self, data: Any) -> Optional[str]:
        raise NotImplementedError

    def _json_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers


class ChatCompletionProvider(AIProvider):
    """OpenAI-compatible chat completions, used by grok, groq and openrouter."""

    def build_request(self, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            url=f"{self.config.base_url}/chat/completions",
            headers=self._json_headers(),
            json_body={
                "model": self.config.model,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                "max_tokens": self.config.max_tokens,
                "temperature": self.config.temperature,
            },
        )

    def parse_response(self, data: Any) -> Optional[str]:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            return None
        return _clean(content)


class GeminiProvider(AIProvider):
    def build_request(self, prompt: str) -> ProviderRequest:
        params = {"key": self.config.api_key} if self.config.api_key else {}
        return ProviderRequest(
            url=f"{self.config.base_url}/models/{self.config.model}:generateContent",
            headers={"Content-Type": "application/json"},
            params=params,
            json_body={
                "contents": [{"parts": [{"text": f"{SHORT_SYSTEM_PROMPT} {prompt}"}]}],
                "generationConfig": {
                    "maxOutputTokens": self.config.max_tokens,
                    "temperature": self.config.temperature,
                },
            },
        )

    def parse_response(self, data: Any) -> Optional[str]:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
        return _clean(text)


class OllamaProvider(AIProvider):
    def build_request(self, prompt: str) -> ProviderRequest:
        return ProviderRequest(
            url=f"{self.config.base_url}/api/generate",
            headers=self._json_headers(),
            json_body={
                "model": self.config.model,
                "prompt": f"{SHORT_SYSTEM_PROMPT} {prompt}",
                "stream": False,
                "options": {
                    "num_predict": self.config.max_tokens,
                    "temperature": self.config.temperature,
                },
            },
        )

    def parse_response(self, data: Any) -> Optional[str]:
        if not isinstance(data, dict):
            return None
        return _clean(data.get("response"))


PROVIDER_CLASSES: dict[AIProviderName, type[AIProvider]] = {
    AIProviderName.grok: ChatCompletionProvider,
    AIProviderName.groq: ChatCompletionProvider,
    AIProviderName.openrouter: ChatCompletionProvider,
    AIProviderName.gemini: GeminiProvider,
    AIProviderName.ollama: OllamaProvider,
}


def build_provider(config: AIConfig) -> AIProvider:
    provider_class = PROVIDER_CLASSES.get(config.provider)
    if provider_class is None:
        raise UnsupportedProviderError(f"Unsupported AI provider: {config.provider}")
    return provider_class(config)


def _clean(text: Any) -> Optional[str]:
    if not isinstance(text, str):
        return None
    return text.strip() or None
