from decimal import Decimal
from unittest.mock import Mock

import pytest
import requests

from showroom.models.vehicle import VehicleType
from showroom.services.ai_description import (
    AIDescriptionService,
    VehicleDescriptionInput,
    build_fallback_description,
    build_prompt,
    format_price,
)
from showroom.services.ai_providers import (
    ChatCompletionProvider,
    GeminiProvider,
    OllamaProvider,
    build_provider,
)
from showroom.utils.ai_config import AIConfig, AIProviderName, UnsupportedProviderError, load_ai_config


@pytest.fixture
def vehicle():
    return VehicleDescriptionInput(
        type=VehicleType.suv,
        brand="Subaru",
        model="Forester",
        year=2021,
        color="Green",
        engine_size="2.5L",
        price=Decimal("28500"),
    )


def make_config(provider: AIProviderName, **overrides) -> AIConfig:
    values = {
        "provider": provider,
        "base_url": "https://ai.example.test/v1",
        "model": "test-model",
        "api_key": "sk-test",
        "timeout": 3.0,
    }
    values.update(overrides)
    return AIConfig(**values)


def make_http(payload=None, error: Exception = None) -> Mock:
    http = Mock(spec=requests.Session)
    if error is not None:
        http.post.side_effect = error
        return http
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    http.post.return_value = response
    return http


def test_prompt_embeds_all_fields(vehicle):
    prompt = build_prompt(vehicle)

    for expected in ["SUV", "Subaru", "Forester", "2021", "Green", "2.5L", "$28,500"]:
        assert expected in prompt
    assert "150-200 words" in prompt


def test_fallback_mentions_vehicle(vehicle):
    text = build_fallback_description(vehicle)

    assert "2021 Subaru Forester" in text
    assert "Green SUV" in text
    assert "$28,500" in text


@pytest.mark.parametrize(
    "price, expected",
    [(Decimal("25000"), "25,000"), (Decimal("25000.00"), "25,000"), (Decimal("1999.5"), "1,999.50"), (950, "950")],
)
def test_format_price(price, expected):
    assert format_price(price) == expected


def test_chat_completion_request_and_response(vehicle):
    http = make_http({"choices": [{"message": {"content": "  Drive the Forester today.  "}}]})
    service = AIDescriptionService(make_config(AIProviderName.groq), http=http)

    assert service.generate_description(vehicle) == "Drive the Forester today."

    url = http.post.call_args.args[0]
    kwargs = http.post.call_args.kwargs
    assert url == "https://ai.example.test/v1/chat/completions"
    assert kwargs["headers"]["Authorization"] == "Bearer sk-test"
    assert kwargs["json"]["model"] == "test-model"
    assert [message["role"] for message in kwargs["json"]["messages"]] == ["system", "user"]
    assert "Forester" in kwargs["json"]["messages"][1]["content"]
    assert kwargs["timeout"] == 3.0


def test_gemini_request_and_response(vehicle):
    http = make_http({"candidates": [{"content": {"parts": [{"text": "A green adventure awaits."}]}}]})
    service = AIDescriptionService(make_config(AIProviderName.gemini, model="gemini-pro"), http=http)

    assert service.generate_description(vehicle) == "A green adventure awaits."

    url = http.post.call_args.args[0]
    kwargs = http.post.call_args.kwargs
    assert url == "https://ai.example.test/v1/models/gemini-pro:generateContent"
    assert kwargs["params"] == {"key": "sk-test"}
    assert "Authorization" not in kwargs["headers"]
    assert kwargs["json"]["contents"][0]["parts"][0]["text"].startswith("You are a professional")


def test_ollama_request_and_response(vehicle):
    http = make_http({"response": "Local model copy."})
    config = make_config(AIProviderName.ollama, base_url="http://localhost:11434", api_key=None)
    service = AIDescriptionService(config, http=http)

    assert service.generate_description(vehicle) == "Local model copy."

    kwargs = http.post.call_args.kwargs
    assert http.post.call_args.args[0] == "http://localhost:11434/api/generate"
    assert kwargs["json"]["stream"] is False
    assert "Authorization" not in kwargs["headers"]


@pytest.mark.parametrize(
    "provider, payload",
    [
        (AIProviderName.grok, {"choices": []}),
        (AIProviderName.grok, {"choices": [{"message": {"content": "   "}}]}),
        (AIProviderName.gemini, {"candidates": [{"content": {"parts": []}}]}),
        (AIProviderName.ollama, {"response": ""}),
        (AIProviderName.ollama, ["not", "an", "object"]),
    ],
)
def test_empty_or_malformed_response_falls_back(vehicle, provider, payload):
    service = AIDescriptionService(make_config(provider), http=make_http(payload))

    assert service.generate_description(vehicle) == build_fallback_description(vehicle)


def test_network_failure_falls_back(vehicle):
    http = make_http(error=requests.ConnectionError("connection refused"))
    service = AIDescriptionService(make_config(AIProviderName.grok), http=http)

    assert service.generate_description(vehicle) == build_fallback_description(vehicle)
    assert http.post.call_count == 1


def test_timeout_falls_back(vehicle):
    http = make_http(error=requests.Timeout("too slow"))
    service = AIDescriptionService(make_config(AIProviderName.grok), http=http)

    assert service.generate_description(vehicle) == build_fallback_description(vehicle)


def test_http_error_status_falls_back(vehicle):
    http = make_http({"error": "unauthorized"})
    http.post.return_value.raise_for_status.side_effect = requests.HTTPError("401 Client Error")
    service = AIDescriptionService(make_config(AIProviderName.groq), http=http)

    assert service.generate_description(vehicle) == build_fallback_description(vehicle)


def test_invalid_json_falls_back(vehicle):
    http = make_http()
    http.post.return_value.json.side_effect = ValueError("Expecting value")
    service = AIDescriptionService(make_config(AIProviderName.openrouter), http=http)

    assert service.generate_description(vehicle) == build_fallback_description(vehicle)


def test_unknown_provider_rejected_at_config_load():
    with pytest.raises(UnsupportedProviderError) as exc_info:
        load_ai_config("skynet", environ={})
    assert "skynet" in str(exc_info.value)


def test_unknown_provider_never_reaches_network(monkeypatch):
    post = Mock()
    monkeypatch.setattr(requests.Session, "post", post)

    with pytest.raises(UnsupportedProviderError):
        AIDescriptionService(load_ai_config("skynet", environ={}))
    post.assert_not_called()


@pytest.mark.parametrize(
    "name, provider_class",
    [
        ("grok", ChatCompletionProvider),
        ("groq", ChatCompletionProvider),
        ("openrouter", ChatCompletionProvider),
        ("gemini", GeminiProvider),
        ("ollama", OllamaProvider),
    ],
)
def test_provider_selection(name, provider_class):
    assert isinstance(build_provider(load_ai_config(name, environ={})), provider_class)


def test_load_ai_config_defaults_and_overrides():
    config = load_ai_config("GROQ", environ={
        "GROQ_API_KEY": "gsk-123",
        "GROQ_MODEL": "llama3-8b",
    })

    assert config.provider == AIProviderName.groq
    assert config.base_url == "https://api.groq.com/openai/v1"
    assert config.model == "llama3-8b"
    assert config.api_key == "gsk-123"

    ollama = load_ai_config("ollama", environ={"OLLAMA_BASE_URL": "http://ollama:11434/"})
    assert ollama.base_url == "http://ollama:11434"
    assert ollama.api_key is None


def test_ai_config_is_immutable():
    config = load_ai_config("grok", environ={})

    with pytest.raises(Exception):
        config.model = "other"
