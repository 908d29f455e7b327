"""Tests for app.services.company_profiler.profile_extractor."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest
from tenacity import wait_none

from app.config import Settings
from app.errors import AiUnavailableError
from app.services.company_profiler.constants import LLM_RETRY_ATTEMPTS
from app.services.company_profiler.profile_extractor import (
    SYSTEM_PROMPT,
    AnthropicProfileExtractor,
    OpenAIProfileExtractor,
    create_profile_extractor,
)


def _mock_openai_client(content) -> MagicMock:
    """Create a mock AsyncOpenAI client whose completion returns *content*."""
    completion = MagicMock()
    completion.choices = [MagicMock(message=MagicMock(content=content))]
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion)
    return client


def _mock_anthropic_client(*texts: str) -> MagicMock:
    message = MagicMock()
    message.content = [MagicMock(type="text", text=t) for t in texts]
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=message)
    return client


def _rate_limit_error() -> openai.RateLimitError:
    request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
    return openai.RateLimitError(
        "Rate limit reached",
        response=httpx.Response(429, request=request),
        body=None,
    )


def _settings(**overrides) -> Settings:
    values = {
        "supabase_url": "http://localhost:54321",
        "supabase_service_key": "key",
        "openai_api_key": None,
        "anthropic_api_key": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.mark.asyncio
class TestOpenAIProfileExtractor:
    async def test_returns_completion_text(self):
        client = _mock_openai_client('{"company_name": "Acme"}')
        ext = OpenAIProfileExtractor(client, "gpt-test")
        text = await ext.complete("https://acme.example/", "Acme makes widgets")
        assert text == '{"company_name": "Acme"}'

    async def test_request_uses_json_mode_and_low_temperature(self):
        client = _mock_openai_client("{}")
        ext = OpenAIProfileExtractor(client, "gpt-test", temperature=0.2)
        await ext.complete("https://acme.example/", "Acme makes widgets")

        call_kwargs = client.chat.completions.create.call_args.kwargs
        assert call_kwargs["model"] == "gpt-test"
        assert call_kwargs["temperature"] == 0.2
        assert call_kwargs["response_format"] == {"type": "json_object"}

        system, user = call_kwargs["messages"]
        assert system == {"role": "system", "content": SYSTEM_PROMPT}
        assert user["role"] == "user"
        assert "Website URL: https://acme.example/" in user["content"]
        assert '"""Acme makes widgets"""' in user["content"]
        assert '"tier2_keywords": string[]' in user["content"]

    async def test_empty_choices_return_none(self):
        completion = MagicMock()
        completion.choices = []
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=completion)
        ext = OpenAIProfileExtractor(client, "gpt-test")
        assert await ext.complete("https://acme.example/", "text") is None

    async def test_sdk_error_becomes_ai_unavailable(self):
        request = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        client = MagicMock()
        client.chat.completions.create = AsyncMock(
            side_effect=openai.APIConnectionError(request=request)
        )
        ext = OpenAIProfileExtractor(client, "gpt-test")

        with pytest.raises(AiUnavailableError) as exc_info:
            await ext.complete("https://acme.example/", "text")
        assert exc_info.value.status_code == 500
        client.chat.completions.create.assert_called_once()

    async def test_rate_limit_is_retried_then_succeeds(self):
        completion = MagicMock()
        completion.choices = [MagicMock(message=MagicMock(content='{"poc": "Jane"}'))]
        client = MagicMock()
        client.chat.completions.create = AsyncMock(
            side_effect=[_rate_limit_error(), _rate_limit_error(), completion]
        )
        ext = OpenAIProfileExtractor(client, "gpt-test")

        with patch.object(OpenAIProfileExtractor._call_llm.retry, "wait", wait_none()):
            text = await ext.complete("https://acme.example/", "text")

        assert text == '{"poc": "Jane"}'
        assert client.chat.completions.create.await_count == 3

    async def test_persistent_rate_limit_becomes_ai_unavailable(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=_rate_limit_error())
        ext = OpenAIProfileExtractor(client, "gpt-test")

        with patch.object(OpenAIProfileExtractor._call_llm.retry, "wait", wait_none()):
            with pytest.raises(AiUnavailableError):
                await ext.complete("https://acme.example/", "text")

        assert client.chat.completions.create.await_count == LLM_RETRY_ATTEMPTS

    async def test_unexpected_errors_propagate(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=RuntimeError("boom"))
        ext = OpenAIProfileExtractor(client, "gpt-test")

        with pytest.raises(RuntimeError):
            await ext.complete("https://acme.example/", "text")


@pytest.mark.asyncio
class TestAnthropicProfileExtractor:
    async def test_joins_text_blocks(self):
        client = _mock_anthropic_client('{"company_name": ', '"Acme"}')
        ext = AnthropicProfileExtractor(client, "claude-test", max_tokens=1234)
        text = await ext.complete("https://acme.example/", "content")
        assert text == '{"company_name": "Acme"}'

        call_kwargs = client.messages.create.call_args.kwargs
        assert call_kwargs["model"] == "claude-test"
        assert call_kwargs["max_tokens"] == 1234
        assert call_kwargs["system"] == SYSTEM_PROMPT


class TestCreateProfileExtractor:
    def test_openai_provider(self):
        ext = create_profile_extractor(_settings(openai_api_key="sk-test"))
        assert isinstance(ext, OpenAIProfileExtractor)
        assert ext.model == "gpt-4.1-mini"
        assert ext.temperature == 0.2

    def test_anthropic_provider(self):
        ext = create_profile_extractor(
            _settings(llm_provider="anthropic", anthropic_api_key="sk-ant-test")
        )
        assert isinstance(ext, AnthropicProfileExtractor)

    def test_missing_key_raises(self):
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            create_profile_extractor(_settings())

    def test_unknown_provider_raises(self):
        with pytest.raises(ValueError, match="Unsupported"):
            create_profile_extractor(_settings(llm_provider="mystery"))
