"""
Unit tests for the OpenAI generation client.
The SDK client is mocked; no network calls are made.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from openai import OpenAIError

from perspectivex.errors import GenerationError
from perspectivex.models import GenerationSettings
from perspectivex.services.llm_openai import OpenAIGenerationClient


def completion(content, model="gpt-4o-mini"):
    return SimpleNamespace(
        model=model,
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=3),
    )


def make_client(create):
    sdk = MagicMock()
    sdk.chat.completions.create = create
    settings = GenerationSettings(model="gpt-4o-mini", temperature=0.2, max_tokens=256)
    return OpenAIGenerationClient(api_key="", settings=settings, client=sdk), sdk


class TestOpenAIGenerationClient:
    @pytest.mark.asyncio
    async def test_generate_returns_text(self):
        create = AsyncMock(return_value=completion("Hi!"))
        client, _ = make_client(create)

        assert await client.generate("instruction text") == "Hi!"

        create.assert_awaited_once_with(
            model="gpt-4o-mini",
            messages=[{"role": "user", "content": "instruction text"}],
            temperature=0.2,
            max_tokens=256,
        )

    @pytest.mark.asyncio
    async def test_sdk_error_becomes_generation_error(self):
        create = AsyncMock(side_effect=OpenAIError("quota exceeded"))
        client, _ = make_client(create)

        with pytest.raises(GenerationError, match="quota exceeded"):
            await client.generate("x")
        assert create.await_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("content", [None, "", "   "])
    async def test_empty_reply_is_an_error(self, content):
        client, _ = make_client(AsyncMock(return_value=completion(content)))
        with pytest.raises(GenerationError):
            await client.generate("x")

    @pytest.mark.asyncio
    async def test_malformed_response_is_an_error(self):
        client, _ = make_client(AsyncMock(return_value=SimpleNamespace(choices=[])))
        with pytest.raises(GenerationError):
            await client.generate("x")

    def test_missing_api_key(self):
        with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
            OpenAIGenerationClient(api_key="", settings=GenerationSettings(model="m"))

    def test_sdk_retries_disabled(self):
        client = OpenAIGenerationClient(
            api_key="sk-test",
            settings=GenerationSettings(model="m"),
            base_url="https://example.invalid/v1",
        )
        assert client.client.max_retries == 0
        assert str(client.client.base_url).startswith("https://example.invalid/v1")
