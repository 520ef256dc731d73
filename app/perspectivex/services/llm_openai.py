"""
Purpose: Thin client wrapper around the OpenAI SDK.
One place for auth, model options and error normalization.

Contract: one outbound request per generate() call. No retries (the SDK's
built-in retry is disabled), no batching, no client-side timeout beyond the
SDK default. Every failure surfaces as GenerationError.

Extensibility:
- Any OpenAI-compatible endpoint works through base_url (e.g. Gemini's
  OpenAI-compatible API).

Testing: Mock the SDK client; assert request shape and error mapping.
"""

from __future__ import annotations
import logging
import time
from typing import Optional

from openai import AsyncOpenAI, OpenAIError

from ..errors import GenerationError
from ..models import GenerationSettings

logger = logging.getLogger(__name__)


class OpenAIGenerationClient:
    def __init__(
        self,
        api_key: str,
        settings: GenerationSettings,
        *,
        base_url: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        if client is None and not api_key:
            raise RuntimeError("Missing OPENAI_API_KEY")
        self.settings = settings
        self.client = client or AsyncOpenAI(
            api_key=api_key, base_url=base_url, max_retries=0
        )

    async def generate(self, instruction: str) -> str:
        start = time.time()
        logger.debug(
            "Generation call starting: model=%s, instruction=%d chars",
            self.settings.model,
            len(instruction),
        )
        try:
            resp = await self.client.chat.completions.create(
                model=self.settings.model,
                messages=[{"role": "user", "content": instruction}],
                temperature=self.settings.temperature,
                max_tokens=self.settings.max_tokens,
            )
        except OpenAIError as e:
            raise GenerationError(f"Generation request failed: {e}") from e

        try:
            text = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise GenerationError("Malformed generation response.") from e
        if not text or not text.strip():
            raise GenerationError("Generation response was empty.")

        usage = getattr(resp, "usage", None)
        logger.debug(
            "Generation call finished: model=%s, tokens_in=%s, tokens_out=%s, %.0fms",
            getattr(resp, "model", self.settings.model),
            getattr(usage, "prompt_tokens", 0) if usage else 0,
            getattr(usage, "completion_tokens", 0) if usage else 0,
            (time.time() - start) * 1000,
        )
        return text
