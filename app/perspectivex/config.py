from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from .models import ArchiveOrder, GenerationSettings, RoutingPolicy
from .prompts import DEFAULT_ASSISTANT_NAME, DEFAULT_ATTRIBUTION, DEFAULT_PERSPECTIVES
from .persistence.archive import DEFAULT_STORAGE_KEY


load_dotenv()


def _split_csv(value: Optional[str]) -> tuple[str, ...]:
    if not value:
        return DEFAULT_PERSPECTIVES
    return tuple(p.strip() for p in value.split(",") if p.strip())


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    def __init__(self) -> None:
        self.openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
        self.model: str = os.getenv("PERSPECTIVEX_MODEL", "gpt-4o-mini")
        self.base_url: Optional[str] = os.getenv("PERSPECTIVEX_BASE_URL") or None
        self.temperature: float = float(os.getenv("PERSPECTIVEX_TEMPERATURE", "0.7"))
        self.max_tokens: int = int(os.getenv("PERSPECTIVEX_MAX_TOKENS", "1024"))

        self.data_dir: str = os.getenv("PERSPECTIVEX_DATA_DIR", "./data")
        self.storage_key: str = os.getenv("PERSPECTIVEX_STORAGE_KEY", DEFAULT_STORAGE_KEY)
        self.archive_order = ArchiveOrder(
            os.getenv("PERSPECTIVEX_ARCHIVE_ORDER", ArchiveOrder.NEWEST_FIRST.value)
        )

        self.routing_policy = RoutingPolicy(
            os.getenv("PERSPECTIVEX_ROUTING_POLICY", RoutingPolicy.RULE_GATED.value)
        )
        self.perspectives: tuple[str, ...] = _split_csv(
            os.getenv("PERSPECTIVEX_PERSPECTIVES")
        )
        self.assistant_name: str = os.getenv(
            "PERSPECTIVEX_ASSISTANT_NAME", DEFAULT_ASSISTANT_NAME
        )
        self.attribution: str = os.getenv("PERSPECTIVEX_ATTRIBUTION", DEFAULT_ATTRIBUTION)

        self.log_level: str = os.getenv("PERSPECTIVEX_LOG_LEVEL", "INFO")

    def generation_settings(self) -> GenerationSettings:
        return GenerationSettings(
            model=self.model,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
