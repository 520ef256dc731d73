"""Facade that turns a raw utterance into the instruction sent to the model."""

from __future__ import annotations
import logging
from typing import Optional, Sequence

from ..models import RoutingPolicy
from . import perspectives as _perspectives
from .perspectives import DEFAULT_PERSPECTIVES, PLACEHOLDER

logger = logging.getLogger(__name__)

DEFAULT_ASSISTANT_NAME = "PerspectiveX"
DEFAULT_ATTRIBUTION = "I was created by the PerspectiveX team."


class DefaultPromptRouter:
    """
    Builds the final instruction by substituting the utterance verbatim into a
    fixed template. No local classification happens here: the rules are
    embedded in the text and interpreted by the remote model, which may or may
    not comply.
    """

    def __init__(
        self,
        *,
        policy: RoutingPolicy = RoutingPolicy.RULE_GATED,
        perspectives: Optional[Sequence[str]] = None,
        assistant_name: str = DEFAULT_ASSISTANT_NAME,
        attribution: str = DEFAULT_ATTRIBUTION,
    ) -> None:
        perspectives = tuple(perspectives or DEFAULT_PERSPECTIVES)
        if len(perspectives) != 5 or len(set(perspectives)) != 5:
            raise ValueError("Exactly five distinct perspectives are required.")
        self.policy = policy
        self.perspectives = perspectives
        if policy == RoutingPolicy.ALWAYS_PERSPECTIVES:
            self.template = _perspectives.always_perspectives_template(
                assistant_name=assistant_name, perspectives=perspectives
            )
        else:
            self.template = _perspectives.rule_gated_template(
                assistant_name=assistant_name,
                attribution=attribution,
                perspectives=perspectives,
            )

    def route(self, raw_utterance: str) -> str:
        instruction = self.template.replace(PLACEHOLDER, raw_utterance, 1)
        logger.debug(
            "Routed utterance with policy=%s (%d chars)",
            self.policy.value,
            len(instruction),
        )
        return instruction


__all__ = [
    "DEFAULT_ASSISTANT_NAME",
    "DEFAULT_ATTRIBUTION",
    "DEFAULT_PERSPECTIVES",
    "DefaultPromptRouter",
]
