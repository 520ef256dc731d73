"""
Unit tests for the prompt router templates.
"""

import pytest

from perspectivex.models import RoutingPolicy
from perspectivex.prompts import (
    DEFAULT_ATTRIBUTION,
    DEFAULT_PERSPECTIVES,
    DefaultPromptRouter,
)
from perspectivex.prompts.perspectives import PLACEHOLDER


class TestRuleGatedRouter:
    def test_utterance_is_embedded_verbatim(self, router):
        instruction = router.route("What do people think of carbon taxes?")
        assert instruction.count("What do people think of carbon taxes?") == 1
        assert instruction.rstrip().endswith("What do people think of carbon taxes?")

    def test_placeholder_is_consumed(self, router):
        assert PLACEHOLDER not in router.route("hello")

    def test_rules_in_priority_order(self, router):
        instruction = router.route("hello")
        identity = instruction.index(DEFAULT_ATTRIBUTION)
        greeting = instruction.index("greeting or small talk")
        direct = instruction.index("answer it directly")
        protocol = instruction.index("multi-perspective protocol")
        assert identity < greeting < direct < protocol

    def test_all_perspectives_listed(self, router):
        instruction = router.route("trade wars")
        for nation in DEFAULT_PERSPECTIVES:
            assert nation in instruction
        assert "exactly one short paragraph" in instruction
        assert "Never refuse and never apologize" in instruction

    def test_special_characters_pass_through(self, router):
        raw = "  {braces} $dollar {{USER_PROMPT}} %s \\n  "
        instruction = router.route(raw)
        assert instruction.count(raw) == 1

    def test_no_local_classification(self, router):
        greeting = router.route("hi")
        topic = router.route("elections in Europe")
        assert greeting.rsplit("hi", 1)[0] == topic.rsplit("elections in Europe", 1)[0]

    def test_custom_identity(self):
        router = DefaultPromptRouter(
            assistant_name="Globe", attribution="Globe was built by Ada's team."
        )
        instruction = router.route("who built you?")
        assert "You are Globe" in instruction
        assert "Globe was built by Ada's team." in instruction


class TestAlwaysPerspectivesRouter:
    def test_forces_protocol_without_carve_outs(self):
        router = DefaultPromptRouter(policy=RoutingPolicy.ALWAYS_PERSPECTIVES)
        instruction = router.route("hello")
        assert DEFAULT_ATTRIBUTION not in instruction
        assert "greeting" not in instruction
        assert "whatever the message is about" in instruction
        for nation in DEFAULT_PERSPECTIVES:
            assert nation in instruction
        assert instruction.rstrip().endswith("hello")


class TestPerspectiveConfiguration:
    def test_custom_perspectives(self):
        nations = ["Brazil", "Nigeria", "Japan", "Germany", "Australia"]
        instruction = DefaultPromptRouter(perspectives=nations).route("topic")
        positions = [instruction.index(n) for n in nations]
        assert positions == sorted(positions)

    @pytest.mark.parametrize(
        "nations",
        [
            ["Brazil", "Japan"],
            ["Brazil", "Brazil", "Japan", "Germany", "Chile"],
            ["A", "B", "C", "D", "E", "F"],
        ],
    )
    def test_requires_five_distinct(self, nations):
        with pytest.raises(ValueError):
            DefaultPromptRouter(perspectives=nations)
