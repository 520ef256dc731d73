"""
Purpose: Guardrails for user input.
Content: early, predictable failures before anything is appended or sent.
The utterance itself is passed on verbatim; nothing here rewrites it.
"""

from ..errors import ValidationError


class DefaultSecurity:
    def validate_user_input(self, text: str) -> None:
        if not (text or "").strip():
            raise ValidationError("Please enter a non-empty message.")
