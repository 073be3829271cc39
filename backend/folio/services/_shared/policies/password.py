"""Password strength policy shared by signup and password change."""

from __future__ import annotations

import re

MIN_PASSWORD_LENGTH = 10
SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'

_LETTER = re.compile(r"[A-Za-z]")
_DIGIT = re.compile(r"\d")
_SPECIAL = re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]")


def password_problems(raw: str) -> list[str]:
    """Return human-readable reasons ``raw`` is rejected (empty when acceptable).

    A password needs at least ``MIN_PASSWORD_LENGTH`` characters and at least
    two of: a letter, a digit, a special character.
    """
    problems: list[str] = []
    if len(raw) < MIN_PASSWORD_LENGTH:
        problems.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long.")
    classes = sum(bool(p.search(raw)) for p in (_LETTER, _DIGIT, _SPECIAL))
    if classes < 2:
        problems.append(
            "Password must combine at least two of: letters, digits, special characters."
        )
    return problems
