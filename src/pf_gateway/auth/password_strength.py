"""Password strength scoring on a 0..4 scale.

Registration treats this as a black box: scores below
settings.PASSWORD_MIN_SCORE are rejected as weak.

  0  shorter than 8 characters, or a well-known password
  1  contains the user's own name / e-mail, or is built from <= 3 distinct chars
  2+ one point per character class beyond the first, plus length bonuses
     at 12 and 16 characters, capped at 4
"""

import re
from collections.abc import Iterable

MIN_LENGTH = 8

_CHARACTER_CLASSES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"\d"),
    re.compile(r"[^a-zA-Z0-9]"),
)

_COMMON_PASSWORDS = frozenset(
    {
        "password",
        "password1",
        "passw0rd",
        "12345678",
        "123456789",
        "1234567890",
        "qwertyuiop",
        "qwerty123",
        "iloveyou",
        "letmein1",
        "welcome1",
        "sunshine",
        "football",
        "baseball",
        "11111111",
        "abc12345",
    }
)


def score_password(password: str, user_inputs: Iterable[str] = ()) -> int:
    if len(password) < MIN_LENGTH:
        return 0

    lowered = password.lower()
    if lowered in _COMMON_PASSWORDS:
        return 0

    for value in user_inputs:
        fragment = value.strip().lower()
        if len(fragment) >= 3 and fragment in lowered:
            return 1

    if len(set(password)) <= 3:
        return 1

    classes = sum(1 for pattern in _CHARACTER_CLASSES if pattern.search(password))
    score = classes - 1
    if len(password) >= 12:
        score += 1
    if len(password) >= 16:
        score += 1
    return max(0, min(score, 4))
