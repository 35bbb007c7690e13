"""Password hashing with bcrypt.

bcrypt only looks at the first 72 bytes of its input, so longer passwords
are rejected up front instead of being silently truncated. The work factor
comes from settings.BCRYPT_ROUNDS.
"""

import bcrypt

from config.settings import settings

MAX_PASSWORD_BYTES = 72

# Verified against when the e-mail is unknown, so a failed login costs the
# same bcrypt work whether or not the account exists.
_DUMMY_HASH = bcrypt.hashpw(b"no-such-account", bcrypt.gensalt(settings.BCRYPT_ROUNDS))


def password_too_long(plain: str) -> bool:
    return len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(plain: str) -> str:
    """Return the utf-8 bcrypt hash of plain."""
    salt = bcrypt.gensalt(settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Check plain against hashed. A malformed stored hash counts as a mismatch."""
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def dummy_verify(plain: str) -> None:
    """Spend one bcrypt comparison without an account to compare against."""
    bcrypt.checkpw(plain.encode("utf-8"), _DUMMY_HASH)
