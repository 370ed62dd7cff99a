"""Password hashing utilities.

Uses bcrypt for secure password hashing. bcrypt automatically handles
salting and is resistant to rainbow table attacks. The work factor comes
from settings.bcrypt_rounds (12 → ~100ms per hash on modern hardware).
Both functions are pure and safe to call concurrently.
"""

from typing import Optional

import bcrypt

from taskhub.config import settings

# bcrypt only looks at the first 72 bytes of the secret.
_MAX_BYTES = 72


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password with bcrypt.

    bcrypt includes a random salt automatically and produces hashes
    starting with "$2b$". Passwords are truncated to 72 bytes.
    """
    pw_bytes = password.encode("utf-8")[:_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash.

    bcrypt.checkpw compares digests in constant time. A malformed stored
    hash verifies as False rather than raising.
    """
    try:
        pw_bytes = password.encode("utf-8")[:_MAX_BYTES]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False
