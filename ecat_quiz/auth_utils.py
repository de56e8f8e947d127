"""Password hashing for user accounts.

Stored ``users.password`` values are bcrypt hashes. Rows written before
hashing was introduced may still hold plaintext; those never verify.
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72

PWD_CONTEXT = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__ident="2b",
    bcrypt__rounds=12,
)


def hash_password(plain_password: str) -> str:
    if len(plain_password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return PWD_CONTEXT.hash(plain_password)


def verify_password(plain_password: str, stored_password: str) -> bool:
    """True when ``plain_password`` matches the stored bcrypt hash."""
    if PWD_CONTEXT.identify(stored_password) is None:
        logger.warning("Stored password is not a recognised hash; refusing login")
        return False
    return PWD_CONTEXT.verify(plain_password, stored_password)
