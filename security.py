from typing import Optional, Tuple

from passlib.context import CryptContext


# Argon2, salted per hash. Hashes made with older parameters are
# flagged for rehash on the next successful login.
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto"
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def check_password(plain_password: str, hashed_password: str) -> Tuple[bool, Optional[str]]:
    """Verify a password.

    Returns ``(valid, new_hash)``; ``new_hash`` is set when the stored hash
    should be replaced. A stored value passlib cannot identify never matches.
    """
    try:
        return pwd_context.verify_and_update(plain_password, hashed_password)
    except ValueError:
        return False, None
