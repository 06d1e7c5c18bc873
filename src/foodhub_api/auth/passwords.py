"""Password hashing with bcrypt (cost factor 10)."""

from passlib.context import CryptContext

BCRYPT_ROUNDS = 10

pwd_context: CryptContext = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    """Salt and hash a plaintext password."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against its stored hash.

    Malformed stored hashes count as a mismatch.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False
