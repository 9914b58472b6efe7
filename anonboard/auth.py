import bcrypt

from . import config
from .errors import OperationFailed

# bcrypt only looks at the first 72 bytes; newer releases refuse longer input.
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    """Return a salted one-way bcrypt hash of ``password``.

    The empty string is a valid password.
    """
    try:
        salt = bcrypt.gensalt(config.BCRYPT_ROUNDS)
        return bcrypt.hashpw(_encode(password), salt).decode("ascii")
    except (ValueError, TypeError, AttributeError) as exc:
        raise OperationFailed("password could not be hashed") from exc


def verify_password(password: str, hashed: str) -> bool:
    """Check ``password`` against a stored hash.

    A malformed hash is an operation failure, never a mismatch.
    """
    try:
        return bcrypt.checkpw(_encode(password), hashed.encode("ascii"))
    except (ValueError, TypeError, AttributeError) as exc:
        raise OperationFailed("password hash could not be checked") from exc
