import base64
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

ALGORITHM_TAG = "pbkdf2_sha256"
ITERATIONS = 390000


def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=iterations,
    )


def hash_password(password: str) -> str:
    salt = os.urandom(16)
    key = _kdf(salt, ITERATIONS).derive(password.encode())
    return "$".join([
        ALGORITHM_TAG,
        str(ITERATIONS),
        base64.b64encode(salt).decode(),
        base64.b64encode(key).decode(),
    ])


def verify_hashed_password(password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored hash.

    The comparison is done by PBKDF2HMAC.verify, which is constant time.
    A stored value that does not parse never verifies.
    """
    try:
        tag, iterations, salt_b64, key_b64 = hashed_password.split("$")
        if tag != ALGORITHM_TAG:
            return False
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(key_b64)
        _kdf(salt, int(iterations)).verify(password.encode(), expected)
    except (ValueError, InvalidKey):
        return False
    return True
