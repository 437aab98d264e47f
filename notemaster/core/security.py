"""
Security Utilities.

Password hashing for note locks. Digests are unsalted SHA-256 hex so that
notes locked by earlier releases still verify after migration; a digest is
only ever compared against the one stored on the same note.
"""

import hashlib
import hmac

from notemaster.core.exceptions import ValidationError

DEFAULT_PASSWORD_MIN_LENGTH = 1


def hash_password(password: str) -> str:
    """Hash a password into a lowercase hex SHA-256 digest."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(plain_password: str, digest: str) -> bool:
    """Verify a password against its digest in constant time."""
    return hmac.compare_digest(hash_password(plain_password), digest)


def validate_password(password: str, min_length: int = DEFAULT_PASSWORD_MIN_LENGTH) -> None:
    """
    Reject passwords that are blank or shorter than the minimum length.

    Args:
        password: Plaintext password
        min_length: Minimum length after trimming

    Raises:
        ValidationError: If the password is too short after trimming
    """
    if len(password.strip()) < min_length:
        raise ValidationError(
            "Password too short",
            details={"password": f"Minimum length is {min_length}"},
        )
