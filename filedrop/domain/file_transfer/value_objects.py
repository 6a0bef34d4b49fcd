"""
File Transfer Value Objects

Immutable value objects for type safety and validation.
"""

import secrets
import string
from dataclasses import dataclass

from filedrop.domain.errors import EntropySourceError

DEFAULT_TOKEN_BYTES = 8

_HEX_DIGITS = frozenset(string.hexdigits.lower())


class InvalidTransferTokenError(ValueError):
    """Raised when a transfer token is malformed."""
    pass


@dataclass(frozen=True)
class TransferToken:
    """
    Value object representing a validated transfer token.

    A token is the lowercase hex encoding of cryptographically random
    bytes, so its length is always even and non-zero.
    """
    value: str

    def __post_init__(self):
        if not self._is_valid():
            raise InvalidTransferTokenError(
                f"Invalid transfer token: expected lowercase hex, got {self.value!r}"
            )

    def _is_valid(self) -> bool:
        if not self.value or not isinstance(self.value, str):
            return False

        if len(self.value) % 2:
            return False

        return all(c in _HEX_DIGITS for c in self.value)

    @classmethod
    def is_well_formed(cls, value: str, byte_length: int = None) -> bool:
        """
        Check whether a raw string could be a token, without raising.

        Args:
            value: Candidate token string
            byte_length: If given, the token must encode exactly this many bytes

        Returns:
            True if the value is a valid token (of the requested length)
        """
        try:
            token = cls(value)
        except InvalidTransferTokenError:
            return False
        return byte_length is None or len(token.value) == byte_length * 2

    def __str__(self) -> str:
        return self.value


def generate_token(byte_length: int = DEFAULT_TOKEN_BYTES) -> TransferToken:
    """
    Generate a new unguessable transfer token.

    Uses the operating system's CSPRNG through ``secrets``. Uniqueness is not
    guaranteed here; the registry rejects collisions on register.

    Args:
        byte_length: Number of random bytes (token is twice as many hex chars)

    Returns:
        New TransferToken

    Raises:
        ValueError: If byte_length is smaller than 1
        EntropySourceError: If the random source cannot supply bytes
    """
    if byte_length < 1:
        raise ValueError(f"byte_length must be positive, got {byte_length}")

    try:
        raw = secrets.token_bytes(byte_length)
    except (OSError, NotImplementedError) as e:
        raise EntropySourceError("Secure random source unavailable", e) from e

    return TransferToken(raw.hex())
