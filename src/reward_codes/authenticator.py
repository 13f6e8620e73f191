# SPDX-License-Identifier: MIT
"""Keyed hashing and Crockford rendering for reward code authenticators.

A code's authenticator is the HMAC-SHA-256 of its validation string, cut down
to a number of leading bytes chosen by a truncation policy and rendered with
the Crockford base32 alphabet. Smaller rewards get shorter, less secure codes.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Sequence

from .constants import DIGEST_SIZE

CROCKFORD_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_RFC4648_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_TO_CROCKFORD = str.maketrans(_RFC4648_ALPHABET, CROCKFORD_ALPHABET)
_CROCKFORD_VALUES = frozenset(CROCKFORD_ALPHABET)


def sign(message: str, key: str) -> bytes:
    """Return the full HMAC-SHA-256 digest of ``message`` under ``key``."""
    return hmac.new(
        key.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).digest()


def truncate(digest: bytes, byte_count: int | None) -> bytes:
    """Return the leading ``byte_count`` bytes of ``digest``.

    ``None`` keeps the whole digest.
    """
    if byte_count is None:
        return digest
    if byte_count < 1:
        raise ValueError(f"byte_count must be positive, got {byte_count}")
    return digest[:byte_count]


def render(raw: bytes) -> str:
    """Return ``raw`` as uppercase Crockford base32 without padding."""
    # Base32 groups bits identically; only the alphabet differs.
    encoded = base64.b32encode(raw).decode("ascii").rstrip("=")
    return encoded.translate(_TO_CROCKFORD)


def parse(text: str) -> int:
    """Return the number of bytes encoded by the Crockford ``text``.

    Only the alphabet is validated; trailing bits that do not fill a whole
    byte are ignored. Case folding is ASCII only so that no other character
    can map onto the alphabet.

    Raises:
        ValueError: If ``text`` contains a character outside the alphabet.
    """
    for char in text:
        if not char.isascii() or char.upper() not in _CROCKFORD_VALUES:
            raise ValueError(f"Invalid Crockford character: {char!r}")
    return len(text) * 5 // 8


def get_required_length(
    currency: int, policy: Sequence[Sequence[int]] | None
) -> int:
    """Return how many hash bytes a code worth ``currency`` must carry.

    The first requirement whose ceiling is at least ``currency`` wins. When no
    ceiling matches the full digest length is required.
    """
    for ceiling, byte_count in policy or ():
        if currency <= ceiling:
            return byte_count
    return DIGEST_SIZE


def authenticate(message: str, key: str, byte_count: int | None = None) -> str:
    """Return the rendered, truncated authenticator for ``message``."""
    return render(truncate(sign(message, key), byte_count))


__all__ = [
    "CROCKFORD_ALPHABET",
    "authenticate",
    "get_required_length",
    "parse",
    "render",
    "sign",
    "truncate",
]
