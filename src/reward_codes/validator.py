# SPDX-License-Identifier: MIT
"""Authenticity checks for decoded reward codes.

These helpers never touch external state. A mismatch is a normal negative
outcome reported as ``False``; callers are responsible for rate limiting
repeated failures.
"""

from __future__ import annotations

import hmac
from typing import Sequence, Union

import logfire

from . import authenticator
from .canonical import Identity, validation_string
from .constants import DIGEST_SIZE
from .models import CodePayload

Requirement = Union[int, Sequence[Sequence[int]], None]


def required_bytes(payload: CodePayload, required: Requirement) -> int:
    """Resolve ``required`` to a byte count for ``payload``.

    ``required`` may be an absolute byte count, a truncation policy looked up
    against the payload currency, or ``None`` for the full digest.
    """
    if required is None:
        return DIGEST_SIZE
    if isinstance(required, int):
        return required
    return authenticator.get_required_length(payload.currency, required)


def meets_required_length(payload: CodePayload, required: Requirement) -> bool:
    """Return ``True`` when the embedded hash carries enough bytes."""
    if payload.hash_byte_length is None:
        return False
    return payload.hash_byte_length >= required_bytes(payload, required)


def check_hash(
    payload: CodePayload,
    key: str,
    required: Requirement,
    identity: Identity | None = None,
) -> bool:
    """Return ``True`` when ``payload`` carries a valid hash for ``key``.

    Args:
        payload: Decoded payload to authenticate.
        key: HMAC key used when the code was generated.
        required: Byte count or truncation policy the hash must satisfy.
        identity: Redeeming user's id; required for id-bound codes.

    Returns:
        ``True`` on an exact, case-insensitive match of the expected hash.

    Raises:
        TypeError: If ``payload`` is id-bound and ``identity`` is missing.
    """
    message = validation_string(payload, identity)
    if not payload.hash:
        return False
    expected = authenticator.authenticate(
        message, key, required_bytes(payload, required)
    ).upper()
    presented = payload.hash[: len(expected)].upper()
    matched = hmac.compare_digest(expected, presented)
    if not matched:
        logfire.debug("Reward code hash mismatch", kind=payload.kind.name)
    return matched


__all__ = ["Requirement", "check_hash", "meets_required_length", "required_bytes"]
