# SPDX-License-Identifier: MIT
"""Deterministic validation strings for reward code payloads.

The validation string is the only input to the authenticator. It is always
lowercase and joins the present parts with ``-`` in a fixed order::

    [label] [identity, personal codes only] currency [limit] kind-tag

The identity of an id-bound code is never stored in the payload; callers pass
it in when validating.
"""

from __future__ import annotations

from .constants import SEGMENT_SEPARATOR
from .models import CodeKind, CodePayload

Identity = int | str


def render_identity(identity: object) -> str:
    """Return ``identity`` as text suitable for hashing and comparison.

    Raises:
        TypeError: If ``identity`` is missing or not a string or integer.
    """
    if identity is None:
        raise TypeError("An identity is required for id-bound codes")
    if isinstance(identity, bool) or not isinstance(identity, (int, str)):
        raise TypeError(
            "Expected str or int identity, got "
            f"{type(identity).__name__} ({identity!r})"
        )
    if isinstance(identity, int):
        return f"{identity:d}"
    return identity


def _bound_identity(payload: CodePayload, identity: object) -> str | None:
    if payload.kind is CodeKind.PUBLIC:
        return None
    if payload.kind is CodeKind.PERSONAL_BY_NAME:
        return payload.username
    return render_identity(identity)


def validation_string(payload: CodePayload, identity: Identity | None = None) -> str:
    """Return the canonical lowercase string authenticated for ``payload``.

    Args:
        payload: Code payload to encode.
        identity: User identity for id-bound codes. Ignored for other kinds.

    Returns:
        Hyphen-joined, lowercase validation string.

    Raises:
        TypeError: If ``payload`` is id-bound and ``identity`` is missing.
    """
    parts: list[str] = []
    if payload.label is not None:
        parts.append(payload.label)
    bound = _bound_identity(payload, identity)
    if bound is not None:
        parts.append(bound)
    parts.append(f"{payload.currency:d}")
    if payload.limit is not None:
        parts.append(f"{payload.limit:d}")
    parts.append(payload.kind.tag)
    return SEGMENT_SEPARATOR.join(part.lower() for part in parts)


__all__ = ["Identity", "render_identity", "validation_string"]
