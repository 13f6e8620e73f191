# SPDX-License-Identifier: MIT
"""Generate reward code strings and decode them back into payloads.

Code layouts (segments joined by ``-``)::

    public:        [label] currency [limit] P<HASH>
    name-bound:    [label] username currency N<HASH>
    id-bound:      [label] currency I<HASH>

Decoding is purely syntactic. A decoded payload has not been authenticated;
pass it to :func:`reward_codes.validator.check_hash` before trusting it.
"""

from __future__ import annotations

from typing import Mapping, NamedTuple, Sequence

import logfire

from . import authenticator
from .canonical import Identity, validation_string
from .constants import SEGMENT_SEPARATOR
from .errors import CodeFormatError, DecodeErrorKind
from .models import (
    CodeKind,
    CodePayload,
    GenerateOptions,
    TruncationPolicy,
    is_integer_text,
)

MIN_SEGMENTS = 2
MAX_SEGMENTS = 4

_KIND_TAGS = {kind.tag: kind for kind in CodeKind}


class _Layout(NamedTuple):
    """Field names for the leading segments of a code.

    ``leading_integer`` restricts the layout to codes whose first segment is
    (``True``) or is not (``False``) integer shaped; ``None`` matches both.
    """

    fields: tuple[str, ...]
    leading_integer: bool | None = None


# Keyed by (kind, total segment count including the hash segment). Entries are
# tried in order; a missing key is a size error.
DECODE_TABLE: Mapping[tuple[CodeKind, int], tuple[_Layout, ...]] = {
    (CodeKind.PUBLIC, 4): (_Layout(("label", "currency", "limit")),),
    (CodeKind.PUBLIC, 3): (
        _Layout(("currency", "limit"), leading_integer=True),
        _Layout(("label", "currency"), leading_integer=False),
    ),
    (CodeKind.PUBLIC, 2): (_Layout(("currency",)),),
    (CodeKind.PERSONAL_BY_NAME, 4): (_Layout(("label", "username", "currency")),),
    (CodeKind.PERSONAL_BY_NAME, 3): (_Layout(("username", "currency")),),
    (CodeKind.PERSONAL_BY_ID, 3): (_Layout(("label", "currency")),),
    (CodeKind.PERSONAL_BY_ID, 2): (_Layout(("currency",)),),
}


def _select_layout(kind: CodeKind, leading: Sequence[str]) -> _Layout:
    count = len(leading) + 1
    layouts = DECODE_TABLE.get((kind, count))
    if layouts is None:
        sizes = [size for table_kind, size in DECODE_TABLE if table_kind is kind]
        if count < min(sizes):
            raise CodeFormatError(DecodeErrorKind.TOO_FEW_PARTS)
        raise CodeFormatError(DecodeErrorKind.TOO_MANY_PARTS)
    numeric = is_integer_text(leading[0])
    for layout in layouts:
        if layout.leading_integer is None or layout.leading_integer is numeric:
            return layout
    raise RuntimeError(f"No decode layout for {kind.name} with {count} segments")


def _parse_kind(segment: str) -> CodeKind:
    tag = segment[:1]
    kind = _KIND_TAGS.get(tag.lower()) if tag.isascii() else None
    if kind is None:
        raise CodeFormatError(DecodeErrorKind.INVALID_KIND_TAG, repr(tag))
    return kind


def _parse_hash(text: str) -> int:
    if not text:
        raise CodeFormatError(DecodeErrorKind.INVALID_HASH, "hash too small")
    try:
        byte_length = authenticator.parse(text)
    except ValueError as exc:
        raise CodeFormatError(DecodeErrorKind.INVALID_HASH, str(exc)) from exc
    if byte_length == 0:
        raise CodeFormatError(DecodeErrorKind.INVALID_HASH, "hash too small")
    return byte_length


def _parse_number(text: str, error: DecodeErrorKind) -> int:
    if not is_integer_text(text):
        raise CodeFormatError(error, repr(text))
    try:
        return int(text)
    except ValueError:
        # Beyond the interpreter's integer string conversion limit.
        raise CodeFormatError(error, f"{len(text)} digits") from None


def decode(code: str) -> CodePayload:
    """Return the untrusted payload described by ``code``.

    Args:
        code: Code string as shared with users.

    Returns:
        Payload with ``hash`` lowercased and ``hash_byte_length`` populated.

    Raises:
        CodeFormatError: If ``code`` is not a syntactically valid code.
    """
    parts = code.split(SEGMENT_SEPARATOR)
    if len(parts) < MIN_SEGMENTS:
        raise CodeFormatError(DecodeErrorKind.TOO_FEW_PARTS)
    if len(parts) > MAX_SEGMENTS:
        raise CodeFormatError(DecodeErrorKind.TOO_MANY_PARTS)

    *leading, technical = parts
    kind = _parse_kind(technical)
    # Validate before lowercasing; Unicode case mapping can produce ASCII.
    byte_length = _parse_hash(technical[1:])
    hash_text = technical[1:].lower()

    layout = _select_layout(kind, leading)
    values = dict(zip(layout.fields, leading))

    label = values.get("label")
    username = values.get("username")
    if label == "" or username == "":
        raise CodeFormatError(DecodeErrorKind.EMPTY_SEGMENT)
    if label is not None and is_integer_text(label):
        raise CodeFormatError(DecodeErrorKind.LABEL_IS_INTEGER, repr(label))
    currency = _parse_number(values["currency"], DecodeErrorKind.INVALID_CURRENCY)
    limit_text = values.get("limit")
    limit = (
        _parse_number(limit_text, DecodeErrorKind.INVALID_LIMIT)
        if limit_text is not None
        else None
    )

    payload = CodePayload(
        kind=kind,
        label=label,
        currency=currency,
        limit=limit,
        username=username,
        hash=hash_text,
        hash_byte_length=byte_length,
    )
    logfire.debug(
        "Decoded reward code",
        kind=kind.name,
        segments=len(parts),
        hash_bytes=byte_length,
    )
    return payload


def generate(
    payload: CodePayload,
    key: str,
    policy: TruncationPolicy | Sequence[Sequence[int]] | None = None,
    identity: Identity | None = None,
) -> str:
    """Return the shareable code string for ``payload``.

    Args:
        payload: Payload to issue. Any existing ``hash`` is ignored.
        key: HMAC key.
        policy: Truncation policy selecting the hash length by currency.
        identity: User id for id-bound codes; hashed but never shown.

    Returns:
        Dash-delimited code ending with the uppercase kind tag and hash.

    Raises:
        TypeError: If ``payload`` is id-bound and ``identity`` is missing.
    """
    message = validation_string(payload, identity)
    byte_count = authenticator.get_required_length(payload.currency, policy)
    friendly_hash = authenticator.authenticate(message, key, byte_count)

    visible: list[str] = []
    if payload.label is not None:
        visible.append(payload.label)
    if payload.kind is CodeKind.PERSONAL_BY_NAME and payload.username is not None:
        visible.append(payload.username)
    visible.append(f"{payload.currency:d}")
    if payload.limit is not None:
        visible.append(f"{payload.limit:d}")
    visible.append(payload.kind.tag.upper() + friendly_hash)

    logfire.info(
        "Generated reward code",
        kind=payload.kind.name,
        currency=payload.currency,
        hash_bytes=byte_count,
    )
    return SEGMENT_SEPARATOR.join(visible)


def generate_code(options: GenerateOptions) -> str:
    """Return a code string for validated generation ``options``."""
    with logfire.span("codec.generate_code", attributes={"kind": options.kind.name}):
        return generate(
            options.to_payload(),
            options.key,
            options.policy,
            identity=options.userid,
        )


__all__ = ["DECODE_TABLE", "decode", "generate", "generate_code"]
