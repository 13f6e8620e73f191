# SPDX-License-Identifier: MIT
"""Tests for hash checks on decoded codes."""

import string

import pytest
from hypothesis import given
from hypothesis import strategies as st

from reward_codes.authenticator import CROCKFORD_ALPHABET
from reward_codes.codec import decode, generate
from reward_codes.models import CodeKind, CodePayload
from reward_codes.validator import check_hash, meets_required_length, required_bytes

KEY = "secret"
POLICY = [(500, 4), (2000, 6), (5000, 8), (10000, 12)]

labels = st.text(
    alphabet=string.ascii_letters + string.digits + "_", min_size=1, max_size=12
).filter(lambda s: not s.isdigit())
names = st.text(alphabet=string.ascii_letters + string.digits, min_size=1, max_size=16)
amounts = st.integers(min_value=1, max_value=50000)


@st.composite
def payloads(draw) -> CodePayload:
    kind = draw(st.sampled_from(list(CodeKind)))
    label = draw(st.one_of(st.none(), labels))
    currency = draw(amounts)
    if kind is CodeKind.PUBLIC:
        limit = draw(st.one_of(st.none(), st.integers(min_value=1, max_value=1000)))
        return CodePayload(kind=kind, label=label, currency=currency, limit=limit)
    if kind is CodeKind.PERSONAL_BY_NAME:
        return CodePayload(
            kind=kind, label=label, currency=currency, username=draw(names)
        )
    return CodePayload(kind=kind, label=label, currency=currency)


@given(payload=payloads(), identity=st.integers(min_value=1, max_value=10**12))
def test_generated_codes_round_trip_and_validate(payload, identity) -> None:
    code = generate(payload, KEY, POLICY, identity=identity)
    decoded = decode(code)
    assert decoded.kind is payload.kind
    assert decoded.label == payload.label
    assert decoded.currency == payload.currency
    assert decoded.limit == payload.limit
    assert decoded.username == payload.username
    assert check_hash(decoded, KEY, POLICY, identity)


@given(
    payload=payloads(),
    position=st.integers(min_value=0),
    replacement=st.sampled_from(CROCKFORD_ALPHABET),
)
def test_tampered_hash_is_rejected(payload, position, replacement) -> None:
    code = generate(payload, KEY, POLICY, identity=7)
    head, tail = code.rsplit("-", 1)
    index = 1 + position % (len(tail) - 1)
    if tail[index] == replacement:
        return
    tampered = f"{head}-{tail[:index]}{replacement}{tail[index + 1:]}"
    assert not check_hash(decode(tampered), KEY, POLICY, 7)


def test_wrong_key_is_rejected() -> None:
    code = generate(CodePayload(kind=CodeKind.PUBLIC, currency=100), KEY, POLICY)
    assert not check_hash(decode(code), "other", POLICY)


def test_hash_comparison_ignores_case() -> None:
    code = generate(CodePayload(kind=CodeKind.PUBLIC, currency=100), KEY, POLICY)
    assert check_hash(decode(code.lower()), KEY, POLICY)


def test_fixed_byte_requirement() -> None:
    code = generate(CodePayload(kind=CodeKind.PUBLIC, currency=100), KEY, POLICY)
    payload = decode(code)
    assert check_hash(payload, KEY, 4)
    assert not check_hash(payload, KEY, 8)


def test_short_hash_fails_higher_requirement() -> None:
    code = generate(CodePayload(kind=CodeKind.PUBLIC, currency=100), KEY, [(100, 2)])
    payload = decode(code)
    assert not check_hash(payload, KEY, POLICY)
    assert not meets_required_length(payload, POLICY)
    assert meets_required_length(payload, 2)


def test_id_bound_code_checks_identity() -> None:
    payload = CodePayload(kind=CodeKind.PERSONAL_BY_ID, currency=10)
    decoded = decode(generate(payload, KEY, POLICY, identity=1234))
    assert check_hash(decoded, KEY, POLICY, 1234)
    assert check_hash(decoded, KEY, POLICY, "1234")
    assert not check_hash(decoded, KEY, POLICY, 4321)


def test_id_bound_code_without_identity_is_a_programming_error() -> None:
    payload = CodePayload(kind=CodeKind.PERSONAL_BY_ID, currency=10)
    decoded = decode(generate(payload, KEY, POLICY, identity=1234))
    with pytest.raises(TypeError):
        check_hash(decoded, KEY, POLICY)


def test_payload_without_hash_never_matches() -> None:
    assert not check_hash(CodePayload(kind=CodeKind.PUBLIC, currency=1), KEY, None)


def test_required_bytes_resolution() -> None:
    payload = CodePayload(kind=CodeKind.PUBLIC, currency=1500)
    assert required_bytes(payload, POLICY) == 6
    assert required_bytes(payload, 3) == 3
    assert required_bytes(payload, None) == 32
