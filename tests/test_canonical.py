# SPDX-License-Identifier: MIT
"""Tests for validation string construction."""

import pytest

from reward_codes.canonical import render_identity, validation_string
from reward_codes.models import CodeKind, CodePayload


def test_public_code_without_extras() -> None:
    payload = CodePayload(kind=CodeKind.PUBLIC, currency=100)
    assert validation_string(payload) == "100-p"


def test_public_code_with_label_and_limit_is_lowercase() -> None:
    payload = CodePayload(kind=CodeKind.PUBLIC, label="Summer", currency=250, limit=5)
    assert validation_string(payload) == "summer-250-5-p"


def test_name_bound_code_includes_username() -> None:
    payload = CodePayload(
        kind=CodeKind.PERSONAL_BY_NAME, label="Gift", username="Alice", currency=10
    )
    assert validation_string(payload) == "gift-alice-10-n"


def test_public_code_ignores_identity_argument() -> None:
    payload = CodePayload(kind=CodeKind.PUBLIC, currency=5)
    assert validation_string(payload, "someone") == "5-p"


@pytest.mark.parametrize("identity", [42, "42"])
def test_id_bound_code_uses_supplied_identity(identity) -> None:
    payload = CodePayload(kind=CodeKind.PERSONAL_BY_ID, currency=7)
    assert validation_string(payload, identity) == "42-7-i"


def test_id_bound_code_requires_identity() -> None:
    payload = CodePayload(kind=CodeKind.PERSONAL_BY_ID, currency=7)
    with pytest.raises(TypeError):
        validation_string(payload)


@pytest.mark.parametrize("bad", [True, 4.2, object()])
def test_render_identity_rejects_other_types(bad) -> None:
    with pytest.raises(TypeError):
        render_identity(bad)


def test_validation_string_is_deterministic() -> None:
    payload = CodePayload(kind=CodeKind.PUBLIC, label="A", currency=1, limit=2)
    assert validation_string(payload) == validation_string(payload.model_copy())
