# SPDX-License-Identifier: MIT
"""Pydantic models describing reward code payloads and generation options.

These definitions act as the contract between the codec, the validator and the
configuration layer. A :class:`CodePayload` is either built fresh from
validated :class:`GenerateOptions` at generation time or reconstructed from the
text of a code string, in which case it stays untrusted until its hash has been
checked.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Any, Mapping, NamedTuple, Sequence

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .constants import DIGEST_SIZE, SEGMENT_SEPARATOR
from .errors import OptionsError

_INTEGER_RE = re.compile(r"[0-9]+")


def is_integer_text(value: object) -> bool:
    """Return ``True`` when ``value`` renders as a plain run of ASCII digits."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return value >= 0
    return isinstance(value, str) and _INTEGER_RE.fullmatch(value) is not None


class CodeKind(str, Enum):
    """Kinds of reward code, valued by their one character tag."""

    PUBLIC = "p"
    PERSONAL_BY_NAME = "n"
    PERSONAL_BY_ID = "i"

    @property
    def tag(self) -> str:
        return self.value


class ByteRequirement(NamedTuple):
    """Number of hash bytes required for codes worth up to ``ceiling``."""

    ceiling: int
    byte_count: int


TruncationPolicy = tuple[ByteRequirement, ...]


def policy_from_pairs(values: Sequence[int] | None) -> TruncationPolicy:
    """Return a truncation policy from a flattened ``(ceiling, bytes)`` list.

    Args:
        values: Alternating currency ceilings and byte counts, ascending by
            ceiling. ``None`` or an empty list yields an empty policy.

    Returns:
        Tuple of :class:`ByteRequirement` entries.

    Raises:
        ValueError: If the list has odd length, ceilings are not ascending or a
            byte count falls outside the digest size.
    """
    if not values:
        return ()
    if len(values) % 2 == 1:
        raise ValueError("Bytes should be specified in pairs of two (currency, bytes)")
    policy = tuple(
        ByteRequirement(int(values[i]), int(values[i + 1]))
        for i in range(0, len(values), 2)
    )
    for previous, current in zip(policy, policy[1:]):
        if current.ceiling <= previous.ceiling:
            raise ValueError("Byte requirements must be ascending by currency")
    for requirement in policy:
        if not 1 <= requirement.byte_count <= DIGEST_SIZE:
            raise ValueError(
                f"Byte count must be between 1 and {DIGEST_SIZE}, "
                f"got {requirement.byte_count}"
            )
    return policy


def _check_segment(name: str, value: str | None) -> str | None:
    if value is None:
        return value
    if not value:
        raise ValueError(f"{name} must not be empty")
    if SEGMENT_SEPARATOR in value:
        raise ValueError(f"{name} must not contain '{SEGMENT_SEPARATOR}'")
    return value


class StrictModel(BaseModel):
    """Base model with strict settings to prevent shape drift."""

    model_config = ConfigDict(extra="forbid")


class CodePayload(StrictModel):
    """Typed contents of a reward code.

    Instances are immutable. The identity resolution cache is the only state
    that may be attached after construction and lives for as long as the
    in-memory object.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: CodeKind = Field(..., description="Which kind of code this is.")
    label: str | None = Field(
        None, description="Optional display label, never integer shaped."
    )
    currency: Annotated[int, Field(ge=0, description="Currency amount awarded.")]
    limit: Annotated[
        int | None, Field(ge=0, description="Maximum uses of a public code.")
    ] = None
    username: str | None = Field(
        None, description="Bound username for name-bound personal codes."
    )
    hash: str | None = Field(
        None, description="Lowercase Crockford text of the embedded hash."
    )
    hash_byte_length: Annotated[
        int | None, Field(ge=0, description="Raw bytes encoded by ``hash``.")
    ] = None

    # Identity resolution cache; ``_identity_resolved`` distinguishes a cached
    # missing user from a lookup that has not run yet.
    _identity_resolved: bool = PrivateAttr(default=False)
    _resolved_identity: int | str | None = PrivateAttr(default=None)

    @field_validator("label", "username")
    @classmethod
    def _check_visible_segments(
        cls, value: str | None, info: ValidationInfo
    ) -> str | None:
        return _check_segment(str(info.field_name).capitalize(), value)

    @model_validator(mode="after")
    def _check_kind_fields(self) -> "CodePayload":
        if self.label is not None and is_integer_text(self.label):
            raise ValueError("Label must not be an integer")
        if self.limit is not None and self.kind is not CodeKind.PUBLIC:
            raise ValueError("Limits cannot be used with personal codes")
        if self.kind is CodeKind.PERSONAL_BY_NAME and self.username is None:
            raise ValueError("Name-bound codes require a username")
        if self.kind is not CodeKind.PERSONAL_BY_NAME and self.username is not None:
            raise ValueError("Only name-bound codes carry a username")
        return self

    @property
    def is_public(self) -> bool:
        return self.kind is CodeKind.PUBLIC


class GenerateOptions(BaseModel):
    """Validated options record used to issue a code.

    Field names mirror the command-line flags and configuration keys, so
    ``max`` and ``bytes`` are accepted as aliases for ``limit`` and
    ``requirements``.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    key: str = Field(..., min_length=1, description="HMAC key.", repr=False)
    public: bool = Field(False, description="Anyone may redeem the code.")
    username: str | None = Field(None, description="Bind the code to a username.")
    userid: str | None = Field(None, description="Bind the code to a user id.")
    label: str | None = Field(None, description="User visible label.")
    currency: int = Field(..., gt=0, description="Currency amount to award.")
    limit: int | None = Field(
        None,
        gt=0,
        validation_alias=AliasChoices("limit", "max"),
        description="Maximum number of uses for a public code.",
    )
    requirements: list[int] | None = Field(
        None,
        validation_alias=AliasChoices("requirements", "bytes"),
        description="Flattened (currency, bytes) truncation pairs.",
    )

    @field_validator("userid", mode="before")
    @classmethod
    def _coerce_userid(cls, value: Any) -> Any:
        """Accept integer user ids from JSON or YAML configuration."""
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("requirements")
    @classmethod
    def _validate_requirements(cls, value: list[int] | None) -> list[int] | None:
        policy_from_pairs(value)
        return value

    @field_validator("label")
    @classmethod
    def _validate_label(cls, value: str | None) -> str | None:
        if value is not None and is_integer_text(value):
            raise ValueError("Label must not be an integer")
        return _check_segment("Label", value)

    @field_validator("username")
    @classmethod
    def _validate_username(cls, value: str | None) -> str | None:
        return _check_segment("Username", value)

    @model_validator(mode="after")
    def _check_selection(self) -> "GenerateOptions":
        if not self.public and not self.username and not self.userid:
            raise ValueError(
                "Missing required parameters: one of public, username, or userid"
            )
        if self.username and self.userid:
            raise ValueError("Only one of username or userid is allowed")
        if self.public and (self.username or self.userid):
            raise ValueError("Code must be public or personal, not both")
        if not self.public and self.limit:
            raise ValueError("Limits cannot be used with personal codes")
        return self

    @property
    def kind(self) -> CodeKind:
        if self.public:
            return CodeKind.PUBLIC
        if self.username:
            return CodeKind.PERSONAL_BY_NAME
        return CodeKind.PERSONAL_BY_ID

    @property
    def policy(self) -> TruncationPolicy:
        return policy_from_pairs(self.requirements)

    def to_payload(self) -> CodePayload:
        """Return the unsigned payload described by these options."""
        return CodePayload(
            kind=self.kind,
            label=self.label,
            currency=self.currency,
            limit=self.limit,
            username=self.username if self.kind is CodeKind.PERSONAL_BY_NAME else None,
        )


def summarise_validation_error(exc: ValidationError) -> str:
    """Return a single line describing every error in ``exc``."""
    return "; ".join(
        (
            f"{'.'.join(map(str, error['loc']))}: {error['msg']}"
            if error["loc"]
            else error["msg"]
        )
        for error in exc.errors()
    )


def parse_options(values: Mapping[str, Any]) -> GenerateOptions:
    """Validate ``values`` into :class:`GenerateOptions`.

    Raises:
        OptionsError: If any option is missing or inconsistent.
    """
    try:
        return GenerateOptions.model_validate(dict(values))
    except ValidationError as exc:
        raise OptionsError(summarise_validation_error(exc)) from exc


__all__ = [
    "ByteRequirement",
    "CodeKind",
    "CodePayload",
    "GenerateOptions",
    "StrictModel",
    "TruncationPolicy",
    "is_integer_text",
    "parse_options",
    "policy_from_pairs",
    "summarise_validation_error",
]
