# SPDX-License-Identifier: MIT
"""Exception types raised by the reward code codec and its collaborators."""

from __future__ import annotations

from enum import Enum


class DecodeErrorKind(str, Enum):
    """Reasons a code string can fail syntactic decoding."""

    TOO_FEW_PARTS = "TooFewParts"
    TOO_MANY_PARTS = "TooManyParts"
    INVALID_KIND_TAG = "InvalidKindTag"
    INVALID_HASH = "InvalidHash"
    LABEL_IS_INTEGER = "LabelIsInteger"
    INVALID_CURRENCY = "InvalidCurrency"
    INVALID_LIMIT = "InvalidLimit"
    EMPTY_SEGMENT = "EmptySegment"


_DECODE_MESSAGES = {
    DecodeErrorKind.TOO_FEW_PARTS: "Code too small",
    DecodeErrorKind.TOO_MANY_PARTS: "Code too large",
    DecodeErrorKind.INVALID_KIND_TAG: "Invalid code kind tag",
    DecodeErrorKind.INVALID_HASH: "Invalid hash",
    DecodeErrorKind.LABEL_IS_INTEGER: "Label must not be an integer",
    DecodeErrorKind.INVALID_CURRENCY: "Currency must be a number",
    DecodeErrorKind.INVALID_LIMIT: "Limit must be a number",
    DecodeErrorKind.EMPTY_SEGMENT: "Label and username must not be empty",
}


class CodeFormatError(ValueError):
    """Raised when a code string is malformed.

    Attributes:
        kind: Machine readable reason for the failure.
    """

    def __init__(self, kind: DecodeErrorKind, detail: str | None = None) -> None:
        self.kind = kind
        message = _DECODE_MESSAGES[kind]
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class OptionsError(ValueError):
    """Raised when generation options fail validation."""


class ResultError(RuntimeError):
    """Raised when unwrapping a failed result."""


class StoreError(Exception):
    """Base class for counter store failures.

    Subclasses other than the transient and ambiguous variants are fatal.
    """


class TransientStoreError(StoreError):
    """The store rejected the request but it is safe to retry (queue full)."""


class AmbiguousStoreError(StoreError):
    """The update may or may not have been applied."""


class IdentityLookupError(Exception):
    """Base class for identity lookup failures; retried until the deadline."""


class IdentityNotFoundError(IdentityLookupError):
    """The requested username does not exist."""


__all__ = [
    "AmbiguousStoreError",
    "CodeFormatError",
    "DecodeErrorKind",
    "IdentityLookupError",
    "IdentityNotFoundError",
    "OptionsError",
    "ResultError",
    "StoreError",
    "TransientStoreError",
]
