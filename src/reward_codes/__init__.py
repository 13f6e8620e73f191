"""Hash-authenticated reward codes.

Codes carry a small payload (currency, optional label, use limit or bound
user) and a truncated HMAC-SHA-256 over its canonical form, so a server can
trust a code without storing every issued one.
"""

from .authenticator import get_required_length
from .codec import decode, generate, generate_code
from .errors import (
    AmbiguousStoreError,
    CodeFormatError,
    DecodeErrorKind,
    IdentityLookupError,
    IdentityNotFoundError,
    OptionsError,
    ResultError,
    StoreError,
    TransientStoreError,
)
from .identity import IdentityLookup, IdentityResolver
from .limits import CounterStore, LimitTracker
from .models import (
    ByteRequirement,
    CodeKind,
    CodePayload,
    GenerateOptions,
    parse_options,
    policy_from_pairs,
)
from .result import Failure, Result, Success
from .validator import check_hash, meets_required_length

__all__ = [
    "AmbiguousStoreError",
    "ByteRequirement",
    "CodeFormatError",
    "CodeKind",
    "CodePayload",
    "CounterStore",
    "DecodeErrorKind",
    "Failure",
    "GenerateOptions",
    "IdentityLookup",
    "IdentityLookupError",
    "IdentityNotFoundError",
    "IdentityResolver",
    "LimitTracker",
    "OptionsError",
    "Result",
    "ResultError",
    "StoreError",
    "Success",
    "TransientStoreError",
    "check_hash",
    "decode",
    "generate",
    "generate_code",
    "get_required_length",
    "meets_required_length",
    "parse_options",
    "policy_from_pairs",
]
