"""Project-wide constants and default paths.

This module centralises small constants that are imported across the
package. Keep this file minimal and free of side effects.
"""

from __future__ import annotations

from pathlib import Path

# Seconds between attempts against the counter store or identity lookup.
RETRY_INTERVAL_SECONDS = 10.0

# Raw length of an HMAC-SHA-256 digest.
DIGEST_SIZE = 32

LIMIT_DISCRIMINATOR = "limit"

SEGMENT_SEPARATOR = "-"

ENV_PREFIX = "REWARD_CODES_"

DEFAULT_CONFIG_FILE = Path("reward_codes.yaml")

__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DIGEST_SIZE",
    "ENV_PREFIX",
    "LIMIT_DISCRIMINATOR",
    "RETRY_INTERVAL_SECONDS",
    "SEGMENT_SEPARATOR",
]
