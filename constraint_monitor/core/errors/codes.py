# constraint_monitor/core/errors/codes.py
from __future__ import annotations

from typing import Final


# ---- canonical error codes (stable public contract) ----
# generic
UNKNOWN: Final[str] = "UNKNOWN"
INTERNAL_ERROR: Final[str] = "INTERNAL_ERROR"
INVALID_ARGUMENT: Final[str] = "INVALID_ARGUMENT"

# configuration / rules
CONFIG_INVALID: Final[str] = "CONFIG_INVALID"
RULE_INVALID: Final[str] = "RULE_INVALID"
PATTERN_INVALID: Final[str] = "PATTERN_INVALID"
GLOB_INVALID: Final[str] = "GLOB_INVALID"

# hook input
PAYLOAD_INVALID: Final[str] = "PAYLOAD_INVALID"
PAYLOAD_INCOMPLETE: Final[str] = "PAYLOAD_INCOMPLETE"

# semantic providers
PROVIDER_UNAVAILABLE: Final[str] = "PROVIDER_UNAVAILABLE"
PROVIDER_ERROR: Final[str] = "PROVIDER_ERROR"
PROVIDER_TIMEOUT: Final[str] = "PROVIDER_TIMEOUT"
RESPONSE_INVALID: Final[str] = "RESPONSE_INVALID"


# ---- semantic groups (internal helpers) ----

INPUT_CODES: Final[set[str]] = {
    PAYLOAD_INVALID,
    PAYLOAD_INCOMPLETE,
}

RULE_CODES: Final[set[str]] = {
    RULE_INVALID,
    PATTERN_INVALID,
    GLOB_INVALID,
}

# Failures that count against a provider's circuit breaker.
PROVIDER_CODES: Final[set[str]] = {
    PROVIDER_ERROR,
    PROVIDER_TIMEOUT,
    RESPONSE_INVALID,
}

KNOWN_CODES: Final[set[str]] = (
    {UNKNOWN, INTERNAL_ERROR, INVALID_ARGUMENT, CONFIG_INVALID, PROVIDER_UNAVAILABLE}
    | INPUT_CODES
    | RULE_CODES
    | PROVIDER_CODES
)
