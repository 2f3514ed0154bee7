"""Prefixed domain identifiers shared by the aggregates.

Identifiers look like ``CRD-1a2b3c4d``: a fixed upper-case prefix, a hyphen
and an 8-character lowercase hex token.
"""

from __future__ import annotations

import re
from uuid import uuid4

TOKEN_LENGTH = 8

_TOKEN_PATTERN = re.compile(r"[0-9a-f]{8}")


def is_valid_domain_id(value: object, prefix: str) -> bool:
    """Check that value is ``<prefix>-<token>`` with a well-formed token."""
    if not isinstance(value, str):
        return False
    head, sep, token = value.partition("-")
    if not sep or head != prefix:
        return False
    return _TOKEN_PATTERN.fullmatch(token) is not None


def generate_domain_id(prefix: str) -> str:
    """Build a fresh identifier for prefix from a random UUID."""
    return f"{prefix}-{uuid4().hex[:TOKEN_LENGTH]}"
