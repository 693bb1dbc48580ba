"""Opaque admission receipts."""

from __future__ import annotations

import hashlib
import time

TOKEN_LENGTH = 64


def issue_token(key: str, instant_ns: int | None = None) -> str:
    """Return a SHA-256 hex digest over *key* and a nanosecond timestamp.

    The token is a correlation handle for logs and clients, not a credential.
    """
    if instant_ns is None:
        instant_ns = time.time_ns()
    return hashlib.sha256(f"{key}:{instant_ns}".encode()).hexdigest()
