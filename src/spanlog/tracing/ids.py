"""Span and trace identifier generation.

Identifiers are random bytes from the OS CSPRNG, hex-encoded in lowercase.
The low bit of the first byte is always set so an identifier can never be
all zeros (an all-zero id is invalid in OTLP).
"""

from __future__ import annotations

import logging
import random
import secrets

logger = logging.getLogger("spanlog.tracing")

SPAN_ID_BYTES = 8
TRACE_ID_BYTES = 16


def random_id_bytes(size: int) -> bytes:
    """Return ``size`` random bytes, first byte OR 0x01.

    Falls back to the non-cryptographic ``random`` module only when the OS has
    no secure randomness source, and warns every time it does.
    """
    try:
        raw = bytearray(secrets.token_bytes(size))
    except NotImplementedError:
        logger.warning("No secure randomness source available; using non-cryptographic ids (reduced security)")
        raw = bytearray(random.getrandbits(8) for _ in range(size))
    raw[0] |= 0x01
    return bytes(raw)


def new_span_id() -> str:
    """16 lowercase hex chars."""
    return random_id_bytes(SPAN_ID_BYTES).hex()


def new_trace_id() -> str:
    """32 lowercase hex chars."""
    return random_id_bytes(TRACE_ID_BYTES).hex()
