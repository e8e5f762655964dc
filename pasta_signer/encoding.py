"""
Version-tagged binary tuples and base58-check text.

Binary form of a tuple of field/scalar elements::

    version_number (1 B) ‖ e_0 (32 B LE) ‖ e_1 (32 B LE) ‖ …

Text form::

    base58check( version_byte (1 B) ‖ binary )

with the usual 4-byte  sha256(sha256(payload))  checksum.  Decoding is
strict: wrong length, wrong tag, bad checksum and non-canonical elements
are all rejected with ``DecodeError``.
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple, Type

import base58

from .field import FIELD_BYTES, _PrimeFieldElement

logger = logging.getLogger(__name__)


class DecodeError(ValueError):
    """Malformed binary or base58 input."""
    pass


# ── binary ──────────────────────────────────────────────────────────────
def encode_versioned(version: int, elements: Sequence[_PrimeFieldElement]) -> bytes:
    return bytes([version]) + b"".join(e.to_bytes() for e in elements)


def decode_versioned(
    data: bytes,
    version: int,
    types: Sequence[Type[_PrimeFieldElement]],
) -> Tuple[_PrimeFieldElement, ...]:
    expected = 1 + FIELD_BYTES * len(types)
    if len(data) != expected:
        raise DecodeError(f"expected {expected} bytes, got {len(data)}")
    if data[0] != version:
        raise DecodeError(f"expected version number {version}, got {data[0]}")
    out = []
    for i, cls in enumerate(types):
        start = 1 + i * FIELD_BYTES
        try:
            out.append(cls.from_bytes(data[start:start + FIELD_BYTES]))
        except ValueError as e:
            raise DecodeError(str(e)) from e
    return tuple(out)


# ── base58-check ────────────────────────────────────────────────────────
def to_base58(version_byte: int, payload: bytes) -> str:
    return base58.b58encode_check(bytes([version_byte]) + payload).decode("ascii")


def from_base58(text: str, version_byte: int) -> bytes:
    """Check and strip the checksum and version byte; return the payload."""
    try:
        raw = base58.b58decode_check(text)
    except ValueError as e:
        logger.debug(f"Rejected base58 input: {e}")
        raise DecodeError(f"invalid base58check string: {e}") from e
    if not raw:
        raise DecodeError("empty base58check payload")
    if raw[0] != version_byte:
        logger.debug(f"Rejected base58 input with version byte {raw[0]}")
        raise DecodeError(f"expected version byte {version_byte}, got {raw[0]}")
    return raw[1:]
