"""
Static protocol tables: network identities, hash prefixes, version tags.

All tables are read-only mappings fixed at import.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class NetworkId(Enum):
    """Domain-separation tag mixed into nonce derivation and the challenge."""

    MAINNET = "mainnet"
    TESTNET = "testnet"

    @classmethod
    def parse(cls, value) -> NetworkId:
        if isinstance(value, NetworkId):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"unknown network id {value!r} (expected 'mainnet' or 'testnet')"
            ) from None


# 8-bit code packed into the nonce-derivation input
NETWORK_ID_CODES: Mapping[NetworkId, int] = MappingProxyType({
    NetworkId.MAINNET: 0x01,
    NetworkId.TESTNET: 0x00,
})

# Poseidon salts for the signature challenge, padded to 20 bytes
SIGNATURE_PREFIXES: Mapping[NetworkId, str] = MappingProxyType({
    NetworkId.MAINNET: "MinaSignatureMainnet",
    NetworkId.TESTNET: "CodaSignature*******",
})

# leading byte of base58-check payloads, per value class
VERSION_BYTES: Mapping[str, int] = MappingProxyType({
    "signature": 154,
})

# leading byte of version-tagged binary encodings, per value class
VERSION_NUMBERS: Mapping[str, int] = MappingProxyType({
    "signature": 1,
})
