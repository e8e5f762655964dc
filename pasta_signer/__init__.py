"""
pasta_signer: deterministic Schnorr signatures over the Pallas curve.

A Python implementation of the chunked Mina signature scheme:

- **Deterministic nonces** derived with BLAKE2b from the message, the
  key pair and the network id; no randomness at signing time
- **Poseidon challenges** salted per network, so mainnet and testnet
  signatures never cross over
- **Canonical commitments** (even *y*) and strict base58-check encoding

Quick start
-----------
::

    from pasta_signer import (
        Field, Scalar, PublicKey, NetworkId,
        sign_field_element, verify_field_element, Signature,
    )

    sk = Scalar(0x1234)
    pk = PublicKey.from_private_key(sk)

    sig = sign_field_element(Field(7), sk, NetworkId.TESTNET)
    assert verify_field_element(sig, Field(7), pk, NetworkId.TESTNET)

    text = sig.to_base58()
    assert Signature.from_base58(text) == sig
"""

__version__ = "0.1.0"

# ── core types ──────────────────────────────────────────────────────────
from .field import Field, Scalar, P, Q
from .curve import Point, ProjectivePoint, PublicKey, G
from .constants import NetworkId
from .hash_input import HashInput, pack_to_fields

# ── signatures ──────────────────────────────────────────────────────────
from .signing import (
    Signature,
    NonceDerivationError,
    SignatureDecodeError,
    sign,
    verify,
    sign_field_element,
    verify_field_element,
)

# ── hashing ─────────────────────────────────────────────────────────────
from .hash import derive_nonce, hash_message, hash_with_prefix
from .poseidon import PoseidonParams, poseidon_hash

__all__ = [
    # version
    "__version__",
    # core
    "Field", "Scalar", "P", "Q",
    "Point", "ProjectivePoint", "PublicKey", "G",
    "NetworkId", "HashInput", "pack_to_fields",
    # signatures
    "Signature", "NonceDerivationError", "SignatureDecodeError",
    "sign", "verify", "sign_field_element", "verify_field_element",
    # hashing
    "derive_nonce", "hash_message", "hash_with_prefix",
    "PoseidonParams", "poseidon_hash",
]
