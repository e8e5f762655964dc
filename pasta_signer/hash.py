"""
Domain-separated hashing for the Pallas Schnorr scheme.

Two hashes with two different jobs:

- **Nonce derivation** uses BLAKE2b-256 over the bytes of the packed
  message, public key, private key and network code.  The output is
  secret and deterministic: the same inputs always give the same nonce,
  so a nonce can never be reused for two different messages.

- **Challenge derivation** uses the Poseidon sponge over field
  elements, salted with a per-network prefix ("signature, mainnet" vs
  "signature, testnet") so that a signature for one network is never
  valid on the other.

References
----------
- Mina Protocol, ``docs/specs/signatures/description.md``.
- RFC 7693  The BLAKE2 Cryptographic Hash and MAC.
"""

from __future__ import annotations

import hashlib
from typing import Sequence

from .constants import NETWORK_ID_CODES, SIGNATURE_PREFIXES, NetworkId
from .curve import Point
from .field import FIELD_BITS, Field, Scalar, bits_to_bytes, fields_to_bits
from .hash_input import HashInput, pack_to_fields
from .poseidon import PARAMS, PoseidonParams, initial_state, update

NONCE_BYTES = 32


# ── internal helpers ────────────────────────────────────────────────────
def blake2b_256(data: bytes) -> bytes:
    """Unkeyed, unsalted BLAKE2b with a 32-byte digest."""
    return hashlib.blake2b(data, digest_size=NONCE_BYTES).digest()


def prefix_to_field(prefix: str) -> Field:
    """
    Encode an ASCII domain prefix as one field element.

    Characters are taken as little-endian bytes, so the first character
    lands in the lowest byte.
    """
    raw = prefix.encode("ascii")
    if len(raw) * 8 >= FIELD_BITS:
        raise ValueError(f"prefix {prefix!r} is too long to fit in a field element")
    return Field(int.from_bytes(raw, "little"))


def hash_with_prefix(
    prefix: str,
    inputs: Sequence[Field],
    params: PoseidonParams = PARAMS,
) -> Field:
    """Poseidon, salted by first absorbing ``prefix_to_field(prefix)``."""
    state = update(initial_state(params), [prefix_to_field(prefix).value], params)
    state = update(state, [f.value for f in inputs], params)
    return Field(state[0])


# ── public hash functions ───────────────────────────────────────────────
def derive_nonce(
    message: HashInput,
    public_key: Point,
    private_key: Scalar,
    network: NetworkId,
) -> Scalar:
    r"""
    Deterministic nonce  k' = BLAKE2b(pack(m ‖ x ‖ y ‖ d ‖ id)) mod q.

    The private key is carried into the base field by bit re-composition
    (*d*); the network code is packed as 8 bits.  The top two bits of
    the 256-bit digest are dropped before reduction: since
    q = 2^254 + ε  with tiny ε, the masked value is already below *q*
    and the distribution is uniform up to a negligible bias.
    """
    network = NetworkId.parse(network)
    d = Field.from_bits(private_key.to_bits())
    extended = message.append(HashInput(
        fields=(public_key.x, public_key.y, d),
        packed=((NETWORK_ID_CODES[network], 8),),
    ))
    data = bits_to_bytes(fields_to_bits(pack_to_fields(extended)))
    digest = bytearray(blake2b_256(data))
    digest[NONCE_BYTES - 1] &= 0x3F
    return Scalar.from_bytes_reduce(bytes(digest))


def hash_message(
    message: HashInput,
    public_key: Point,
    r: Field,
    network: NetworkId,
) -> Scalar:
    r"""
    Schnorr challenge  e = Poseidon_prefix(pack(m ‖ x ‖ y ‖ r)).

    The Poseidon output is a base-field element; it is relabelled as a
    scalar without reduction, which is exact because  p < q  on Pallas.
    """
    network = NetworkId.parse(network)
    extended = message.append(HashInput(fields=(public_key.x, public_key.y, r)))
    e = hash_with_prefix(SIGNATURE_PREFIXES[network], pack_to_fields(extended))
    return Scalar(e.value)
