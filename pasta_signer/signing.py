"""
Deterministic Schnorr signatures over Pallas.

**Signing** with private key  d  and public key  P = d·G:

    k' = derive_nonce(m, P, d, id)        (BLAKE2b, deterministic)
    R  = k'·G                             (commitment)
    k  = k'   if R.y is even,  else  −k'  (canonical even-y commitment)
    e  = hash_message(m, P, R.x, id)      (Poseidon, network-salted)
    s  = k + e·d

The signature is  (r, s) = (R.x, s).  No sign bit for *R* is sent: the
verifier only accepts the commitment with even *y*, which removes the
only malleability freedom in the commitment.

**Verification** recomputes  R = s·G − e·P  and accepts iff *R* is not
the identity, *R.y* is even and  R.x == r.

References
----------
- Schnorr (1991). "Efficient Signature Generation by Smart Cards."
  J. Cryptology.
- Mina Protocol, ``docs/specs/signatures/description.md``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

import msgspec

from .constants import VERSION_BYTES, VERSION_NUMBERS, NetworkId
from .curve import G, PublicKey
from .encoding import (
    DecodeError,
    decode_versioned,
    encode_versioned,
    from_base58,
    to_base58,
)
from .field import Field, Scalar
from .hash import derive_nonce, hash_message
from .hash_input import HashInput

logger = logging.getLogger(__name__)

_G_PROJ = G.to_projective()


class NonceDerivationError(RuntimeError):
    """The derived nonce is zero; signing must stop, not retry."""
    pass


class SignatureDecodeError(DecodeError):
    """A signature could not be parsed (distinct from an invalid one)."""
    pass


# ── data structures ─────────────────────────────────────────────────────

class _SignatureJson(msgspec.Struct, frozen=True):
    field: str
    scalar: str


@dataclass(frozen=True)
class Signature:
    """
    Schnorr signature  (r, s):  *r* is the commitment's x-coordinate in
    F_p, *s* the response in F_q.
    """

    r: Field
    s: Scalar

    def to_bytes(self) -> bytes:
        """65 bytes: version number, r (32 LE), s (32 LE)."""
        return encode_versioned(VERSION_NUMBERS["signature"], (self.r, self.s))

    @classmethod
    def from_bytes(cls, data: bytes) -> Signature:
        try:
            r, s = decode_versioned(data, VERSION_NUMBERS["signature"], (Field, Scalar))
        except DecodeError as e:
            raise SignatureDecodeError(f"invalid signature bytes: {e}") from e
        return cls(r=r, s=s)  # type: ignore[arg-type]

    def to_base58(self) -> str:
        return to_base58(VERSION_BYTES["signature"], self.to_bytes())

    @classmethod
    def from_base58(cls, text: str) -> Signature:
        try:
            payload = from_base58(text, VERSION_BYTES["signature"])
        except DecodeError as e:
            raise SignatureDecodeError(f"invalid signature string: {e}") from e
        return cls.from_bytes(payload)

    def to_json(self) -> str:
        """``{"field": "<r>", "scalar": "<s>"}`` with decimal strings."""
        return msgspec.json.encode(
            _SignatureJson(field=str(self.r.value), scalar=str(self.s.value))
        ).decode("utf-8")

    @classmethod
    def from_json(cls, data: Union[str, bytes]) -> Signature:
        try:
            raw = msgspec.json.decode(data, type=_SignatureJson)
            r, s = int(raw.field), int(raw.scalar)
        except (msgspec.DecodeError, ValueError) as e:
            raise SignatureDecodeError(f"invalid signature JSON: {e}") from e
        if not 0 <= r < Field.MODULUS or not 0 <= s < Scalar.MODULUS:
            raise SignatureDecodeError("signature JSON value out of range")
        return cls(r=Field(r), s=Scalar(s))


# ── signing ─────────────────────────────────────────────────────────────

def sign(
    message: HashInput,
    private_key: Scalar,
    network: NetworkId,
) -> Signature:
    """
    Sign *message* with *private_key* for *network*.

    Deterministic: identical inputs give identical signatures.

    Raises
    ------
    ValueError
        If *private_key* is zero.
    NonceDerivationError
        If the derived nonce is zero.  Retrying with the same inputs
        reproduces the failure.
    """
    network = NetworkId.parse(network)
    if private_key.is_zero():
        raise ValueError("private key must be non-zero")

    public_key = G.scale(private_key)
    k_prime = derive_nonce(message, public_key, private_key, network)
    if k_prime.is_zero():
        logger.error("Derived nonce is zero; refusing to sign")
        raise NonceDerivationError("sign: derived nonce is 0")

    R = G.scale(k_prime)

    # k = ±k' selected arithmetically from the parity of R.y
    odd = R.y.value & 1
    k = Scalar(k_prime.value * (1 - 2 * odd))

    e = hash_message(message, public_key, R.x, network)
    s = k + e * private_key

    logger.debug(f"Signed message for {network.value}")
    return Signature(r=R.x, s=s)


def sign_field_element(
    message: Field,
    private_key: Scalar,
    network: NetworkId,
) -> Signature:
    """:func:`sign` for a message that is a single field element."""
    return sign(HashInput(fields=(message,)), private_key, network)


# ── verification ────────────────────────────────────────────────────────

def verify(
    signature: Signature,
    message: HashInput,
    public_key: PublicKey,
    network: NetworkId,
) -> bool:
    """
    Return ``True`` iff *signature* is valid for *message* under
    *public_key* and *network*.

    Every rejection, including an undecompressable public key and a
    commitment at infinity, is reported as ``False``.
    """
    network = NetworkId.parse(network)
    logger.debug(f"Verifying signature for {network.value}")
    try:
        pk = public_key.to_point()
    except ValueError:
        logger.debug("Verification failed: public key is not on the curve")
        return False

    e = hash_message(message, pk, signature.r, network)
    R = signature.s * _G_PROJ - e * pk.to_projective()

    affine = R.to_affine()
    if affine is None:
        logger.debug("Verification failed: commitment is the point at infinity")
        return False
    if not affine.y.is_even():
        logger.debug("Verification failed: commitment has odd y")
        return False
    return affine.x == signature.r


def verify_field_element(
    signature: Signature,
    message: Field,
    public_key: PublicKey,
    network: NetworkId,
) -> bool:
    """:func:`verify` for a message that is a single field element."""
    return verify(signature, HashInput(fields=(message,)), public_key, network)
