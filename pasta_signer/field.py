"""
Prime-field arithmetic for the Pasta cycle, seen from Pallas.

Two fields matter to the signature scheme:

- ``Field``: the Pallas **base** field  F_p,  where curve coordinates
  live and where the Poseidon sponge operates.
- ``Scalar``: the Pallas **scalar** field  F_q  (the order of the
  group generated by *G*), where private keys, nonces and the
  signature response *s* live.

For Pallas both primes are  2^254 + ε  with  ε < 2^126,  and  p < q.
Both fields therefore share a 255-bit decomposition width and a 32-byte
little-endian canonical encoding.

References
----------
- Hopwood, Bowe, Grigg (2020). "The Pasta Curves for Halo 2 and Beyond."
- Mina Protocol, ``docs/specs/signatures/description.md``.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

# ── Pasta constants ─────────────────────────────────────────────────────
P = 0x40000000000000000000000000000000224698FC094CF91B992D30ED00000001
Q = 0x40000000000000000000000000000000224698FC0994A8DD8C46EB2100000001
FIELD_BITS = 255
FIELD_BYTES = 32

# hash outputs in F_p are relabelled as scalars without reduction
if not P < Q:
    raise RuntimeError("base field order must be below the scalar field order")


# ── shared element implementation ───────────────────────────────────────
class _PrimeFieldElement:
    """Integer modulo ``MODULUS``; subclasses fix the modulus."""

    __slots__ = ("_v",)

    MODULUS: int = 0

    def __init__(self, value: int) -> None:
        self._v = value % self.MODULUS

    # constructors -----------------------------------------------------------
    @classmethod
    def zero(cls):
        return cls(0)

    @classmethod
    def one(cls):
        return cls(1)

    @classmethod
    def from_bytes(cls, data: bytes):
        """Canonical 32-byte little-endian decoding; rejects v ≥ modulus."""
        if len(data) != FIELD_BYTES:
            raise ValueError(f"need {FIELD_BYTES} bytes, got {len(data)}")
        v = int.from_bytes(data, "little")
        if v >= cls.MODULUS:
            raise ValueError(f"{cls.__name__} encoding out of range")
        return cls(v)

    @classmethod
    def from_bytes_reduce(cls, data: bytes):
        """Hash-output safe: little-endian integer reduced modulo the order."""
        return cls(int.from_bytes(data, "little"))

    @classmethod
    def from_bits(cls, bits: Iterable[bool]):
        """Compose LSB-first bits (any length) and reduce."""
        v = 0
        for i, b in enumerate(bits):
            if b:
                v |= 1 << i
        return cls(v)

    # serialisation ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        return self._v.to_bytes(FIELD_BYTES, "little")

    def to_bits(self) -> List[bool]:
        """Fixed-width (255) LSB-first decomposition."""
        v = self._v
        return [bool((v >> i) & 1) for i in range(FIELD_BITS)]

    @property
    def value(self) -> int:
        return self._v

    def is_zero(self) -> bool:
        return self._v == 0

    def is_even(self) -> bool:
        return self._v & 1 == 0

    # arithmetic -------------------------------------------------------------
    def _same(self, o) -> bool:
        return type(o) is type(self)

    def __add__(self, o):
        if not self._same(o):
            return NotImplemented
        return type(self)(self._v + o._v)

    def __sub__(self, o):
        if not self._same(o):
            return NotImplemented
        return type(self)(self._v - o._v)

    def __mul__(self, o):
        if not self._same(o):
            return NotImplemented
        return type(self)(self._v * o._v)

    def __neg__(self):
        return type(self)(-self._v)

    def __truediv__(self, o):
        if not self._same(o):
            return NotImplemented
        return self * o.inv()

    def __pow__(self, e: int):
        if e < 0:
            return self.inv() ** (-e)
        return type(self)(pow(self._v, e, self.MODULUS))

    def inv(self):
        """Multiplicative inverse via Fermat's little theorem."""
        if self._v == 0:
            raise ZeroDivisionError(f"cannot invert zero {type(self).__name__}")
        return type(self)(pow(self._v, self.MODULUS - 2, self.MODULUS))

    # comparison / hashing ---------------------------------------------------
    def __eq__(self, o: object) -> bool:
        if self._same(o):
            return self._v == o._v  # type: ignore[attr-defined]
        if isinstance(o, int) and not isinstance(o, bool):
            return self._v == o % self.MODULUS
        return False

    def __hash__(self) -> int:
        return hash(self._v)

    def __int__(self) -> int:
        return self._v

    def __bool__(self) -> bool:
        return self._v != 0

    def __repr__(self) -> str:
        h = hex(self._v)
        name = type(self).__name__
        return f"{name}(0x{h[2:10]}…)" if len(h) > 14 else f"{name}({h})"


class Field(_PrimeFieldElement):
    """Element of the Pallas base field  F_p."""

    __slots__ = ()
    MODULUS = P

    def sqrt(self) -> Optional[Field]:
        """A square root, or ``None`` for a non-residue."""
        r = sqrt_mod(self._v, P)
        return None if r is None else Field(r)


class Scalar(_PrimeFieldElement):
    """Element of the Pallas scalar field  F_q."""

    __slots__ = ()
    MODULUS = Q


# ── square roots ────────────────────────────────────────────────────────
def sqrt_mod(a: int, p: int) -> Optional[int]:
    """
    Tonelli–Shanks square root modulo an odd prime *p*.

    Pasta primes have  p − 1 = 2^32 · t,  so the  p ≡ 3 (mod 4)  shortcut
    used for secp256k1 does not apply.  Returns ``None`` when *a* is a
    quadratic non-residue.
    """
    a %= p
    if a == 0:
        return 0
    if pow(a, (p - 1) // 2, p) != 1:
        return None

    s, t = 0, p - 1
    while t % 2 == 0:
        t //= 2
        s += 1

    z = 2
    while pow(z, (p - 1) // 2, p) != p - 1:
        z += 1

    m = s
    c = pow(z, t, p)
    x = pow(a, (t + 1) // 2, p)
    b = pow(a, t, p)
    while b != 1:
        # least i with b^(2^i) == 1
        i, b2 = 0, b
        while b2 != 1:
            b2 = b2 * b2 % p
            i += 1
        g = pow(c, 1 << (m - i - 1), p)
        x = x * g % p
        c = g * g % p
        b = b * c % p
        m = i
    return x


# ── bit / byte packing ──────────────────────────────────────────────────
def bits_to_bytes(bits: Sequence[bool]) -> bytes:
    """
    Group bits into bytes, eight at a time, LSB first within each byte.

    A trailing partial group is zero-padded at the high end.
    """
    out = bytearray()
    for start in range(0, len(bits), 8):
        byte = 0
        for j, b in enumerate(bits[start:start + 8]):
            if b:
                byte |= 1 << j
        out.append(byte)
    return bytes(out)


def fields_to_bits(elements: Iterable[Field]) -> List[bool]:
    """Concatenate the fixed-width decompositions of *elements*."""
    bits: List[bool] = []
    for e in elements:
        bits.extend(e.to_bits())
    return bits
