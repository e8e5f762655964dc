"""
Elliptic curve arithmetic on Pallas,  y² = x³ + 5  over  F_p.

Group operations run in Jacobian coordinates on plain Python integers;
affine ``Point`` values are produced only at the boundaries (public
keys, the commitment *R*).  The identity exists only as a
``ProjectivePoint``, and ``ProjectivePoint.to_affine()`` returns ``None``
for it, which is how callers detect the point at infinity.

The generator is the original "Mina" generator  G = (1, √6)  with the
odd square root.

References
----------
- Bernstein, Lange.  Explicit-Formulas Database,
  ``dbl-2009-l`` and ``add-2007-bl`` for  a = 0  Jacobian curves.
- Mina Protocol, ``docs/specs/signatures/description.md``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .field import P, FIELD_BITS, Field, Scalar

# ── Pallas constants ────────────────────────────────────────────────────
B = 5
GENERATOR_X = 1
GENERATOR_Y = 0x1B74B5A30A12937C53DFA9F06378EE548F655BD4333D477119CF7A23CAED2ABB


def _on_curve(x: int, y: int) -> bool:
    return (y * y - x * x * x - B) % P == 0


# ── Point  (affine, never the identity) ─────────────────────────────────
@dataclass(frozen=True)
class Point:
    """Affine point on Pallas.  Construction checks the curve equation."""

    x: Field
    y: Field

    def __post_init__(self) -> None:
        if not _on_curve(self.x.value, self.y.value):
            raise ValueError("point is not on the Pallas curve")

    def to_projective(self) -> ProjectivePoint:
        return ProjectivePoint(self.x.value, self.y.value, 1)

    def scale(self, k: Scalar) -> Point:
        """Compute *k · self*; raises if the result is the identity."""
        result = (k * self.to_projective()).to_affine()
        if result is None:
            raise ValueError("scalar multiplication reached the point at infinity")
        return result

    def __rmul__(self, k) -> ProjectivePoint:
        if isinstance(k, Scalar):
            return k * self.to_projective()
        return NotImplemented

    def __neg__(self) -> Point:
        return Point(self.x, -self.y)

    def __repr__(self) -> str:
        return f"Point(x={self.x!r}, y={self.y!r})"


# ── ProjectivePoint  (Jacobian, X/Z², Y/Z³) ─────────────────────────────
class ProjectivePoint:
    """
    Pallas group element in Jacobian coordinates.

    The identity is any triple with  Z = 0.
    """

    __slots__ = ("_x", "_y", "_z")

    def __init__(self, x: int, y: int, z: int) -> None:
        self._x = x % P
        self._y = y % P
        self._z = z % P

    @classmethod
    def identity(cls) -> ProjectivePoint:
        return cls(1, 1, 0)

    def is_zero(self) -> bool:
        return self._z == 0

    # group operations -------------------------------------------------------
    def double(self) -> ProjectivePoint:
        if self._z == 0 or self._y == 0:
            return ProjectivePoint.identity()
        x1, y1, z1 = self._x, self._y, self._z
        a = x1 * x1 % P
        b = y1 * y1 % P
        c = b * b % P
        d = 2 * ((x1 + b) * (x1 + b) - a - c) % P
        e = 3 * a % P
        f = e * e % P
        x3 = (f - 2 * d) % P
        y3 = (e * (d - x3) - 8 * c) % P
        z3 = 2 * y1 * z1 % P
        return ProjectivePoint(x3, y3, z3)

    def __add__(self, o: ProjectivePoint) -> ProjectivePoint:
        if not isinstance(o, ProjectivePoint):
            return NotImplemented
        if self._z == 0:
            return o
        if o._z == 0:
            return self
        x1, y1, z1 = self._x, self._y, self._z
        x2, y2, z2 = o._x, o._y, o._z
        z1z1 = z1 * z1 % P
        z2z2 = z2 * z2 % P
        u1 = x1 * z2z2 % P
        u2 = x2 * z1z1 % P
        s1 = y1 * z2 * z2z2 % P
        s2 = y2 * z1 * z1z1 % P
        h = (u2 - u1) % P
        r = 2 * (s2 - s1) % P
        if h == 0:
            # same x: either P + P or P + (−P)
            if r == 0:
                return self.double()
            return ProjectivePoint.identity()
        i = 4 * h * h % P
        j = h * i % P
        v = u1 * i % P
        x3 = (r * r - j - 2 * v) % P
        y3 = (r * (v - x3) - 2 * s1 * j) % P
        z3 = ((z1 + z2) * (z1 + z2) - z1z1 - z2z2) * h % P
        return ProjectivePoint(x3, y3, z3)

    def __neg__(self) -> ProjectivePoint:
        return ProjectivePoint(self._x, -self._y, self._z)

    def __sub__(self, o: ProjectivePoint) -> ProjectivePoint:
        if not isinstance(o, ProjectivePoint):
            return NotImplemented
        return self + (-o)

    def scale(self, k: Scalar) -> ProjectivePoint:
        """
        Scalar multiplication  k · self  via a Montgomery ladder.

        The ladder runs a fixed number of steps (the scalar bit width).
        Each step is the same masked swap, addition, doubling and swap
        back, whatever the bit value.
        """
        n = k.value
        r0 = ProjectivePoint.identity()
        r1 = self
        for i in reversed(range(FIELD_BITS)):
            bit = (n >> i) & 1
            r0, r1 = _cswap(r0, r1, bit)
            r1 = r0 + r1
            r0 = r0.double()
            r0, r1 = _cswap(r0, r1, bit)
        return r0

    def __rmul__(self, k) -> ProjectivePoint:
        if isinstance(k, Scalar):
            return self.scale(k)
        return NotImplemented

    # conversion -------------------------------------------------------------
    def to_affine(self) -> Optional[Point]:
        """Affine representative, or ``None`` for the point at infinity."""
        if self._z == 0:
            return None
        zi = pow(self._z, P - 2, P)
        zi2 = zi * zi % P
        return Point(Field(self._x * zi2), Field(self._y * zi2 * zi))

    def __eq__(self, o: object) -> bool:
        if not isinstance(o, ProjectivePoint):
            return False
        if self._z == 0 or o._z == 0:
            return self._z == 0 and o._z == 0
        z1z1 = self._z * self._z % P
        z2z2 = o._z * o._z % P
        if (self._x * z2z2 - o._x * z1z1) % P != 0:
            return False
        return (self._y * z2z2 * o._z - o._y * z1z1 * self._z) % P == 0

    def __hash__(self) -> int:
        affine = self.to_affine()
        return hash(None if affine is None else (affine.x.value, affine.y.value))

    def __repr__(self) -> str:
        affine = self.to_affine()
        if affine is None:
            return "ProjectivePoint(∞)"
        return f"ProjectivePoint({affine.x!r}, {affine.y!r})"


def _cswap(a: ProjectivePoint, b: ProjectivePoint, bit: int):
    """Return ``(b, a)`` if *bit* is 1, else ``(a, b)``, via an XOR mask."""
    mask = -bit
    dx = (a._x ^ b._x) & mask
    dy = (a._y ^ b._y) & mask
    dz = (a._z ^ b._z) & mask
    return (
        ProjectivePoint(a._x ^ dx, a._y ^ dy, a._z ^ dz),
        ProjectivePoint(b._x ^ dx, b._y ^ dy, b._z ^ dz),
    )


# ── PublicKey  (compressed point) ───────────────────────────────────────
@dataclass(frozen=True)
class PublicKey:
    """
    Compressed Pallas point: the x-coordinate plus the parity of *y*.

    Always refers to a non-identity point; decompression fails for an
    *x* with no matching *y* on the curve.
    """

    x: Field
    is_odd: bool

    @classmethod
    def from_point(cls, point: Point) -> PublicKey:
        return cls(x=point.x, is_odd=not point.y.is_even())

    @classmethod
    def from_private_key(cls, private_key: Scalar) -> PublicKey:
        """Derive  pk = sk · G  and compress it."""
        if private_key.is_zero():
            raise ValueError("private key must be non-zero")
        return cls.from_point(G.scale(private_key))

    def to_point(self) -> Point:
        """Decompress; raises ``ValueError`` if *x* is not on the curve."""
        y = (self.x ** 3 + Field(B)).sqrt()
        if y is None:
            raise ValueError("public key x-coordinate is not on the Pallas curve")
        if y.is_even() == self.is_odd:
            y = -y
        return Point(self.x, y)

    def to_json(self) -> dict:
        return {"x": str(self.x.value), "isOdd": self.is_odd}


# ── module-level generator ──────────────────────────────────────────────
G = Point(Field(GENERATOR_X), Field(GENERATOR_Y))
