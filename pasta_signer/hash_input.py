"""
Structured hash inputs and their chunked packing into field elements.

A ``HashInput`` is the uniform shape of anything that gets signed: a
list of full base-field elements plus a list of small integers, each
with a declared bit width.  ``pack_to_fields`` flattens it so that the
small integers share field elements instead of taking one each.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .field import Field, FIELD_BITS

# packed chunks stay strictly below the field width
_MAX_PACKED_BITS = FIELD_BITS - 1


@dataclass(frozen=True)
class HashInput:
    """
    Signable message: ``fields`` followed by bit-``packed`` integers.

    ``packed`` holds ``(value, bits)`` pairs with  0 ≤ value < 2^bits.
    """

    fields: Tuple[Field, ...] = ()
    packed: Tuple[Tuple[int, int], ...] = ()

    def __post_init__(self) -> None:
        fields = tuple(self.fields)
        packed = tuple((int(v), int(n)) for v, n in self.packed)
        for f in fields:
            if not isinstance(f, Field):
                raise ValueError(f"hash input fields must be Field, got {type(f).__name__}")
        for value, bits in packed:
            if not 1 <= bits <= _MAX_PACKED_BITS:
                raise ValueError(f"packed width must be in 1..{_MAX_PACKED_BITS}, got {bits}")
            if not 0 <= value < (1 << bits):
                raise ValueError(f"packed value {value} does not fit in {bits} bits")
        object.__setattr__(self, "fields", fields)
        object.__setattr__(self, "packed", packed)

    @classmethod
    def empty(cls) -> HashInput:
        return cls()

    @classmethod
    def of_fields(cls, *fields: Field) -> HashInput:
        return cls(fields=fields)

    def append(self, other: HashInput) -> HashInput:
        """Concatenate; ``self`` comes first in both lists."""
        return HashInput(
            fields=self.fields + other.fields,
            packed=self.packed + other.packed,
        )


def pack_to_fields(message: HashInput) -> List[Field]:
    """
    Flatten *message* into base-field elements.

    Plain fields come first, unchanged.  Packed pairs are then
    accumulated most-significant-first into a running chunk; once adding
    the next pair would bring the chunk to 255 bits or more, the chunk
    is emitted and a new one starts with that pair.
    """
    if not message.packed:
        return list(message.fields)

    chunks: List[Field] = []
    current = 0
    size = 0
    for value, bits in message.packed:
        size += bits
        if size < FIELD_BITS:
            current = (current << bits) + value
        else:
            chunks.append(Field(current))
            size = bits
            current = value
    chunks.append(Field(current))
    return list(message.fields) + chunks

