"""
Poseidon sponge over the Pallas base field.

This is the field-native hash used for the signature challenge.  The
construction follows the "Kimchi" instantiation:

    width 3, rate 2, S-box  x ↦ x⁷,  55 full rounds, no partial rounds,
    no initial round-constant layer; each round is  S-box → MDS → ARK.

Absorption adds each rate-sized block of input into the first two state
cells and permutes; input is zero-padded to a multiple of the rate, and
an empty input still permutes once.

The parameter set is process-wide, immutable configuration chosen at
import:

- ``$PASTA_SIGNER_POSEIDON_PARAMS`` may name a JSON file with a complete
  parameter set (entries as decimal or ``0x`` strings).
- Otherwise the built-in set is used: the published Kimchi ``fp`` MDS
  matrix (:data:`KIMCHI_MDS`) with round constants expanded from BLAKE2b.
  The Kimchi round-constant table is not bundled, so challenges match
  Mina only when the full table is loaded from a file.

References
----------
- Grassi, Khovratovich, Rechberger, Roy, Schofnegger (2021).
  "Poseidon: A New Hash Function for Zero-Knowledge Proof Systems."
  USENIX Security 2021.
- o1-labs ``proof-systems``, ``poseidon/src/pasta/fp_kimchi.rs``.
"""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence, Tuple, Union

import msgspec

from .field import P, Field

logger = logging.getLogger(__name__)

ENV_POSEIDON_PARAMS = "PASTA_SIGNER_POSEIDON_PARAMS"

Matrix = Tuple[Tuple[int, ...], ...]

FULL_ROUNDS = 55
WIDTH = 3
RATE = 2
ALPHA = 7

# Kimchi fp MDS: a Cauchy matrix, M[i][j] = 1 / (x_i + y_j)
KIMCHI_MDS: Matrix = (
    (
        12035446894107573964500871153637039653510326950134440362813193268448863222019,
        25461374787957152039031444204194007219326765802730624564074257060397341542093,
        27667907157110496066452777015908813333407980290333709698851344970789663080149,
    ),
    (
        4491931056866994439025447213644536587424785196363427220456343191847333476930,
        14743631939509747387607291926699970421064627808101543132147270746750887019919,
        9448400033389617131295304336481030167723486090288313334230651810071857784477,
    ),
    (
        10525578725509990281643336361904863911009900817790387635342941550657754064843,
        27437632000253211280915908546961303399777448677029255413769125486614773776695,
        27566319851776897085443681456689352477426926500749993803132851225169606086988,
    ),
)

_ROUND_CONSTANT_TAG = b"pasta_signer/poseidon/pallas/ark"


# ── parameter set ───────────────────────────────────────────────────────
class _ParamsFile(msgspec.Struct, frozen=True):
    """On-disk JSON shape; big integers travel as strings."""

    full_rounds: int
    width: int
    rate: int
    alpha: int
    mds: List[List[str]]
    round_constants: List[List[str]]


@dataclass(frozen=True)
class PoseidonParams:
    """Immutable Poseidon instantiation over  F_p."""

    full_rounds: int
    width: int
    rate: int
    alpha: int
    mds: Matrix
    round_constants: Matrix

    def __post_init__(self) -> None:
        object.__setattr__(self, "mds", tuple(tuple(row) for row in self.mds))
        object.__setattr__(
            self, "round_constants", tuple(tuple(row) for row in self.round_constants),
        )
        if self.width < 2 or not 1 <= self.rate < self.width:
            raise ValueError(f"need 1 ≤ rate < width, got rate={self.rate} width={self.width}")
        if self.full_rounds < 1:
            raise ValueError("full_rounds must be ≥ 1")
        if self.alpha < 3:
            raise ValueError("alpha must be ≥ 3")
        if len(self.mds) != self.width or any(len(row) != self.width for row in self.mds):
            raise ValueError(f"mds must be {self.width}×{self.width}")
        if len(self.round_constants) != self.full_rounds or any(
            len(row) != self.width for row in self.round_constants
        ):
            raise ValueError(
                f"round_constants must be {self.full_rounds}×{self.width}"
            )
        for row in self.mds + self.round_constants:
            for v in row:
                if not 0 <= v < P:
                    raise ValueError("parameter entry is not a canonical field element")

    # serialisation ----------------------------------------------------------
    def to_json(self) -> bytes:
        return msgspec.json.encode(_ParamsFile(
            full_rounds=self.full_rounds,
            width=self.width,
            rate=self.rate,
            alpha=self.alpha,
            mds=[[hex(v) for v in row] for row in self.mds],
            round_constants=[[hex(v) for v in row] for row in self.round_constants],
        ))

    @classmethod
    def from_json(cls, data: Union[bytes, str]) -> PoseidonParams:
        try:
            raw = msgspec.json.decode(data, type=_ParamsFile)
        except msgspec.DecodeError as e:
            raise ValueError(f"invalid Poseidon parameter file: {e}") from e
        return cls(
            full_rounds=raw.full_rounds,
            width=raw.width,
            rate=raw.rate,
            alpha=raw.alpha,
            mds=_parse_matrix(raw.mds),
            round_constants=_parse_matrix(raw.round_constants),
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> PoseidonParams:
        return cls.from_json(Path(path).read_bytes())


def _parse_matrix(rows: List[List[str]]) -> Matrix:
    try:
        return tuple(tuple(int(v, 0) for v in row) for row in rows)
    except ValueError as e:
        raise ValueError(f"invalid Poseidon parameter entry: {e}") from e


def _round_constant(r: int, i: int) -> int:
    h = hashlib.blake2b(digest_size=32)
    h.update(_ROUND_CONSTANT_TAG)
    h.update(r.to_bytes(4, "little"))
    h.update(i.to_bytes(4, "little"))
    digest = bytearray(h.digest())
    digest[31] &= 0x3F                      # < 2^254 < p
    return int.from_bytes(digest, "little")


def built_in_params() -> PoseidonParams:
    """Kimchi-shaped parameters: Kimchi MDS, BLAKE2b-expanded round constants."""
    return PoseidonParams(
        full_rounds=FULL_ROUNDS,
        width=WIDTH,
        rate=RATE,
        alpha=ALPHA,
        mds=KIMCHI_MDS,
        round_constants=tuple(
            tuple(_round_constant(r, i) for i in range(WIDTH))
            for r in range(FULL_ROUNDS)
        ),
    )


def _select_params() -> PoseidonParams:
    path = os.getenv(ENV_POSEIDON_PARAMS)
    if path:
        logger.debug(f"Loading Poseidon parameters from {path}")
        return PoseidonParams.load(path)
    logger.debug("Using built-in Poseidon parameters")
    return built_in_params()


PARAMS = _select_params()


# ── sponge ──────────────────────────────────────────────────────────────
def permutation(state: List[int], params: PoseidonParams = PARAMS) -> List[int]:
    """Apply the full-round permutation; returns a new state."""
    alpha = params.alpha
    mds = params.mds
    for rc in params.round_constants:
        state = [pow(s, alpha, P) for s in state]
        state = [
            (sum(m * s for m, s in zip(row, state)) + c) % P
            for row, c in zip(mds, rc)
        ]
    return state


def initial_state(params: PoseidonParams = PARAMS) -> List[int]:
    return [0] * params.width


def update(
    state: List[int],
    inputs: Sequence[int],
    params: PoseidonParams = PARAMS,
) -> List[int]:
    """Absorb *inputs* into *state*; returns a new state."""
    state = list(state)
    if not inputs:
        return permutation(state, params)
    rate = params.rate
    n = -(-len(inputs) // rate) * rate
    padded = list(inputs) + [0] * (n - len(inputs))
    for start in range(0, n, rate):
        for i in range(rate):
            state[i] = (state[i] + padded[start + i]) % P
        state = permutation(state, params)
    return state


def poseidon_hash(inputs: Sequence[Field], params: PoseidonParams = PARAMS) -> Field:
    """Unsalted hash: absorb into the zero state, squeeze ``state[0]``."""
    state = update(initial_state(params), [f.value for f in inputs], params)
    return Field(state[0])
