"""Test fixtures and utilities."""

import pytest

from pasta_signer.constants import NetworkId
from pasta_signer.curve import G, Point, PublicKey
from pasta_signer.field import Field, Scalar
from pasta_signer.hash_input import HashInput


@pytest.fixture
def private_key() -> Scalar:
    """A fixed non-zero private key."""
    return Scalar(0x3C2F1B0A5E4D6F7081920A1B2C3D4E5F60718293A4B5C6D7E8F9011223344556)


@pytest.fixture
def other_private_key() -> Scalar:
    return Scalar(0x1234)


@pytest.fixture
def public_point(private_key: Scalar) -> Point:
    return G.scale(private_key)


@pytest.fixture
def public_key(private_key: Scalar) -> PublicKey:
    return PublicKey.from_private_key(private_key)


@pytest.fixture
def message() -> HashInput:
    """A message mixing full fields and packed integers."""
    return HashInput(
        fields=(Field(7), Field(2**200 + 11)),
        packed=((1, 1), (42, 32), (0xFFFF, 16)),
    )


@pytest.fixture(params=[NetworkId.MAINNET, NetworkId.TESTNET], ids=["mainnet", "testnet"])
def network(request) -> NetworkId:
    return request.param
