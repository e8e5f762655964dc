"""Tests for Schnorr signing and verification."""

import logging

import pytest

import pasta_signer.signing as signing
from pasta_signer.constants import NetworkId
from pasta_signer.curve import G, Point, PublicKey
from pasta_signer.field import Field, Scalar
from pasta_signer.hash import hash_message
from pasta_signer.hash_input import HashInput
from pasta_signer.signing import (
    NonceDerivationError,
    Signature,
    sign,
    sign_field_element,
    verify,
    verify_field_element,
)

G_PROJ = G.to_projective()


def _other(network: NetworkId) -> NetworkId:
    return NetworkId.TESTNET if network is NetworkId.MAINNET else NetworkId.MAINNET


def test_sign_and_verify(message: HashInput, private_key: Scalar,
                         public_key: PublicKey, network: NetworkId) -> None:
    sig = sign(message, private_key, network)
    assert verify(sig, message, public_key, network) is True


@pytest.mark.parametrize("k", [1, 2, 0x1234, 2**253 + 17])
def test_sign_and_verify_various_keys(k: int) -> None:
    sk = Scalar(k)
    pk = PublicKey.from_private_key(sk)
    msg = HashInput(fields=(Field(k), Field(3)), packed=((k % 256, 8),))
    assert verify(sign(msg, sk, NetworkId.TESTNET), msg, pk, NetworkId.TESTNET)


def test_deterministic(message: HashInput, private_key: Scalar, network: NetworkId) -> None:
    a = sign(message, private_key, network)
    b = sign(message, private_key, network)
    assert a == b
    assert a.to_bytes() == b.to_bytes()


def test_network_separation(message: HashInput, private_key: Scalar,
                            public_key: PublicKey, network: NetworkId) -> None:
    sig = sign(message, private_key, network)
    assert verify(sig, message, public_key, _other(network)) is False
    assert sig != sign(message, private_key, _other(network))


def test_commitment_has_even_y(message: HashInput, private_key: Scalar,
                               public_point: Point, network: NetworkId) -> None:
    sig = sign(message, private_key, network)
    e = hash_message(message, public_point, sig.r, network)
    R = (sig.s * G_PROJ - e * public_point.to_projective()).to_affine()
    assert R is not None
    assert R.x == sig.r
    assert R.y.is_even()


class TestTamper:
    """Modified signatures, messages and keys are rejected."""

    def test_modified_r(self, message: HashInput, private_key: Scalar,
                        public_key: PublicKey) -> None:
        sig = sign(message, private_key, NetworkId.MAINNET)
        bad = Signature(r=sig.r + Field(1), s=sig.s)
        assert verify(bad, message, public_key, NetworkId.MAINNET) is False

    def test_modified_s(self, message: HashInput, private_key: Scalar,
                        public_key: PublicKey) -> None:
        sig = sign(message, private_key, NetworkId.MAINNET)
        for bit in (0, 1, 100, 253):
            bad = Signature(r=sig.r, s=Scalar(sig.s.value ^ (1 << bit)))
            assert verify(bad, message, public_key, NetworkId.MAINNET) is False

    def test_different_message(self, message: HashInput, private_key: Scalar,
                               public_key: PublicKey) -> None:
        sig = sign(message, private_key, NetworkId.MAINNET)
        other = HashInput(fields=message.fields, packed=message.packed[:-1])
        assert verify(sig, other, public_key, NetworkId.MAINNET) is False

    def test_different_public_key(self, message: HashInput, private_key: Scalar,
                                  other_private_key: Scalar) -> None:
        sig = sign(message, private_key, NetworkId.MAINNET)
        other_pk = PublicKey.from_private_key(other_private_key)
        assert verify(sig, message, other_pk, NetworkId.MAINNET) is False

    def test_flipped_public_key_parity(self, message: HashInput, private_key: Scalar,
                                       public_key: PublicKey) -> None:
        sig = sign(message, private_key, NetworkId.MAINNET)
        flipped = PublicKey(x=public_key.x, is_odd=not public_key.is_odd)
        assert verify(sig, message, flipped, NetworkId.MAINNET) is False


class TestRejection:
    """Verification failures are reported as False, never raised."""

    def test_odd_y_twin_rejected(self, message: HashInput, private_key: Scalar,
                                 public_point: Point, public_key: PublicKey) -> None:
        sig = sign(message, private_key, NetworkId.TESTNET)
        e = hash_message(message, public_point, sig.r, NetworkId.TESTNET)
        # s' = 2·e·d − s  recomputes  −R: same x, odd y
        twin = Signature(r=sig.r, s=Scalar(2) * e * private_key - sig.s)
        R = (twin.s * G_PROJ - e * public_point.to_projective()).to_affine()
        assert R is not None
        assert R.x == sig.r
        assert not R.y.is_even()
        assert verify(twin, message, public_key, NetworkId.TESTNET) is False

    def test_commitment_at_infinity(self, message: HashInput, private_key: Scalar,
                                    public_point: Point, public_key: PublicKey) -> None:
        r = Field(12345)
        e = hash_message(message, public_point, r, NetworkId.TESTNET)
        sig = Signature(r=r, s=e * private_key)
        assert verify(sig, message, public_key, NetworkId.TESTNET) is False

    def test_public_key_off_curve(self, message: HashInput, private_key: Scalar) -> None:
        sig = sign(message, private_key, NetworkId.TESTNET)
        x = 0
        while (Field(x) ** 3 + Field(5)).sqrt() is not None:
            x += 1
        assert verify(sig, message, PublicKey(Field(x), False), NetworkId.TESTNET) is False

    def test_zero_signature(self, message: HashInput, public_key: PublicKey) -> None:
        sig = Signature(r=Field(0), s=Scalar(0))
        assert verify(sig, message, public_key, NetworkId.MAINNET) is False


class TestSigningErrors:
    """Fatal signing conditions."""

    def test_zero_private_key(self, message: HashInput) -> None:
        with pytest.raises(ValueError, match="non-zero"):
            sign(message, Scalar(0), NetworkId.TESTNET)

    def test_zero_nonce_is_fatal(self, message: HashInput, private_key: Scalar,
                                 monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(signing, "derive_nonce", lambda *args: Scalar(0))
        with pytest.raises(NonceDerivationError, match="derived nonce is 0"):
            sign(message, private_key, NetworkId.TESTNET)

    def test_zero_nonce_error_is_runtime_error(self) -> None:
        assert issubclass(NonceDerivationError, RuntimeError)

    def test_unknown_network(self, message: HashInput, private_key: Scalar) -> None:
        with pytest.raises(ValueError, match="unknown network id"):
            sign(message, private_key, "devnet")


class TestFieldElementWrappers:
    """The single-field-element scenario."""

    def test_scenario(self, private_key: Scalar, public_key: PublicKey) -> None:
        sig = sign_field_element(Field(7), private_key, NetworkId.TESTNET)
        assert sig == sign_field_element(Field(7), private_key, NetworkId.TESTNET)
        assert verify_field_element(sig, Field(7), public_key, NetworkId.TESTNET) is True
        assert verify_field_element(sig, Field(7), public_key, NetworkId.MAINNET) is False
        assert verify_field_element(sig, Field(8), public_key, NetworkId.TESTNET) is False

    def test_wrapper_matches_hash_input(self, private_key: Scalar,
                                        public_key: PublicKey) -> None:
        sig = sign(HashInput.of_fields(Field(7)), private_key, "testnet")
        assert sig == sign_field_element(Field(7), private_key, NetworkId.TESTNET)
        assert verify_field_element(sig, Field(7), public_key, "testnet")


class TestKnownAnswers:
    """Values fixed by the curve and the BLAKE2b nonce alone."""

    def test_commitment_x(self) -> None:
        # k' = 0x39a2...a295, and k'·G has odd y, so k = −k'
        sig = sign_field_element(Field(7), Scalar(0x1234), NetworkId.TESTNET)
        assert sig.r == Field(
            12856213424053939462491028274858199841140146050120256007473728033625353334332
        )


class TestLogging:
    """Debug logging of signing calls."""

    def test_sign_and_verify_log_network(self, caplog: pytest.LogCaptureFixture,
                                         message: HashInput, private_key: Scalar,
                                         public_key: PublicKey) -> None:
        with caplog.at_level(logging.DEBUG, logger="pasta_signer.signing"):
            sig = sign(message, private_key, NetworkId.MAINNET)
            assert verify(sig, message, public_key, NetworkId.MAINNET)
        messages = [r.getMessage() for r in caplog.records]
        assert "Signed message for mainnet" in messages
        assert "Verifying signature for mainnet" in messages
        assert hex(private_key.value)[2:] not in caplog.text
        assert str(private_key.value) not in caplog.text
