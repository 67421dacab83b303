"""
Security tests for modvault.

Tests specifically for security-related scenarios:
- Secret values never reach log output or repr()
- Hostile peer values and malformed parameters
- Immutability of values shared between parties
"""

import logging

import pytest

from modvault import (
    BigInt, DHParameters, DiffieHellmanParty, DeterministicEntropy, KeyGenConfig,
    ModVaultError, RSAKeyPair, generate_keypair
)
from modvault.errors import (
    DivisionByZero, InvalidBound, InvalidModulus, InvalidParameters, MessageTooLarge,
    NoInverseExists, PrimeGenerationExhausted, Underflow, InvalidExponent
)

MERSENNE_61 = 2 ** 61 - 1


def _secret_forms(value: BigInt):
    return [str(value), value.to_str(16), hex(int(value))]


class TestLogHygiene:
    """Secrets must not appear in log records."""

    def test_rsa_keygen_logs_no_private_exponent(self, sampler, caplog):
        with caplog.at_level(logging.DEBUG, logger="modvault"):
            keypair = generate_keypair(128, KeyGenConfig(rounds=20), sampler)
        assert caplog.records, "key generation should log progress at DEBUG"
        for secret in _secret_forms(keypair.private_exponent):
            assert secret not in caplog.text

    def test_dh_party_logs_no_private_exponent(self, sampler, caplog):
        with caplog.at_level(logging.DEBUG, logger="modvault"):
            party = DiffieHellmanParty(DHParameters(MERSENNE_61, 3), sampler, verify_rounds=10)
            party.compute_shared_secret(DiffieHellmanParty(DHParameters(MERSENNE_61, 3), sampler).public_value)
        for secret in _secret_forms(party._private_exponent):
            assert secret not in caplog.text

    def test_package_logger_is_silent_by_default(self):
        handlers = logging.getLogger("modvault").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)


class TestReprHygiene:
    """Secrets must not appear in repr()."""

    def test_dh_party_repr(self):
        party = DiffieHellmanParty(DHParameters(MERSENNE_61, 3), private_exponent=123456789)
        assert "123456789" not in repr(party)
        assert str(party.public_value) in repr(party)

    def test_rsa_keypair_repr(self):
        keypair = RSAKeyPair.from_primes(61, 53, e=17)
        assert "413" not in repr(keypair)
        assert "413" not in repr(keypair.private_key)

    def test_entropy_repr(self):
        assert "hunter2" not in repr(DeterministicEntropy("hunter2"))


class TestHostilePeers:
    """Values an attacker controls."""

    @pytest.mark.parametrize("peer", [0, 1, MERSENNE_61, MERSENNE_61 + 1, -3])
    def test_degenerate_peer_values_rejected(self, sampler, peer):
        """0 and 1 fix the shared secret; values >= p are not group elements."""
        party = DiffieHellmanParty(DHParameters(MERSENNE_61, 3), sampler)
        with pytest.raises(InvalidParameters):
            party.compute_shared_secret(peer)

    def test_degenerate_generator_rejected(self, sampler):
        with pytest.raises(InvalidParameters):
            DiffieHellmanParty(DHParameters(MERSENNE_61, MERSENNE_61 - 1), sampler)

    def test_oversized_ciphertext_rejected(self):
        keypair = RSAKeyPair.from_primes(61, 53, e=17)
        with pytest.raises(MessageTooLarge):
            keypair.decrypt(3233 + 65)

    def test_forged_signature_out_of_range(self):
        """s and s + n must not both verify."""
        keypair = RSAKeyPair.from_primes(61, 53, e=17)
        signature = keypair.sign(65)
        assert keypair.verify(65, signature)
        assert not keypair.verify(65, signature + keypair.modulus)


class TestImmutability:
    """Shared values cannot be altered in place."""

    def test_bigint_is_immutable(self):
        value = BigInt(42)
        with pytest.raises(AttributeError):
            value._digits = (7,)

    def test_in_place_operators_rebind(self):
        a = BigInt(5)
        b = a
        a += 1
        assert b == 5
        assert a == 6

    def test_keys_are_frozen(self):
        keypair = RSAKeyPair.from_primes(61, 53, e=17)
        with pytest.raises(AttributeError):
            keypair.public_key.e = 3

    def test_parameters_are_frozen(self):
        with pytest.raises(AttributeError):
            DHParameters(23, 5).g = 2


class TestErrorHierarchy:
    """Every library error is a ModVaultError and a familiar builtin."""

    @pytest.mark.parametrize("error,builtin", [
        (InvalidModulus, ValueError),
        (DivisionByZero, ZeroDivisionError),
        (Underflow, ArithmeticError),
        (NoInverseExists, ValueError),
        (InvalidBound, ValueError),
        (InvalidParameters, ValueError),
        (InvalidExponent, ValueError),
        (MessageTooLarge, ValueError),
        (PrimeGenerationExhausted, RuntimeError),
    ])
    def test_error_bases(self, error, builtin):
        assert issubclass(error, ModVaultError)
        assert issubclass(error, builtin)

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZero):
            BigInt(10) // 0
        with pytest.raises(ZeroDivisionError):
            BigInt(10) % BigInt(0)

    def test_unsigned_underflow(self):
        with pytest.raises(Underflow):
            BigInt(3).sub(5)
