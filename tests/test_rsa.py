"""
Unit tests for RSA.

Tests:
- Textbook vector (p=61, q=53)
- Key validity: e*d = 1 (mod lambda(n))
- Encrypt / decrypt round trip, sign / verify
- Configuration and failure modes
"""

import math
from concurrent.futures import ThreadPoolExecutor

import pytest

from modvault.core_math.bigint import BigInt
from modvault.core_math.random_sampler import RandomSampler, SystemEntropy
from modvault.errors import (
    InvalidExponent, InvalidParameters, MessageTooLarge, PrimeGenerationExhausted
)
from modvault.primality.prime_gen import generate_prime
from modvault.rsa.rsa_math import (
    KeyGenConfig, RSAKeyPair, RSAPrivateKey, RSAPublicKey, generate_keypair,
    rsa_encrypt, rsa_decrypt, rsa_sign, rsa_verify,
    POLICY_ADVANCE, DEFAULT_PUBLIC_EXPONENT
)

from tests.conftest import ZeroEntropy

FAST = KeyGenConfig(rounds=20)


def _carmichael(p: int, q: int) -> int:
    return (p - 1) * (q - 1) // math.gcd(p - 1, q - 1)


@pytest.fixture
def keypair(sampler) -> RSAKeyPair:
    return generate_keypair(256, FAST, sampler)


class TestTextbookVector:
    """p = 61, q = 53, e = 17."""

    def test_carmichael_key(self):
        keypair = RSAKeyPair.from_primes(61, 53, e=17)
        assert keypair.modulus == 3233
        assert keypair.private_exponent == 413  # 17^-1 mod lcm(60, 52) = 780

    def test_euler_key(self):
        keypair = RSAKeyPair.from_primes(61, 53, e=17, use_carmichael=False)
        assert keypair.private_exponent == 2753  # 17^-1 mod 3120

    def test_encrypt_decrypt(self):
        keypair = RSAKeyPair.from_primes(61, 53, e=17)
        assert keypair.encrypt(65) == 2790
        assert keypair.decrypt(2790) == 65


class TestKeyGeneration:
    """Unit tests for key generation."""

    def test_key_validity(self, sampler):
        """(e * d) mod lambda(n) == 1 for keys derived from generated primes."""
        for _ in range(3):
            p = generate_prime(64, 20, sampler)
            q = generate_prime(64, 20, sampler)
            if p == q:
                continue
            keypair = RSAKeyPair.from_primes(p, q)
            lam = _carmichael(int(p), int(q))
            assert math.gcd(int(keypair.public_exponent), lam) == 1
            assert (int(keypair.public_exponent) * int(keypair.private_exponent)) % lam == 1
            assert keypair.modulus == p * q

    def test_generated_key_shape(self, keypair):
        assert keypair.public_exponent == DEFAULT_PUBLIC_EXPONENT
        assert keypair.key_size in (255, 256)
        assert keypair.public_key.n == keypair.private_key.n

    def test_only_public_and_private_parts_kept(self, keypair):
        """The key pair exposes (n, e) and (n, d) and nothing else secret."""
        assert set(keypair.public_key.to_dict()) == {'n', 'e'}
        assert set(keypair.private_key.to_dict()) == {'n', 'd'}
        assert not hasattr(keypair, '_p')
        assert not hasattr(keypair, '_q')

    def test_generate_classmethod(self, sampler):
        keypair = RSAKeyPair.generate(64, FAST, sampler)
        assert keypair.decrypt(keypair.encrypt(12345)) == 12345

    def test_small_exponent_with_advance_policy(self, sampler):
        config = KeyGenConfig(rounds=20, public_exponent=3, exponent_policy=POLICY_ADVANCE)
        for _ in range(3):
            keypair = generate_keypair(64, config, sampler)
            assert keypair.public_exponent.is_odd()
            assert keypair.public_exponent >= 3
            assert keypair.decrypt(keypair.encrypt(999)) == 999

    def test_small_exponent_with_regenerate_policy(self, sampler):
        config = KeyGenConfig(rounds=20, public_exponent=3, exponent_retries=64)
        keypair = generate_keypair(64, config, sampler)
        assert keypair.public_exponent == 3
        assert keypair.decrypt(keypair.encrypt(999)) == 999

    def test_euler_totient_option(self, sampler):
        config = KeyGenConfig(rounds=20, use_carmichael=False)
        keypair = generate_keypair(64, config, sampler)
        assert keypair.decrypt(keypair.encrypt(4)) == 4

    def test_key_size_too_small(self, sampler):
        with pytest.raises(ValueError):
            generate_keypair(8, FAST, sampler)

    @pytest.mark.parametrize("bits", [17, 65, 257])
    def test_odd_key_size_rejected(self, sampler, bits):
        """An odd size cannot be split into two equal prime sizes."""
        with pytest.raises(ValueError):
            generate_keypair(bits, FAST, sampler)

    def test_concurrent_generation(self):
        """Independent key generations can share one system-entropy sampler."""
        sampler = RandomSampler(SystemEntropy())
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [pool.submit(generate_keypair, 64, FAST, sampler) for _ in range(2)]
            keypairs = [future.result() for future in futures]

        assert keypairs[0].modulus != keypairs[1].modulus
        for keypair in keypairs:
            assert keypair.key_size in (63, 64)
            assert keypair.decrypt(keypair.encrypt(424242)) == 424242

    def test_prime_search_exhausted(self):
        """Candidates are always 2^7 + 1 = 129 (composite); generation must fail."""
        with pytest.raises(PrimeGenerationExhausted):
            generate_keypair(16, KeyGenConfig(rounds=5, max_attempts=5), RandomSampler(ZeroEntropy()))

    def test_distinct_primes_required(self):
        """Candidates are always 2^8 + 1 = 257 (prime), so q never differs from p."""
        with pytest.raises(PrimeGenerationExhausted):
            generate_keypair(18, KeyGenConfig(rounds=5, max_attempts=5), RandomSampler(ZeroEntropy()))


class TestKeyGenConfig:
    """Configuration validation."""

    @pytest.mark.parametrize("kwargs", [
        {'rounds': 0},
        {'max_attempts': 0},
        {'exponent_retries': 0},
        {'exponent_policy': 'bogus'},
    ])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ValueError):
            KeyGenConfig(**kwargs)

    @pytest.mark.parametrize("e", [1, 2, 4, 65536])
    def test_invalid_public_exponent(self, e):
        with pytest.raises(InvalidExponent):
            KeyGenConfig(public_exponent=e)

    def test_defaults(self):
        config = KeyGenConfig()
        assert config.public_exponent == 65537
        assert config.rounds >= 20
        assert config.use_carmichael


class TestFromPrimes:
    """Key derivation from caller-supplied primes."""

    def test_exponent_not_coprime(self):
        # lambda = lcm(6, 10) = 30, gcd(3, 30) = 3
        with pytest.raises(InvalidExponent):
            RSAKeyPair.from_primes(7, 11, e=3)

    def test_equal_primes_rejected(self):
        with pytest.raises(InvalidParameters):
            RSAKeyPair.from_primes(61, 61, e=17)

    def test_tiny_primes_rejected(self):
        with pytest.raises(InvalidParameters):
            RSAKeyPair.from_primes(2, 61, e=17)

    def test_even_exponent_rejected(self):
        with pytest.raises(InvalidExponent):
            RSAKeyPair.from_primes(61, 53, e=18)

    def test_mismatched_moduli(self):
        with pytest.raises(InvalidParameters):
            RSAKeyPair(RSAPublicKey(3233, 17), RSAPrivateKey(3127, 413))


class TestEncryption:
    """Encrypt / decrypt."""

    def test_round_trip(self, keypair, sampler):
        n = keypair.modulus
        messages = [0, 1, 2, 42, n - 1, n - 2] + [sampler.random_below(n) for _ in range(10)]
        for m in messages:
            c = rsa_encrypt(m, keypair.public_key)
            assert 0 <= c < n
            assert rsa_decrypt(c, keypair.private_key) == m

    def test_ciphertext_differs_from_message(self, keypair):
        assert keypair.encrypt(12345678901234567890) != 12345678901234567890

    def test_message_too_large(self, keypair):
        with pytest.raises(MessageTooLarge):
            keypair.encrypt(keypair.modulus)
        with pytest.raises(MessageTooLarge):
            keypair.encrypt(keypair.modulus + 5)

    def test_negative_message(self, keypair):
        with pytest.raises(MessageTooLarge):
            keypair.encrypt(-1)

    def test_ciphertext_out_of_range(self, keypair):
        with pytest.raises(MessageTooLarge):
            keypair.decrypt(keypair.modulus)

    def test_bytes_round_trip(self, keypair):
        data = b"\x00\x00hello rsa"
        ciphertext = keypair.encrypt_bytes(data)
        assert len(ciphertext) == keypair.public_key.byte_length
        assert keypair.decrypt_bytes(ciphertext, len(data)) == data
        assert keypair.decrypt_bytes(ciphertext) == b"hello rsa"

    def test_bytes_too_long(self, keypair):
        with pytest.raises(MessageTooLarge):
            keypair.encrypt_bytes(b"\xff" * 40)


class TestSignatures:
    """Textbook sign / verify."""

    def test_sign_verify(self, keypair):
        signature = rsa_sign(12345, keypair.private_key)
        assert rsa_verify(12345, signature, keypair.public_key)

    def test_tampered_signature_rejected(self, keypair):
        signature = keypair.sign(12345)
        assert not keypair.verify(12345, signature + 1)
        assert not keypair.verify(12346, signature)

    def test_out_of_range_signature_rejected(self, keypair):
        assert not keypair.verify(1, keypair.modulus)
        assert not keypair.verify(keypair.modulus, 1)


class TestExport:
    """Per-component key export."""

    def test_public_key_dict_round_trip(self, keypair):
        exported = keypair.public_key.to_dict()
        assert RSAPublicKey.from_dict(exported) == keypair.public_key

    def test_private_key_dict_round_trip(self, keypair):
        exported = keypair.private_key.to_dict()
        assert RSAPrivateKey.from_dict(exported) == keypair.private_key

    def test_components_as_bytes(self, keypair):
        n_bytes = keypair.modulus.to_bytes()
        assert BigInt.from_bytes(n_bytes) == keypair.modulus

    def test_private_repr_hides_d(self, keypair):
        text = repr(keypair.private_key) + repr(keypair)
        assert str(keypair.private_exponent) not in text
        assert keypair.private_exponent.to_str(16) not in text
