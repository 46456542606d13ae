# Copyright (c) 2026 Signer — MIT License

"""Test suite for ML-DSA-65 signatures.

Tests:
    - Sizes and algorithm descriptor
    - Sign / verify roundtrip (instance, static, functional)
    - Negative verification: wrong key, altered message, signature, public key
    - Length validation (errors) vs. invalid signatures (False)
    - Signing-key decode check
    - Hedged signing and injected randomness
    - Empty-context policy

Run from the project root:
    python -m tools.test_dsa
"""

import os
import sys
import unittest

# Ensure project root is on the import path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from pqkeys import ml_dsa
from pqkeys.dsa import (
    DSAKeyPair,
    SignatureScheme,
    dsa_keygen,
    dsa_sign,
    dsa_verify,
    get_dsa_algorithm_info,
)
from pqkeys.errors import (
    EntropyError,
    InvalidInputError,
    InvalidKeyEncodingError,
    InvalidKeyLengthError,
)
from pqkeys.rng import ChaCha20Rng, SecureRandom


_SIGNER_SEED = bytes(32)
_OTHER_SEED = b"\x02" * 32
_MESSAGE = b"post-quantum signatures"


def _flip(data, index, mask=0x01):
    out = bytearray(data)
    out[index] ^= mask
    return bytes(out)


class TestDSASizes(unittest.TestCase):

    def test_key_sizes(self):
        self.assertEqual(SignatureScheme.key_sizes(), {
            "public_key": 1952,
            "secret_key": 4032,
            "signature": 3309,
        })

    def test_algorithm_info(self):
        info = get_dsa_algorithm_info()
        self.assertEqual(info["algorithm"], "ML-DSA-65")
        self.assertEqual(info["standard"], "FIPS 204")
        self.assertEqual(info["security_level"], "Level 3 (192-bit post-quantum)")
        self.assertEqual(info["public_key_size"], 1952)
        self.assertEqual(info["secret_key_size"], 4032)
        self.assertEqual(info["signature_size"], 3309)


class TestSignatureScheme(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        """Generate keys and one signature once (expensive in pure Python)."""
        cls.signer = SignatureScheme.from_seed(_SIGNER_SEED)
        cls.other = SignatureScheme.from_seed(_OTHER_SEED)
        cls.sig = cls.signer.sign(_MESSAGE)

    # -- keys ---------------------------------------------------------

    def test_key_lengths(self):
        self.assertEqual(len(self.signer.public_key), 1952)
        self.assertEqual(len(self.signer.secret_key), 4032)

    def test_from_seed_deterministic(self):
        again = SignatureScheme.from_seed(_SIGNER_SEED)
        self.assertEqual(again.keypair, self.signer.keypair)

    def test_different_seeds_different_keys(self):
        self.assertNotEqual(self.signer.public_key, self.other.public_key)

    def test_secret_key_starts_with_rho(self):
        self.assertEqual(self.signer.secret_key[:32], self.signer.public_key[:32])

    def test_keypair(self):
        keypair = self.signer.keypair
        self.assertIsInstance(keypair, DSAKeyPair)
        pk, sk = keypair
        self.assertEqual(pk, self.signer.public_key)
        self.assertEqual(sk, self.signer.secret_key)
        self.assertIn("redacted", repr(keypair))
        self.assertNotIn(sk.hex()[:64], repr(keypair))
        self.assertNotIn(sk.hex()[:64], repr(self.signer))

    def test_generate_entropy_failure(self):
        def broken(n):
            raise OSError("entropy pool unavailable")

        with self.assertRaises(EntropyError):
            SignatureScheme.generate(random_source=SecureRandom(broken))

    def test_from_keys_wrong_lengths(self):
        with self.assertRaises(InvalidKeyLengthError):
            SignatureScheme.from_keys(self.signer.public_key[:-1], self.signer.secret_key)
        with self.assertRaises(InvalidKeyLengthError):
            SignatureScheme.from_keys(self.signer.public_key, self.signer.secret_key[:-1])

    def test_from_seed_wrong_length(self):
        with self.assertRaises(InvalidInputError):
            SignatureScheme.from_seed(bytes(16))

    # -- sign / verify ------------------------------------------------

    def test_signature_length(self):
        self.assertEqual(len(self.sig), 3309)

    def test_verify(self):
        self.assertTrue(self.signer.verify(_MESSAGE, self.sig))

    def test_verify_with_key(self):
        self.assertIs(
            SignatureScheme.verify_with_key(self.signer.public_key, _MESSAGE, self.sig),
            True,
        )

    def test_sign_with_key(self):
        sig = SignatureScheme.sign_with_key(self.signer.secret_key, b"static")
        self.assertTrue(self.signer.verify(b"static", sig))

    def test_accepts_bytearray_inputs(self):
        self.assertTrue(SignatureScheme.verify_with_key(
            bytearray(self.signer.public_key), bytearray(_MESSAGE), bytearray(self.sig)
        ))

    def test_hedged_signatures_differ(self):
        sig2 = self.signer.sign(_MESSAGE)
        self.assertNotEqual(sig2, self.sig)
        self.assertTrue(self.signer.verify(_MESSAGE, sig2))

    def test_injected_randomness_is_deterministic(self):
        source = SecureRandom(lambda n: b"\x05" * n)
        a = self.signer.sign(b"fixed", random_source=source)
        b = self.signer.sign(b"fixed", random_source=source)
        self.assertEqual(a, b)
        self.assertEqual(a, ml_dsa.sign(self.signer.secret_key, b"fixed",
                                        ChaCha20Rng(b"\x05" * 32)))

    def test_sign_entropy_failure(self):
        def broken(n):
            raise OSError("entropy pool unavailable")

        with self.assertRaises(EntropyError):
            self.signer.sign(_MESSAGE, random_source=SecureRandom(broken))

    # -- negative verification ----------------------------------------

    def test_wrong_public_key(self):
        self.assertIs(self.other.verify(_MESSAGE, self.sig), False)

    def test_altered_message(self):
        self.assertFalse(self.signer.verify(_flip(_MESSAGE, 0), self.sig))
        self.assertFalse(self.signer.verify(_MESSAGE + b"!", self.sig))

    def test_flipped_signature_bits(self):
        for index in (0, 47, 100, 2000):
            self.assertFalse(self.signer.verify(_MESSAGE, _flip(self.sig, index)),
                             f"bit flip at byte {index} still verified")

    def test_flipped_public_key_bits(self):
        for index in (0, 500, 1951):
            pk = _flip(self.signer.public_key, index)
            self.assertFalse(SignatureScheme.verify_with_key(pk, _MESSAGE, self.sig))

    def test_nonzero_context_does_not_verify(self):
        sig = ml_dsa.sign(self.signer.secret_key, _MESSAGE, ChaCha20Rng(bytes(32)),
                          context=b"other-domain")
        self.assertTrue(ml_dsa.verify(self.signer.public_key, _MESSAGE, sig,
                                      context=b"other-domain"))
        self.assertFalse(self.signer.verify(_MESSAGE, sig))

    # -- validation ---------------------------------------------------

    def test_verify_short_public_key(self):
        with self.assertRaises(InvalidKeyLengthError):
            SignatureScheme.verify_with_key(self.signer.public_key[:-1], _MESSAGE, self.sig)

    def test_verify_wrong_signature_length(self):
        with self.assertRaises(InvalidInputError) as ctx:
            self.signer.verify(_MESSAGE, self.sig[:-1])
        self.assertNotIsInstance(ctx.exception, InvalidKeyLengthError)
        with self.assertRaises(InvalidInputError):
            self.signer.verify(_MESSAGE, self.sig + b"\x00")

    def test_message_must_be_bytes(self):
        with self.assertRaises(InvalidInputError):
            self.signer.sign("text message")
        with self.assertRaises(InvalidInputError):
            self.signer.verify("text message", self.sig)

    def test_sign_with_short_key(self):
        with self.assertRaises(InvalidKeyLengthError):
            SignatureScheme.sign_with_key(self.signer.secret_key[:4031], _MESSAGE)

    def test_sign_with_malformed_key(self):
        sk = bytearray(self.signer.secret_key)
        sk[128] = 0xFF
        with self.assertRaises(InvalidKeyEncodingError):
            SignatureScheme.sign_with_key(bytes(sk), _MESSAGE)

    def test_context_too_long(self):
        with self.assertRaises(InvalidInputError):
            ml_dsa.sign(self.signer.secret_key, _MESSAGE, ChaCha20Rng(bytes(32)),
                        context=bytes(256))


class TestFunctionalDSA(unittest.TestCase):

    def test_keygen_sign_verify(self):
        pk, sk = dsa_keygen(_OTHER_SEED)
        sig = dsa_sign(sk, b"")
        self.assertTrue(dsa_verify(pk, b"", sig))
        self.assertFalse(dsa_verify(pk, b"x", sig))

    def test_keygen_bad_seed(self):
        with self.assertRaises(InvalidInputError):
            dsa_keygen(bytes(31))


if __name__ == "__main__":
    unittest.main()
