# Copyright (c) 2026 Signer — MIT License

"""ML-DSA-65 digital signatures with strict size validation.

SignatureScheme holds one immutable keypair and mirrors KeyEncapsulation:
instance methods use the held key, static methods take it explicitly.

Sizes:
    Public key:  1,952 bytes
    Secret key:  4,032 bytes
    Signature:   3,309 bytes

Signing is hedged (fresh 32-byte randomness per signature) and always uses
the empty FIPS 204 context string. Malformed inputs raise; a well-formed
signature that does not verify returns False.
"""

import logging
import time
from typing import NamedTuple

from . import ml_dsa
from .errors import InvalidInputError, InvalidKeyLengthError
from .rng import rng_from_seed, seeded_rng

logger = logging.getLogger(__name__)

# Sizes (exported for client-side validation)
DSA_PUBLIC_KEY_SIZE = ml_dsa.PK_LEN     # 1,952
DSA_SECRET_KEY_SIZE = ml_dsa.SK_LEN     # 4,032
DSA_SIGNATURE_SIZE = ml_dsa.SIG_LEN     # 3,309

DSA_ALGORITHM = "ML-DSA-65"
DSA_STANDARD = "FIPS 204"
DSA_SECURITY_LEVEL = "Level 3 (192-bit post-quantum)"


class DSAKeyPair(NamedTuple):
    public_key: bytes
    secret_key: bytes

    def __repr__(self):
        return (f"DSAKeyPair(public_key=<{len(self.public_key)} bytes>, "
                f"secret_key=<redacted>)")


def _as_bytes(value, what):
    if isinstance(value, str) or not isinstance(value, (bytes, bytearray, memoryview)):
        logger.debug("Rejected %s of type %s", what, type(value).__name__)
        raise InvalidInputError(
            f"{what} must be bytes-like, got {type(value).__name__}"
        )
    return bytes(value)


def _check_length(value, expected, what, error):
    value = _as_bytes(value, what)
    if len(value) != expected:
        logger.debug("Rejected %s of %d bytes", what, len(value))
        raise error(
            f"Invalid {what} length: expected {expected}, got {len(value)}"
        )
    return value


def _elapsed_ms(start):
    return (time.perf_counter() - start) * 1000.0


def _sign(secret_key, message, random_source):
    sk = _check_length(secret_key, DSA_SECRET_KEY_SIZE, "secret key",
                       InvalidKeyLengthError)
    message = _as_bytes(message, "message")
    sk = ml_dsa.decode_signing_key(sk)
    return ml_dsa.sign(sk, message, seeded_rng(random_source))


class SignatureScheme:
    """An ML-DSA-65 signing identity."""

    __slots__ = ("_public_key", "_secret_key")

    def __init__(self, public_key, secret_key):
        self._public_key = _check_length(public_key, DSA_PUBLIC_KEY_SIZE,
                                         "public key", InvalidKeyLengthError)
        self._secret_key = _check_length(secret_key, DSA_SECRET_KEY_SIZE,
                                         "secret key", InvalidKeyLengthError)

    @classmethod
    def generate(cls, random_source=None):
        start = time.perf_counter()
        pk, sk = ml_dsa.keygen(seeded_rng(random_source))
        logger.debug("ML-DSA-65 key generation took %.2fms", _elapsed_ms(start))
        return cls(pk, sk)

    @classmethod
    def from_seed(cls, seed):
        """Deterministic keypair from a 32-byte seed (SHA3-256, then ChaCha20)."""
        start = time.perf_counter()
        pk, sk = ml_dsa.keygen(rng_from_seed(seed))
        logger.debug("Deterministic ML-DSA-65 key generation took %.2fms",
                     _elapsed_ms(start))
        return cls(pk, sk)

    @classmethod
    def from_keys(cls, public_key, secret_key):
        """Wrap existing keys. Pairing is the caller's responsibility."""
        return cls(public_key, secret_key)

    @property
    def public_key(self):
        return self._public_key

    @property
    def secret_key(self):
        return self._secret_key

    @property
    def keypair(self):
        return DSAKeyPair(self._public_key, self._secret_key)

    def __repr__(self):
        return f"SignatureScheme(public_key=<{len(self._public_key)} bytes>)"

    def sign(self, message, random_source=None):
        """Sign ``message`` with the held secret key -> 3,309-byte signature.

        Raises:
            InvalidKeyEncodingError: held key fails the decode check.
            EntropyError: no fresh signing randomness could be drawn.
            SigningError: the primitive failed.
        """
        start = time.perf_counter()
        sig = _sign(self._secret_key, message, random_source)
        logger.debug("Signing took %.2fms", _elapsed_ms(start))
        return sig

    @staticmethod
    def sign_with_key(secret_key, message, random_source=None):
        start = time.perf_counter()
        sig = _sign(secret_key, message, random_source)
        logger.debug("Static signing took %.2fms", _elapsed_ms(start))
        return sig

    @staticmethod
    def verify_with_key(public_key, message, signature):
        """Verify ``signature`` over ``message``.

        Returns:
            True if valid, False for a well-formed signature that does not
            verify (wrong key, altered message or signature).

        Raises:
            InvalidKeyLengthError: public key is not 1,952 bytes.
            InvalidInputError: signature is not 3,309 bytes.
        """
        start = time.perf_counter()
        pk = _check_length(public_key, DSA_PUBLIC_KEY_SIZE, "public key",
                           InvalidKeyLengthError)
        sig = _check_length(signature, DSA_SIGNATURE_SIZE, "signature",
                            InvalidInputError)
        message = _as_bytes(message, "message")
        ok = ml_dsa.verify(pk, message, sig)
        logger.debug("Verification took %.2fms (valid=%s)", _elapsed_ms(start), ok)
        return ok

    def verify(self, message, signature):
        return self.verify_with_key(self._public_key, message, signature)

    @staticmethod
    def key_sizes():
        return {
            "public_key": DSA_PUBLIC_KEY_SIZE,
            "secret_key": DSA_SECRET_KEY_SIZE,
            "signature": DSA_SIGNATURE_SIZE,
        }


def get_dsa_algorithm_info():
    return {
        "algorithm": DSA_ALGORITHM,
        "standard": DSA_STANDARD,
        "security_level": DSA_SECURITY_LEVEL,
        "public_key_size": DSA_PUBLIC_KEY_SIZE,
        "secret_key_size": DSA_SECRET_KEY_SIZE,
        "signature_size": DSA_SIGNATURE_SIZE,
    }


# ── Functional API ──────────────────────────────────────────────

def dsa_keygen(seed=None):
    """Generate a DSAKeyPair; deterministic when a 32-byte seed is given."""
    if seed is None:
        return SignatureScheme.generate().keypair
    return SignatureScheme.from_seed(seed).keypair


def dsa_sign(secret_key, message):
    return SignatureScheme.sign_with_key(secret_key, message)


def dsa_verify(public_key, message, signature):
    return SignatureScheme.verify_with_key(public_key, message, signature)
