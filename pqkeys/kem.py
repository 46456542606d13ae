# Copyright (c) 2026 Signer — MIT License

"""ML-KEM-768 key encapsulation with strict size validation.

KeyEncapsulation owns one immutable keypair. Operations that need a secret
key come in two shapes: an instance method using the held key and a static
method taking the key explicitly, so callers can work statelessly.

Sizes:
    Public (encapsulation) key: 1,184 bytes
    Secret (decapsulation) key: 2,400 bytes
    Ciphertext:                 1,088 bytes
    Shared secret:                 32 bytes

Every input is length-checked before it is decoded, and decoded before any
cryptographic work. Fresh randomness is drawn for every key generation and
every encapsulation; nothing is cached or reused.

Example:
    >>> alice = KeyEncapsulation.generate()
    >>> result = KeyEncapsulation.encapsulate_to(alice.public_key)
    >>> alice.decapsulate(result.ciphertext) == result.shared_secret
    True
"""

import logging
import time
from typing import NamedTuple

from . import ml_kem
from .errors import InvalidInputError, InvalidKeyLengthError
from .rng import rng_from_seed, seeded_rng

logger = logging.getLogger(__name__)

# ── Sizes and descriptor (exported for client-side validation) ──

KEM_PUBLIC_KEY_SIZE = ml_kem.EK_LEN        # 1,184
KEM_SECRET_KEY_SIZE = ml_kem.DK_LEN        # 2,400
KEM_CIPHERTEXT_SIZE = ml_kem.CT_LEN        # 1,088
KEM_SHARED_SECRET_SIZE = ml_kem.SS_LEN     # 32, for every ML-KEM parameter set

KEM_ALGORITHM = "ML-KEM-768"
KEM_STANDARD = "FIPS 203"
KEM_SECURITY_LEVEL = "Level 3 (192-bit post-quantum)"


class KEMKeyPair(NamedTuple):
    public_key: bytes
    secret_key: bytes

    def __repr__(self):
        return (f"KEMKeyPair(public_key=<{len(self.public_key)} bytes>, "
                f"secret_key=<redacted>)")


class EncapsulationResult(NamedTuple):
    ciphertext: bytes
    shared_secret: bytes

    def __repr__(self):
        return (f"EncapsulationResult(ciphertext=<{len(self.ciphertext)} bytes>, "
                f"shared_secret=<redacted>)")


# ── Validation ──────────────────────────────────────────────────

def _as_bytes(value, what):
    if isinstance(value, str) or not isinstance(value, (bytes, bytearray, memoryview)):
        logger.debug("Rejected %s of type %s", what, type(value).__name__)
        raise InvalidInputError(
            f"{what} must be bytes-like, got {type(value).__name__}"
        )
    return bytes(value)


def _check_public_key(public_key):
    public_key = _as_bytes(public_key, "public key")
    if len(public_key) != KEM_PUBLIC_KEY_SIZE:
        logger.debug("Rejected public key of %d bytes", len(public_key))
        raise InvalidKeyLengthError(
            f"Invalid public key length: expected {KEM_PUBLIC_KEY_SIZE}, "
            f"got {len(public_key)}"
        )
    return public_key


def _check_secret_key(secret_key):
    secret_key = _as_bytes(secret_key, "secret key")
    if len(secret_key) != KEM_SECRET_KEY_SIZE:
        logger.debug("Rejected secret key of %d bytes", len(secret_key))
        raise InvalidKeyLengthError(
            f"Invalid secret key length: expected {KEM_SECRET_KEY_SIZE}, "
            f"got {len(secret_key)}"
        )
    return secret_key


def _check_ciphertext(ciphertext):
    ciphertext = _as_bytes(ciphertext, "ciphertext")
    if len(ciphertext) != KEM_CIPHERTEXT_SIZE:
        logger.debug("Rejected ciphertext of %d bytes", len(ciphertext))
        raise InvalidInputError(
            f"Invalid ciphertext length: expected {KEM_CIPHERTEXT_SIZE}, "
            f"got {len(ciphertext)}"
        )
    return ciphertext


def _elapsed_ms(start):
    return (time.perf_counter() - start) * 1000.0


def _decapsulate(secret_key, ciphertext):
    ct = ml_kem.decode_ciphertext(_check_ciphertext(ciphertext))
    dk = ml_kem.decode_decaps_key(_check_secret_key(secret_key))
    return ml_kem.decaps(dk, ct)


# ── KeyEncapsulation ────────────────────────────────────────────

class KeyEncapsulation:
    """An ML-KEM-768 identity: one public/secret keypair.

    Construct with generate(), from_seed() or from_keys(). The keypair is
    fixed for the lifetime of the instance.
    """

    __slots__ = ("_public_key", "_secret_key")

    def __init__(self, public_key, secret_key):
        self._public_key = _check_public_key(public_key)
        self._secret_key = _check_secret_key(secret_key)

    # -- construction -------------------------------------------------

    @classmethod
    def generate(cls, random_source=None):
        """Fresh keypair from 32 bytes of secure randomness.

        Raises:
            EntropyError: if the random source fails. Not retried.
        """
        start = time.perf_counter()
        ek, dk = ml_kem.keygen(seeded_rng(random_source))
        logger.debug("ML-KEM-768 key generation took %.2fms", _elapsed_ms(start))
        return cls(ek, dk)

    @classmethod
    def from_seed(cls, seed):
        """Deterministic keypair: ChaCha20Rng(SHA3-256(seed)) drives keygen.

        The same 32-byte seed always yields byte-identical keys.

        Raises:
            InvalidInputError: if seed is not exactly 32 bytes.
        """
        start = time.perf_counter()
        ek, dk = ml_kem.keygen(rng_from_seed(seed))
        logger.debug("Deterministic ML-KEM-768 key generation took %.2fms",
                     _elapsed_ms(start))
        return cls(ek, dk)

    @classmethod
    def from_keys(cls, public_key, secret_key):
        """Wrap existing keys. Both lengths are checked independently.

        The halves are not checked to be a matching pair; a mismatched pair
        only shows up later as decapsulation yielding a different secret.
        """
        return cls(public_key, secret_key)

    # -- accessors ----------------------------------------------------

    @property
    def public_key(self):
        return self._public_key

    @property
    def secret_key(self):
        """The decapsulation key. Handle with care."""
        return self._secret_key

    @property
    def keypair(self):
        return KEMKeyPair(self._public_key, self._secret_key)

    def __repr__(self):
        return f"KeyEncapsulation(public_key=<{len(self._public_key)} bytes>)"

    # -- operations ---------------------------------------------------

    def encapsulate(self, public_key, random_source=None):
        """Encapsulate a fresh shared secret to ``public_key`` (a peer's key).

        The held keypair is not used.
        """
        return self.encapsulate_to(public_key, random_source)

    @staticmethod
    def encapsulate_to(public_key, random_source=None):
        """Encapsulate a fresh shared secret to ``public_key``.

        Returns:
            EncapsulationResult(ciphertext, shared_secret).

        Raises:
            InvalidKeyLengthError: public key is not 1,184 bytes.
            InvalidKeyEncodingError: public key fails the modulus check.
            EntropyError: no fresh randomness could be drawn.
            EncapsulationError: the primitive failed.
        """
        start = time.perf_counter()
        ek = ml_kem.decode_encaps_key(_check_public_key(public_key))
        shared_secret, ct = ml_kem.encaps(ek, seeded_rng(random_source))
        logger.debug("Encapsulation took %.2fms", _elapsed_ms(start))
        return EncapsulationResult(ct, shared_secret)

    def decapsulate(self, ciphertext):
        """Recover the shared secret from ``ciphertext`` with the held key."""
        start = time.perf_counter()
        shared_secret = _decapsulate(self._secret_key, ciphertext)
        logger.debug("Decapsulation took %.2fms", _elapsed_ms(start))
        return shared_secret

    @staticmethod
    def decapsulate_with_key(secret_key, ciphertext):
        """Recover the shared secret using an explicit secret key.

        Raises:
            InvalidInputError: ciphertext is not 1,088 bytes.
            InvalidKeyLengthError: secret key is not 2,400 bytes.
            InvalidKeyEncodingError: secret key fails the FIPS 203 checks.
            DecapsulationError: the primitive failed.
        """
        start = time.perf_counter()
        shared_secret = _decapsulate(secret_key, ciphertext)
        logger.debug("Static decapsulation took %.2fms", _elapsed_ms(start))
        return shared_secret

    @staticmethod
    def key_sizes():
        return {
            "public_key": KEM_PUBLIC_KEY_SIZE,
            "secret_key": KEM_SECRET_KEY_SIZE,
            "ciphertext": KEM_CIPHERTEXT_SIZE,
            "shared_secret": KEM_SHARED_SECRET_SIZE,
        }


def get_algorithm_info():
    """Descriptor of the KEM: name, standard, security level and sizes."""
    return {
        "algorithm": KEM_ALGORITHM,
        "standard": KEM_STANDARD,
        "security_level": KEM_SECURITY_LEVEL,
        "public_key_size": KEM_PUBLIC_KEY_SIZE,
        "secret_key_size": KEM_SECRET_KEY_SIZE,
        "ciphertext_size": KEM_CIPHERTEXT_SIZE,
        "shared_secret_size": KEM_SHARED_SECRET_SIZE,
    }


# ── Functional API ──────────────────────────────────────────────

def kem_keygen(seed=None):
    """Generate a KEMKeyPair; deterministic when a 32-byte seed is given."""
    if seed is None:
        kem = KeyEncapsulation.generate()
    else:
        kem = KeyEncapsulation.from_seed(seed)
    return kem.keypair


def kem_encaps(public_key):
    """Encapsulate to ``public_key`` -> EncapsulationResult."""
    return KeyEncapsulation.encapsulate_to(public_key)


def kem_decaps(secret_key, ciphertext):
    """Decapsulate ``ciphertext`` with ``secret_key`` -> 32-byte secret."""
    return KeyEncapsulation.decapsulate_with_key(secret_key, ciphertext)
