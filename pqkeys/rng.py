# Copyright (c) 2026 Signer — MIT License

"""Randomness for key generation, encapsulation and signing.

Two generators share one interface, ``random_bytes(n) -> bytes``:

    SecureRandom  — libsodium's CSPRNG (via PyNaCl). The only entropy source.
    ChaCha20Rng   — deterministic ChaCha20 keystream over a 32-byte seed.

Every operation that needs randomness draws a fresh 32-byte seed from
SecureRandom and expands it with its own ChaCha20Rng. Caller-supplied seeds
(the ``from_seed`` constructors) are first whitened with SHA-3-256:

    rng = ChaCha20Rng(SHA3-256(seed))

ChaCha20Rng reproduces ``rand_chacha::ChaCha20Rng::from_seed`` byte for byte
(key = seed, 64-bit block counter and 64-bit stream id both zero), so keys
derived from a seed match those of other implementations of this layer.
"""

import hashlib

import nacl.utils
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from .errors import EntropyError, InvalidInputError

SEED_SIZE = 32

# counter (8 bytes LE) || stream id (8 bytes LE)
_CHACHA_NONCE = b"\x00" * 16


def _as_bytes(value, what):
    if isinstance(value, str) or not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidInputError(
            f"{what} must be bytes-like, got {type(value).__name__}"
        )
    return bytes(value)


class SecureRandom:
    """Cryptographically secure random source.

    ``source`` is any callable ``source(n) -> bytes``; the default is
    libsodium's ``randombytes_buf``. Failures are never retried and never
    fall back to a weaker generator.
    """

    def __init__(self, source=nacl.utils.random):
        self._source = source

    def random_bytes(self, n):
        try:
            out = self._source(n)
        except Exception as exc:
            raise EntropyError(f"Random generation failed: {exc!r}") from exc
        if not isinstance(out, bytes) or len(out) != n:
            got = len(out) if isinstance(out, (bytes, bytearray)) else type(out).__name__
            raise EntropyError(f"Random generation failed: expected {n} bytes, got {got}")
        return out


class ChaCha20Rng:
    """Deterministic generator: consecutive bytes of the ChaCha20 keystream."""

    def __init__(self, seed):
        seed = _as_bytes(seed, "seed")
        if len(seed) != SEED_SIZE:
            raise InvalidInputError(
                f"Seed must be exactly {SEED_SIZE} bytes, got {len(seed)}"
            )
        cipher = Cipher(algorithms.ChaCha20(seed, _CHACHA_NONCE), mode=None)
        self._stream = cipher.encryptor()

    def random_bytes(self, n):
        # Encrypting zeros yields the raw keystream.
        return self._stream.update(b"\x00" * n)


_default_source = SecureRandom()


def derive_seed(seed):
    """Whiten a caller-supplied 32-byte seed: SHA3-256(seed)."""
    seed = _as_bytes(seed, "seed")
    if len(seed) != SEED_SIZE:
        raise InvalidInputError(
            f"Seed must be exactly {SEED_SIZE} bytes, got {len(seed)}"
        )
    return hashlib.sha3_256(seed).digest()


def seeded_rng(random_source=None):
    """Draw a fresh seed from ``random_source`` and expand it with ChaCha20.

    Raises:
        EntropyError: if the source fails or returns a short read.
    """
    source = random_source if random_source is not None else _default_source
    seed = source.random_bytes(SEED_SIZE)
    if not isinstance(seed, bytes) or len(seed) != SEED_SIZE:
        raise EntropyError(f"Random generation failed: expected {SEED_SIZE} bytes")
    return ChaCha20Rng(seed)


def rng_from_seed(seed):
    """Deterministic generator for a caller seed (hash first, then seed)."""
    return ChaCha20Rng(derive_seed(seed))
