# Copyright (c) 2026 Signer — MIT License

"""Post-quantum key material — ML-KEM-768 and ML-DSA-65.

Key encapsulation:
    ML-KEM-768 (FIPS 203) — lattice-based KEM, NIST Level 3.
    KeyEncapsulation, kem_keygen / kem_encaps / kem_decaps.

Signatures:
    ML-DSA-65 (FIPS 204)  — lattice-based digital signature, NIST Level 3.
    SignatureScheme, dsa_keygen / dsa_sign / dsa_verify.

Randomness comes from libsodium (PyNaCl) and is expanded with ChaCha20.
Seeded constructors hash the seed with SHA3-256 first, so a given 32-byte
seed always reproduces the same keys.
"""

import logging

from .errors import (
    PQKeysError,
    EntropyError,
    InvalidInputError, InvalidKeyLengthError,
    InvalidEncodingError, InvalidKeyEncodingError, InvalidCiphertextEncodingError,
    PrimitiveError, KeyGenerationError, EncapsulationError,
    DecapsulationError, SigningError,
)
from .rng import SEED_SIZE, SecureRandom, ChaCha20Rng
from .kem import (
    KeyEncapsulation, KEMKeyPair, EncapsulationResult,
    kem_keygen, kem_encaps, kem_decaps, get_algorithm_info,
    KEM_PUBLIC_KEY_SIZE, KEM_SECRET_KEY_SIZE,
    KEM_CIPHERTEXT_SIZE, KEM_SHARED_SECRET_SIZE,
)
from .dsa import (
    SignatureScheme, DSAKeyPair,
    dsa_keygen, dsa_sign, dsa_verify, get_dsa_algorithm_info,
    DSA_PUBLIC_KEY_SIZE, DSA_SECRET_KEY_SIZE, DSA_SIGNATURE_SIZE,
)

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())


def get_version():
    return __version__


__all__ = [
    # Errors
    "PQKeysError", "EntropyError",
    "InvalidInputError", "InvalidKeyLengthError",
    "InvalidEncodingError", "InvalidKeyEncodingError", "InvalidCiphertextEncodingError",
    "PrimitiveError", "KeyGenerationError", "EncapsulationError",
    "DecapsulationError", "SigningError",
    # Randomness
    "SEED_SIZE", "SecureRandom", "ChaCha20Rng",
    # KEM
    "KeyEncapsulation", "KEMKeyPair", "EncapsulationResult",
    "kem_keygen", "kem_encaps", "kem_decaps", "get_algorithm_info",
    "KEM_PUBLIC_KEY_SIZE", "KEM_SECRET_KEY_SIZE",
    "KEM_CIPHERTEXT_SIZE", "KEM_SHARED_SECRET_SIZE",
    # DSA
    "SignatureScheme", "DSAKeyPair",
    "dsa_keygen", "dsa_sign", "dsa_verify", "get_dsa_algorithm_info",
    "DSA_PUBLIC_KEY_SIZE", "DSA_SECRET_KEY_SIZE", "DSA_SIGNATURE_SIZE",
    # Version
    "get_version", "__version__",
]
