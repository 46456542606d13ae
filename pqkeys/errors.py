# Copyright (c) 2026 Signer — MIT License

"""Exception taxonomy for the key-material layer.

Every failure surfaces as a subclass of PQKeysError:

    EntropyError           — secure random source unavailable or short.
    InvalidInputError      — wrong type or size (raised before any decode).
    InvalidKeyLengthError  — a key has the wrong size.
    InvalidEncodingError   — right size, but fails the structural decode.
    PrimitiveError         — the lattice primitive itself failed.

A signature that does not verify is not an error: verify returns False.
"""


class PQKeysError(Exception):
    """Base class for all errors raised by pqkeys."""


class EntropyError(PQKeysError):
    """The secure random source failed or returned too few bytes."""


class InvalidInputError(PQKeysError, ValueError):
    """Input has the wrong type or length."""


class InvalidKeyLengthError(InvalidInputError):
    """A public or secret key has the wrong length."""


class InvalidEncodingError(PQKeysError, ValueError):
    """Input has the correct length but is not a valid encoding."""


class InvalidKeyEncodingError(InvalidEncodingError):
    """A correctly sized key fails the primitive's decode checks."""


class InvalidCiphertextEncodingError(InvalidEncodingError):
    """A ciphertext fails the primitive's decode checks."""


class PrimitiveError(PQKeysError, RuntimeError):
    """The underlying ML-KEM / ML-DSA operation failed."""


class KeyGenerationError(PrimitiveError):
    pass


class EncapsulationError(PrimitiveError):
    pass


class DecapsulationError(PrimitiveError):
    pass


class SigningError(PrimitiveError):
    pass
