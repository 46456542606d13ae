# Copyright (c) 2026 Signer — MIT License

"""ML-DSA-65 (FIPS 204) primitive adapter.

The lattice arithmetic lives in ``dilithium-py``. Key generation and signing
run the library's deterministic internal algorithms with randomness taken
from the caller's generator; verification uses the library's pure-mode
``verify``.

Key sizes:
    Public key:  1,952 bytes
    Secret key:  4,032 bytes
    Signature:   3,309 bytes

Public API:
    keygen(rng)                           -> (pk_bytes, sk_bytes)
    sign(sk, message, rng, context=b"")   -> sig_bytes
    verify(pk, message, sig, context=b"") -> bool
    decode_signing_key(sk)                -> sk_bytes

Signing is hedged: a fresh 32-byte ``rnd`` is drawn from ``rng`` for every
signature. The message is formatted as in FIPS 204 Algorithm 2:

    M' = 0x00 || len(ctx) || ctx || M
"""

from dilithium_py.ml_dsa import ML_DSA_65

from .errors import (
    InvalidInputError,
    InvalidKeyEncodingError,
    KeyGenerationError,
    SigningError,
)

# ── ML-DSA-65 Parameters (FIPS 204 Table 1/2) ───────────────────

_K = 6                # Rows in matrix A
_L = 5                # Columns in matrix A
_ETA = 4              # Secret key coefficient bound
_OMEGA = 55           # Max number of 1s in hint
_C_TILDE_BYTES = 48   # Challenge seed bytes

PK_LEN = 32 + _K * 320                              # 1952
SK_LEN = 128 + (_L + _K) * 128 + _K * 416           # 4032
SIG_LEN = _C_TILDE_BYTES + _L * 640 + _OMEGA + _K   # 3309

CONTEXT = b""
_MAX_CONTEXT = 255

# s1 || s2 follow rho(32) || K(32) || tr(64); 4 bits per coefficient.
_S_START = 128
_S_END = _S_START + (_L + _K) * 128


def _format_message(message, context):
    if len(context) > _MAX_CONTEXT:
        raise InvalidInputError(
            f"Context string must be <= {_MAX_CONTEXT} bytes, got {len(context)}"
        )
    return b"\x00" + bytes([len(context)]) + context + message


def decode_signing_key(sk):
    """Validate a correctly sized secret key.

    s1 and s2 are packed as eta - c with c in [-eta, eta], so every 4-bit
    field must lie in [0, 2*eta]. Any other nibble cannot come from a valid
    key and is rejected before signing.
    """
    bad = 0
    for byte in sk[_S_START:_S_END]:
        bad |= ((byte & 0x0F) > 2 * _ETA) | ((byte >> 4) > 2 * _ETA)
    if bad:
        raise InvalidKeyEncodingError(
            "Invalid secret key: s1/s2 coefficients out of range"
        )
    return sk


def keygen(rng):
    """ML-DSA.KeyGen with the 32-byte seed xi drawn from ``rng``.

    Returns:
        (pk_bytes, sk_bytes): 1,952-byte public key, 4,032-byte secret key.
    """
    xi = rng.random_bytes(32)
    try:
        pk, sk = ML_DSA_65._keygen_internal(xi)
    except ValueError as exc:
        raise KeyGenerationError(f"Key generation failed: {exc}") from exc
    if len(pk) != PK_LEN or len(sk) != SK_LEN:
        raise KeyGenerationError(
            f"Key generation failed: got {len(pk)}-byte PK and {len(sk)}-byte SK"
        )
    return pk, sk


def sign(sk, message, rng, context=CONTEXT):
    """ML-DSA.Sign (pure mode) with ``rnd`` drawn from ``rng``.

    ``sk`` must already be decoded. Returns a 3,309-byte signature.
    """
    m_prime = _format_message(message, context)
    rnd = rng.random_bytes(32)
    try:
        sig = ML_DSA_65._sign_internal(sk, m_prime, rnd)
    except ValueError as exc:
        raise SigningError(f"Signing failed: {exc}") from exc
    if len(sig) != SIG_LEN:
        raise SigningError(f"Signing failed: got a {len(sig)}-byte signature")
    return sig


def verify(pk, message, sig, context=CONTEXT):
    """ML-DSA.Verify (pure mode).

    A correctly sized signature whose z or hint section does not decode is
    simply invalid, so decode failures report False.
    """
    if len(context) > _MAX_CONTEXT:
        return False
    try:
        return bool(ML_DSA_65.verify(pk, message, sig, ctx=context))
    except (ValueError, IndexError):
        return False
