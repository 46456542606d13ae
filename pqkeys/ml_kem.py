# Copyright (c) 2026 Signer — MIT License

"""ML-KEM-768 (FIPS 203) primitive adapter.

The lattice arithmetic lives in ``kyber-py``; this module drives its
deterministic internal algorithms with randomness supplied by the caller's
generator, and performs the FIPS 203 input checks up front so that malformed
keys are reported distinctly from wrong-sized ones.

Key sizes:
    Encapsulation key (EK): 1,184 bytes
    Decapsulation key (DK): 2,400 bytes
    Ciphertext:             1,088 bytes
    Shared secret:             32 bytes

Public API:
    keygen(rng)                 -> (ek_bytes, dk_bytes)
    encaps(ek, rng)             -> (shared_secret, ct_bytes)
    decaps(dk, ct)              -> shared_secret
    decode_encaps_key(ek)       -> ek_bytes      (§7.2 modulus check)
    decode_decaps_key(dk)       -> dk_bytes      (§7.3 hash check)
    decode_ciphertext(ct)       -> ct_bytes

``rng`` is any object with ``random_bytes(n)``. Draw order follows
FIPS 203 Algorithms 19 and 20: keygen takes d then z, encaps takes m.
"""

import hashlib
import hmac

from kyber_py.ml_kem import ML_KEM_768

from .errors import (
    DecapsulationError,
    EncapsulationError,
    InvalidCiphertextEncodingError,
    InvalidKeyEncodingError,
    KeyGenerationError,
)

# ── ML-KEM-768 Parameters (FIPS 203 Table 2/3) ──────────────────

_Q = 3329              # Prime modulus
_K = 3                 # Module rank

EK_LEN = 384 * _K + 32          # 1184
DK_LEN = 768 * _K + 96          # 2400
CT_LEN = 32 * (10 * _K + 4)     # 1088
SS_LEN = 32

_DK_PKE_END = 384 * _K                  # 1152
_EK_END = _DK_PKE_END + EK_LEN          # 2336
_H_END = _EK_END + 32                   # 2368


# ── Byte encoding (12-bit coefficients) ─────────────────────────

def _byte_decode_12(data):
    """FIPS 203 ByteDecode_12 without the mod-q reduction."""
    acc = int.from_bytes(data, "little")
    coeffs = []
    for _ in range(len(data) * 8 // 12):
        coeffs.append(acc & 0xFFF)
        acc >>= 12
    return coeffs


def _byte_encode_12(coeffs):
    """FIPS 203 ByteEncode_12 of coefficients reduced mod q."""
    acc = 0
    for i, c in enumerate(coeffs):
        acc |= (c % _Q) << (12 * i)
    return acc.to_bytes(len(coeffs) * 12 // 8, "little")


def _modulus_check(data):
    """Every 12-bit coefficient in ``data`` encodes a value in [0, q-1].

    Decodes, reduces and re-encodes, then compares to the original.
    """
    canonical = _byte_encode_12(_byte_decode_12(data))
    return hmac.compare_digest(canonical, data)


# ── Decoding ────────────────────────────────────────────────────

def decode_encaps_key(ek):
    """Validate a correctly sized encapsulation key (FIPS 203 §7.2)."""
    if not _modulus_check(ek[:_DK_PKE_END]):
        raise InvalidKeyEncodingError(
            "Invalid public key: encapsulation key failed the FIPS 203 modulus check"
        )
    return ek


def decode_decaps_key(dk):
    """Validate a correctly sized decapsulation key (FIPS 203 §7.3).

    Layout: dk_pke (1152) || ek (1184) || H(ek) (32) || z (32).
    """
    ek = dk[_DK_PKE_END:_EK_END]
    pke_ok = _modulus_check(dk[:_DK_PKE_END])
    ek_ok = _modulus_check(ek[:_DK_PKE_END])
    hash_ok = hmac.compare_digest(hashlib.sha3_256(ek).digest(), dk[_EK_END:_H_END])
    if not (pke_ok and ek_ok and hash_ok):
        raise InvalidKeyEncodingError(
            "Invalid secret key: decapsulation key failed the FIPS 203 input checks"
        )
    return dk


def decode_ciphertext(ct):
    """Validate a ciphertext.

    Every 1,088-byte string is a well-formed ML-KEM-768 ciphertext
    (compressed u and v use all bit patterns), so only the size is checked.
    """
    if len(ct) != CT_LEN:
        raise InvalidCiphertextEncodingError(
            f"Invalid ciphertext: expected {CT_LEN} bytes, got {len(ct)}"
        )
    return ct


# ── Primitive operations ────────────────────────────────────────

def keygen(rng):
    """ML-KEM.KeyGen with d and z drawn from ``rng``.

    Returns:
        (ek_bytes, dk_bytes): 1,184-byte encapsulation key and
                              2,400-byte decapsulation key.
    """
    d = rng.random_bytes(32)
    z = rng.random_bytes(32)
    try:
        ek, dk = ML_KEM_768._keygen_internal(d, z)
    except ValueError as exc:
        raise KeyGenerationError(f"Key generation failed: {exc}") from exc
    if len(ek) != EK_LEN or len(dk) != DK_LEN:
        raise KeyGenerationError(
            f"Key generation failed: got {len(ek)}-byte EK and {len(dk)}-byte DK"
        )
    return ek, dk


def encaps(ek, rng):
    """ML-KEM.Encaps with m drawn from ``rng``. ``ek`` must be decoded.

    Returns:
        (shared_secret, ct_bytes)
    """
    m = rng.random_bytes(32)
    try:
        shared_secret, ct = ML_KEM_768._encaps_internal(ek, m)
    except ValueError as exc:
        raise EncapsulationError(f"Encapsulation failed: {exc}") from exc
    return shared_secret, ct


def decaps(dk, ct):
    """ML-KEM.Decaps with implicit rejection.

    A ciphertext that was not produced for ``dk`` yields a pseudo-random
    32-byte secret (J(z || ct)), not an error.
    """
    try:
        shared_secret = ML_KEM_768.decaps(dk, ct)
    except ValueError as exc:
        raise DecapsulationError(f"Decapsulation failed: {exc}") from exc
    if len(shared_secret) != SS_LEN:
        raise DecapsulationError(
            f"Decapsulation failed: got a {len(shared_secret)}-byte shared secret"
        )
    return shared_secret
