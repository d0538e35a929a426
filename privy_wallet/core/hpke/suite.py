"""
HPKE Cipher Suite

The single RFC 9180 suite used for wallet export:
    KEM:  DHKEM(P-256, HKDF-SHA256)  0x0010
    KDF:  HKDF-SHA256                0x0001
    AEAD: ChaCha20-Poly1305          0x0003

Contains the labeled HKDF helpers and the DH-based KEM (encap/decap).
"""

from typing import Tuple

from cryptography.hazmat.primitives import hashes, hmac, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.kdf.hkdf import HKDFExpand

KEM_ID = 0x0010
KDF_ID = 0x0001
AEAD_ID = 0x0003

MODE_BASE = 0x00

N_SECRET = 32   # KEM shared secret
N_ENC = 65      # uncompressed SEC1 point
N_H = 32        # SHA-256 output
N_K = 32        # ChaCha20-Poly1305 key
N_N = 12        # nonce
N_T = 16        # tag

HPKE_VERSION_LABEL = b"HPKE-v1"


def i2osp(value: int, length: int) -> bytes:
    return value.to_bytes(length, "big")


KEM_SUITE_ID = b"KEM" + i2osp(KEM_ID, 2)
HPKE_SUITE_ID = b"HPKE" + i2osp(KEM_ID, 2) + i2osp(KDF_ID, 2) + i2osp(AEAD_ID, 2)


def extract(salt: bytes, ikm: bytes) -> bytes:
    """HKDF-Extract with SHA-256. An empty salt means Nh zero bytes."""
    h = hmac.HMAC(salt or b"\x00" * N_H, hashes.SHA256())
    h.update(ikm)
    return h.finalize()


def expand(prk: bytes, info: bytes, length: int) -> bytes:
    return HKDFExpand(algorithm=hashes.SHA256(), length=length, info=info).derive(prk)


def labeled_extract(salt: bytes, label: bytes, ikm: bytes, suite_id: bytes) -> bytes:
    return extract(salt, HPKE_VERSION_LABEL + suite_id + label + ikm)


def labeled_expand(prk: bytes, label: bytes, info: bytes, length: int, suite_id: bytes) -> bytes:
    labeled_info = i2osp(length, 2) + HPKE_VERSION_LABEL + suite_id + label + info
    return expand(prk, labeled_info, length)


def serialize_public_key(public_key: ec.EllipticCurvePublicKey) -> bytes:
    return public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )


def deserialize_public_key(data: bytes) -> ec.EllipticCurvePublicKey:
    """
    Raises:
        ValueError: If data is not an uncompressed point on P-256
    """
    if len(data) != N_ENC or data[0] != 0x04:
        raise ValueError(f"expected a {N_ENC}-byte uncompressed P-256 point, got {len(data)} bytes")
    return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), data)


def _extract_and_expand(dh: bytes, kem_context: bytes) -> bytes:
    eae_prk = labeled_extract(b"", b"eae_prk", dh, KEM_SUITE_ID)
    return labeled_expand(eae_prk, b"shared_secret", kem_context, N_SECRET, KEM_SUITE_ID)


def encap(pk_r: ec.EllipticCurvePublicKey) -> Tuple[bytes, bytes]:
    """
    Sender side of DHKEM.

    Returns:
        Tuple of (shared_secret, enc)
    """
    sk_e = ec.generate_private_key(ec.SECP256R1())
    dh = sk_e.exchange(ec.ECDH(), pk_r)
    enc = serialize_public_key(sk_e.public_key())
    kem_context = enc + serialize_public_key(pk_r)
    return _extract_and_expand(dh, kem_context), enc


def decap(enc: bytes, sk_r: ec.EllipticCurvePrivateKey) -> bytes:
    """
    Receiver side of DHKEM.

    Raises:
        ValueError: If enc is not a valid point or the ECDH fails
    """
    pk_e = deserialize_public_key(enc)
    dh = sk_r.exchange(ec.ECDH(), pk_e)
    kem_context = enc + serialize_public_key(sk_r.public_key())
    return _extract_and_expand(dh, kem_context)


def key_schedule(mode: int, shared_secret: bytes, info: bytes) -> Tuple[bytes, bytes, bytes]:
    """
    Derive (key, base_nonce, exporter_secret) for base mode (no PSK).
    """
    psk = b""
    psk_id = b""
    psk_id_hash = labeled_extract(b"", b"psk_id_hash", psk_id, HPKE_SUITE_ID)
    info_hash = labeled_extract(b"", b"info_hash", info, HPKE_SUITE_ID)
    ks_context = bytes([mode]) + psk_id_hash + info_hash

    secret = labeled_extract(shared_secret, b"secret", psk, HPKE_SUITE_ID)
    key = labeled_expand(secret, b"key", ks_context, N_K, HPKE_SUITE_ID)
    base_nonce = labeled_expand(secret, b"base_nonce", ks_context, N_N, HPKE_SUITE_ID)
    exporter_secret = labeled_expand(secret, b"exp", ks_context, N_H, HPKE_SUITE_ID)
    return key, base_nonce, exporter_secret
