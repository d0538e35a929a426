"""
Unit tests for HPKE (RFC 9180 base mode, P-256 / HKDF-SHA256 / ChaCha20-Poly1305).
"""
import base64

import pytest
from cryptography.hazmat.primitives.asymmetric import ec

from privy_wallet.core.hpke import (
    AEAD_ID,
    KDF_ID,
    KEM_ID,
    decrypt,
    decrypt_export_response,
    encrypt,
    setup_base_r,
    setup_base_s,
)
from privy_wallet.core.hpke.suite import labeled_expand, labeled_extract
from privy_wallet.core.signing.keys import generate_keypair
from privy_wallet.errors import HpkeDecryptionError, HpkeError, HpkeInputError

SECRET = b"0x4c0883a69102937d6231471b5dbb6204fe512961708279f2e3e8a5d4b8e3e7b1"


def _flip(b64_value: str, index: int) -> str:
    raw = bytearray(base64.b64decode(b64_value))
    raw[index] ^= 0x01
    return base64.b64encode(bytes(raw)).decode("ascii")


@pytest.fixture
def keys():
    return generate_keypair()


@pytest.fixture
def sealed(keys):
    ciphertext, encapsulated_key = encrypt(SECRET, keys.public_key)
    return ciphertext, encapsulated_key


class TestSuite:
    """Test the fixed algorithm identifiers."""

    def test_suite_ids(self):
        assert KEM_ID == 0x0010
        assert KDF_ID == 0x0001
        assert AEAD_ID == 0x0003

    def test_labeled_expand_length(self):
        prk = labeled_extract(b"", b"test", b"ikm", b"HPKE\x00\x10\x00\x01\x00\x03")
        assert len(prk) == 32
        assert len(labeled_expand(prk, b"key", b"", 32, b"suite")) == 32
        assert len(labeled_expand(prk, b"base_nonce", b"", 12, b"suite")) == 12


class TestRoundTrip:
    """Test encryption to an ephemeral key and decryption with its private half."""

    def test_decrypt_returns_plaintext(self, keys, sealed):
        ciphertext, encapsulated_key = sealed
        assert decrypt(ciphertext, encapsulated_key, keys.private_key) == SECRET

    def test_encapsulated_key_is_uncompressed_point(self, sealed):
        _, encapsulated_key = sealed
        raw = base64.b64decode(encapsulated_key)
        assert len(raw) == 65
        assert raw[0] == 0x04

    def test_ciphertext_includes_tag(self, sealed):
        ciphertext, _ = sealed
        assert len(base64.b64decode(ciphertext)) == len(SECRET) + 16

    def test_empty_plaintext(self, keys):
        ciphertext, encapsulated_key = encrypt(b"", keys.public_key)
        assert decrypt(ciphertext, encapsulated_key, keys.private_key) == b""

    def test_info_and_aad(self, keys):
        ciphertext, encapsulated_key = encrypt(SECRET, keys.public_key, info="ctx", aad=b"header")
        assert decrypt(ciphertext, encapsulated_key, keys.private_key, info=b"ctx", aad="header") == SECRET

    def test_info_mismatch_fails(self, keys):
        ciphertext, encapsulated_key = encrypt(SECRET, keys.public_key, info="ctx")
        with pytest.raises(HpkeDecryptionError):
            decrypt(ciphertext, encapsulated_key, keys.private_key)

    def test_aad_mismatch_fails(self, keys):
        ciphertext, encapsulated_key = encrypt(SECRET, keys.public_key, aad="a")
        with pytest.raises(HpkeDecryptionError):
            decrypt(ciphertext, encapsulated_key, keys.private_key, aad="b")

    def test_encrypt_to_key_object(self, keys):
        ciphertext, encapsulated_key = encrypt(SECRET, keys.private_key.public_key())
        assert decrypt(ciphertext, encapsulated_key, keys.private_key) == SECRET

    def test_each_encryption_uses_new_encapsulated_key(self, keys):
        _, enc1 = encrypt(SECRET, keys.public_key)
        _, enc2 = encrypt(SECRET, keys.public_key)
        assert enc1 != enc2


class TestContexts:
    """Test multi-message contexts and the secret exporter."""

    def test_sequence_numbers(self, keys):
        pk = keys.private_key.public_key()
        enc, sender = setup_base_s(pk, b"info")
        receiver = setup_base_r(enc, keys.private_key, b"info")

        messages = [b"one", b"two", b"three"]
        ciphertexts = [sender.seal(b"", m) for m in messages]

        assert [receiver.open(b"", c) for c in ciphertexts] == messages
        assert sender.seq == receiver.seq == 3

    def test_out_of_order_open_fails(self, keys):
        from cryptography.exceptions import InvalidTag

        enc, sender = setup_base_s(keys.private_key.public_key())
        receiver = setup_base_r(enc, keys.private_key)
        sender.seal(b"", b"first")
        second = sender.seal(b"", b"second")

        with pytest.raises(InvalidTag):
            receiver.open(b"", second)
        assert receiver.seq == 0

    def test_exporter_secret_matches(self, keys):
        enc, sender = setup_base_s(keys.private_key.public_key())
        receiver = setup_base_r(enc, keys.private_key)
        assert sender.export(b"label", 32) == receiver.export(b"label", 32)
        assert sender.export(b"label", 32) != sender.export(b"other", 32)


class TestTamperDetection:
    """Flipping any byte of the ciphertext or encapsulated key must fail."""

    def test_any_ciphertext_byte(self, keys, sealed):
        ciphertext, encapsulated_key = sealed
        for i in range(len(base64.b64decode(ciphertext))):
            with pytest.raises(HpkeError):
                decrypt(_flip(ciphertext, i), encapsulated_key, keys.private_key)

    def test_any_encapsulated_key_byte(self, keys, sealed):
        ciphertext, encapsulated_key = sealed
        for i in range(65):
            with pytest.raises(HpkeError):
                decrypt(ciphertext, _flip(encapsulated_key, i), keys.private_key)

    def test_wrong_private_key(self, sealed):
        ciphertext, encapsulated_key = sealed
        with pytest.raises(HpkeDecryptionError, match="Failed to decrypt"):
            decrypt(ciphertext, encapsulated_key, generate_keypair().private_key)

    def test_truncated_encapsulated_key(self, keys, sealed):
        ciphertext, encapsulated_key = sealed
        short = base64.b64encode(base64.b64decode(encapsulated_key)[:33]).decode()
        with pytest.raises(HpkeDecryptionError):
            decrypt(ciphertext, short, keys.private_key)


class TestInputErrors:
    """Structural input errors are distinguished from decryption failures."""

    def test_malformed_ciphertext_base64(self, keys, sealed):
        _, encapsulated_key = sealed
        with pytest.raises(HpkeInputError, match="ciphertext"):
            decrypt("***", encapsulated_key, keys.private_key)

    def test_malformed_encapsulated_key_base64(self, keys, sealed):
        ciphertext, _ = sealed
        with pytest.raises(HpkeInputError, match="encapsulated_key"):
            decrypt(ciphertext, "***", keys.private_key)

    def test_ciphertext_shorter_than_tag(self, keys, sealed):
        _, encapsulated_key = sealed
        with pytest.raises(HpkeInputError, match="shorter"):
            decrypt(base64.b64encode(b"short").decode(), encapsulated_key, keys.private_key)

    def test_non_string_input(self, keys, sealed):
        _, encapsulated_key = sealed
        with pytest.raises(HpkeInputError):
            decrypt(None, encapsulated_key, keys.private_key)

    @pytest.mark.parametrize("field", ["info", "aad"])
    def test_non_string_info_or_aad(self, keys, sealed, field):
        ciphertext, encapsulated_key = sealed
        with pytest.raises(HpkeInputError, match=field):
            decrypt(ciphertext, encapsulated_key, keys.private_key, **{field: None})

    def test_line_wrapped_base64_is_accepted(self, keys, sealed):
        ciphertext, encapsulated_key = sealed
        wrapped = ciphertext[:20] + "\n" + ciphertext[20:] + "\n"
        assert decrypt(wrapped, " " + encapsulated_key + "\r\n", keys.private_key) == SECRET

    def test_wrong_private_key_type(self, sealed):
        ciphertext, encapsulated_key = sealed
        with pytest.raises(HpkeInputError, match="P-256"):
            decrypt(ciphertext, encapsulated_key, "not-a-key")

    def test_wrong_curve(self, sealed):
        ciphertext, encapsulated_key = sealed
        with pytest.raises(HpkeInputError):
            decrypt(ciphertext, encapsulated_key, ec.generate_private_key(ec.SECP384R1()))

    def test_encrypt_invalid_public_key(self):
        with pytest.raises(HpkeInputError):
            encrypt(SECRET, "not-a-key")

    def test_input_and_decryption_errors_are_hpke_errors(self):
        assert issubclass(HpkeInputError, HpkeError)
        assert issubclass(HpkeDecryptionError, HpkeError)


class TestDecryptExportResponse:
    """Test decryption of export response bodies."""

    def test_success(self, keys, sealed):
        ciphertext, encapsulated_key = sealed
        data = {"encryption_type": "HPKE", "ciphertext": ciphertext, "encapsulated_key": encapsulated_key}
        assert decrypt_export_response(data, keys.private_key) == SECRET

    @pytest.mark.parametrize("missing", ["ciphertext", "encapsulated_key"])
    def test_missing_field(self, keys, sealed, missing):
        ciphertext, encapsulated_key = sealed
        data = {"ciphertext": ciphertext, "encapsulated_key": encapsulated_key}
        del data[missing]
        with pytest.raises(HpkeInputError, match="Invalid export response"):
            decrypt_export_response(data, keys.private_key)

    def test_not_a_mapping(self, keys):
        with pytest.raises(HpkeInputError, match="Invalid export response"):
            decrypt_export_response(None, keys.private_key)

    def test_unsupported_encryption_type(self, keys, sealed):
        ciphertext, encapsulated_key = sealed
        data = {"encryption_type": "RSA", "ciphertext": ciphertext, "encapsulated_key": encapsulated_key}
        with pytest.raises(HpkeInputError, match="encryption_type"):
            decrypt_export_response(data, keys.private_key)


class TestInterop:
    """Decrypt ciphertexts produced by an independent HPKE implementation."""

    def test_pyhpke_sender(self, keys):
        pyhpke = pytest.importorskip("pyhpke")
        from cryptography.hazmat.primitives import serialization

        suite = pyhpke.CipherSuite.new(
            pyhpke.KEMId.DHKEM_P256_HKDF_SHA256,
            pyhpke.KDFId.HKDF_SHA256,
            pyhpke.AEADId.CHACHA20_POLY1305,
        )
        raw_public = keys.private_key.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.UncompressedPoint,
        )
        pkr = suite.kem.deserialize_public_key(raw_public)
        enc, sender = suite.create_sender_context(pkr)
        ciphertext = sender.seal(SECRET)

        plaintext = decrypt(
            base64.b64encode(ciphertext).decode(),
            base64.b64encode(enc).decode(),
            keys.private_key,
        )
        assert plaintext == SECRET
