"""Tests for the hex codec and passphrase cipher."""

import pytest

from pubtoken.crypto import hexcodec
from pubtoken.crypto.cipher import (
    HEADER_LEN,
    MAGIC,
    MIN_CONTAINER_LEN,
    PassphraseCipher,
    looks_encrypted,
)
from pubtoken.errors import AuthenticationError, DecodeError, FormatError
from pubtoken.secret import Secret


# ═══════════════════════════════════════════════════════════════════
#  1. Hex codec
# ═══════════════════════════════════════════════════════════════════


def test_hex_encode_is_lowercase():
    assert hexcodec.encode(b"\xab\xcd\x01") == "abcd01"


@pytest.mark.parametrize("data", [b"", b"\x00", b"abc", bytes(range(256))])
def test_hex_decode_inverts_encode(data):
    assert hexcodec.decode(hexcodec.encode(data)) == data


def test_hex_decode_accepts_uppercase():
    assert hexcodec.decode("ABCD") == b"\xab\xcd"


@pytest.mark.parametrize("text", ["zz", "61 62", "6g", "é1"])
def test_hex_decode_rejects_non_hex(text):
    with pytest.raises(DecodeError):
        hexcodec.decode(text)


def test_hex_decode_rejects_odd_length_without_repair():
    with pytest.raises(DecodeError):
        hexcodec.decode("abc")


def test_pad_odd_restores_missing_leading_zero():
    original = b"\x0a\xbc"
    stored = hexcodec.encode(original).lstrip("0")  # "abc"
    assert hexcodec.pad_odd(stored) == "0abc"
    assert hexcodec.decode(hexcodec.pad_odd(stored)) == original


def test_pad_odd_leaves_even_length_alone():
    assert hexcodec.pad_odd("abcd") == "abcd"
    assert hexcodec.pad_odd("") == ""


# ═══════════════════════════════════════════════════════════════════
#  2. Passphrase cipher
# ═══════════════════════════════════════════════════════════════════


def test_roundtrip(cipher):
    token = b"pypi-AgEIcHlwaS5vcmcCJGE"
    container = cipher.encrypt(token, "correct horse")
    assert cipher.decrypt(container, "correct horse") == token


def test_roundtrip_with_secret_passphrase(cipher):
    container = cipher.encrypt(b"abc123", Secret("s3cret"))
    assert cipher.decrypt(container, Secret("s3cret")) == b"abc123"


def test_roundtrip_empty_plaintext(cipher):
    assert cipher.decrypt(cipher.encrypt(b"", "pw"), "pw") == b""


def test_container_layout(cipher):
    container = cipher.encrypt(b"abc", "pw")
    assert container.startswith(MAGIC)
    assert len(container) == HEADER_LEN + 3 + 16
    assert looks_encrypted(container)


def test_fresh_salt_and_nonce_each_time(cipher):
    a = cipher.encrypt(b"same", "pw")
    b = cipher.encrypt(b"same", "pw")
    assert a != b


def test_wrong_passphrase_fails(cipher):
    container = cipher.encrypt(b"abc123", "one")
    with pytest.raises(AuthenticationError):
        cipher.decrypt(container, "two")


def test_tampered_ciphertext_fails(cipher):
    container = bytearray(cipher.encrypt(b"abc123", "pw"))
    container[-1] ^= 0x01
    with pytest.raises(AuthenticationError):
        cipher.decrypt(bytes(container), "pw")


def test_tampered_header_fails(cipher):
    container = bytearray(cipher.encrypt(b"abc123", "pw"))
    container[HEADER_LEN - 1] ^= 0x01  # last nonce byte
    with pytest.raises(AuthenticationError):
        cipher.decrypt(bytes(container), "pw")


def test_short_input_is_format_error(cipher):
    with pytest.raises(FormatError, match="too short"):
        cipher.decrypt(b"abc", "pw")


def test_wrong_magic_is_format_error(cipher):
    with pytest.raises(FormatError):
        cipher.decrypt(b"x" * MIN_CONTAINER_LEN, "pw")
    assert not looks_encrypted(b"x" * MIN_CONTAINER_LEN)


def test_unknown_version_is_format_error(cipher):
    container = bytearray(cipher.encrypt(b"abc", "pw"))
    container[len(MAGIC)] = 99
    with pytest.raises(FormatError, match="version"):
        cipher.decrypt(bytes(container), "pw")
    assert not looks_encrypted(bytes(container))


def test_out_of_range_cost_is_format_error(cipher):
    container = bytearray(cipher.encrypt(b"abc", "pw"))
    container[len(MAGIC) + 1] = 40
    with pytest.raises(FormatError, match="cost"):
        cipher.decrypt(bytes(container), "pw")


def test_decrypt_uses_cost_from_header(cipher):
    container = cipher.encrypt(b"abc", "pw")
    assert PassphraseCipher(log_n=12).decrypt(container, "pw") == b"abc"


def test_empty_passphrase_rejected(cipher):
    with pytest.raises(ValueError):
        cipher.encrypt(b"abc", "")


def test_invalid_cost_rejected():
    with pytest.raises(ValueError):
        PassphraseCipher(log_n=4)
