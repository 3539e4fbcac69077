"""
Passphrase-based token encryption: scrypt key derivation + ChaCha20-Poly1305.

Container layout (the 36-byte header is authenticated as associated data):

    magic "pubtok" (6) | version (1) | scrypt log_n (1) | salt (16) | nonce (12)
    | ciphertext + Poly1305 tag (>= 16)
"""

from __future__ import annotations

import logging
import secrets
import struct

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from pubtoken.config import (
    SCRYPT_LOG_N,
    SCRYPT_MAX_LOG_N,
    SCRYPT_MIN_LOG_N,
    SCRYPT_P,
    SCRYPT_R,
)
from pubtoken.errors import AuthenticationError, FormatError
from pubtoken.secret import Secret, as_secret

logger = logging.getLogger(__name__)

MAGIC = b"pubtok"
VERSION = 1
SALT_LEN = 16
NONCE_LEN = 12
KEY_LEN = 32
TAG_LEN = 16

_PARAMS = struct.Struct(">BB")  # version, log_n
HEADER_LEN = len(MAGIC) + _PARAMS.size + SALT_LEN + NONCE_LEN
MIN_CONTAINER_LEN = HEADER_LEN + TAG_LEN


def looks_encrypted(data: bytes) -> bool:
    """True when *data* carries this module's container header."""
    return (
        len(data) >= MIN_CONTAINER_LEN
        and data.startswith(MAGIC)
        and data[len(MAGIC)] == VERSION
    )


class PassphraseCipher:
    """Encrypts and decrypts byte buffers under a user passphrase."""

    def __init__(self, log_n: int = SCRYPT_LOG_N) -> None:
        if not SCRYPT_MIN_LOG_N <= log_n <= SCRYPT_MAX_LOG_N:
            raise ValueError(
                f"scrypt log_n must be between {SCRYPT_MIN_LOG_N} and {SCRYPT_MAX_LOG_N}"
            )
        self.log_n = log_n

    # ── public ──────────────────────────────────────────────────────

    def encrypt(self, plaintext: bytes, passphrase: Secret | str) -> bytes:
        """Return a self-contained container that only *passphrase* can open."""
        salt = secrets.token_bytes(SALT_LEN)
        nonce = secrets.token_bytes(NONCE_LEN)
        header = MAGIC + _PARAMS.pack(VERSION, self.log_n) + salt + nonce

        aead = ChaCha20Poly1305(_derive_key(passphrase, salt, self.log_n))
        logger.debug("Encrypting %d bytes (scrypt log_n=%d)", len(plaintext), self.log_n)
        return header + aead.encrypt(nonce, plaintext, header)

    def decrypt(self, container: bytes, passphrase: Secret | str) -> bytes:
        """Open a container.

        Raises FormatError if *container* is not one of ours, and
        AuthenticationError if the passphrase is wrong or the data was altered.
        """
        header, log_n, salt, nonce = _parse_header(container)
        aead = ChaCha20Poly1305(_derive_key(passphrase, salt, log_n))
        try:
            return aead.decrypt(nonce, container[HEADER_LEN:], header)
        except InvalidTag as e:
            raise AuthenticationError(
                "failed to decrypt token: wrong passphrase or corrupted data"
            ) from e


# ── helpers ─────────────────────────────────────────────────────────


def _parse_header(container: bytes) -> tuple[bytes, int, bytes, bytes]:
    if len(container) < MIN_CONTAINER_LEN:
        raise FormatError("encrypted token is too short")
    if not container.startswith(MAGIC):
        raise FormatError("stored token is not an encrypted token")

    offset = len(MAGIC)
    version, log_n = _PARAMS.unpack_from(container, offset)
    if version != VERSION:
        raise FormatError(f"unsupported encrypted token version {version}")
    if not SCRYPT_MIN_LOG_N <= log_n <= SCRYPT_MAX_LOG_N:
        raise FormatError(f"invalid scrypt cost parameter {log_n}")

    offset += _PARAMS.size
    salt = container[offset : offset + SALT_LEN]
    offset += SALT_LEN
    nonce = container[offset : offset + NONCE_LEN]
    return container[:HEADER_LEN], log_n, salt, nonce


def _derive_key(passphrase: Secret | str, salt: bytes, log_n: int) -> bytes:
    phrase = as_secret(passphrase)
    if phrase.is_empty():
        raise ValueError("an empty passphrase cannot be used for encryption")
    kdf = Scrypt(salt=salt, length=KEY_LEN, n=2**log_n, r=SCRYPT_R, p=SCRYPT_P)
    return kdf.derive(phrase.expose_bytes())
