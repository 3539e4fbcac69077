"""Crypto package — hex codec + passphrase-based token encryption."""

from pubtoken.crypto import hexcodec
from pubtoken.crypto.cipher import PassphraseCipher

__all__ = ["PassphraseCipher", "hexcodec"]
