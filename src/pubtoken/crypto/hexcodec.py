"""Hex encoding for encrypted tokens stored in the credentials file."""

from __future__ import annotations

import binascii

from pubtoken.errors import DecodeError


def encode(data: bytes) -> str:
    """Lowercase hex of *data*."""
    return binascii.hexlify(data).decode("ascii")


def decode(text: str) -> bytes:
    """Decode a hex string.  Raises DecodeError on non-hex input or odd length."""
    try:
        return binascii.unhexlify(text.encode("ascii"))
    except (binascii.Error, UnicodeEncodeError) as e:
        raise DecodeError(f"stored value is not valid hex: {e}") from e


def pad_odd(text: str) -> str:
    """Restore a dropped leading zero nibble on odd-length input.

    This is a repair, not a validation: genuinely truncated data is
    padded too and only fails later, at decryption.
    """
    if len(text) % 2 == 1:
        return f"0{text}"
    return text
