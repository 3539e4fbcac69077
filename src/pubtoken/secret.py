"""Sensitive value wrapper — tokens and passphrases never print in cleartext."""

from __future__ import annotations

_REDACTED = "**********"


class Secret:
    """Holds a token or passphrase until the moment it is used.

    - ``repr()``/``str()`` are redacted, so a Secret is safe to log by accident
    - the value is only reachable through :meth:`expose_secret`
    - :meth:`zeroize` overwrites the backing buffer (also on ``with`` exit)

    Zeroization is best-effort: ``str`` objects returned by
    :meth:`expose_secret` are immutable copies Python will not scrub.  The
    logging redaction filter also holds a copy of each resolved token until
    ``secret_redaction_filter.clear()`` runs after the upload.
    """

    __slots__ = ("_buf", "_is_text", "_wiped")

    def __init__(self, value: str | bytes | bytearray) -> None:
        if isinstance(value, str):
            self._buf = bytearray(value.encode("utf-8"))
            self._is_text = True
        else:
            self._buf = bytearray(value)
            self._is_text = False
        self._wiped = False

    # ── public ──────────────────────────────────────────────────────

    def expose_secret(self) -> str | bytes:
        """Return the wrapped value in the type it was created with."""
        self._check_alive()
        if self._is_text:
            return self._buf.decode("utf-8")
        return bytes(self._buf)

    def expose_bytes(self) -> bytes:
        """Return the wrapped value as bytes (UTF-8 for text secrets)."""
        self._check_alive()
        return bytes(self._buf)

    def is_empty(self) -> bool:
        self._check_alive()
        return len(self._buf) == 0

    def zeroize(self) -> None:
        """Overwrite the backing buffer with zeros and release it."""
        for i in range(len(self._buf)):
            self._buf[i] = 0
        del self._buf[:]
        self._wiped = True

    @property
    def wiped(self) -> bool:
        return self._wiped

    # ── protocol ────────────────────────────────────────────────────

    def __enter__(self) -> "Secret":
        return self

    def __exit__(self, *exc: object) -> None:
        self.zeroize()

    def __len__(self) -> int:
        return len(self._buf)

    def __repr__(self) -> str:
        return f"Secret('{_REDACTED}')"

    __str__ = __repr__

    def __format__(self, spec: str) -> str:
        return format(repr(self), spec)

    def __reduce__(self):
        raise TypeError("Secret values cannot be pickled")

    # ── private ─────────────────────────────────────────────────────

    def _check_alive(self) -> None:
        if self._wiped:
            raise ValueError("secret has already been zeroized")


def as_secret(value: Secret | str | bytes) -> Secret:
    """Wrap *value* unless it already is a :class:`Secret`."""
    if isinstance(value, Secret):
        return value
    return Secret(value)
