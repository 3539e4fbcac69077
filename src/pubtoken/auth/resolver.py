"""Token resolution — explicit > stored > prompted, first match wins.

Only the explicit and prompted paths write the credentials file; reading a
stored token never rewrites it, even after a successful decryption.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from pubtoken.auth.prompt import ConsolePrompter, Prompter
from pubtoken.auth.storage import CredentialStore
from pubtoken.config import TOKEN_HELP_URL
from pubtoken.crypto import hexcodec
from pubtoken.crypto.cipher import PassphraseCipher, looks_encrypted
from pubtoken.errors import DecodeError, FormatError, MissingInputError
from pubtoken.logging_config import secret_redaction_filter
from pubtoken.secret import Secret, as_secret

logger = logging.getLogger(__name__)

PASSPHRASE_PROMPT = "Enter a passphrase (optional)"
TOKEN_PROMPT = "Access token"


class TokenSource(enum.Enum):
    EXPLICIT = "explicit"
    STORED = "stored"
    PROMPTED = "prompted"


@dataclass
class ResolvedToken:
    """Outcome of a resolution.  ``token`` is always plaintext."""

    token: Secret
    source: TokenSource
    persisted: bool = False  # credentials file was rewritten
    encrypted: bool = False  # the stored form is (or was) an encrypted container


class TokenResolver:
    """Produces the plaintext token for one repository."""

    def __init__(
        self,
        store: CredentialStore,
        prompter: Prompter | None = None,
        cipher: PassphraseCipher | None = None,
    ) -> None:
        self.store = store
        self.prompter = prompter or ConsolePrompter()
        self.cipher = cipher or PassphraseCipher()

    # ── public ──────────────────────────────────────────────────────

    def resolve(
        self,
        repository: str,
        explicit_token: Secret | str | None = None,
    ) -> ResolvedToken:
        stored = self.store.get_token(repository)
        if explicit_token is not None:
            token = as_secret(explicit_token)
            if token.is_empty():
                raise MissingInputError("an access token is required")
            logger.debug("Using token supplied for repository '%s'", repository)
            result = self._protect_and_store(repository, token, TokenSource.EXPLICIT)
        elif stored is not None:
            logger.debug("Using stored token for repository '%s'", repository)
            result = self._unlock_stored(repository, stored)
        else:
            self.prompter.notify(
                f"No access token found, generate one at: {TOKEN_HELP_URL}"
            )
            token = self.prompter.read_line(TOKEN_PROMPT)
            if token.is_empty():
                raise MissingInputError("an access token is required")
            result = self._protect_and_store(repository, token, TokenSource.PROMPTED)

        secret_redaction_filter.register(result.token.expose_secret())
        return result

    # ── private ─────────────────────────────────────────────────────

    def _protect_and_store(
        self, repository: str, token: Secret, source: TokenSource
    ) -> ResolvedToken:
        with self.prompter.read_secret(PASSPHRASE_PROMPT) as passphrase:
            if passphrase.is_empty():
                stored_value = token.expose_secret()
                encrypted = False
            else:
                blob = self.cipher.encrypt(token.expose_bytes(), passphrase)
                stored_value = hexcodec.encode(blob)
                encrypted = True

        self.store.set_token(repository, stored_value)
        self.store.save()
        logger.info(
            "Stored %s token for repository '%s' in %s",
            "encrypted" if encrypted else "plaintext",
            repository,
            self.store.path,
        )
        return ResolvedToken(token, source, persisted=True, encrypted=encrypted)

    def _unlock_stored(self, repository: str, stored: str) -> ResolvedToken:
        with self.prompter.read_secret(PASSPHRASE_PROMPT) as passphrase:
            if passphrase.is_empty():
                if is_encrypted_value(stored):
                    raise MissingInputError(
                        f"the stored token for '{repository}' is encrypted; "
                        "a passphrase is required"
                    )
                return ResolvedToken(Secret(stored), TokenSource.STORED)

            blob = hexcodec.decode(hexcodec.pad_odd(canonicalize_stored_value(stored)))
            plaintext = Secret(self.cipher.decrypt(blob, passphrase))

        try:
            token = Secret(plaintext.expose_bytes().decode("utf-8"))
        except UnicodeDecodeError as e:
            raise FormatError("decrypted token is not valid UTF-8") from e
        finally:
            plaintext.zeroize()
        logger.debug("Decrypted stored token for repository '%s'", repository)
        return ResolvedToken(token, TokenSource.STORED, encrypted=True)


def canonicalize_stored_value(value: str) -> str:
    """Strip quoting artifacts before hex-decoding a stored token.

    A value can come back from a round trip through the credentials file
    wrapped in residual quotes or escapes; surrounding whitespace, ``\\`` and
    ``"`` are never part of a hex string.
    """
    return value.strip().replace("\\", "").replace('"', "")


def resolve_token(
    explicit_token: Secret | str | None,
    repository: str,
    store: CredentialStore,
    prompter: Prompter | None = None,
    cipher: PassphraseCipher | None = None,
) -> Secret:
    """Resolve the plaintext token to upload with."""
    resolver = TokenResolver(store, prompter=prompter, cipher=cipher)
    return resolver.resolve(repository, explicit_token).token


def is_encrypted_value(stored: str) -> bool:
    """True when *stored* is the hex form of an encrypted container."""
    try:
        blob = hexcodec.decode(hexcodec.pad_odd(canonicalize_stored_value(stored)))
    except DecodeError:
        return False
    return looks_encrypted(blob)
