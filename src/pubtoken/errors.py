"""Custom exception classes for pubtoken."""

from __future__ import annotations

from pathlib import Path


class PubTokenError(Exception):
    """Base class for all errors surfaced by pubtoken."""


class MissingInputError(PubTokenError):
    """Raised when a required token or passphrase was not provided."""


class DecodeError(PubTokenError, ValueError):
    """Raised when a stored value is not valid hex."""


class FormatError(PubTokenError, ValueError):
    """Raised when bytes are not a recognized encrypted container."""


class AuthenticationError(PubTokenError):
    """
    Raised when an encrypted container fails its integrity check,
    either because the passphrase is wrong or the data was tampered with.
    """


class CredentialsIOError(PubTokenError):
    """Raised when the credentials file cannot be read, parsed or written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


class RepositoryURLError(PubTokenError):
    """Raised when a repository name and upload URL do not go together."""


class PublishError(PubTokenError):
    """Raised when the distribution upload cannot run or fails."""
