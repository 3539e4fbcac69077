"""Credential persistence — read/write the per-user TOML credentials file.

Layout: one table per repository name, holding at least a ``token`` string.

    [pypi]
    token = "pypi-AgEIcHlwaS5vcmc..."

Unrelated keys (other tools may share the file) are round-tripped through
tomlkit untouched.  There is no file locking; two concurrent invocations can
race on the read-modify-write, although each individual write is atomic.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from collections.abc import MutableMapping
from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError

from pubtoken.config import get_credentials_path
from pubtoken.errors import CredentialsIOError

logger = logging.getLogger(__name__)

TOKEN_FIELD = "token"


class CredentialStore:
    """Repository name → record mapping, loaded once and saved at most once."""

    def __init__(
        self,
        path: Path | None = None,
        document: tomlkit.TOMLDocument | None = None,
    ) -> None:
        self.path = Path(path) if path is not None else get_credentials_path()
        self._doc = document if document is not None else tomlkit.document()

    @classmethod
    def load(cls, path: Path | None = None) -> "CredentialStore":
        """Load the credentials file.  A missing file yields an empty store."""
        path = Path(path) if path is not None else get_credentials_path()
        if not path.exists():
            logger.debug("No credentials file at %s", path)
            return cls(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise CredentialsIOError(f"failed to read credentials: {e}", path) from e
        try:
            doc = tomlkit.parse(text)
        except TOMLKitError as e:
            raise CredentialsIOError(f"failed to parse credentials: {e}", path) from e
        logger.debug("Loaded credentials for %d repositories from %s", len(doc), path)
        return cls(path, doc)

    # ── public ──────────────────────────────────────────────────────

    def entry_or_create(self, repository: str) -> MutableMapping:
        """Return the record for *repository*, inserting an empty table if absent."""
        entry = self._doc.get(repository)
        if entry is None:
            self._doc[repository] = tomlkit.table()
            return self._doc[repository]
        if not isinstance(entry, MutableMapping):
            raise CredentialsIOError(
                f"credentials entry '{repository}' is not a table", self.path
            )
        return entry

    def get_token(self, repository: str) -> str | None:
        """Stored token string (plaintext or encoded), or None."""
        entry = self._doc.get(repository)
        if not isinstance(entry, MutableMapping):
            return None
        token = entry.get(TOKEN_FIELD)
        if token is None:
            return None
        return str(token)

    def set_token(self, repository: str, token: str) -> None:
        """Set only the ``token`` field of *repository*'s record."""
        self.entry_or_create(repository)[TOKEN_FIELD] = token

    def repositories(self) -> list[str]:
        """Names of all repository records, in file order."""
        return [
            name for name, entry in self._doc.items() if isinstance(entry, MutableMapping)
        ]

    def remove(self, repository: str) -> bool:
        """Drop *repository*'s record.  Returns True if it existed."""
        if repository in self._doc:
            del self._doc[repository]
            return True
        return False

    def save(self) -> None:
        """Atomically write the document back with owner-only permissions."""
        self._ensure_dir()
        text = tomlkit.dumps(self._doc)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
            # chmod 600 before the file becomes visible under its real name
            if os.name != "nt":
                os.chmod(tmp_name, stat.S_IRUSR | stat.S_IWUSR)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise CredentialsIOError(f"failed to write credentials: {e}", self.path) from e
        logger.debug("Saved credentials to %s", self.path)

    # ── private ─────────────────────────────────────────────────────

    def _ensure_dir(self) -> None:
        parent = self.path.parent
        try:
            if not parent.exists():
                parent.mkdir(parents=True, exist_ok=True)
                if os.name != "nt":
                    parent.chmod(stat.S_IRWXU)
        except OSError as e:
            raise CredentialsIOError(f"failed to create {parent}: {e}", self.path) from e
