"""Shared test fixtures — scripted prompts, fast cipher, isolated credentials file."""

from __future__ import annotations

from pathlib import Path

import pytest

from pubtoken.config import SCRYPT_MIN_LOG_N
from pubtoken.crypto.cipher import PassphraseCipher
from pubtoken.logging_config import secret_redaction_filter
from pubtoken.secret import Secret


class ScriptedPrompter:
    """Answers prompts from fixed lists instead of a terminal."""

    def __init__(self, secrets: list[str] | None = None, lines: list[str] | None = None):
        self.secrets = list(secrets or [])
        self.lines = list(lines or [])
        self.prompts: list[str] = []
        self.notices: list[str] = []

    def read_secret(self, prompt: str) -> Secret:
        self.prompts.append(prompt)
        return Secret(self.secrets.pop(0).strip())

    def read_line(self, prompt: str) -> Secret:
        self.prompts.append(prompt)
        return Secret(self.lines.pop(0).strip())

    def notify(self, message: str) -> None:
        self.notices.append(message)


@pytest.fixture
def cipher() -> PassphraseCipher:
    """Cheapest allowed scrypt cost, so tests do not spend seconds per call."""
    return PassphraseCipher(log_n=SCRYPT_MIN_LOG_N)


@pytest.fixture
def credentials_path(tmp_path: Path, monkeypatch) -> Path:
    path = tmp_path / "home" / "credentials"
    monkeypatch.setenv("PUBTOKEN_CREDENTIALS", str(path))
    return path


@pytest.fixture(autouse=True)
def _clear_redaction_filter():
    secret_redaction_filter.clear()
    yield
    secret_redaction_filter.clear()
