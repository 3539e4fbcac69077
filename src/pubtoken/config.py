"""Global configuration constants."""

import os
from pathlib import Path

# ── Repository ─────────────────────────────────────────────────────
DEFAULT_REPOSITORY = "pypi"
DEFAULT_REPOSITORY_URL = "https://upload.pypi.org/legacy/"
# The "pypi" repository name is only valid against the canonical upload host.
PYPI_UPLOAD_HOST = "upload.pypi.org"
TOKEN_HELP_URL = "https://pypi.org/manage/account/token/"
TOKEN_USERNAME = "__token__"

# ── Upload tool ────────────────────────────────────────────────────
TWINE_MODULE = "twine"
DIST_DIR_NAME = "dist"
PROJECT_MARKER = "pyproject.toml"

# ── Encryption ─────────────────────────────────────────────────────
# scrypt cost: N = 2**SCRYPT_LOG_N (32 MiB of memory at r=8).
SCRYPT_LOG_N = 15
SCRYPT_MIN_LOG_N = 10
SCRYPT_MAX_LOG_N = 20
SCRYPT_R = 8
SCRYPT_P = 1

# ── Storage ────────────────────────────────────────────────────────
# PUBTOKEN_HOME relocates the whole state dir, PUBTOKEN_CREDENTIALS just the file.
PUBTOKEN_DIR = Path.home() / ".pubtoken"
CREDENTIALS_FILE_NAME = "credentials"


def get_home_dir() -> Path:
    """Directory holding pubtoken's per-user state."""
    override = os.environ.get("PUBTOKEN_HOME", "")
    return Path(override).expanduser() if override else PUBTOKEN_DIR


def get_credentials_path() -> Path:
    """Location of the credentials document for this user."""
    override = os.environ.get("PUBTOKEN_CREDENTIALS", "")
    if override:
        return Path(override).expanduser()
    return get_home_dir() / CREDENTIALS_FILE_NAME
