"""Distribution upload — repository checks, dist discovery, twine invocation."""

from __future__ import annotations

import glob
import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

import httpx

from pubtoken.config import (
    DEFAULT_REPOSITORY,
    DEFAULT_REPOSITORY_URL,
    DIST_DIR_NAME,
    PROJECT_MARKER,
    PYPI_UPLOAD_HOST,
    TOKEN_USERNAME,
    TWINE_MODULE,
)
from pubtoken.errors import PublishError, RepositoryURLError
from pubtoken.secret import Secret

logger = logging.getLogger(__name__)

_GLOB_CHARS = "*?["


@dataclass
class UploadRequest:
    """Everything the upload tool needs besides the token."""

    files: list[Path]
    repository_url: str = DEFAULT_REPOSITORY_URL
    sign: bool = False
    identity: str | None = None
    cert: Path | None = None
    quiet: bool = False


# ── validation ──────────────────────────────────────────────────────


def validate_repository(repository: str, repository_url: str) -> httpx.URL:
    """Parse *repository_url* and check it is valid for *repository*."""
    try:
        url = httpx.URL(repository_url)
    except httpx.InvalidURL as e:
        raise RepositoryURLError(f"invalid repository url {repository_url}: {e}") from e

    if url.scheme not in ("http", "https") or not url.host:
        raise RepositoryURLError(f"invalid repository url {repository_url}")
    # -r pypi with a non-pypi url is almost certainly a mistake
    if repository == DEFAULT_REPOSITORY and url.host != PYPI_UPLOAD_HOST:
        raise RepositoryURLError(
            f"invalid pypi url {repository_url} (use -h for help)"
        )
    return url


# ── file discovery ──────────────────────────────────────────────────


def find_project_root(start: Path | None = None) -> Path:
    """Nearest directory at or above *start* holding a pyproject.toml."""
    start = (start or Path.cwd()).resolve()
    for candidate in (start, *start.parents):
        if (candidate / PROJECT_MARKER).is_file():
            return candidate
    return start


def collect_dist_files(
    paths: list[Path] | None = None, project_root: Path | None = None
) -> list[Path]:
    """Files to upload: the given paths, or everything in <project>/dist.

    Arguments holding glob characters are expanded here, since shells on
    Windows (or a quoted argument) pass them through literally.
    """
    if paths:
        files: list[Path] = []
        missing = []
        for path in paths:
            matches = _expand(path)
            if matches:
                files.extend(matches)
            else:
                missing.append(path)
        if missing:
            raise PublishError(
                "distribution file not found: " + ", ".join(str(p) for p in missing)
            )
        return files

    dist_dir = (project_root or find_project_root()) / DIST_DIR_NAME
    files = sorted(p for p in dist_dir.glob("*") if p.is_file())
    if not files:
        raise PublishError(f"no distribution files found in {dist_dir}")
    return files


def _expand(path: Path) -> list[Path]:
    pattern = str(path)
    if not any(c in pattern for c in _GLOB_CHARS):
        return [path] if path.exists() else []
    return sorted(Path(m) for m in glob.glob(pattern) if Path(m).is_file())


# ── upload ──────────────────────────────────────────────────────────


def build_upload_command(request: UploadRequest, python: str | None = None) -> list[str]:
    """twine argv.  Credentials travel through the environment, never argv."""
    cmd = [
        python or sys.executable,
        "-m",
        TWINE_MODULE,
        "--no-color",
        "upload",
        "--non-interactive",
        *[str(f) for f in request.files],
        "--repository-url",
        request.repository_url,
    ]
    if request.sign:
        cmd.append("--sign")
    if request.identity:
        cmd.extend(["--identity", request.identity])
    if request.cert:
        cmd.extend(["--cert", str(request.cert)])
    return cmd


def build_upload_env(token: Secret, base: dict[str, str] | None = None) -> dict[str, str]:
    env = dict(os.environ if base is None else base)
    env["TWINE_USERNAME"] = TOKEN_USERNAME
    env["TWINE_PASSWORD"] = token.expose_secret()
    return env


def upload(request: UploadRequest, token: Secret) -> None:
    """Run the upload tool.  Raises PublishError unless it succeeds."""
    cmd = build_upload_command(request)
    env = build_upload_env(token)
    logger.debug("Running: %s", " ".join(cmd))

    output = subprocess.DEVNULL if request.quiet else None
    try:
        result = subprocess.run(cmd, env=env, stdout=output, stderr=output, check=False)
    except OSError as e:
        raise PublishError(f"failed to run {TWINE_MODULE}: {e}") from e
    finally:
        env.pop("TWINE_PASSWORD", None)

    if result.returncode != 0:
        raise PublishError("failed to publish files")
    logger.info("Uploaded %d file(s) to %s", len(request.files), request.repository_url)
