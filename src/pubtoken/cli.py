"""pubtoken CLI — powered by Typer."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from pubtoken import __version__
from pubtoken.config import DEFAULT_REPOSITORY, DEFAULT_REPOSITORY_URL

app = typer.Typer(
    name="pubtoken",
    help="📦 pubtoken — publish packages with a locally protected access token",
    no_args_is_help=True,
    invoke_without_command=True,
    rich_markup_mode="rich",
)
credentials_app = typer.Typer(help="🔐 Stored credentials management")
app.add_typer(credentials_app, name="credentials")

console = Console()
err_console = Console(stderr=True)


# ── Publish command ─────────────────────────────────────────────────


@app.command("publish")
def publish(
    dist: Optional[List[Path]] = typer.Argument(
        None,
        help="Distribution files to upload (defaults to <project-root>/dist/*).",
        show_default=False,
    ),
    repository: str = typer.Option(
        DEFAULT_REPOSITORY, "--repository", "-r", help="Repository to publish to."
    ),
    repository_url: str = typer.Option(
        DEFAULT_REPOSITORY_URL, "--repository-url", help="Repository upload URL."
    ),
    token: Optional[str] = typer.Option(
        None, "--token", help="Access token used for the upload (stored for next time)."
    ),
    sign: bool = typer.Option(False, "--sign", help="Sign files to upload using GPG."),
    identity: Optional[str] = typer.Option(
        None, "--identity", "-i", help="GPG identity used to sign files."
    ),
    cert: Optional[Path] = typer.Option(None, "--cert", help="Path to alternate CA bundle."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose diagnostics."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Turn off all output."),
) -> None:
    """Publish packages to a package repository."""
    from pubtoken.auth.prompt import ConsolePrompter
    from pubtoken.auth.resolver import TokenResolver
    from pubtoken.auth.storage import CredentialStore
    from pubtoken.errors import PubTokenError
    from pubtoken.logging_config import secret_redaction_filter, setup_logging
    from pubtoken.publish import (
        UploadRequest,
        collect_dist_files,
        upload,
        validate_repository,
    )

    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet cannot be used together")
    setup_logging(verbose=verbose, quiet=quiet)

    try:
        validate_repository(repository, repository_url)
        files = collect_dist_files(dist)
        store = CredentialStore.load()
        resolver = TokenResolver(store, prompter=ConsolePrompter(err_console))
        resolved = resolver.resolve(repository, token)

        request = UploadRequest(
            files=files,
            repository_url=repository_url,
            sign=sign,
            identity=identity,
            cert=cert,
            quiet=quiet,
        )
        try:
            with resolved.token as secret:
                upload(request, secret)
        finally:
            secret_redaction_filter.clear()
    except PubTokenError as e:
        err_console.print(f"[bold red]❌ {e}[/]")
        raise typer.Exit(1)

    if not quiet:
        console.print(f"[bold green]✅ Published {len(files)} file(s) to {repository}[/]")
        if resolved.persisted:
            kind = "encrypted" if resolved.encrypted else "plaintext"
            console.print(f"[dim]   {kind.capitalize()} token saved to {store.path}[/]")


# ── Credentials commands ────────────────────────────────────────────


@credentials_app.command("list")
def credentials_list() -> None:
    """Show repositories with a stored token (never the token itself)."""
    from pubtoken.auth.storage import CredentialStore
    from pubtoken.errors import PubTokenError

    try:
        store = CredentialStore.load()
    except PubTokenError as e:
        err_console.print(f"[bold red]❌ {e}[/]")
        raise typer.Exit(1)

    names = store.repositories()
    if not names:
        console.print("[dim]No credentials found[/]")
        return

    table = Table(title="🔐 Stored Credentials", show_lines=False)
    table.add_column("Repository", style="cyan", no_wrap=True)
    table.add_column("Token", style="white")

    for name in names:
        table.add_row(name, _describe_token(store.get_token(name)))

    console.print(table)
    console.print(f"[dim]File: {store.path}[/]")


@credentials_app.command("remove")
def credentials_remove(
    repository: str = typer.Argument(..., help="Repository whose record to delete."),
) -> None:
    """Remove a repository's stored credentials."""
    from pubtoken.auth.storage import CredentialStore
    from pubtoken.errors import PubTokenError

    try:
        store = CredentialStore.load()
        if not store.remove(repository):
            console.print(f"[dim]No credentials found for {repository}[/]")
            return
        store.save()
    except PubTokenError as e:
        err_console.print(f"[bold red]❌ {e}[/]")
        raise typer.Exit(1)

    console.print(f"[bold green]✅ Credentials for {repository} removed[/]")


def _describe_token(stored: str | None) -> str:
    from pubtoken.auth.resolver import is_encrypted_value

    if stored is None:
        return "—"
    return "encrypted" if is_encrypted_value(stored) else "plaintext"


# ── Version ─────────────────────────────────────────────────────────


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", help="Show version and exit"
    ),
) -> None:
    if version:
        console.print(f"pubtoken v{__version__}")
        raise typer.Exit()
    if ctx.invoked_subcommand is None and not version:
        # No command given, show help
        console.print(ctx.get_help())
        raise typer.Exit()
