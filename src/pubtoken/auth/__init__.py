"""Auth package — credentials file + access token resolution."""

from pubtoken.auth.prompt import ConsolePrompter, Prompter
from pubtoken.auth.resolver import ResolvedToken, TokenResolver, TokenSource, resolve_token
from pubtoken.auth.storage import CredentialStore

__all__ = [
    "ConsolePrompter",
    "CredentialStore",
    "Prompter",
    "ResolvedToken",
    "TokenResolver",
    "TokenSource",
    "resolve_token",
]
