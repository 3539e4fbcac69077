"""pubtoken — publish Python packages with a locally protected access token."""

__version__ = "0.1.0"
