"""Synchronize OpenAPI specification and fixture documents between checkouts."""

from __future__ import annotations

__version__ = "0.1.0"


def main() -> None:
    """Console script entry point."""
    from openapi_update.cli import app

    app()


__all__ = ["__version__", "main"]
