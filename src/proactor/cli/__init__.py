"""
CLI layer for proactor.

Provides a Typer application: an interactive shell that maps commands to
dispatcher submissions, and a batch runner. All scheduling lives in
``proactor.dispatch``; this package only handles terminal transport.

Entry point::

    proactor --help
"""

from proactor.cli.app import app

__all__ = ["app"]
