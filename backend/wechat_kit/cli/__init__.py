"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .wechat import wechat_cli


def init_app(app: Flask) -> None:
    """Register the ``wechat`` command group.

    Parameters
    ----------
    app:
        Flask application instance whose CLI registry will receive the
        command group.
    """
    app.cli.add_command(wechat_cli)
