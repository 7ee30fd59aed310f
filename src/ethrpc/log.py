"""Logging setup for the ethrpc command line."""

from __future__ import annotations

import logging

import click

LOGGER_NAME = "ethrpc"
LOG_FORMAT = "[LOG]: %(message)s"


class ClickEchoHandler(logging.Handler):
    """Write records with click.echo so they follow the current stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:  # noqa: BLE001
            self.handleError(record)


def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Route package log records to stderr.

    Safe to call more than once; the handler is only added the first time.
    """
    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(isinstance(h, ClickEchoHandler) for h in root.handlers):
        handler = ClickEchoHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root
