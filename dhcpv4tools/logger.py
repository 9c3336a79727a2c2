"""Loggers that report DHCPv4 messages and diagnostic text."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

_DEFAULT_LOGGER_NAME = "dhcpv4"


def _default_printfer() -> logging.Logger:
    return logging.getLogger(_DEFAULT_LOGGER_NAME)


class EmptyLogger:
    """A logger that discards everything."""

    def printf(self, fmt: str, *args: Any) -> None:
        """Discard a formatted message."""

    def print_message(self, prefix: str, message: Any) -> None:
        """Discard a DHCP message."""


@dataclass
class ShortSummaryLogger:
    """Logs messages through printfer, showing DHCP messages in their short form.

    printfer is a logging.Logger or anything with a compatible ``info`` method;
    format strings use %-style placeholders.
    """

    printfer: Any = field(default_factory=_default_printfer)

    def printf(self, fmt: str, *args: Any) -> None:
        """Log a message formatted %-style."""
        self.printfer.info(fmt, *args)

    def print_message(self, prefix: str, message: Any) -> None:
        """Log a DHCP message as a one-line summary."""
        self.printf("%s: %s", prefix, message)


@dataclass
class DebugLogger:
    """Logs messages through printfer, showing DHCP messages in full.

    The message must provide a ``summary()`` method.
    """

    printfer: Any = field(default_factory=_default_printfer)

    def printf(self, fmt: str, *args: Any) -> None:
        """Log a message formatted %-style."""
        self.printfer.info(fmt, *args)

    def print_message(self, prefix: str, message: Any) -> None:
        """Log a DHCP message using its multi-line summary."""
        self.printf("%s: %s", prefix, message.summary())