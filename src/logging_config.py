"""Handlers for the 'genogram' logger tree used by the CLI."""

import logging
import sys

FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: int = logging.INFO, log_file: str | None = None) -> None:
    """Send 'genogram.*' records at ``level`` to stderr and, optionally, to ``log_file``."""
    logger = logging.getLogger("genogram")
    logger.setLevel(level)
    # main() may run more than once in a process
    logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    formatter = logging.Formatter(FORMAT, datefmt="%H:%M:%S")
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
