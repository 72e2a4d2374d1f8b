"""ZeroIDE CLI - keystroke-driven terminal chat console."""

from __future__ import annotations

import importlib.metadata
import logging


def _configure_logging() -> None:
    """Configure logging to suppress noisy third-party logs.

    Suppresses asyncio ERROR logs emitted while pending tasks are torn down
    at shutdown.
    """
    if not logging.root.handlers:
        logging.basicConfig(
            level=logging.WARNING,
            format="%(levelname)s: %(message)s",
        )

    logging.getLogger("asyncio").setLevel(logging.CRITICAL)


_configure_logging()

try:
    __version__ = importlib.metadata.version("zeroide-cli")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"
