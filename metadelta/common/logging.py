"""Shared logging helpers for metadelta."""

import logging


def configure_logging(*, level: int = logging.WARNING, force: bool = False) -> None:
    """Initialise the root logger once with a terse CLI format.

    Logs go to stderr so the resolved status lines on stdout stay clean. Pass
    ``force=True`` to reconfigure during tests.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
