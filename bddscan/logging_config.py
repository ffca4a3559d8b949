from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def init_logging(level: str = "WARNING") -> None:
    """Configure root logging for the CLI."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=[logging.StreamHandler()])
    logging.getLogger("bddscan").setLevel(level.upper())
