"""Logging setup for the command line and the dashboard."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "WARNING", quiet_werkzeug: bool = True) -> None:
    """Configure root logging once for an entry point."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.WARNING),
                        format=LOG_FORMAT)
    if quiet_werkzeug:
        logging.getLogger("werkzeug").setLevel(logging.ERROR)
