import logging
import os
import sys


def configure_logging(default_level: int = logging.WARNING) -> None:
    """Configure the root logger with a single stderr handler.

    Respects MEMOY_LOG_LEVEL env var if present. Logs go to stderr so they
    never interleave with the board drawn on stdout.
    """
    level_name = os.getenv("MEMOY_LOG_LEVEL")
    level = default_level
    if level_name:
        level = getattr(logging, level_name.upper(), default_level)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(
        logging.Formatter(fmt="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s")
    )

    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplicates in repeated test runs
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
