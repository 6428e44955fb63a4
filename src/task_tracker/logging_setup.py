from __future__ import annotations

import logging
import sys
from typing import Union


def setup_logging(level: Union[str, int] = logging.INFO) -> None:
    """
    Configure the root logger with a single stderr handler.

    Safe to call more than once: existing handlers are replaced so reloading
    the app does not duplicate output.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
