"""Process-wide logging setup.

Logs go to stderr: stdout is reserved for the MCP stdio transport.
"""

from __future__ import annotations

import logging
import sys


LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
