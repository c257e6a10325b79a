from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(*, level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Install console (and optional rotating file) handlers on the root logger.

    Safe to call more than once: handlers added by a previous call are replaced.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_scholax", False):
            root.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=10 * 1024 * 1024,  # 10 MB per file
                backupCount=5,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        handler._scholax = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Only show warnings and errors from the dev server.
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
