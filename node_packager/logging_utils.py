from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional


def configure_logging(
    log_path: Optional[str] = None,
    level: int = logging.INFO,
    also_console: bool = True,
) -> Optional[str]:
    """Configure logging.

    Console output follows `level`. A file log is only written when log_path
    is given and always records DEBUG; if that location is not writable we
    fall back to a file in the working directory.

    Returns the actual file path being used, if any.
    """

    logger = logging.getLogger()

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_node_packager_configured", False):
        return getattr(logger, "_node_packager_log_path", log_path)

    logger.setLevel(level)

    chosen_path: Optional[str] = None
    handlers: list[logging.Handler] = []

    if log_path:
        fmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        try:
            Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
            chosen_path = log_path
        except OSError:
            # Fall back to a writable location.
            fallback = str(Path.cwd() / "node-packager.log")
            file_handler = logging.FileHandler(fallback)
            chosen_path = fallback
        file_handler.setFormatter(fmt)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        if level <= logging.DEBUG:
            console.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        else:
            console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        console.setLevel(level)
        handlers.append(console)

    if chosen_path:
        # The file gets everything; the console handler filters on its own level.
        logger.setLevel(logging.DEBUG)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_node_packager_configured", True)
    setattr(logger, "_node_packager_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
