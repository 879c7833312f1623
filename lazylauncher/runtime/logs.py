"""Log sink setup.

The terminal belongs to the UI, so logs go to a rotating file under the
platform log directory instead of stderr.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FILENAME = "lazylauncher.log"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME
LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {name}:{line} | {message}"


def configure_logging(log_path: Path | None = DEFAULT_LOG_PATH, verbose: bool = False) -> Path | None:
    """Replace default sinks with one file sink; ``None`` disables logging.

    Returns the path actually logged to, or ``None`` when the file cannot be
    opened.
    """
    logger.remove()
    if log_path is None:
        return None
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            level="DEBUG" if verbose else "INFO",
            format=LOG_FORMAT,
            rotation="1 MB",
            retention=3,
            enqueue=True,
        )
    except OSError:
        return None
    return log_path
