# src/heroprint/core/utils/configure_logging.py
import logging
import sys
from typing import Dict, Optional, Union

from tqdm import tqdm

Level = Union[str, int]

# processName tells batch workers apart
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(processName)s [%(name)s:%(lineno)d] %(message)s"


class LogWithTqdm(logging.Handler):
    """Routes records through `tqdm.write()` so the batch progress bar stays on one line."""

    def __init__(self, stream=None, level=logging.NOTSET):
        super().__init__(level)
        self.stream = stream

    def emit(self, record):
        try:
            tqdm.write(self.format(record), file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


def to_level(level: Optional[Level], fallback: int) -> int:
    """'debug' / 'DEBUG' / 10 -> 10; unknown names and None give `fallback`."""
    if level is None:
        return fallback
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else fallback


def configure_logger(
        general_level: Level = 'INFO',
        module_specific_levels: Optional[Dict[str, Level]] = None,
        silenced_loggers: Optional[Dict[str, Level]] = None
) -> LogWithTqdm:
    """
    Installs a single tqdm-aware handler on the root logger, then applies the
    per-logger levels from settings.json (`debug.module_levels`,
    `debug.silenced_loggers`). Calling it again replaces the earlier setup.
    """
    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(to_level(general_level, logging.INFO))

    overrides = [(module_specific_levels, logging.INFO), (silenced_loggers, logging.CRITICAL)]
    for levels, fallback in overrides:
        for name, level in (levels or {}).items():
            logging.getLogger(name).setLevel(to_level(level, fallback))

    return handler
