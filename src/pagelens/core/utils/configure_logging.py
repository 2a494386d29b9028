import logging
import sys
from typing import Any, Dict, Optional, Union

from tqdm import tqdm

LevelLike = Union[str, int]


class LogWithTqdm(logging.Handler):
    """
    A logging handler that writes through `tqdm.write()` so log lines
    do not break the batch progress bar.
    """
    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def _to_level(level: Optional[LevelLike], default: int) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        return getattr(logging, level.upper(), default)
    return default


def configure_logger(
        general_level: Optional[LevelLike] = "WARNING",
        module_specific_levels: Optional[Dict[str, LevelLike]] = None,
        silenced_loggers: Optional[Dict[str, LevelLike]] = None,
) -> None:
    """
    Configures the root logger with a tqdm-friendly handler, then applies
    per-module levels and mutes noisy loggers.
    """
    handler = LogWithTqdm()
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
    ))

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(general_level, logging.WARNING))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name, level in (module_specific_levels or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.INFO))

    for name, level in (silenced_loggers or {}).items():
        logging.getLogger(name).setLevel(_to_level(level, logging.CRITICAL))


def configure_from_settings(debug_settings: Optional[Dict[str, Any]]) -> None:
    """Applies the `debug` block of settings.json."""
    debug_settings = debug_settings or {}
    configure_logger(
        debug_settings.get("level", "WARNING"),
        debug_settings.get("module_levels"),
        debug_settings.get("silenced"),
    )
