import logging
import os
from typing import Optional, Union

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def resolve_level(value: Union[str, int, None], default: int = logging.INFO) -> int:
    """Map a level name ("debug") or number ("10", 10) to a logging level."""
    if value is None or value == "":
        return default
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text.upper())
    return level if isinstance(level, int) else default


def configure_logging(default_level: int = logging.INFO, level: Optional[Union[str, int]] = None) -> int:
    """Opt-in logging setup for applications embedding the dispatcher.

    The library itself never installs handlers. ``level`` wins over the
    DISPATCHOR_LOG_LEVEL env var, which wins over ``default_level``.
    Returns the level applied to the ``dispatchor`` logger.
    """
    if level is None:
        level = os.getenv("DISPATCHOR_LOG_LEVEL")
    resolved = resolve_level(level, default_level)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger("dispatchor").setLevel(resolved)
    return resolved
