"""In-process synchronous event dispatcher."""

from .config import DispatcherConfig, load_config
from .dispatcher import Dispatcher
from .errors import DispatchorError, InvalidArgument
from .listener import Listener
from .logging_config import configure_logging

__all__ = [
    "Dispatcher",
    "DispatcherConfig",
    "DispatchorError",
    "InvalidArgument",
    "Listener",
    "configure_logging",
    "load_config",
]

__version__ = "0.1.0"
