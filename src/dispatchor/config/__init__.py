from .loader import DispatcherConfig, load_config

__all__ = ["DispatcherConfig", "load_config"]
