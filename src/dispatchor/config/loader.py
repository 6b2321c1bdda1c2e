from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from importlib.resources import files as resource_files
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

logger = logging.getLogger(__name__)

ENV_CONFIG_FILE = "DISPATCHOR_CONFIG_FILE"
ENV_WILDCARD = "DISPATCHOR_WILDCARD"
ENV_MAX_LISTENERS = "DISPATCHOR_MAX_LISTENERS"

DEFAULT_WILDCARD = "*"


@dataclass(frozen=True)
class DispatcherConfig:
    """Dispatcher tunables.

    - wildcard: event name whose listeners receive every emission
    - max_listeners: log a warning when one event collects more listeners
      than this; 0 disables the check
    """

    wildcard: str = DEFAULT_WILDCARD
    max_listeners: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DispatcherConfig":
        allowed = {f.name for f in dataclasses.fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in allowed:
                logger.debug("Ignoring unknown config key %r", key)
                continue
            values[key] = value

        wildcard = values.get("wildcard", DEFAULT_WILDCARD)
        if not isinstance(wildcard, str) or not wildcard:
            logger.warning("Invalid wildcard name %r; using %r", wildcard, DEFAULT_WILDCARD)
            wildcard = DEFAULT_WILDCARD

        max_listeners = values.get("max_listeners", 0)
        try:
            max_listeners = max(0, int(max_listeners))
        except (TypeError, ValueError):
            logger.warning("Invalid max_listeners %r; disabling leak warning", max_listeners)
            max_listeners = 0

        return cls(wildcard=wildcard, max_listeners=max_listeners)

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        env = os.environ if env is None else env
        out: Dict[str, Any] = {}
        if env.get(ENV_WILDCARD):
            out["wildcard"] = env[ENV_WILDCARD]
        raw = env.get(ENV_MAX_LISTENERS)
        if raw:
            try:
                out["max_listeners"] = int(raw)
            except ValueError:
                logger.error("Invalid env for %s=%r", ENV_MAX_LISTENERS, raw)
        return out

    @staticmethod
    def from_yaml_file(path: Path) -> Dict[str, Any]:
        if not path.exists():
            logger.debug("Config file not found: %s", path)
            return {}
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning("Config file %s does not hold a mapping; ignoring it", path)
            return {}
        logger.debug("Loaded dispatcher config from path: %s", path)
        return data


def _embedded_defaults() -> Dict[str, Any]:
    text = resource_files("dispatchor.config").joinpath("defaults.yaml").read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}


def load_config(
    path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> DispatcherConfig:
    """Build a config from embedded defaults, a user YAML file and the environment.

    Later layers win. If ``path`` is None, ``DISPATCHOR_CONFIG_FILE`` is
    consulted for the user file.
    """
    env = os.environ if env is None else env
    data = _embedded_defaults()

    if path is None and env.get(ENV_CONFIG_FILE):
        path = env[ENV_CONFIG_FILE]
    if path is not None:
        data.update(DispatcherConfig.from_yaml_file(Path(path).expanduser()))

    data.update(DispatcherConfig.from_env(env))
    cfg = DispatcherConfig.from_dict(data)
    logger.info("Dispatcher config: wildcard=%r | max_listeners=%d", cfg.wildcard, cfg.max_listeners)
    return cfg
