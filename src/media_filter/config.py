"""Configuration lookup for media filters.

Configuration is a flat mapping of dotted keys to values, e.g.:

    {
        "xpdf.path.pdftotext": "/usr/bin/pdftotext",
        "filter.plugins": "pdftotext, pdfthumbnail",
        "filter.timeout": 300
    }

Nested JSON objects are flattened, so {"xpdf": {"path": {"pdftotext": ...}}}
is equivalent to the first entry above.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "MEDIA_FILTER_"


def _flatten(data: dict, prefix: str = "") -> dict[str, Any]:
    flat: dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, prefix=f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def env_key(key: str) -> str:
    """Return the environment variable name that overrides a dotted key."""
    return ENV_PREFIX + key.replace(".", "_").upper()


class Configuration:
    """Dict-backed configuration with dotted-key property lookup.

    Attributes:
        from_env: If True, MEDIA_FILTER_* environment variables take
                  precedence over the stored values.
    """

    def __init__(self, properties: dict | None = None, from_env: bool = False):
        self._properties = _flatten(properties or {})
        self.from_env = from_env

    def __repr__(self) -> str:
        return f"Configuration({len(self._properties)} properties)"

    def __contains__(self, key: str) -> bool:
        return self.get_property(key) is not None

    def get_property(self, key: str, default: Any = None) -> Any:
        if self.from_env:
            value = os.environ.get(env_key(key))
            if value is not None:
                return value
        return self._properties.get(key, default)

    def set_property(self, key: str, value: Any) -> None:
        self._properties[key] = value

    def get_int(self, key: str, default: int) -> int:
        return int(self._typed(key, default, int))

    def get_float(self, key: str, default: float) -> float:
        return float(self._typed(key, default, float))

    def get_list(self, key: str, default: list[str] | None = None) -> list[str]:
        """Return a comma-separated property as a list of stripped names."""
        value = self.get_property(key)
        if value is None:
            return list(default or [])
        if isinstance(value, (list, tuple)):
            return [str(v).strip() for v in value if str(v).strip()]
        return [v.strip() for v in str(value).split(",") if v.strip()]

    def _typed(self, key: str, default, cast):
        value = self.get_property(key)
        if value is None or value == "":
            return default
        try:
            return cast(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Value {value!r} for key \"{key}\" is not a valid {cast.__name__}"
            ) from e


def load_configuration(path: Path, from_env: bool = True) -> Configuration:
    """Load configuration from a JSON file.

    Args:
        path: Path to the JSON configuration file
        from_env: Whether environment variables override file values

    Returns:
        The loaded configuration

    Raises:
        ConfigurationError: If the file cannot be read or is not a JSON object
    """
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot load configuration from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")

    logger.debug(f"Loaded configuration from {path}")
    return Configuration(data, from_env=from_env)
