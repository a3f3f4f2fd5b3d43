"""
Config system - typed resolver configuration with layered sources.

Merge precedence (later overrides earlier):
defaults < .env file < environment variables < explicit overrides
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, get_origin
import json
import os

from dotenv import dotenv_values

from .faults import ConfigError


DEFAULT_ENV_PREFIX = "ACTIONCTL_"


@dataclass
class ResolverConfig:
    """
    Settings consumed by the application, the resolvers and the helpers.

    Attributes:
        controller_attribute: Request attribute holding the controller identifier
        action_attribute: Request attribute holding the action name
        action_suffix: Suffix tried when the exact method is missing
        charset: Default response charset
        debug: Expose fault details in error responses
        template_paths: Search paths for the template loader
    """

    controller_attribute: str = "_controller"
    action_attribute: str = "action"
    action_suffix: str = "Action"
    charset: str = "UTF-8"
    debug: bool = False
    template_paths: List[str] = field(default_factory=lambda: ["templates"])

    @classmethod
    def load(
        cls,
        env_file: Optional[str] = None,
        env_prefix: str = DEFAULT_ENV_PREFIX,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "ResolverConfig":
        """
        Build a config from a .env file, the environment and overrides.

        Args:
            env_file: Path to a .env file (missing files are ignored)
            env_prefix: Prefix for environment variables
            overrides: Manual overrides (highest precedence)

        Returns:
            Validated ResolverConfig
        """
        data: Dict[str, Any] = {}

        if env_file and Path(env_file).exists():
            data.update(_strip_prefix(dotenv_values(env_file), env_prefix))

        data.update(_strip_prefix(os.environ, env_prefix))

        if overrides:
            data.update(overrides)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResolverConfig":
        """Instantiate from a flat dict, coercing strings and ignoring unknown keys."""
        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            kwargs[f.name] = _coerce(f.name, data[f.name], f.type)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def _strip_prefix(source, prefix: str) -> Dict[str, Any]:
    """Convert ACTIONCTL_ACTION_SUFFIX to action_suffix."""
    result = {}
    for key, value in source.items():
        if value is None or not key.startswith(prefix):
            continue
        result[key[len(prefix):].lower()] = value
    return result


def _coerce(name: str, value: Any, annotation: Any) -> Any:
    """Parse string values to the field's type."""
    if annotation is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            if value.lower() in ("true", "yes", "1", "on"):
                return True
            if value.lower() in ("false", "no", "0", "off", ""):
                return False
        raise ConfigError(f"Invalid boolean for '{name}': {value!r}", key=name)

    if get_origin(annotation) is list:
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        if isinstance(value, str):
            if value.startswith("["):
                try:
                    parsed = json.loads(value)
                except json.JSONDecodeError as e:
                    raise ConfigError(f"Invalid list for '{name}': {value!r}", key=name) from e
                return [str(v) for v in parsed]
            return [part.strip() for part in value.split(",") if part.strip()]
        raise ConfigError(f"Invalid list for '{name}': {value!r}", key=name)

    if not isinstance(value, str):
        raise ConfigError(
            f"Invalid value for '{name}': expected str, got {type(value).__name__}",
            key=name,
        )
    return value
