"""
Configuration for capture expansion.

Settings come from, in increasing priority:
    - defaults on CaptureConfig
    - a capture.yaml / capture.yml / capture.json file
    - CAPTURE_* environment variables
    - explicit overrides (e.g. CLI options)
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, List, Optional

import yaml

from capture.analyzer import AliasPolicy

logger = logging.getLogger(__name__)


TARGETS = ("rust", "python")
RENDER_MODES = ("inline", "pretty")


class ConfigurationError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass(frozen=True)
class CaptureConfig:
    """
    Expansion settings.

    Properties:
        alias_policy: What to do about mutable aliasing (strict or shadow)
        target: Backend used to render expansions ("rust" or "python")
        render_mode: Rust layout, "inline" or "pretty"
        macro_name: Invocation name looked for when rewriting source files
        ref_type: Python name wrapping shared references
        ref_mut_type: Python name wrapping mutable references
    """

    alias_policy: AliasPolicy = AliasPolicy.STRICT
    target: str = "rust"
    render_mode: str = "inline"
    macro_name: str = "capture"
    ref_type: str = "SharedRef"
    ref_mut_type: str = "MutRef"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["alias_policy"] = self.alias_policy.value
        return data


DEFAULT_CONFIG_PATHS = [
    "capture.yaml",
    "capture.yml",
    "capture.json",
]

_ENV_KEYS = {
    "CAPTURE_ALIAS_POLICY": "alias_policy",
    "CAPTURE_TARGET": "target",
    "CAPTURE_RENDER_MODE": "render_mode",
    "CAPTURE_MACRO_NAME": "macro_name",
}


def find_config_file(search_paths: Optional[List[str]] = None) -> Optional[str]:
    """Find the first existing configuration file."""
    for path in search_paths or DEFAULT_CONFIG_PATHS:
        if os.path.exists(path):
            return path
    return None


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load configuration from file (JSON or YAML)."""
    if not os.path.exists(config_path):
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.endswith((".yaml", ".yml")):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid configuration file format: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {config_path} must be a mapping")
    return data


def load_env_config(environ: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Load configuration from CAPTURE_* environment variables."""
    environ = os.environ if environ is None else environ
    config = {}
    for env_key, name in _ENV_KEYS.items():
        value = environ.get(env_key)
        if value:
            config[name] = value.strip()
    return config


def _validate(data: Dict[str, Any]) -> Dict[str, Any]:
    """Check keys and values, converting alias_policy to its enum."""
    known = set(CaptureConfig.__dataclass_fields__)
    unknown = set(data) - known
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

    result = dict(data)
    if "alias_policy" in result and not isinstance(result["alias_policy"], AliasPolicy):
        try:
            result["alias_policy"] = AliasPolicy(str(result["alias_policy"]).lower())
        except ValueError:
            raise ConfigurationError(
                f"Invalid alias_policy: {result['alias_policy']!r} "
                f"(expected one of {[p.value for p in AliasPolicy]})"
            )

    if "target" in result and result["target"] not in TARGETS:
        raise ConfigurationError(f"Invalid target: {result['target']!r} (expected one of {list(TARGETS)})")

    if "render_mode" in result and result["render_mode"] not in RENDER_MODES:
        raise ConfigurationError(
            f"Invalid render_mode: {result['render_mode']!r} (expected one of {list(RENDER_MODES)})"
        )

    for key in ("macro_name", "ref_type", "ref_mut_type"):
        if key in result and not str(result[key]).isidentifier():
            raise ConfigurationError(f"Invalid {key}: {result[key]!r} is not an identifier")

    return result


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> CaptureConfig:
    """
    Build a CaptureConfig from file, environment and overrides.

    Args:
        config_path: Explicit file; when None the default paths are searched
        overrides: Highest-priority values (None values are ignored)
        environ: Environment mapping, defaults to os.environ

    Raises:
        ConfigurationError: On unreadable files or invalid values
    """
    merged: Dict[str, Any] = {}

    path = config_path or find_config_file()
    if path:
        logger.debug("Loading configuration from %s", path)
        merged.update(load_config_file(path))

    merged.update(load_env_config(environ))

    if overrides:
        merged.update({k: v for k, v in overrides.items() if v is not None})

    return replace(CaptureConfig(), **_validate(merged))


__all__ = [
    "CaptureConfig",
    "ConfigurationError",
    "load_config",
    "load_config_file",
    "load_env_config",
    "find_config_file",
]
