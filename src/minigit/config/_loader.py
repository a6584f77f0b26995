# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""TOML configuration file reading, merging and environment overrides."""

import json
import os
import tomllib
from typing import TYPE_CHECKING, Any

from minigit.exceptions import ConfigLoadError

if TYPE_CHECKING:
    from pathlib import Path

ENV_PREFIX = "MINIGIT_"


def read_toml_file(path: "Path") -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read and parse a TOML file.

    Args:
        path: Path to the TOML file.

    Returns:
        Parsed TOML content as dictionary.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file cannot be parsed.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse TOML file {path}: {e}"
        raise ConfigLoadError(
            msg, path=path, line=getattr(e, "lineno", None), column=getattr(e, "colno", None)
        ) from e


def copy_value(value: Any) -> Any:  # pyright: ignore[reportExplicitAny]
    """Return an independent copy of a nested dict/list value."""
    if isinstance(value, dict):
        return {k: copy_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [copy_value(item) for item in value]
    return value


def deep_merge(
    base: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    override: dict[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Merge `override` into `base` without modifying either.

    Tables merge recursively. Arrays and scalars from `override` replace the
    value in `base` wholesale.

    Args:
        base: Lower-precedence configuration.
        override: Higher-precedence configuration.

    Returns:
        A new merged dictionary.
    """
    result = {key: copy_value(value) for key, value in base.items()}
    for key, value in override.items():
        current = result.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = copy_value(value)
    return result


def parse_env_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Infer a typed value from an environment variable string.

    Booleans are only recognized as ``true``/``false`` so that numeric values
    such as ports keep their integer type.

    Args:
        value: The raw string value.

    Returns:
        A bool, int, float, decoded JSON array or object, or the string itself.
    """
    lower_value = value.strip().lower()
    if lower_value in ("true", "false"):
        return lower_value == "true"

    try:
        return int(value)
    except ValueError:
        pass

    if "." in value:
        try:
            return float(value)
        except ValueError:
            pass

    if (value.startswith("[") and value.endswith("]")) or (
        value.startswith("{") and value.endswith("}")
    ):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path, creating tables as needed.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "storage.dir", "/srv/git")
        >>> d
        {'storage': {'dir': '/srv/git'}}
    """
    *parents, leaf = key_path.split(".")
    current = d
    for part in parents:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[leaf] = value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: "dict[str, str] | None" = None,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Collect configuration overrides from environment variables.

    ``MINIGIT_STORAGE__DIR`` maps to ``storage.dir``. Variables without a
    double underscore (``MINIGIT_CONFIG``, ``MINIGIT_DEBUG``) land at the top
    level, where the root model ignores them.

    Args:
        prefix: Environment variable prefix.
        environ: Mapping to read instead of ``os.environ``.

    Returns:
        Nested dictionary of overrides.
    """
    source = os.environ if environ is None else environ
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for key, value in source.items():
        if not key.startswith(prefix):
            continue
        config_key = key[len(prefix) :]
        if not config_key:
            continue
        config_path = config_key.replace("__", ".").lower()
        set_nested_key(result, config_path, parse_env_value(value))

    return result
