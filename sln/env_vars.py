"""Read function environment variables from CLI options."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Mapping, Optional, Tuple, Union, cast

from .exceptions import ValidationError

if TYPE_CHECKING:
    from ._logging import SlnLogger
    from .reconcile import EnvVarMergeMode

LOGGER = cast("SlnLogger", logging.getLogger(__name__))

ENV_VAR_OPTIONS: Dict[str, Tuple[EnvVarMergeMode, bool]] = {
    "set_env": ("replace", False),
    "set_env_from_json": ("replace", True),
    "update_env": ("merge", False),
    "update_env_from_json": ("merge", True),
}
"""Option name to (merge mode, value is a JSON file path)."""


def option_flag(name: str) -> str:
    """CLI flag of an option name (``set_env`` -> ``--set-env``)."""
    return "--" + name.replace("_", "-")


def parse_key_value_list(value: str) -> Dict[str, str]:
    """Parse ``KEY=VALUE,KEY2=VALUE2``.

    Only the first ``=`` of each pair separates the key, so values may
    contain ``=``.

    Raises:
        ValidationError: A pair has no ``=`` or an empty key.

    """
    result: Dict[str, str] = {}
    for pair in value.split(","):
        if not pair.strip():
            continue
        key, sep, val = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ValidationError(f"invalid environment variable {pair!r}; expected KEY=VALUE")
        result[key] = val
    return result


def read_json_env_file(path: Union[Path, str]) -> Dict[str, str]:
    """Read a JSON object of environment variables.

    Raises:
        ValidationError: The file can't be read or isn't an object of strings.

    """
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except OSError as exc:
        raise ValidationError(f"unable to read {path}: {exc}") from exc
    except ValueError as exc:
        raise ValidationError(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValidationError(f"{path} must contain a JSON object")
    for key, val in data.items():
        if not isinstance(val, str):
            raise ValidationError(f"value of {key} in {path} must be a string")
    return cast(Dict[str, str], data)


def check_env_options(options: Mapping[str, Optional[str]]) -> Optional[str]:
    """Make sure at most one environment variable option was supplied.

    Returns:
        Name of the supplied option, if any.

    Raises:
        ValidationError: More than one option was supplied.

    """
    supplied = [name for name in ENV_VAR_OPTIONS if options.get(name)]
    if len(supplied) > 1:
        raise ValidationError(
            f"incompatible arguments {', '.join(option_flag(name) for name in supplied)}; "
            "supply only one environment variable option"
        )
    return supplied[0] if supplied else None


def read_env_vars_from_options(
    options: Mapping[str, Optional[str]],
) -> Optional[Tuple[EnvVarMergeMode, Dict[str, str]]]:
    """Get the environment variables requested by CLI options.

    Args:
        options: Values of ``set_env``, ``set_env_from_json``, ``update_env``
            and ``update_env_from_json``. Missing keys are ignored.

    Returns:
        Merge mode and variables, or ``None`` when no option was supplied.

    """
    name = check_env_options(options)
    if not name:
        return None
    mode, from_file = ENV_VAR_OPTIONS[name]
    value = cast(str, options[name])
    env_vars = read_json_env_file(value) if from_file else parse_key_value_list(value)
    LOGGER.debug("%s environment variables from %s: %s", mode, option_flag(name), list(env_vars))
    return mode, env_vars
