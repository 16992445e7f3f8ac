"""Combine proposed configuration with state fetched from AWS.

Everything here is pure: inputs are never mutated and nothing is sent
anywhere. The pipelines fetch the existing state, call one of these and write
the result back.

"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from typing_extensions import Literal

from .models import Alias

if TYPE_CHECKING:
    from collections.abc import Mapping

EnvVarMergeMode = Literal["merge", "replace"]

NOTIFICATION_LIST_KEY = "LambdaFunctionConfigurations"


def merge_env_vars(
    existing: Optional[Mapping[str, str]],
    proposed: Mapping[str, str],
    mode: EnvVarMergeMode,
) -> Dict[str, str]:
    """Reconcile function environment variables.

    Args:
        existing: Variables currently set on the function. ``None`` is the
            same as no variables.
        proposed: Variables supplied by the user.
        mode: ``merge`` keeps existing keys that aren't overridden;
            ``replace`` discards the existing set.

    Raises:
        ValueError: Unknown mode.

    """
    if mode == "replace":
        return dict(proposed)
    if mode == "merge":
        result = dict(existing or {})
        result.update(proposed)
        return result
    raise ValueError(f"unsupported env var merge mode: {mode}")


def build_notification_rule(
    function_arn: str,
    events: Iterable[str],
    prefix: Optional[str] = None,
    suffix: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a single S3 ``LambdaFunctionConfiguration`` entry.

    The ``Filter`` key is only included when at least one filter rule was
    supplied; S3 does not treat an empty rule list as "no filter".

    """
    rule: Dict[str, Any] = {"LambdaFunctionArn": function_arn, "Events": list(events)}
    filter_rules: List[Dict[str, str]] = []
    if prefix:
        filter_rules.append({"Name": "prefix", "Value": prefix})
    if suffix:
        filter_rules.append({"Name": "suffix", "Value": suffix})
    if filter_rules:
        rule["Filter"] = {"Key": {"FilterRules": filter_rules}}
    return rule


def append_notification_rule(
    existing: Optional[Mapping[str, Any]], rule: Mapping[str, Any]
) -> Dict[str, Any]:
    """Add a subscription to a bucket notification configuration.

    Entries already present (including queue and topic configurations
    registered by other tools) are carried over untouched and in order.

    Args:
        existing: Current configuration, ``None`` or empty if there is none.
        rule: Entry to append.

    """
    merged: Dict[str, Any] = copy.deepcopy(dict(existing or {}))
    current = merged.get(NOTIFICATION_LIST_KEY) or []
    merged[NOTIFICATION_LIST_KEY] = [*current, copy.deepcopy(dict(rule))]
    return merged


def alias_target(function_name: str, label: str, version: str) -> Alias:
    """Point a single alias label at a version, independent of other labels."""
    return Alias(function_name=function_name, label=label, target_version=version)


def merge_stage_variables(
    existing: Optional[Mapping[str, str]], name: str, value: str
) -> Dict[str, str]:
    """Overwrite one named stage variable, keeping the rest."""
    result = dict(existing or {})
    result[name] = value
    return result
