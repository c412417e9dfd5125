"""Helpers for reading CDK context values (cdk.json or -c key=value)."""

import re
from typing import Any, Iterable

from constructs import Node

NAMESPACE_SEPARATOR = ":"

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class MissingContextError(ValueError):
    """Raised when a required context key is absent or empty."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Context key '{key}' is required. Set it in cdk.json or pass -c {key}=<value>.")


def get_required_context(node: Node, key: str) -> Any:
    """Return a context value, raising MissingContextError when it is missing or blank."""
    value = node.try_get_context(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingContextError(key)
    return value


def get_context_bool(node: Node, key: str, default: bool = False) -> bool:
    """Read a boolean context value. Values passed with -c arrive as strings."""
    value = node.try_get_context(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def camel_to_snake(name: str) -> str:
    """Convert a camelCase context key to a snake_case keyword argument name.

    >>> camel_to_snake("appRepoName")
    'app_repo_name'
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def get_context_by_namespace(node: Node, namespace: str) -> dict[str, Any]:
    """Collect every "<namespace>:<key>" context entry as snake_case keyword arguments.

    For example the entry ``"website:hostnamePrefix": "marble"`` is returned as
    ``{"hostname_prefix": "marble"}`` when namespace is "website".
    """
    prefix = f"{namespace}{NAMESPACE_SEPARATOR}"
    result: dict[str, Any] = {}
    for key, value in node.get_all_context().items():
        if key.startswith(prefix):
            result[camel_to_snake(key[len(prefix):])] = value
    return result


def pick_context(context: dict[str, Any], names: Iterable[str]) -> dict[str, Any]:
    """Keep the namespaced context entries a stack accepts as keyword arguments."""
    return {name: context[name] for name in names if name in context}
