"""Environment configuration of the Lambda functions."""

import os
from typing import Optional

try:  # pragma: no cover
    from utils.errors import AppError, ErrorCode  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from .errors import AppError, ErrorCode

DEFAULT_DAYS_FOR_KEY_TO_LAST = 7


def get_required_env(name: str) -> str:
    """Value of a required environment variable.

    Raises:
        AppError: CONFIGURATION_ERROR when the variable is unset or empty
    """
    value = os.getenv(name)
    if not value:
        raise AppError(ErrorCode.CONFIGURATION_ERROR, f"Environment variable {name} is not set", {"variable": name})
    return value


def get_int_env(name: str, default: int) -> int:
    """Integer environment variable, falling back to ``default`` when unset."""
    value: Optional[str] = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise AppError(
            ErrorCode.CONFIGURATION_ERROR, f"Environment variable {name} must be an integer", {"variable": name}
        ) from e
