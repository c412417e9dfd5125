"""
Scheduled Lambda rotating the public AppSync API key.

Every run creates a fresh key, stores its id as a SecureString parameter for
the website builds to read, and deletes the keys it created earlier once
they have expired.
"""

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from utils.config import (  # type: ignore[import-not-found]
        DEFAULT_DAYS_FOR_KEY_TO_LAST,
        get_int_env,
        get_required_env,
    )
    from utils.errors import AppError, handle_error  # type: ignore[import-not-found]
    from utils.logging import get_correlation_id, get_logger  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from ..utils.config import DEFAULT_DAYS_FOR_KEY_TO_LAST, get_int_env, get_required_env
    from ..utils.errors import AppError, handle_error
    from ..utils.logging import get_correlation_id, get_logger

if TYPE_CHECKING:  # pragma: no cover
    from mypy_boto3_appsync import AppSyncClient
    from mypy_boto3_ssm import SSMClient

AUTO_MAINTAINED_DESCRIPTION = "auto maintained api key"
# AppSync rejects keys expiring 365 days or more in the future
MAX_KEY_LIFETIME_DAYS = 364

logger = get_logger(__name__)


def _ssm() -> "SSMClient":
    return boto3.client("ssm")


def _appsync() -> "AppSyncClient":
    return boto3.client("appsync")


def get_parameter(name: str) -> Optional[str]:
    """Decrypted value of an SSM parameter, or None when it does not exist."""
    try:
        response = _ssm().get_parameter(Name=name, WithDecryption=True)
    except ClientError as e:
        if e.response.get("Error", {}).get("Code") == "ParameterNotFound":
            logger.warning("SSM parameter not found", parameter=name)
            return None
        raise
    return response["Parameter"]["Value"]


def get_expire_time(days: int, now: Optional[datetime] = None) -> int:
    """Epoch seconds ``days`` from now, capped at the AppSync maximum key lifetime."""
    now = now or datetime.now(timezone.utc)
    days = min(days, MAX_KEY_LIFETIME_DAYS)
    return int((now + timedelta(days=days)).timestamp())


def generate_new_api_key(graphql_api_id: str, expires: int) -> str:
    """Create an API key and return its id."""
    response = _appsync().create_api_key(
        apiId=graphql_api_id,
        description=AUTO_MAINTAINED_DESCRIPTION,
        expires=expires,
    )
    return response["apiKey"]["id"]


def save_secure_parameter(name: str, key_id: str) -> None:
    _ssm().put_parameter(
        Name=name,
        Description="api key for graphql-api-url",
        Value=key_id,
        Type="SecureString",
        Overwrite=True,
    )


def delete_expired_api_keys(graphql_api_id: str, now: Optional[datetime] = None) -> int:
    """Delete expired keys created by this function. Keys created elsewhere are left alone.

    Returns:
        Number of keys deleted
    """
    now_epoch = (now or datetime.now(timezone.utc)).timestamp()
    client = _appsync()
    deleted = 0
    next_token: Optional[str] = None
    while True:
        kwargs: Dict[str, Any] = {"apiId": graphql_api_id}
        if next_token:
            kwargs["nextToken"] = next_token
        response = client.list_api_keys(**kwargs)
        for api_key in response.get("apiKeys", []):
            if api_key.get("description") != AUTO_MAINTAINED_DESCRIPTION:
                continue
            if api_key.get("expires", now_epoch) < now_epoch:
                client.delete_api_key(apiId=graphql_api_id, id=api_key["id"])
                logger.info("Deleted expired API key", api_id=graphql_api_id, key_id=api_key["id"])
                deleted += 1
        next_token = response.get("nextToken")
        if not next_token:
            return deleted


def run(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Rotate the API key of the GraphQL API.

    Args:
        event: EventBridge scheduled event
        context: Lambda context (unused)

    Returns:
        The event, unchanged
    """
    logger.correlation_id = get_correlation_id(event)

    try:
        graphql_api_id_key_path = get_required_env("GRAPHQL_API_ID_KEY_PATH")
        graphql_api_key_key_path = get_required_env("GRAPHQL_API_KEY_KEY_PATH")
        days_for_key_to_last = get_int_env("DAYS_FOR_KEY_TO_LAST", DEFAULT_DAYS_FOR_KEY_TO_LAST)

        graphql_api_id = get_parameter(graphql_api_id_key_path)
        if not graphql_api_id:
            logger.warning("No GraphQL API id stored, nothing to rotate", parameter=graphql_api_id_key_path)
            return event

        expires = get_expire_time(days_for_key_to_last)
        key_id = generate_new_api_key(graphql_api_id, expires)
        logger.info("Created API key", api_id=graphql_api_id, expires=expires)

        save_secure_parameter(graphql_api_key_key_path, key_id)
        logger.info("Saved API key id", parameter=graphql_api_key_key_path)

        deleted = delete_expired_api_keys(graphql_api_id)
    except (AppError, ClientError) as e:
        logger.error("API key rotation failed", error=handle_error(e))
        raise

    logger.info("Rotation complete", api_id=graphql_api_id, deleted_keys=deleted)
    return event
