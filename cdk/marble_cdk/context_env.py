"""Per-environment deployment settings read from the "environments" context block."""

import os
from dataclasses import dataclass
from typing import Any, Optional

import aws_cdk as cdk
from constructs import Node

from .context_helpers import MissingContextError, get_required_context


@dataclass(frozen=True)
class ContextEnv:
    """Settings for one named environment (dev, prod, ...).

    Example cdk.json entry::

        "environments": {
            "prod": {
                "account": "123456789012",
                "region": "us-east-1",
                "domainName": "library.nd.edu",
                "hostedZoneId": "Z123",
                "createDns": true,
                "slackNotifyStackName": "slack-approval-bot-wse-notifier",
                "notificationReceivers": "team@example.edu"
            }
        }
    """

    name: str
    env: cdk.Environment
    domain_name: str
    create_dns: bool = False
    hosted_zone_id: Optional[str] = None
    slack_notify_stack_name: Optional[str] = None
    notification_receivers: Optional[str] = None

    @classmethod
    def from_context(cls, node: Node, name: str) -> "ContextEnv":
        environments: dict[str, Any] = get_required_context(node, "environments")
        settings = environments.get(name)
        if settings is None:
            raise MissingContextError(f"environments.{name}")
        if not settings.get("domainName"):
            raise MissingContextError(f"environments.{name}.domainName")

        account = settings.get("account") or os.getenv("CDK_DEFAULT_ACCOUNT")
        region = settings.get("region") or os.getenv("CDK_DEFAULT_REGION", "us-east-1")

        create_dns = settings.get("createDns", False)
        if isinstance(create_dns, str):
            create_dns = create_dns.lower() == "true"

        return cls(
            name=name,
            env=cdk.Environment(account=account, region=region),
            domain_name=settings["domainName"],
            create_dns=bool(create_dns),
            hosted_zone_id=settings.get("hostedZoneId") or None,
            slack_notify_stack_name=settings.get("slackNotifyStackName") or None,
            notification_receivers=settings.get("notificationReceivers") or None,
        )
