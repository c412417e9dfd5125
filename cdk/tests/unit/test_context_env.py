"""Tests for ContextEnv."""

import os
from unittest.mock import patch

import pytest
from aws_cdk import App

from marble_cdk.context_env import ContextEnv
from marble_cdk.context_helpers import MissingContextError

ENVIRONMENTS = {
    "dev": {"domainName": "libraries.nd.edu"},
    "prod": {
        "account": "123456789012",
        "region": "us-west-2",
        "domainName": "library.nd.edu",
        "hostedZoneId": "Z0123456789",
        "createDns": "true",
        "slackNotifyStackName": "slack-approval-bot-wse-notifier",
        "notificationReceivers": "team@example.edu",
    },
    "broken": {"region": "us-east-1"},
}


@pytest.fixture
def node():
    """App node with an environments context block."""
    return App(context={"environments": ENVIRONMENTS}).node


class TestFromContext:
    """Tests for ContextEnv.from_context."""

    def test_full_settings(self, node):
        """Every setting is read from the named block."""
        context_env = ContextEnv.from_context(node, "prod")

        assert context_env.name == "prod"
        assert context_env.env.account == "123456789012"
        assert context_env.env.region == "us-west-2"
        assert context_env.domain_name == "library.nd.edu"
        assert context_env.hosted_zone_id == "Z0123456789"
        assert context_env.create_dns is True
        assert context_env.slack_notify_stack_name == "slack-approval-bot-wse-notifier"
        assert context_env.notification_receivers == "team@example.edu"

    def test_defaults_from_environment(self, node):
        """Account and region fall back to the CDK defaults."""
        with patch.dict(os.environ, {"CDK_DEFAULT_ACCOUNT": "210987654321"}, clear=True):
            context_env = ContextEnv.from_context(node, "dev")

        assert context_env.env.account == "210987654321"
        assert context_env.env.region == "us-east-1"
        assert context_env.create_dns is False
        assert context_env.hosted_zone_id is None
        assert context_env.slack_notify_stack_name is None

    def test_unknown_environment(self, node):
        """An environment missing from the block is reported by path."""
        with pytest.raises(MissingContextError) as exc_info:
            ContextEnv.from_context(node, "staging")

        assert exc_info.value.key == "environments.staging"

    def test_domain_name_required(self, node):
        """Every environment needs a domain name."""
        with pytest.raises(MissingContextError) as exc_info:
            ContextEnv.from_context(node, "broken")

        assert exc_info.value.key == "environments.broken.domainName"

    def test_missing_block(self):
        """Without an environments block nothing can be deployed."""
        with pytest.raises(MissingContextError):
            ContextEnv.from_context(App().node, "dev")

    def test_frozen(self, node):
        """Settings cannot be changed once read."""
        context_env = ContextEnv.from_context(node, "prod")

        with pytest.raises(AttributeError):
            context_env.name = "dev"  # type: ignore[misc]
