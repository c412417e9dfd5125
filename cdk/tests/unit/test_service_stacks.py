"""Tests for instantiate_service_stacks."""

import json
from pathlib import Path

import pytest
from aws_cdk import App, assertions

from marble_cdk.context_env import ContextEnv
from marble_cdk.context_helpers import MissingContextError
from marble_cdk.stacks import SITE_INSTANCES, instantiate_service_stacks

CDK_JSON = Path(__file__).parent.parent.parent / "cdk.json"


def cdk_json_context(**overrides):
    """The checked-in cdk.json context with overrides applied."""
    context = json.loads(CDK_JSON.read_text())["context"]
    context["environments"]["dev"]["account"] = "123456789012"
    context.update(overrides)
    return context


def _instantiate(context, namespace="marble-test"):
    app = App(context=context)
    context_env = ContextEnv.from_context(app.node, "dev")
    return instantiate_service_stacks(app, namespace, context_env)


@pytest.fixture(scope="module")
def stacks():
    return _instantiate(cdk_json_context())


class TestStackNames:
    """Stacks are named after the namespace."""

    def test_service_stacks(self, stacks):
        """One stack per service."""
        assert stacks.foundation_stack.stack_name == "marble-test-foundation"
        assert stacks.metadata_store_stack.stack_name == "marble-test-metadata-store"
        assert stacks.maintain_metadata_stack.stack_name == "marble-test-maintain-metadata"

    def test_static_host_stacks(self, stacks):
        """One static host per site instance."""
        assert sorted(stacks.static_host_stacks) == sorted(SITE_INSTANCES)
        assert stacks.static_host_stacks["redbox"].stack_name == "marble-test-redbox"


class TestWiring:
    """Context flows into the stacks."""

    def test_hostname_prefix_from_instance_context(self, stacks):
        """Each site reads its own hostname prefix."""
        assert stacks.static_host_stacks["website"].hostname == "marble.libraries.nd.edu"
        assert stacks.static_host_stacks["redbox"].hostname == "redbox.libraries.nd.edu"

    def test_api_reads_namespaced_table(self, stacks):
        """The API is backed by the namespace's table."""
        template = assertions.Template.from_stack(stacks.metadata_store_stack)

        template.has_resource_properties(
            "AWS::DynamoDB::Table",
            {"TableName": "marble-test-website-metadata-ue1-dev"},
        )

    def test_tags(self, stacks):
        """Project, owner and contact tags are applied to every stack."""
        tags = stacks.foundation_stack.tags.tag_values()

        assert tags["Project"] == "marble"
        assert tags["Owner"] == "wse"
        assert tags["Contact"] == "web-and-software-engineering@nd.edu"

    def test_oidc_provider_from_context(self, stacks):
        """The OIDC issuer comes from the maintainMetadata context."""
        template = assertions.Template.from_stack(stacks.maintain_metadata_stack)

        template.has_resource_properties(
            "AWS::AppSync::GraphQLApi",
            {"OpenIDConnectConfig": {"Issuer": "https://okta.nd.edu/oauth2/ausxosq06SDdaFNMB356"}},
        )

    def test_oidc_provider_required(self):
        """The API cannot be built without an OIDC issuer."""
        context = cdk_json_context()
        del context["maintainMetadata:openIdConnectProvider"]

        with pytest.raises(MissingContextError):
            _instantiate(context)
