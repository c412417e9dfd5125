"""Tests for MaintainMetadataStack."""

import re

import pytest
from aws_cdk import App, Environment, assertions

from marble_cdk.appsync.api import SCHEMA_PATH
from marble_cdk.foundation_stack import FoundationStack
from marble_cdk.maintain_metadata_stack import MaintainMetadataStack
from marble_cdk.metadata_store_stack import MetadataStoreStack

ENV = Environment(account="123456789012", region="us-east-1")
OIDC_PROVIDER = "https://okta.example.edu/oauth2/default"

_FIELD = re.compile(r"^  (\w+)\s*[(:]")


def schema_fields(type_name):
    """Top level field names of a type in the schema file."""
    fields = []
    inside = False
    for line in SCHEMA_PATH.read_text().splitlines():
        if line.startswith(f"type {type_name} "):
            inside = True
        elif inside and line.startswith("}"):
            break
        elif inside:
            match = _FIELD.match(line)
            if match:
                fields.append(match.group(1))
    return fields


@pytest.fixture(scope="module")
def stack():
    app = App()
    foundation = FoundationStack(app, "marble-foundation", domain_name="library.nd.edu", env=ENV)
    store = MetadataStoreStack(app, "marble-metadata-store", namespace="marble", env_name="dev", env=ENV)
    return MaintainMetadataStack(
        app,
        "marble-maintain-metadata",
        foundation_stack=foundation,
        website_metadata_table=store.website_metadata_table,
        open_id_connect_provider=OIDC_PROVIDER,
        env=ENV,
    )


@pytest.fixture(scope="module")
def template(stack):
    return assertions.Template.from_stack(stack)


def _resolved_fields(template, type_name):
    resolvers = template.find_resources("AWS::AppSync::Resolver", {"Properties": {"TypeName": type_name}})
    return sorted(resolver["Properties"]["FieldName"] for resolver in resolvers.values())


class TestGraphqlApi:
    """Tests for the API and its authorization."""

    def test_api_name(self, template):
        """The API is named after the stack."""
        template.has_resource_properties("AWS::AppSync::GraphQLApi", {"Name": "marble-maintain-metadata-api"})

    def test_oidc_default_with_api_key(self, template):
        """Maintainers sign in through OIDC; the public site uses an API key."""
        template.has_resource_properties(
            "AWS::AppSync::GraphQLApi",
            {
                "AuthenticationType": "OPENID_CONNECT",
                "OpenIDConnectConfig": {"Issuer": OIDC_PROVIDER},
                "AdditionalAuthenticationProviders": [{"AuthenticationType": "API_KEY"}],
            },
        )
        template.resource_count_is("AWS::AppSync::ApiKey", 1)

    def test_single_table_data_source(self, template):
        """All resolvers share one DynamoDB data source."""
        template.resource_count_is("AWS::AppSync::DataSource", 1)
        template.has_resource_properties("AWS::AppSync::DataSource", {"Type": "AMAZON_DYNAMODB"})


class TestResolvers:
    """Every schema operation is resolved."""

    @pytest.mark.parametrize("type_name", ["Query", "Mutation"])
    def test_every_operation_has_a_resolver(self, template, type_name):
        """Each Query and Mutation field has exactly one resolver."""
        assert _resolved_fields(template, type_name) == sorted(schema_fields(type_name))

    def test_field_resolvers(self, template):
        """Nested fields resolve through their own resolvers."""
        assert _resolved_fields(template, "ItemMetadata") == ["children", "defaultFile", "files", "parent"]
        assert _resolved_fields(template, "FileGroup") == ["files"]
        assert _resolved_fields(template, "File") == ["FileGroup"]
        assert _resolved_fields(template, "WebsiteItem") == ["ItemMetadata"]

    def test_pipeline_functions(self, template):
        """Shared steps are AppSync functions."""
        functions = template.find_resources("AWS::AppSync::FunctionConfiguration")
        names = sorted(function["Properties"]["Name"] for function in functions.values())

        assert names == [
            "deletePortfolioContentForUserFunction",
            "expandSubjectTermsFunction",
            "findPortfolioContentForUserFunction",
            "getMergedItemRecordFunction",
            "updateSupplementalDataRecordFunction",
        ]

    def test_get_item_is_pipeline(self, template):
        """Item reads merge supplemental data in a pipeline."""
        template.has_resource_properties(
            "AWS::AppSync::Resolver",
            {"TypeName": "Query", "FieldName": "getItem", "Kind": "PIPELINE"},
        )


class TestParameters:
    """Tests for published parameters."""

    def test_key_paths(self, stack):
        """Key paths live under the stack's SSM base path."""
        assert stack.maintain_metadata_key_base == "/all/stacks/marble-maintain-metadata"
        assert stack.graphql_api_url_key_path == "/all/stacks/marble-maintain-metadata/graphql-api-url"
        assert stack.graphql_api_key_key_path == "/all/stacks/marble-maintain-metadata/graphql-api-key"
        assert stack.graphql_api_id_key_path == "/all/stacks/marble-maintain-metadata/graphql-api-id"

    def test_url_and_id_published(self, template):
        """URL and id are CloudFormation parameters; the key is written by the rotation function."""
        for name in ("graphql-api-url", "graphql-api-id"):
            template.has_resource_properties(
                "AWS::SSM::Parameter",
                {"Name": f"/all/stacks/marble-maintain-metadata/{name}"},
            )
        template.resource_count_is("AWS::SSM::Parameter", 2)


class TestKeyRotation:
    """Tests for the API key rotation function."""

    def test_rotation_function(self, template, stack):
        """The function knows where the id and key live."""
        template.has_resource_properties(
            "AWS::Lambda::Function",
            {
                "Handler": "handlers.rotate_api_keys.run",
                "Environment": {
                    "Variables": assertions.Match.object_like(
                        {
                            "GRAPHQL_API_ID_KEY_PATH": stack.graphql_api_id_key_path,
                            "GRAPHQL_API_KEY_KEY_PATH": stack.graphql_api_key_key_path,
                            "DAYS_FOR_KEY_TO_LAST": "7",
                        }
                    ),
                },
            },
        )

    def test_nightly_rule(self, template):
        """Rotation runs every night."""
        template.has_resource_properties("AWS::Events::Rule", {"ScheduleExpression": "cron(0 0 * * ? *)"})
