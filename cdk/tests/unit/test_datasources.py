"""Tests for the AppSync data source module."""

import pytest
from aws_cdk import App, Stack, assertions
from aws_cdk import aws_appsync as appsync
from aws_cdk import aws_dynamodb as dynamodb

from marble_cdk.appsync.api import SCHEMA_PATH
from marble_cdk.appsync.datasources import WEBSITE_METADATA, create_dynamodb_datasources


@pytest.fixture
def stack():
    return Stack(App(), "TestStack")


@pytest.fixture
def datasources(stack):
    api = appsync.GraphqlApi(
        stack,
        "Api",
        name="test-api",
        definition=appsync.Definition.from_file(str(SCHEMA_PATH)),
    )
    table = dynamodb.Table(
        stack,
        "Table",
        partition_key=dynamodb.Attribute(name="PK", type=dynamodb.AttributeType.STRING),
        sort_key=dynamodb.Attribute(name="SK", type=dynamodb.AttributeType.STRING),
    )
    return create_dynamodb_datasources(api, table)


def _actions(template):
    actions = set()
    for policy in template.find_resources("AWS::IAM::Policy").values():
        for statement in policy["Properties"]["PolicyDocument"]["Statement"]:
            action = statement["Action"]
            actions.update([action] if isinstance(action, str) else action)
    return actions


class TestCreateDynamodbDatasources:
    """Tests for create_dynamodb_datasources."""

    def test_single_table_source(self, stack, datasources):
        """One DynamoDB data source is registered under the website metadata key."""
        assert list(datasources) == [WEBSITE_METADATA]
        template = assertions.Template.from_stack(stack)
        template.resource_count_is("AWS::AppSync::DataSource", 1)
        template.has_resource_properties("AWS::AppSync::DataSource", {"Type": "AMAZON_DYNAMODB"})

    def test_source_can_write_and_query_indexes(self, stack, datasources):
        """Mutations need write access and the GSIs must be queryable."""
        actions = _actions(assertions.Template.from_stack(stack))

        assert {"dynamodb:PutItem", "dynamodb:UpdateItem", "dynamodb:DeleteItem", "dynamodb:Query"} <= actions
