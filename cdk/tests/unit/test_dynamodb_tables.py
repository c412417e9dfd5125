"""Tests for the dynamodb_tables module."""

import pytest
from aws_cdk import App, Stack, assertions
from aws_cdk import aws_dynamodb as dynamodb

from marble_cdk.dynamodb_tables import GSI1_NAME, GSI2_NAME, create_website_metadata_table


class TestCreateWebsiteMetadataTable:
    """Tests for create_website_metadata_table function."""

    @pytest.fixture
    def stack(self):
        """Create a test stack."""
        app = App()
        return Stack(app, "TestStack")

    @pytest.fixture
    def rn(self):
        """Create a resource naming function."""

        def _rn(name: str) -> str:
            return f"{name}-ue1-test"

        return _rn

    @pytest.fixture
    def template(self, stack, rn):
        create_website_metadata_table(stack, rn)
        return assertions.Template.from_stack(stack)

    def test_returns_table(self, stack, rn):
        """Should return the created table."""
        assert isinstance(create_website_metadata_table(stack, rn), dynamodb.Table)

    def test_table_name(self, template):
        """Table name carries the region and environment suffix."""
        template.has_resource_properties("AWS::DynamoDB::Table", {"TableName": "marble-website-metadata-ue1-test"})

    def test_custom_base_name(self, stack, rn):
        """Namespaced deployments pass their own base name."""
        create_website_metadata_table(stack, rn, name="marble-test-website-metadata")
        template = assertions.Template.from_stack(stack)
        template.has_resource_properties("AWS::DynamoDB::Table", {"TableName": "marble-test-website-metadata-ue1-test"})

    def test_generic_keys(self, template):
        """PK and SK are plain strings."""
        template.has_resource_properties(
            "AWS::DynamoDB::Table",
            {
                "KeySchema": [
                    {"AttributeName": "PK", "KeyType": "HASH"},
                    {"AttributeName": "SK", "KeyType": "RANGE"},
                ],
            },
        )

    def test_global_secondary_indexes(self, template):
        """GSI1 and GSI2 project all attributes."""
        template.has_resource_properties(
            "AWS::DynamoDB::Table",
            {
                "GlobalSecondaryIndexes": [
                    {
                        "IndexName": GSI1_NAME,
                        "KeySchema": [
                            {"AttributeName": "GSI1PK", "KeyType": "HASH"},
                            {"AttributeName": "GSI1SK", "KeyType": "RANGE"},
                        ],
                        "Projection": {"ProjectionType": "ALL"},
                    },
                    {
                        "IndexName": GSI2_NAME,
                        "KeySchema": [
                            {"AttributeName": "GSI2PK", "KeyType": "HASH"},
                            {"AttributeName": "GSI2SK", "KeyType": "RANGE"},
                        ],
                        "Projection": {"ProjectionType": "ALL"},
                    },
                ],
            },
        )

    def test_billing_and_recovery(self, template):
        """On-demand billing with point-in-time recovery."""
        template.has_resource_properties(
            "AWS::DynamoDB::Table",
            {
                "BillingMode": "PAY_PER_REQUEST",
                "PointInTimeRecoverySpecification": {"PointInTimeRecoveryEnabled": True},
            },
        )

    def test_retained(self, template):
        """The table survives stack deletion."""
        template.has_resource("AWS::DynamoDB::Table", {"DeletionPolicy": "Retain", "UpdateReplacePolicy": "Retain"})
