"""AppSync data source creation."""

from typing import TYPE_CHECKING

from aws_cdk import aws_appsync as appsync
from aws_cdk import aws_iam as iam

if TYPE_CHECKING:
    from aws_cdk import aws_dynamodb as dynamodb

# Key of the single table data source in the datasources dict
WEBSITE_METADATA = "website_metadata"


def create_dynamodb_datasources(
    api: appsync.GraphqlApi,
    website_metadata_table: "dynamodb.ITable",
) -> dict[str, appsync.DynamoDbDataSource]:
    """
    Create the DynamoDB data source for the website metadata table.

    Args:
        api: The AppSync GraphQL API
        website_metadata_table: The single website metadata table

    Returns:
        Dictionary of datasource name to DynamoDB data source
    """
    ds = api.add_dynamo_db_data_source(
        "WebsiteDynamoDataSource",
        table=website_metadata_table,
    )
    # Grant GSI permissions
    ds.grant_principal.add_to_principal_policy(
        iam.PolicyStatement(
            actions=["dynamodb:Query"],
            resources=[f"{website_metadata_table.table_arn}/index/*"],
        )
    )
    return {WEBSITE_METADATA: ds}
