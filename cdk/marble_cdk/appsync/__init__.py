"""
AppSync GraphQL API module for the website metadata store.

The implementation is split across multiple modules:

- api.py: API creation (OIDC default auth, API key for public reads)
- datasources.py: the single DynamoDB data source
- keys.py: record key vocabulary of the single table
- vtl.py: shared VTL request/response building blocks
- functions/: AppSync functions used by pipeline resolvers
  - items.py: merged item record and subject term expansion
  - portfolios.py: portfolio content removal
  - supplemental_data.py: per-website supplemental data updates
- resolvers/: resolver wiring organized by type
  - mutations.py: Mutation resolvers
  - queries.py: Query resolvers
  - fields.py: Field resolvers
"""

from dataclasses import dataclass

from aws_cdk import aws_appsync as appsync
from aws_cdk import aws_dynamodb as dynamodb
from constructs import Construct

from .api import create_appsync_api
from .datasources import create_dynamodb_datasources
from .functions import create_appsync_functions
from .resolvers import create_resolvers


@dataclass
class AppSyncResources:
    """Container for all AppSync resources created by setup_appsync."""

    api: appsync.GraphqlApi
    dynamodb_datasources: dict[str, appsync.DynamoDbDataSource]
    functions: dict[str, appsync.AppsyncFunction]


def setup_appsync(
    scope: Construct,
    api_name: str,
    open_id_connect_provider: str,
    days_for_key_to_last: int,
    website_metadata_table: dynamodb.ITable,
) -> AppSyncResources:
    """
    Set up the complete AppSync GraphQL API infrastructure.

    Args:
        scope: CDK construct scope
        api_name: Name of the GraphQL API
        open_id_connect_provider: OIDC issuer URL for signed-in maintainers
        days_for_key_to_last: Lifetime of the initial API key
        website_metadata_table: The single website metadata table

    Returns:
        AppSyncResources containing all created resources
    """
    api = create_appsync_api(
        scope=scope,
        api_name=api_name,
        open_id_connect_provider=open_id_connect_provider,
        days_for_key_to_last=days_for_key_to_last,
    )

    dynamodb_datasources = create_dynamodb_datasources(api, website_metadata_table)

    functions = create_appsync_functions(scope, api, dynamodb_datasources, website_metadata_table)

    create_resolvers(
        scope=scope,
        api=api,
        datasources=dynamodb_datasources,
        functions=functions,
    )

    return AppSyncResources(
        api=api,
        dynamodb_datasources=dynamodb_datasources,
        functions=functions,
    )


__all__ = ["setup_appsync", "AppSyncResources"]
