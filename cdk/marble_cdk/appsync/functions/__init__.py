"""
AppSync functions module.

This module combines all domain-specific AppSync function definitions.
"""

from typing import Any

from aws_cdk import aws_appsync as appsync
from aws_cdk import aws_dynamodb as dynamodb
from constructs import Construct

from .items import create_item_functions
from .portfolios import create_portfolio_functions
from .supplemental_data import create_supplemental_data_functions


def create_appsync_functions(
    scope: Construct,
    api: appsync.GraphqlApi,
    datasources: dict[str, Any],
    website_metadata_table: dynamodb.ITable,
) -> dict[str, appsync.AppsyncFunction]:
    """
    Create all AppSync functions for pipeline resolvers.

    Args:
        scope: CDK construct scope
        api: The AppSync GraphQL API
        datasources: Dictionary of datasource name to data source
        website_metadata_table: Table addressed by name in batch operations

    Returns:
        Dictionary of function name to AppSync function
    """
    functions: dict[str, appsync.AppsyncFunction] = {}

    functions.update(create_item_functions(scope, api, datasources, website_metadata_table))
    functions.update(create_portfolio_functions(scope, api, datasources, website_metadata_table))
    functions.update(create_supplemental_data_functions(scope, api, datasources))

    return functions


__all__ = ["create_appsync_functions"]
