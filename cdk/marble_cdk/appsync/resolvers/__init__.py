"""AppSync resolvers module for GraphQL API.

This module provides modular resolver creation for the AppSync GraphQL API,
organized into:
- mutations: Mutation resolvers (website content, supplemental data, portfolios)
- queries: Query resolvers (read operations)
- fields: Field resolvers (nested type resolution)
"""

from typing import Any

from aws_cdk import aws_appsync as appsync
from constructs import Construct

from .fields import create_field_resolvers
from .mutations import create_mutation_resolvers
from .queries import create_query_resolvers

__all__ = [
    "create_resolvers",
    "create_mutation_resolvers",
    "create_query_resolvers",
    "create_field_resolvers",
]


def create_resolvers(
    scope: Construct,
    api: appsync.GraphqlApi,
    datasources: dict[str, Any],
    functions: dict[str, appsync.AppsyncFunction],
) -> None:
    """
    Create all AppSync resolvers for the GraphQL API.

    Args:
        scope: CDK construct scope
        api: AppSync GraphQL API
        datasources: Dictionary of AppSync data sources
        functions: Dictionary of reusable AppSync functions
    """
    create_mutation_resolvers(scope, api, datasources, functions)
    create_query_resolvers(scope, api, datasources, functions)
    create_field_resolvers(scope, api, datasources, functions)
