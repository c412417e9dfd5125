"""
Builder pattern for AppSync resolvers.

Every resolver of the website metadata API is a VTL resolver: either a unit
resolver bound to the table data source or a pipeline resolver chaining
AppSync functions. Templates are rendered strings (see vtl.py), so the
builder wraps them with MappingTemplate.from_string.
"""

from typing import Any, Optional

from aws_cdk import aws_appsync as appsync
from constructs import Construct


def _mapping_template(template: Optional[str]) -> appsync.MappingTemplate:
    if template is None:
        return appsync.MappingTemplate.dynamo_db_result_item()
    return appsync.MappingTemplate.from_string(template)


def default_resolver_id(type_name: str, field_name: str) -> str:
    """Construct ID used when no id_suffix is given, e.g. QueryGetFileResolver."""
    return f"{type_name}{field_name[0].upper()}{field_name[1:]}Resolver"


class ResolverBuilder:
    """
    Builder for AppSync VTL resolvers.

    Example:
        builder = ResolverBuilder(api, datasources, scope)

        builder.create_vtl_resolver(
            field_name="getFile",
            type_name="Query",
            datasource_name="website_metadata",
            request_template=vtl.get_item(...),
        )
    """

    def __init__(
        self,
        api: appsync.GraphqlApi,
        datasources: dict[str, appsync.BaseDataSource],
        scope: Construct,
    ):
        """
        Initialize the resolver builder.

        Args:
            api: AppSync GraphQL API
            datasources: Dictionary of AppSync data sources (keyed by name)
            scope: CDK construct scope for creating resources
        """
        self.api = api
        self.datasources = datasources
        self.scope = scope

    def create_vtl_resolver(
        self,
        field_name: str,
        type_name: str,
        datasource_name: str,
        request_template: str,
        response_template: Optional[str] = None,
        id_suffix: Optional[str] = None,
    ) -> appsync.Resolver:
        """
        Create a unit resolver with request/response mapping templates.

        Args:
            field_name: GraphQL field name (e.g., "getFile")
            type_name: GraphQL type name (e.g., "Query", "Mutation", "ItemMetadata")
            datasource_name: Key in datasources dict (e.g., "website_metadata")
            request_template: Rendered request template
            response_template: Rendered response template; None returns the raw result
            id_suffix: Optional custom CDK construct ID

        Returns:
            The created resolver
        """
        resolver_id = id_suffix or default_resolver_id(type_name, field_name)

        return appsync.Resolver(
            self.scope,
            resolver_id,
            api=self.api,
            data_source=self.datasources[datasource_name],
            type_name=type_name,
            field_name=field_name,
            request_mapping_template=_mapping_template(request_template),
            response_mapping_template=_mapping_template(response_template),
        )

    def create_vtl_pipeline_resolver(
        self,
        field_name: str,
        type_name: str,
        functions: list[appsync.AppsyncFunction],
        request_template: str,
        response_template: Optional[str] = None,
        id_suffix: Optional[str] = None,
    ) -> appsync.Resolver:
        """
        Create a pipeline resolver running ``functions`` in order.

        The request template usually only seeds the stash; the response
        template defaults to returning the last function's result.

        Args:
            field_name: GraphQL field name
            type_name: GraphQL type name
            functions: List of AppsyncFunction objects to execute in order
            request_template: Rendered "before" template
            response_template: Rendered "after" template
            id_suffix: Optional custom CDK construct ID

        Returns:
            The created resolver
        """
        resolver_id = id_suffix or default_resolver_id(type_name, field_name)

        return appsync.Resolver(
            self.scope,
            resolver_id,
            api=self.api,
            type_name=type_name,
            field_name=field_name,
            request_mapping_template=_mapping_template(request_template),
            response_mapping_template=_mapping_template(response_template),
            pipeline_config=functions,
        )

    def create_batch_resolvers(
        self,
        resolvers: list[dict[str, Any]],
    ) -> list[appsync.Resolver]:
        """
        Create multiple resolvers from a configuration list.

        Args:
            resolvers: List of resolver configurations, each containing:
                - type: "vtl" or "pipeline"
                - field_name: GraphQL field name
                - type_name: GraphQL type name
                - datasource_name: (for vtl) Key in datasources dict
                - functions: (for pipeline) List of AppsyncFunction objects
                - request_template: Rendered request template
                - response_template: (optional) Rendered response template
                - id_suffix: (optional) Custom CDK construct ID

        Returns:
            List of created resolvers
        """
        created = []
        for config in resolvers:
            resolver_type = config["type"]

            if resolver_type == "vtl":
                resolver = self.create_vtl_resolver(
                    field_name=config["field_name"],
                    type_name=config["type_name"],
                    datasource_name=config["datasource_name"],
                    request_template=config["request_template"],
                    response_template=config.get("response_template"),
                    id_suffix=config.get("id_suffix"),
                )
            elif resolver_type == "pipeline":
                resolver = self.create_vtl_pipeline_resolver(
                    field_name=config["field_name"],
                    type_name=config["type_name"],
                    functions=config["functions"],
                    request_template=config["request_template"],
                    response_template=config.get("response_template"),
                    id_suffix=config.get("id_suffix"),
                )
            else:
                raise ValueError(f"Unknown resolver type: {resolver_type}")

            created.append(resolver)

        return created
