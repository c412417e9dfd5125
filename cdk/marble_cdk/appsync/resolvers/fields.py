"""Field resolvers for AppSync GraphQL API."""

from typing import Any

from aws_cdk import aws_appsync as appsync
from constructs import Construct

from .. import keys
from .. import vtl
from ..datasources import WEBSITE_METADATA
from ..resolver_builder import ResolverBuilder
from ...dynamodb_tables import GSI1_NAME

PROPAGATE_WEBSITE = vtl.template(
    "#set($children = [])",
    "#foreach($child in $ctx.result.items)",
    '  $util.qr($child.put("suppliedWebsiteId", $ctx.stash.websiteId))',
    "  $util.qr($children.add($child))",
    "#end",
)


# Files of the source's file group, in sort order
FILES_OF_GROUP = vtl.template(
    vtl.normalize_id("objectFileGroupId", "$ctx.source.objectFileGroupId"),
    vtl.query(
        "GSI1PK = :pk and begins_with(GSI1SK, :beginsWith)",
        {
            ":pk": vtl.quote(keys.key(keys.FILEGROUP, "objectFileGroupId")),
            ":beginsWith": vtl.quote(keys.prefix_of(keys.SORT)),
        },
        index=GSI1_NAME,
    ),
)


def _portfolio_children(type_name: str, *path: str) -> str:
    """Portfolio records of ``type_name`` below USER#<user>[#<collection>]#."""
    return vtl.template(
        *(vtl.normalize_id(variable, f"$ctx.source.{variable}") for variable in path),
        vtl.query(
            "PK = :pk and begins_with(SK, :beginsWith)",
            {
                ":pk": vtl.quote(keys.PORTFOLIO),
                ":beginsWith": vtl.quote(keys.prefix_of(keys.key(keys.USER, *path))),
            },
            filter_block=vtl.type_filter(type_name),
        ),
    )


def create_field_resolvers(
    scope: Construct,
    api: appsync.GraphqlApi,
    datasources: dict[str, Any],
    functions: dict[str, appsync.AppsyncFunction],
) -> None:
    """
    Create all AppSync field resolvers.

    Args:
        scope: CDK construct scope
        api: AppSync GraphQL API
        datasources: Dictionary of AppSync data sources
        functions: Dictionary of reusable AppSync functions
    """
    builder = ResolverBuilder(api, datasources, scope)
    item_pipeline = [functions["get_merged_item_record"], functions["expand_subject_terms"]]

    # === FILES ===

    builder.create_batch_resolvers(
        [
            {
                "type": "vtl",
                "field_name": "FileGroup",
                "type_name": "File",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("id", "$ctx.source.objectFileGroupId"),
                    vtl.get_item(vtl.quote(keys.FILEGROUP), vtl.quote(keys.key(keys.FILEGROUP, "id"))),
                ),
            },
            {
                "type": "vtl",
                "field_name": "files",
                "type_name": "FileGroup",
                "datasource_name": WEBSITE_METADATA,
                "request_template": FILES_OF_GROUP,
                "response_template": vtl.connection_response(),
            },
        ]
    )

    # === ITEMS ===

    builder.create_batch_resolvers(
        [
            {
                "type": "vtl",
                "field_name": "defaultFile",
                "type_name": "ItemMetadata",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("id", "$ctx.source.defaultFilePath"),
                    vtl.get_item(vtl.quote(keys.FILE), vtl.quote(keys.key(keys.FILE, "id"))),
                ),
            },
            {
                "type": "vtl",
                "field_name": "files",
                "type_name": "ItemMetadata",
                "datasource_name": WEBSITE_METADATA,
                "request_template": FILES_OF_GROUP,
                "response_template": vtl.connection_response(),
            },
            {
                "type": "vtl",
                "field_name": "children",
                "type_name": "ItemMetadata",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("id", "$ctx.source.id"),
                    vtl.stash_put("websiteId", "$ctx.source.suppliedWebsiteId"),
                    vtl.query("GSI1PK = :pk", {":pk": vtl.quote(keys.key(keys.ITEM, "id"))}, index=GSI1_NAME),
                ),
                "response_template": vtl.connection_response("$children", preamble=PROPAGATE_WEBSITE),
            },
            {
                "type": "pipeline",
                "field_name": "parent",
                "type_name": "ItemMetadata",
                "functions": item_pipeline,
                "request_template": vtl.stash_request(
                    {"itemId": "$ctx.source.parentId", "websiteId": "$ctx.source.suppliedWebsiteId"}
                ),
            },
            {
                "type": "pipeline",
                "field_name": "ItemMetadata",
                "type_name": "WebsiteItem",
                "functions": item_pipeline,
                "request_template": vtl.stash_request(
                    {"itemId": "$ctx.source.itemId", "websiteId": "$ctx.source.websiteId"}
                ),
            },
        ]
    )

    # === WEBSITES AND PORTFOLIOS ===

    builder.create_batch_resolvers(
        [
            {
                "type": "vtl",
                "field_name": "websiteItems",
                "type_name": "Website",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("websiteId", "$ctx.source.id"),
                    vtl.query("PK = :pk", {":pk": vtl.quote(keys.key(keys.WEBSITE, "websiteId"))}),
                ),
                "response_template": vtl.connection_response(),
            },
            {
                "type": "vtl",
                "field_name": "portfolioCollections",
                "type_name": "PortfolioUser",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _portfolio_children(keys.TYPE_PORTFOLIO_COLLECTION, "portfolioUserId"),
                "response_template": vtl.connection_response(),
            },
            {
                "type": "vtl",
                "field_name": "portfolioItems",
                "type_name": "PortfolioCollection",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _portfolio_children(
                    keys.TYPE_PORTFOLIO_ITEM, "portfolioUserId", "portfolioCollectionId"
                ),
                "response_template": vtl.connection_response(),
            },
        ]
    )
