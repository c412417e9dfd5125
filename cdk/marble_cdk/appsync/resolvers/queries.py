"""Query resolvers for AppSync GraphQL API."""

from typing import Any

from aws_cdk import aws_appsync as appsync
from constructs import Construct

from .. import keys
from .. import vtl
from ..datasources import WEBSITE_METADATA
from ..resolver_builder import ResolverBuilder
from ...dynamodb_tables import GSI1_NAME, GSI2_NAME

PORTFOLIO_USER_ID = vtl.normalize_id("portfolioUserId", "$ctx.identity.claims.netid")


def _get_record(prefix: str, sort_prefix: str, argument: str) -> str:
    """GetItem of the record keyed PREFIX / SORT_PREFIX#<normalized argument>."""
    return vtl.template(
        vtl.normalize_id("id", f"$ctx.args.{argument}"),
        vtl.get_item(vtl.quote(prefix), vtl.quote(keys.key(sort_prefix, "id"))),
    )


def _list_public_collections(extra_filter: str = "", extra_values: dict[str, str] | None = None) -> str:
    """Collections exposed on GSI2 under PUBLIC#, optionally narrowed by a flag."""
    return vtl.query(
        "GSI2PK = :GSI2PK and begins_with(GSI2SK, :beginsWith)",
        {
            ":GSI2PK": vtl.quote(keys.PORTFOLIOCOLLECTION),
            ":beginsWith": vtl.quote(keys.prefix_of(keys.PUBLIC)),
        },
        index=GSI2_NAME,
        filter_block=vtl.type_filter(
            keys.TYPE_PORTFOLIO_COLLECTION,
            " and ".join(filter(None, ["privacy = :privacy", extra_filter])),
            {":privacy": vtl.quote("public"), **(extra_values or {})},
        ),
    )


SUPPLEMENTAL_DATA_FILTER = vtl.template(
    vtl.normalize_id("id", "$ctx.stash.id"),
    vtl.normalize_id("websiteId", "$ctx.stash.websiteId"),
    "#set($records = [])",
    "#foreach($record in $ctx.result.items)",
    vtl.normalize_id("recordId", "$record.id"),
    vtl.normalize_id("recordWebsiteId", "$record.websiteId"),
    '  #if(($id == "" || $recordId == $id) && ($websiteId == "" || $recordWebsiteId == $websiteId))',
    "    $util.qr($records.add($record))",
    "  #end",
    "#end",
)


def create_query_resolvers(
    scope: Construct,
    api: appsync.GraphqlApi,
    datasources: dict[str, Any],
    functions: dict[str, appsync.AppsyncFunction],
) -> None:
    """
    Create all AppSync query resolvers.

    Args:
        scope: CDK construct scope
        api: AppSync GraphQL API
        datasources: Dictionary of AppSync data sources
        functions: Dictionary of reusable AppSync functions
    """
    builder = ResolverBuilder(api, datasources, scope)
    item_pipeline = [functions["get_merged_item_record"], functions["expand_subject_terms"]]

    # === ITEMS ===

    builder.create_vtl_pipeline_resolver(
        field_name="showItemByWebsite",
        type_name="Query",
        functions=item_pipeline,
        request_template=vtl.stash_request({"itemId": "$ctx.args.itemId", "websiteId": "$ctx.args.websiteId"}),
        id_suffix="QueryShowItemByWebsite",
    )

    builder.create_vtl_pipeline_resolver(
        field_name="getItem",
        type_name="Query",
        functions=item_pipeline,
        request_template=vtl.stash_request(
            {
                "itemId": "$ctx.args.id",
                "websiteId": '$util.defaultIfNullOrBlank($ctx.args.websiteId, "")',
            }
        ),
    )

    builder.create_batch_resolvers(
        [
            {
                "type": "vtl",
                "field_name": "listItemsByWebsite",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("websiteId", "$ctx.args.id"),
                    vtl.query("PK = :pk", {":pk": vtl.quote(keys.key(keys.WEBSITE, "websiteId"))}),
                ),
                "response_template": vtl.connection_response(),
            },
            {
                "type": "vtl",
                "field_name": "listItemsBySourceSystem",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("sourceSystem", "$ctx.args.id"),
                    vtl.query(
                        "GSI2PK = :pk and begins_with(GSI2SK, :beginsWith)",
                        {
                            ":pk": vtl.quote(keys.key(keys.SOURCESYSTEM, "sourceSystem")),
                            ":beginsWith": vtl.quote(keys.prefix_of(keys.SORT)),
                        },
                        index=GSI2_NAME,
                    ),
                ),
                "response_template": vtl.connection_response(),
            },
        ]
    )

    # === FILES ===

    builder.create_batch_resolvers(
        [
            {
                "type": "vtl",
                "field_name": "getFile",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _get_record(keys.FILE, keys.FILE, "id"),
            },
            {
                "type": "vtl",
                "field_name": "getFileGroup",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _get_record(keys.FILEGROUP, keys.FILEGROUP, "id"),
            },
            {
                "type": "vtl",
                "field_name": "getFileToProcessRecord",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _get_record(keys.FILETOPROCESS, keys.FILEPATH, "filePath"),
            },
            {
                "type": "vtl",
                "field_name": "listFileGroups",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.query("PK = :pk", {":pk": vtl.quote(keys.FILEGROUP)}),
                "response_template": vtl.connection_response(),
            },
            {
                "type": "vtl",
                "field_name": "listFileGroupsByStorageSystem",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("storageSystem", "$ctx.args.storageSystem"),
                    vtl.normalize_id("typeOfData", "$ctx.args.typeOfData"),
                    vtl.query(
                        "GSI2PK = :pk",
                        {":pk": vtl.quote(keys.key(keys.FILESYSTEM, "storageSystem", "typeOfData"))},
                        index=GSI2_NAME,
                    ),
                ),
                "response_template": vtl.connection_response(),
            },
            {
                "type": "vtl",
                "field_name": "listFileGroupsForS3",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.query(
                    "GSI2PK = :pk",
                    {":pk": vtl.quote(f"{keys.prefix_of(keys.FILESYSTEM)}{keys.WEBSITE_BUCKET_FILESYSTEM}")},
                    index=GSI2_NAME,
                ),
                "response_template": vtl.connection_response(),
            },
            {
                "type": "vtl",
                "field_name": "listFilesToProcess",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("dateLastProcessedBefore", "$ctx.args.dateLastProcessedBefore", vtl.NOW),
                    vtl.query(
                        "GSI2PK = :pk and GSI2SK <= :dateLastProcessed",
                        {
                            ":pk": vtl.quote(keys.FILETOPROCESS),
                            ":dateLastProcessed": vtl.quote(
                                keys.key(keys.DATELASTPROCESSED, "dateLastProcessedBefore")
                            ),
                        },
                        index=GSI2_NAME,
                    ),
                ),
                "response_template": vtl.connection_response(),
            },
        ]
    )

    # === WEBSITES ===

    builder.create_batch_resolvers(
        [
            {
                "type": "vtl",
                "field_name": "getWebsite",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _get_record(keys.WEBSITE, keys.WEBSITE, "id"),
            },
            {
                "type": "vtl",
                "field_name": "listWebsites",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.query("PK = :pk", {":pk": vtl.quote(keys.WEBSITE)}),
                "response_template": vtl.connection_response(),
            },
            {
                "type": "vtl",
                "field_name": "listSupplementalDataRecords",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.stash_put("id", '$util.defaultIfNullOrBlank($ctx.args.id, "")'),
                    vtl.stash_put("websiteId", '$util.defaultIfNullOrBlank($ctx.args.websiteId, "")'),
                    vtl.query("GSI1PK = :pk", {":pk": vtl.quote(keys.SUPPLEMENTALDATA)}, index=GSI1_NAME),
                ),
                "response_template": vtl.connection_response("$records", preamble=SUPPLEMENTAL_DATA_FILTER),
            },
        ]
    )

    # === PORTFOLIOS ===

    builder.create_batch_resolvers(
        [
            {
                "type": "vtl",
                "field_name": "getPortfolioUser",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    PORTFOLIO_USER_ID,
                    vtl.get_item(vtl.quote(keys.PORTFOLIO), vtl.quote(keys.key(keys.USER, "portfolioUserId"))),
                ),
            },
            {
                "type": "vtl",
                "field_name": "getPortfolioCollection",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    PORTFOLIO_USER_ID,
                    vtl.normalize_id("portfolioCollectionId", "$ctx.args.portfolioCollectionId"),
                    vtl.get_item(
                        vtl.quote(keys.PORTFOLIO),
                        vtl.quote(keys.key(keys.USER, "portfolioUserId", "portfolioCollectionId")),
                    ),
                ),
            },
            {
                "type": "vtl",
                "field_name": "getPortfolioItem",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    PORTFOLIO_USER_ID,
                    vtl.normalize_id("portfolioCollectionId", "$ctx.args.portfolioCollectionId"),
                    vtl.normalize_id("portfolioItemId", "$ctx.args.portfolioItemId"),
                    vtl.get_item(
                        vtl.quote(keys.PORTFOLIO),
                        vtl.quote(keys.key(keys.USER, "portfolioUserId", "portfolioCollectionId", "portfolioItemId")),
                    ),
                ),
            },
            {
                "type": "vtl",
                "field_name": "getExposedPortfolioCollection",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("portfolioCollectionId", "$ctx.args.portfolioCollectionId"),
                    vtl.query(
                        "GSI1PK = :pk and GSI1SK = :sk",
                        {
                            ":pk": vtl.quote(keys.PORTFOLIOCOLLECTION),
                            ":sk": vtl.quote(keys.key(keys.PORTFOLIOCOLLECTION, "portfolioCollectionId")),
                        },
                        index=GSI1_NAME,
                        filter_block=vtl.type_filter(keys.TYPE_PORTFOLIO_COLLECTION),
                        paginate=False,
                    ),
                ),
                "response_template": vtl.first_item_response(),
            },
            {
                "type": "vtl",
                "field_name": "listPublicPortfolioCollections",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _list_public_collections(),
                "response_template": vtl.connection_response(),
            },
            {
                "type": "vtl",
                "field_name": "listPublicHighlightedPortfolioCollections",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _list_public_collections(
                    "highlightedCollection = :highlightedCollection", {":highlightedCollection": "true"}
                ),
                "response_template": vtl.connection_response(),
            },
            {
                "type": "vtl",
                "field_name": "listPublicFeaturedPortfolioCollections",
                "type_name": "Query",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _list_public_collections(
                    "featuredCollection = :featuredCollection", {":featuredCollection": "true"}
                ),
                "response_template": vtl.connection_response(),
            },
        ]
    )
