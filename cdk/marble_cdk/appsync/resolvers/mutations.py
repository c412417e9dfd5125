"""Mutation resolvers for AppSync GraphQL API."""

from collections.abc import Mapping
from typing import Any

from aws_cdk import aws_appsync as appsync
from constructs import Construct

from .. import keys
from .. import vtl
from ..datasources import WEBSITE_METADATA
from ..resolver_builder import ResolverBuilder
from .queries import PORTFOLIO_USER_ID

PORTFOLIO_GSI_ATTRIBUTES = ("GSI1PK", "GSI1SK", "GSI2PK", "GSI2SK")


def supplemental_data_request(values: Mapping[str, str]) -> str:
    """Seed the stash for updateSupplementalDataRecordFunction.

    Args:
        values: Supplemental attribute to VTL expression mapping; a null value removes the attribute
    """
    return vtl.template(
        vtl.stash_put("itemId", "$ctx.args.itemId"),
        vtl.stash_put("websiteId", "$ctx.args.websiteId"),
        "#set($supplementalDataArgs = {})",
        '$util.qr($supplementalDataArgs.put("itemId", $ctx.args.itemId))',
        '$util.qr($supplementalDataArgs.put("websiteId", $ctx.args.websiteId))',
        *(f"$util.qr($supplementalDataArgs.put({vtl.quote(name)}, {value}))" for name, value in values.items()),
        vtl.stash_put("supplementalDataArgs", "$supplementalDataArgs"),
        vtl.EMPTY_REQUEST,
    )


def _or_null(argument: str) -> str:
    """Argument value, with blank strings turned into null ($null is never defined)."""
    return f"$util.defaultIfNullOrBlank($ctx.args.{argument}, $null)"


def _portfolio_collection_request() -> str:
    common = {
        "portfolioCollectionId": "$portfolioCollectionId",
        "portfolioUserId": "$ctx.identity.claims.netid",
        "TYPE": vtl.quote(keys.TYPE_PORTFOLIO_COLLECTION),
        "dateModifiedInDynamo": "$now",
        "description": "$ctx.args.description",
        "imageUri": "$ctx.args.imageUri",
        "featuredCollection": "$featuredCollection",
        "highlightedCollection": "$highlightedCollection",
        "layout": "$layout",
        "privacy": "$privacy",
    }
    exposed = {
        "GSI1PK": vtl.quote(keys.PORTFOLIOCOLLECTION),
        "GSI1SK": vtl.quote(keys.key(keys.PORTFOLIOCOLLECTION, "portfolioCollectionId")),
        "GSI2PK": vtl.quote(keys.PORTFOLIOCOLLECTION),
        "GSI2SK": "$util.str.toUpper(\"$privacy#$portfolioCollectionId\")",
    }
    pk = vtl.quote(keys.PORTFOLIO)
    sk = vtl.quote(keys.key(keys.USER, "portfolioUserId", "portfolioCollectionId"))
    preserve = {"dateAddedToDynamo": "$now"}
    return vtl.template(
        PORTFOLIO_USER_ID,
        vtl.normalize_id("portfolioCollectionId", "$ctx.args.portfolioCollectionId", "$util.autoId()"),
        f"#set($now = {vtl.NOW})",
        '#set($privacy = $util.defaultIfNullOrBlank($ctx.args.privacy, "private"))',
        '#set($layout = $util.defaultIfNullOrBlank($ctx.args.layout, "default"))',
        "#set($featuredCollection = false)",
        "#set($highlightedCollection = false)",
        '#if($privacy == "public")',
        "  #if($util.isBoolean($ctx.args.featuredCollection))",
        "    #set($featuredCollection = $ctx.args.featuredCollection)",
        "  #end",
        "  #if($util.isBoolean($ctx.args.highlightedCollection))",
        "    #set($highlightedCollection = $ctx.args.highlightedCollection)",
        "  #end",
        "#end",
        "## Private collections are removed from the indexes, so they are never exposed",
        '#if($privacy == "private")',
        vtl.update_item(pk, sk, common, remove_attributes=PORTFOLIO_GSI_ATTRIBUTES, preserve_values=preserve),
        "#else",
        vtl.update_item(pk, sk, {**common, **exposed}, preserve_values=preserve),
        "#end",
    )


def _portfolio_item_request() -> str:
    common = {
        "portfolioItemId": "$portfolioItemIdAsGiven",
        "portfolioCollectionId": "$portfolioCollectionId",
        "portfolioUserId": "$ctx.identity.claims.netid",
        "TYPE": vtl.quote(keys.TYPE_PORTFOLIO_ITEM),
        "annotation": "$ctx.args.annotation",
        "dateModifiedInDynamo": "$now",
        "description": "$ctx.args.description",
        "imageUri": "$ctx.args.imageUri",
        "internalItemId": "$ctx.args.internalItemId",
        "itemType": "$itemType",
        "sequence": "$ctx.args.sequence",
        "title": "$ctx.args.title",
        "uri": "$ctx.args.uri",
    }
    internal = {
        "GSI1PK": vtl.quote(keys.PORTFOLIOITEM),
        "GSI1SK": vtl.quote(keys.key(keys.INTERNALITEM, "portfolioItemId")),
    }
    pk = vtl.quote(keys.PORTFOLIO)
    sk = vtl.quote(keys.key(keys.USER, "portfolioUserId", "portfolioCollectionId", "portfolioItemId"))
    preserve = {"dateAddedToDynamo": "$now"}
    return vtl.template(
        PORTFOLIO_USER_ID,
        vtl.normalize_id("portfolioCollectionId", "$ctx.args.portfolioCollectionId"),
        "#set($portfolioItemIdAsGiven = $util.defaultIfNullOrBlank($ctx.args.portfolioItemId, $ctx.args.internalItemId))",
        "#set($rawItemId = $util.defaultIfNullOrBlank($portfolioItemIdAsGiven, $ctx.args.uri))",
        vtl.normalize_id("portfolioItemId", "$rawItemId", "$util.autoId()"),
        f"#set($now = {vtl.NOW})",
        "## Only items pointing at website content are indexed",
        "#if($util.isNullOrBlank($ctx.args.internalItemId))",
        '  #set($itemType = $util.defaultIfNullOrBlank($ctx.args.itemType, "internal"))',
        vtl.update_item(pk, sk, common, remove_attributes=internal.keys(), preserve_values=preserve),
        "#else",
        '  #set($itemType = "internal")',
        vtl.update_item(pk, sk, {**common, **internal}, preserve_values=preserve),
        "#end",
    )


def _portfolio_user_request() -> str:
    claims = "$ctx.identity.claims"
    return vtl.template(
        PORTFOLIO_USER_ID,
        f"#set($now = {vtl.NOW})",
        vtl.update_item(
            vtl.quote(keys.PORTFOLIO),
            vtl.quote(keys.key(keys.USER, "portfolioUserId")),
            {
                "portfolioUserId": f"{claims}.netid",
                "bio": "$ctx.args.bio",
                "TYPE": vtl.quote(keys.TYPE_PORTFOLIO_USER),
                "dateModifiedInDynamo": "$now",
                "department": f"{claims}.department",
                "email": f"$util.defaultIfNullOrBlank($ctx.args.email, {claims}.email)",
                "fullName": f"$util.defaultIfNullOrBlank($ctx.args.fullName, {claims}.name)",
                "primaryAffiliation": f"{claims}.primary_affiliation",
            },
            preserve_values={"dateAddedToDynamo": "$now"},
        ),
    )


def create_mutation_resolvers(
    scope: Construct,
    api: appsync.GraphqlApi,
    datasources: dict[str, Any],
    functions: dict[str, appsync.AppsyncFunction],
) -> None:
    """
    Create all AppSync mutation resolvers.

    Args:
        scope: CDK construct scope
        api: AppSync GraphQL API
        datasources: Dictionary of AppSync data sources
        functions: Dictionary of reusable AppSync functions
    """
    builder = ResolverBuilder(api, datasources, scope)
    supplemental_pipeline = [functions["update_supplemental_data_record"]]
    remove_portfolio_pipeline = [
        functions["find_portfolio_content_for_user"],
        functions["delete_portfolio_content_for_user"],
    ]

    # === WEBSITE CONTENT ===

    builder.create_batch_resolvers(
        [
            {
                "type": "vtl",
                "field_name": "addItemToWebsite",
                "type_name": "Mutation",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("websiteId", "$ctx.args.websiteId"),
                    vtl.normalize_id("itemId", "$ctx.args.itemId"),
                    f"#set($now = {vtl.NOW})",
                    vtl.update_item(
                        vtl.quote(keys.key(keys.WEBSITE, "websiteId")),
                        vtl.quote(keys.key(keys.ITEM, "itemId")),
                        {
                            "itemId": "$ctx.args.itemId",
                            "websiteId": "$ctx.args.websiteId",
                            "TYPE": vtl.quote(keys.TYPE_WEBSITE_ITEM),
                            "dateModifiedInDynamo": "$now",
                            "GSI1PK": vtl.quote(keys.key(keys.WEBSITE, "websiteId")),
                            "GSI1SK": vtl.quote(keys.key(keys.ADDED, "now")),
                            "id": "$ctx.args.itemId",
                        },
                        preserve_values={"dateAddedToDynamo": "$now"},
                    ),
                ),
            },
            {
                "type": "vtl",
                "field_name": "removeItemFromWebsite",
                "type_name": "Mutation",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("websiteId", "$ctx.args.websiteId"),
                    vtl.normalize_id("itemId", "$ctx.args.itemId"),
                    vtl.delete_item(
                        vtl.quote(keys.key(keys.WEBSITE, "websiteId")),
                        vtl.quote(keys.key(keys.ITEM, "itemId")),
                    ),
                ),
            },
            {
                "type": "vtl",
                "field_name": "addItemToHarvest",
                "type_name": "Mutation",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("harvestItemId", "$ctx.args.harvestItemId"),
                    vtl.normalize_id("sourceSystem", "$ctx.args.sourceSystem"),
                    f"#set($now = {vtl.NOW})",
                    vtl.update_item(
                        vtl.quote(keys.ITEMTOHARVEST),
                        vtl.quote(keys.key(keys.SOURCESYSTEM, "sourceSystem", "harvestItemId")),
                        {
                            "harvestItemId": "$ctx.args.harvestItemId",
                            "sourceSystem": "$ctx.args.sourceSystem",
                            "TYPE": vtl.quote(keys.TYPE_ITEM_TO_HARVEST),
                            "dateModifiedInDynamo": "$now",
                        },
                        preserve_values={"dateAddedToDynamo": "$now"},
                    ),
                ),
            },
            {
                "type": "vtl",
                "field_name": "saveFileLastProcessedDate",
                "type_name": "Mutation",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("itemId", "$ctx.args.itemId"),
                    f"#set($now = {vtl.NOW})",
                    vtl.update_item(
                        vtl.quote(keys.FILETOPROCESS),
                        vtl.quote(keys.key(keys.FILEPATH, "itemId")),
                        {
                            "dateLastProcessed": "$now",
                            "dateModifiedInDynamo": "$now",
                            "GSI2PK": vtl.quote(keys.FILETOPROCESS),
                            "GSI2SK": vtl.quote(keys.key(keys.DATELASTPROCESSED, "now")),
                        },
                    ),
                ),
            },
        ]
    )

    # === SUPPLEMENTAL DATA ===

    builder.create_batch_resolvers(
        [
            {
                "type": "pipeline",
                "field_name": "saveAdditionalNotesForWebsite",
                "type_name": "Mutation",
                "functions": supplemental_pipeline,
                "request_template": supplemental_data_request({"additionalNotes": _or_null("additionalNotes")}),
            },
            {
                "type": "pipeline",
                "field_name": "saveCopyrightForWebsite",
                "type_name": "Mutation",
                "functions": supplemental_pipeline,
                "request_template": vtl.template(
                    '#set($copyrightStatus = "Copyright")',
                    "#if(!$ctx.args.inCopyright)",
                    '  #set($copyrightStatus = "not in copyright")',
                    "#end",
                    supplemental_data_request(
                        {
                            "copyrightStatement": _or_null("copyrightStatement"),
                            "copyrightStatus": "$copyrightStatus",
                            "inCopyright": "$ctx.args.inCopyright",
                        }
                    ),
                ),
            },
            {
                "type": "pipeline",
                "field_name": "saveDefaultImageForWebsite",
                "type_name": "Mutation",
                "functions": supplemental_pipeline,
                "request_template": supplemental_data_request(
                    {
                        "defaultFilePath": _or_null("defaultFilePath"),
                        "objectFileGroupId": _or_null("objectFileGroupId"),
                    }
                ),
            },
            {
                "type": "pipeline",
                "field_name": "savePartiallyDigitizedForWebsite",
                "type_name": "Mutation",
                "functions": supplemental_pipeline,
                "request_template": supplemental_data_request({"partiallyDigitized": "$ctx.args.partiallyDigitized"}),
            },
            {
                "type": "vtl",
                "field_name": "removeDefaultImageForWebsite",
                "type_name": "Mutation",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    vtl.normalize_id("itemId", "$ctx.args.itemId"),
                    vtl.normalize_id("websiteId", "$ctx.args.websiteId", vtl.quote(keys.ALL_WEBSITES)),
                    vtl.update_item(
                        vtl.quote(keys.key(keys.ITEM, "itemId")),
                        vtl.quote(keys.key(keys.SUPPLEMENTALDATA, "websiteId")),
                        {"dateModifiedInDynamo": vtl.NOW},
                        remove_attributes=("defaultFilePath", "objectFileGroupId"),
                    ),
                ),
            },
        ]
    )

    # === PORTFOLIOS ===

    builder.create_batch_resolvers(
        [
            {
                "type": "vtl",
                "field_name": "savePortfolioUser",
                "type_name": "Mutation",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _portfolio_user_request(),
            },
            {
                "type": "vtl",
                "field_name": "savePortfolioCollection",
                "type_name": "Mutation",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _portfolio_collection_request(),
            },
            {
                "type": "vtl",
                "field_name": "savePortfolioItem",
                "type_name": "Mutation",
                "datasource_name": WEBSITE_METADATA,
                "request_template": _portfolio_item_request(),
            },
            {
                "type": "vtl",
                "field_name": "removePortfolioItem",
                "type_name": "Mutation",
                "datasource_name": WEBSITE_METADATA,
                "request_template": vtl.template(
                    PORTFOLIO_USER_ID,
                    vtl.normalize_id("portfolioCollectionId", "$ctx.args.portfolioCollectionId"),
                    vtl.normalize_id("portfolioItemId", "$ctx.args.portfolioItemId"),
                    vtl.delete_item(
                        vtl.quote(keys.PORTFOLIO),
                        vtl.quote(keys.key(keys.USER, "portfolioUserId", "portfolioCollectionId", "portfolioItemId")),
                    ),
                ),
            },
            {
                "type": "pipeline",
                "field_name": "removePortfolioCollection",
                "type_name": "Mutation",
                "functions": remove_portfolio_pipeline,
                "request_template": vtl.template(
                    "## A blank collection id would select every record of the user",
                    "#if($util.isNullOrBlank($ctx.args.portfolioCollectionId))",
                    '  $util.error("portfolioCollectionId is required", "ValidationError")',
                    "#end",
                    vtl.stash_request(
                        {
                            "portfolioUserId": "$ctx.identity.claims.netid",
                            "portfolioCollectionId": "$ctx.args.portfolioCollectionId",
                        }
                    ),
                ),
            },
            {
                "type": "pipeline",
                "field_name": "removePortfolioUser",
                "type_name": "Mutation",
                "functions": remove_portfolio_pipeline,
                "request_template": vtl.stash_request(
                    {"portfolioUserId": "$ctx.identity.claims.netid", "portfolioCollectionId": '""'}
                ),
            },
        ]
    )
