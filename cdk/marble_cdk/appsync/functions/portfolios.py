"""
AppSync functions removing portfolio content.

The removePortfolioUser and removePortfolioCollection mutations run
findPortfolioContentForUserFunction and then
deletePortfolioContentForUserFunction.
"""

from typing import Any

from aws_cdk import aws_appsync as appsync
from aws_cdk import aws_dynamodb as dynamodb
from constructs import Construct

from .. import keys
from .. import vtl
from ..datasources import WEBSITE_METADATA

FIND_PORTFOLIO_CONTENT_REQUEST = vtl.template(
    vtl.normalize_id("portfolioUserId", "$ctx.stash.portfolioUserId"),
    vtl.normalize_id("portfolioCollectionId", "$ctx.stash.portfolioCollectionId"),
    '#if($portfolioCollectionId == "")',
    f'  #set($sortKey = "{keys.key(keys.USER, "portfolioUserId")}")',
    "#else",
    f'  #set($sortKey = "{keys.key(keys.USER, "portfolioUserId", "portfolioCollectionId")}")',
    "#end",
    vtl.stash_put("portfolioSortKey", "$sortKey"),
    vtl.query(
        "PK = :pk and begins_with(SK, :beginsWith)",
        {":pk": vtl.quote(keys.PORTFOLIO), ":beginsWith": "$sortKey"},
        paginate=False,
    ),
)

# begins_with also matches ids sharing a prefix, so keep only the record itself and its children
FIND_PORTFOLIO_CONTENT_RESPONSE = vtl.template(
    vtl.RAISE_ON_ERROR,
    "#set($sortKey = $ctx.stash.portfolioSortKey)",
    "#set($records = [])",
    "#set($recordKeys = [])",
    "#foreach($record in $ctx.result.items)",
    '  #if($record.SK == $sortKey || $record.SK.startsWith("${sortKey}#"))',
    "    $util.qr($records.add($record))",
    "    #set($recordKey = {})",
    '    $util.qr($recordKey.put("PK", $util.dynamodb.toString($record.PK)))',
    '    $util.qr($recordKey.put("SK", $util.dynamodb.toString($record.SK)))',
    "    $util.qr($recordKeys.add($recordKey))",
    "  #end",
    "#end",
    vtl.stash_put("portfolioRecordsToDelete", "$recordKeys"),
    vtl.stash_put("recordsCountToDelete", "$recordKeys.size()"),
    '{"items": $util.toJson($records)}',
)


# TODO: split into chunks of 25 keys, the BatchDeleteItem limit, for users with larger portfolios
def delete_portfolio_content_request(table_name: str) -> str:
    return vtl.template(
        "#if($ctx.stash.portfolioRecordsToDelete.isEmpty())",
        '  #return({"recordsDeleted": 0})',
        "#end",
        vtl.batch_delete_item(table_name, "ctx.stash.portfolioRecordsToDelete"),
    )


DELETE_PORTFOLIO_CONTENT_RESPONSE = vtl.template(
    vtl.RAISE_ON_ERROR,
    '{"recordsDeleted": $util.toJson($ctx.stash.recordsCountToDelete)}',
)


def create_portfolio_functions(
    scope: Construct,
    api: appsync.GraphqlApi,
    datasources: dict[str, Any],
    website_metadata_table: dynamodb.ITable,
) -> dict[str, appsync.AppsyncFunction]:
    """
    Create AppSync functions for portfolio removal.

    Args:
        scope: CDK construct scope
        api: The AppSync GraphQL API
        datasources: Dictionary of datasource name to data source
        website_metadata_table: Table written by BatchDeleteItem

    Returns:
        Dictionary of function name to AppSync function
    """
    functions: dict[str, appsync.AppsyncFunction] = {}

    functions["find_portfolio_content_for_user"] = appsync.AppsyncFunction(
        scope,
        "FindPortfolioContentForUserFunction",
        name="findPortfolioContentForUserFunction",
        api=api,
        data_source=datasources[WEBSITE_METADATA],
        request_mapping_template=appsync.MappingTemplate.from_string(FIND_PORTFOLIO_CONTENT_REQUEST),
        response_mapping_template=appsync.MappingTemplate.from_string(FIND_PORTFOLIO_CONTENT_RESPONSE),
    )

    functions["delete_portfolio_content_for_user"] = appsync.AppsyncFunction(
        scope,
        "DeletePortfolioContentForUserFunction",
        name="deletePortfolioContentForUserFunction",
        api=api,
        data_source=datasources[WEBSITE_METADATA],
        request_mapping_template=appsync.MappingTemplate.from_string(
            delete_portfolio_content_request(website_metadata_table.table_name)
        ),
        response_mapping_template=appsync.MappingTemplate.from_string(DELETE_PORTFOLIO_CONTENT_RESPONSE),
    )

    return functions
