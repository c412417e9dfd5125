"""
AppSync functions resolving a single item for a website.

- getMergedItemRecordFunction: merges the item record with its parent
  override and supplemental data
- expandSubjectTermsFunction: replaces item subjects with the stored
  subject term records
"""

from typing import Any

from aws_cdk import aws_appsync as appsync
from aws_cdk import aws_dynamodb as dynamodb
from constructs import Construct

from .. import keys
from .. import vtl
from ..datasources import WEBSITE_METADATA

# Key looked up when an item has no subjects to expand; it never exists
PLACEHOLDER_PK = "NoKeyToFind"
PLACEHOLDER_SK = "YieldEmptyResultSet"

MERGED_ITEM_REQUEST = vtl.template(
    "## itemId: stash, then the parent record (field resolvers)",
    "#set($rawId = $util.defaultIfNullOrBlank($ctx.stash.itemId, $ctx.source.itemId))",
    "#set($rawId = $util.defaultIfNullOrBlank($rawId, $ctx.source.id))",
    "#set($rawId = $util.defaultIfNullOrBlank($rawId, $ctx.source.itemMetadataId))",
    vtl.normalize_id("id", "$rawId"),
    "#set($rawWebsiteId = $util.defaultIfNullOrBlank($ctx.stash.websiteId, $ctx.source.suppliedWebsiteId))",
    vtl.normalize_id("suppliedWebsiteId", "$rawWebsiteId"),
    vtl.stash_put("suppliedWebsiteId", "$suppliedWebsiteId"),
    vtl.query("PK = :pk", {":pk": vtl.quote(keys.key(keys.ITEM, "id"))}, paginate=False),
)

MERGED_ITEM_RESPONSE = vtl.template(
    vtl.RAISE_ON_ERROR,
    f"#set($bookkeeping = {vtl.quote_list(vtl.BOOKKEEPING_ATTRIBUTES)})",
    "#set($itemRecord = {})",
    "#set($parentOverride = {})",
    "#set($allWebsites = {})",
    "#set($thisWebsite = {})",
    "#foreach($record in $ctx.result.items)",
    vtl.normalize_id("recordWebsiteId", "$record.websiteId"),
    f'  #if($record.TYPE == "{keys.TYPE_ITEM}")',
    "    #set($itemRecord = $record)",
    f'  #elseif($record.TYPE == "{keys.TYPE_PARENT_OVERRIDE}")',
    '    $util.qr($parentOverride.put("parentId", $record.parentId))',
    f'  #elseif($record.TYPE == "{keys.TYPE_SUPPLEMENTAL_DATA}" && $recordWebsiteId == "{keys.ALL_WEBSITES}")',
    "    #set($allWebsites = $util.map.copyAndRemoveAllKeys($record, $bookkeeping))",
    f'  #elseif($record.TYPE == "{keys.TYPE_SUPPLEMENTAL_DATA}" && $recordWebsiteId == $ctx.stash.suppliedWebsiteId)',
    "    #set($thisWebsite = $util.map.copyAndRemoveAllKeys($record, $bookkeeping))",
    "  #end",
    "#end",
    "## Later layers win: website specific data overrides data for all websites",
    "#set($results = {})",
    "#if(!$itemRecord.isEmpty())",
    "  #foreach($layer in [$itemRecord, $parentOverride, $allWebsites, $thisWebsite])",
    "    $util.qr($results.putAll($layer))",
    "  #end",
    '  $util.qr($results.put("suppliedWebsiteId", $ctx.stash.suppliedWebsiteId))',
    "#end",
    vtl.stash_put("itemRecord", "$results"),
    "$util.toJson($results)",
)


def expand_subject_terms_request(table_name: str) -> str:
    """BatchGetItem of the subject term record of every distinct subject uri."""
    return vtl.template(
        "#set($itemRecord = $util.defaultIfNull($ctx.stash.itemRecord, {}))",
        "#set($subjects = $util.defaultIfNull($itemRecord.subjects, []))",
        "#set($keysToFind = [])",
        "#set($uriList = [])",
        "#foreach($subject in $subjects)",
        '  #set($uri = $util.str.toUpper($util.defaultIfNullOrBlank($subject.uri, "")))',
        '  #if($uri != "" && !$uriList.contains($uri))',
        "    $util.qr($uriList.add($uri))",
        "    #set($termKey = {})",
        f'    $util.qr($termKey.put("PK", $util.dynamodb.toString("{keys.SUBJECTTERM}")))',
        f'    $util.qr($termKey.put("SK", $util.dynamodb.toString("{keys.URI}{keys.KEY_SEPARATOR}$uri")))',
        "    $util.qr($keysToFind.add($termKey))",
        "  #end",
        "#end",
        "#if($keysToFind.isEmpty())",
        "  #set($termKey = {})",
        f'  $util.qr($termKey.put("PK", $util.dynamodb.toString("{PLACEHOLDER_PK}")))',
        f'  $util.qr($termKey.put("SK", $util.dynamodb.toString("{PLACEHOLDER_SK}")))',
        "  $util.qr($keysToFind.add($termKey))",
        "#end",
        vtl.stash_put("subjectsBefore", "$subjects"),
        vtl.batch_get_item(table_name, "keysToFind"),
    )


def expand_subject_terms_response(table_name: str) -> str:
    """Replace each subject with its stored term, keeping subjects that have none."""
    return vtl.template(
        vtl.RAISE_ON_ERROR,
        f"#set($bookkeeping = {vtl.quote_list(vtl.BOOKKEEPING_ATTRIBUTES)})",
        "#set($itemRecord = $util.defaultIfNull($ctx.stash.itemRecord, {}))",
        "#set($terms = {})",
        f"#foreach($term in $util.defaultIfNull($ctx.result.data.get({vtl.quote(table_name)}), []))",
        "  #if(!$util.isNull($term))",
        '    #set($termUri = $util.str.toUpper($util.defaultIfNullOrBlank($term.uri, "")))',
        "    $util.qr($terms.put($termUri, $util.map.copyAndRemoveAllKeys($term, $bookkeeping)))",
        "  #end",
        "#end",
        "#set($subjectsAfter = [])",
        "#foreach($subject in $ctx.stash.subjectsBefore)",
        '  #set($uri = $util.str.toUpper($util.defaultIfNullOrBlank($subject.uri, "")))',
        '  #if($uri != "" && $terms.containsKey($uri))',
        "    $util.qr($subjectsAfter.add($terms.get($uri)))",
        "  #else",
        "    $util.qr($subjectsAfter.add($subject))",
        "  #end",
        "#end",
        "#if($itemRecord.isEmpty())",
        "null",
        "#else",
        "  #if(!$util.isNull($itemRecord.subjects))",
        '    $util.qr($itemRecord.put("subjects", $subjectsAfter))',
        "  #end",
        "$util.toJson($itemRecord)",
        "#end",
    )


def create_item_functions(
    scope: Construct,
    api: appsync.GraphqlApi,
    datasources: dict[str, Any],
    website_metadata_table: dynamodb.ITable,
) -> dict[str, appsync.AppsyncFunction]:
    """
    Create AppSync functions for item retrieval.

    Args:
        scope: CDK construct scope
        api: The AppSync GraphQL API
        datasources: Dictionary of datasource name to data source
        website_metadata_table: Table read by BatchGetItem, which addresses tables by name

    Returns:
        Dictionary of function name to AppSync function
    """
    functions: dict[str, appsync.AppsyncFunction] = {}
    table_name = website_metadata_table.table_name

    functions["get_merged_item_record"] = appsync.AppsyncFunction(
        scope,
        "GetMergedItemRecordFunction",
        name="getMergedItemRecordFunction",
        api=api,
        data_source=datasources[WEBSITE_METADATA],
        request_mapping_template=appsync.MappingTemplate.from_string(MERGED_ITEM_REQUEST),
        response_mapping_template=appsync.MappingTemplate.from_string(MERGED_ITEM_RESPONSE),
    )

    functions["expand_subject_terms"] = appsync.AppsyncFunction(
        scope,
        "ExpandSubjectTermsFunction",
        name="expandSubjectTermsFunction",
        api=api,
        data_source=datasources[WEBSITE_METADATA],
        request_mapping_template=appsync.MappingTemplate.from_string(expand_subject_terms_request(table_name)),
        response_mapping_template=appsync.MappingTemplate.from_string(expand_subject_terms_response(table_name)),
    )

    return functions
