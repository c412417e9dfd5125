"""AppSync function writing the supplemental data record of an item for one website (or all of them)."""

from typing import Any

from aws_cdk import aws_appsync as appsync
from constructs import Construct

from .. import keys
from .. import vtl
from ..datasources import WEBSITE_METADATA

UPDATE_SUPPLEMENTAL_DATA_REQUEST = vtl.template(
    "#set($args = $ctx.stash.supplementalDataArgs)",
    '#set($itemIdAsGiven = $util.defaultIfNullOrBlank($args.itemId, ""))',
    vtl.normalize_id("id", "$args.itemId"),
    '#set($websiteIdAsGiven = $util.defaultIfNullOrBlank($args.websiteId, "All"))',
    vtl.normalize_id("websiteId", "$args.websiteId", '"All"'),
    f'$util.qr($args.put("TYPE", "{keys.TYPE_SUPPLEMENTAL_DATA}"))',
    f'$util.qr($args.put("dateModifiedInDynamo", {vtl.NOW}))',
    f'$util.qr($args.put("GSI1PK", "{keys.SUPPLEMENTALDATA}"))',
    f'$util.qr($args.put("GSI1SK", "{keys.key(keys.ITEM, "id")}"))',
    '$util.qr($args.put("id", $itemIdAsGiven))',
    '$util.qr($args.put("websiteId", $websiteIdAsGiven))',
    vtl.partial_update_request(
        vtl.quote(keys.key(keys.ITEM, "id")),
        vtl.quote(keys.key(keys.SUPPLEMENTALDATA, "websiteId")),
        "args",
    ),
)

UPDATE_SUPPLEMENTAL_DATA_RESPONSE = vtl.template(vtl.RAISE_ON_ERROR, "$util.toJson($ctx.result)")


def create_supplemental_data_functions(
    scope: Construct,
    api: appsync.GraphqlApi,
    datasources: dict[str, Any],
) -> dict[str, appsync.AppsyncFunction]:
    """Create the AppSync function shared by the save*ForWebsite mutations."""
    return {
        "update_supplemental_data_record": appsync.AppsyncFunction(
            scope,
            "UpdateSupplementalDataRecordFunction",
            name="updateSupplementalDataRecordFunction",
            api=api,
            data_source=datasources[WEBSITE_METADATA],
            request_mapping_template=appsync.MappingTemplate.from_string(UPDATE_SUPPLEMENTAL_DATA_REQUEST),
            response_mapping_template=appsync.MappingTemplate.from_string(UPDATE_SUPPLEMENTAL_DATA_RESPONSE),
        ),
    }
