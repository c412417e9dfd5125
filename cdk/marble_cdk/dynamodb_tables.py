from typing import Callable

from aws_cdk import RemovalPolicy
from aws_cdk import aws_dynamodb as ddb
from constructs import Construct

# Generic key names: record types are encoded in prefixed values (ITEM#<id>, WEBSITE#<id>, ...)
PARTITION_KEY = "PK"
SORT_KEY = "SK"

GSI1_NAME = "GSI1"
GSI2_NAME = "GSI2"


def create_website_metadata_table(
    stack: Construct,
    rn: Callable[[str], str],
    name: str = "marble-website-metadata",
) -> ddb.Table:
    """Create the single website metadata table.

    Every record type shares this table. The primary key and the two generic
    indexes (GSI1, GSI2) carry string-prefixed composite keys, so access
    patterns are expressed entirely in key values.

    Args:
        stack: CDK Construct (usually the Stack instance)
        rn: helper function to create resource names (rn(name: str) -> str)
        name: Base table name, before the region and environment suffix

    Returns:
        The website metadata Table construct
    """
    table = ddb.Table(
        stack,
        "WebsiteMetadataTable",
        table_name=rn(name),
        partition_key=ddb.Attribute(name=PARTITION_KEY, type=ddb.AttributeType.STRING),
        sort_key=ddb.Attribute(name=SORT_KEY, type=ddb.AttributeType.STRING),
        billing_mode=ddb.BillingMode.PAY_PER_REQUEST,
        point_in_time_recovery_specification=ddb.PointInTimeRecoverySpecification(point_in_time_recovery_enabled=True),
        removal_policy=RemovalPolicy.RETAIN,
    )
    for index_name in (GSI1_NAME, GSI2_NAME):
        table.add_global_secondary_index(
            index_name=index_name,
            partition_key=ddb.Attribute(name=f"{index_name}PK", type=ddb.AttributeType.STRING),
            sort_key=ddb.Attribute(name=f"{index_name}SK", type=ddb.AttributeType.STRING),
            projection_type=ddb.ProjectionType.ALL,
        )

    return table
