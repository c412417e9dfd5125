"""Stack owning the website metadata table."""

from typing import Any

from aws_cdk import CfnOutput, Stack
from aws_cdk import aws_dynamodb as ddb
from aws_cdk import aws_ssm as ssm
from constructs import Construct

from .dynamodb_tables import create_website_metadata_table
from .helpers import make_resource_namer, ssm_path, stack_region_abbrev


class MetadataStoreStack(Stack):
    """Holds the single-table store the GraphQL API reads and writes."""

    website_metadata_table: ddb.Table

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        namespace: str,
        env_name: str,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        rn = make_resource_namer(stack_region_abbrev(self), env_name)
        self.website_metadata_table = create_website_metadata_table(self, rn, name=f"{namespace}-website-metadata")

        ssm.StringParameter(
            self,
            "SSMWebsiteMetadataTableName",
            parameter_name=ssm_path(self.stack_name, "website-metadata-table-name"),
            string_value=self.website_metadata_table.table_name,
            description="Website metadata DynamoDB table",
        )
        CfnOutput(self, "WebsiteMetadataTableName", value=self.website_metadata_table.table_name)
