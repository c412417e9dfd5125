"""Maintain-metadata stack: the website metadata GraphQL API and its key rotation."""

from typing import Any

from aws_cdk import Stack
from aws_cdk import aws_appsync as appsync
from aws_cdk import aws_dynamodb as dynamodb
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_ssm as ssm
from constructs import Construct

from .appsync import AppSyncResources, setup_appsync
from .foundation_stack import FoundationStack
from .helpers import ssm_base_path, ssm_path
from .iam_roles import create_rotate_api_keys_role
from .lambdas import create_rotate_api_keys_lambda

DAYS_FOR_KEY_TO_LAST = 7


class MaintainMetadataStack(Stack):
    """GraphQL API over the website metadata table.

    Other stacks and website builds find the API through the SSM parameters
    published here. The API key itself is written to
    ``graphql_api_key_key_path`` by the rotation Lambda, not by CloudFormation.
    """

    api: appsync.GraphqlApi
    appsync_resources: AppSyncResources
    rotate_api_keys_lambda: lambda_.Function
    graphql_api_url_key_path: str
    graphql_api_key_key_path: str
    graphql_api_id_key_path: str
    maintain_metadata_key_base: str

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        foundation_stack: FoundationStack,
        website_metadata_table: dynamodb.ITable,
        open_id_connect_provider: str,
        days_for_key_to_last: int = DAYS_FOR_KEY_TO_LAST,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.foundation_stack = foundation_stack

        self.appsync_resources = setup_appsync(
            self,
            api_name=f"{self.stack_name}-api",
            open_id_connect_provider=open_id_connect_provider,
            days_for_key_to_last=days_for_key_to_last,
            website_metadata_table=website_metadata_table,
        )
        self.api = self.appsync_resources.api

        self.maintain_metadata_key_base = ssm_base_path(self.stack_name)
        self.graphql_api_url_key_path = ssm_path(self.stack_name, "graphql-api-url")
        self.graphql_api_key_key_path = ssm_path(self.stack_name, "graphql-api-key")
        self.graphql_api_id_key_path = ssm_path(self.stack_name, "graphql-api-id")

        ssm.StringParameter(
            self,
            "SSMGraphqlApiUrl",
            parameter_name=self.graphql_api_url_key_path,
            string_value=self.api.graphql_url,
            description="AppSync GraphQL base url",
        )
        ssm.StringParameter(
            self,
            "SSMGraphqlApiId",
            parameter_name=self.graphql_api_id_key_path,
            string_value=self.api.api_id,
            description="AppSync GraphQL base id",
        )

        rotate_role = create_rotate_api_keys_role(
            self,
            api=self.api,
            graphql_api_id_key_path=self.graphql_api_id_key_path,
            graphql_api_key_key_path=self.graphql_api_key_key_path,
        )
        self.rotate_api_keys_lambda = create_rotate_api_keys_lambda(
            self,
            role=rotate_role,
            graphql_api_id_key_path=self.graphql_api_id_key_path,
            graphql_api_key_key_path=self.graphql_api_key_key_path,
            days_for_key_to_last=days_for_key_to_last,
        )
