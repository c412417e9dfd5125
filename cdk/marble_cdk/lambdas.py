"""Lambda function definitions for the Marble stacks.

This module creates:
- API key rotation Lambda and its daily schedule (maintain-metadata stack)
- SPA redirection Lambda@Edge function (static host stacks)
"""

import os

from aws_cdk import Duration
from aws_cdk import aws_events as events
from aws_cdk import aws_events_targets as events_targets
from aws_cdk import aws_iam as iam
from aws_cdk import aws_lambda as lambda_
from constructs import Construct

# Use only the src directory for Lambda code (not the entire repo)
LAMBDA_CODE_PATH = os.path.join(os.path.dirname(__file__), "..", "..", "src")


def lambda_code() -> lambda_.Code:
    return lambda_.Code.from_asset(
        LAMBDA_CODE_PATH,
        exclude=[
            "__pycache__",
            "*.pyc",
            ".pytest_cache",
        ],
    )


def create_rotate_api_keys_lambda(
    scope: Construct,
    role: iam.IRole,
    graphql_api_id_key_path: str,
    graphql_api_key_key_path: str,
    days_for_key_to_last: int,
) -> lambda_.Function:
    """Create the API key rotation Lambda and the rule running it every night.

    Args:
        scope: CDK construct scope
        role: Execution role from iam_roles.create_rotate_api_keys_role
        graphql_api_id_key_path: SSM path of the API id
        graphql_api_key_key_path: SSM path the new key id is written to
        days_for_key_to_last: Lifetime of each generated key

    Returns:
        The rotation Lambda function
    """
    rotate_api_keys_fn = lambda_.Function(
        scope,
        "RotateApiKeysLambdaFunction",
        description="Rotates API Keys for AppSync - Maintain Metadata",
        runtime=lambda_.Runtime.PYTHON_3_13,
        handler="handlers.rotate_api_keys.run",
        code=lambda_code(),
        timeout=Duration.seconds(90),
        memory_size=128,
        role=role,
        environment={
            "GRAPHQL_API_ID_KEY_PATH": graphql_api_id_key_path,
            "GRAPHQL_API_KEY_KEY_PATH": graphql_api_key_key_path,
            "DAYS_FOR_KEY_TO_LAST": str(days_for_key_to_last),
            "LOG_LEVEL": "INFO",
        },
    )

    events.Rule(
        scope,
        "RotateAPIKeysRule",
        description="Start lambda to rotate API keys.",
        schedule=events.Schedule.cron(minute="0", hour="0"),
        targets=[events_targets.LambdaFunction(rotate_api_keys_fn)],
    )

    return rotate_api_keys_fn


def create_spa_redirection_lambda(scope: Construct, role: iam.IRole) -> lambda_.Function:
    """Create the origin-request function rewriting SPA routes to index.html.

    Lambda@Edge functions must live in us-east-1 and cannot use environment
    variables.
    """
    return lambda_.Function(
        scope,
        "SPARedirectionLambda",
        description="Basic rewrite rule to send directory requests to appropriate locations in the SPA.",
        runtime=lambda_.Runtime.PYTHON_3_13,
        handler="handlers.spa_redirection.handler",
        code=lambda_code(),
        timeout=Duration.seconds(5),
        memory_size=128,
        role=role,
    )
