"""
IAM roles for the Marble Lambda functions.

Creates:
- Execution role for the API key rotation Lambda
- Execution role for the SPA redirection Lambda@Edge function
"""

from aws_cdk import Stack
from aws_cdk import aws_appsync as appsync
from aws_cdk import aws_iam as iam
from constructs import Construct

BASIC_EXECUTION_POLICY = "service-role/AWSLambdaBasicExecutionRole"


def ssm_parameter_arn(stack: Construct, parameter_path: str) -> str:
    """ARN of an SSM parameter given its absolute path."""
    return Stack.of(stack).format_arn(
        service="ssm",
        resource="parameter",
        resource_name=parameter_path.lstrip("/"),
    )


def create_rotate_api_keys_role(
    stack: Construct,
    api: appsync.IGraphqlApi,
    graphql_api_id_key_path: str,
    graphql_api_key_key_path: str,
) -> iam.Role:
    """Create the execution role of the API key rotation Lambda.

    The role may manage the keys of this one API, read the parameter holding
    the API id and overwrite the parameter holding the current key.

    Args:
        stack: CDK Construct (usually the Stack instance)
        api: The GraphQL API whose keys are rotated
        graphql_api_id_key_path: SSM path of the API id
        graphql_api_key_key_path: SSM path the new key id is written to

    Returns:
        The rotation Lambda execution role
    """
    role = iam.Role(
        stack,
        "RotateApiKeysLambdaRole",
        assumed_by=iam.ServicePrincipal("lambda.amazonaws.com"),
        managed_policies=[iam.ManagedPolicy.from_aws_managed_policy_name(BASIC_EXECUTION_POLICY)],
    )

    role.add_to_policy(
        iam.PolicyStatement(
            actions=["appsync:CreateApiKey", "appsync:DeleteApiKey", "appsync:ListApiKeys"],
            resources=[api.arn, f"{api.arn}/apikeys*"],
        )
    )
    role.add_to_policy(
        iam.PolicyStatement(
            actions=["ssm:GetParametersByPath", "ssm:GetParameter"],
            resources=[ssm_parameter_arn(stack, graphql_api_id_key_path)],
        )
    )
    role.add_to_policy(
        iam.PolicyStatement(
            actions=["ssm:PutParameter"],
            resources=[ssm_parameter_arn(stack, graphql_api_key_key_path)],
        )
    )

    return role


def create_edge_lambda_role(stack: Construct) -> iam.Role:
    """Create a role Lambda@Edge can assume in every edge location."""
    return iam.Role(
        stack,
        "SPARedirectionLambdaRole",
        assumed_by=iam.CompositePrincipal(
            iam.ServicePrincipal("lambda.amazonaws.com"),
            iam.ServicePrincipal("edgelambda.amazonaws.com"),
        ),
        managed_policies=[iam.ManagedPolicy.from_aws_managed_policy_name(BASIC_EXECUTION_POLICY)],
    )
