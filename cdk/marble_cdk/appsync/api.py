"""AppSync API creation."""

from pathlib import Path

from aws_cdk import CfnOutput, Duration, Expiration
from aws_cdk import aws_appsync as appsync
from constructs import Construct

SCHEMA_PATH = Path(__file__).parent.parent.parent / "schema" / "schema.graphql"


def create_appsync_api(
    scope: Construct,
    api_name: str,
    open_id_connect_provider: str,
    days_for_key_to_last: int,
) -> appsync.GraphqlApi:
    """
    Create the website metadata GraphQL API.

    Signed-in maintainers authenticate through the OIDC provider. The public
    website reads through an API key that the rotation Lambda replaces
    before it expires.

    Args:
        scope: CDK construct scope
        api_name: Name of the GraphQL API
        open_id_connect_provider: OIDC issuer URL
        days_for_key_to_last: Lifetime of the initial API key

    Returns:
        The created GraphQL API
    """
    print(f"Creating AppSync API: {api_name}")

    api = appsync.GraphqlApi(
        scope,
        "Api",
        name=api_name,
        definition=appsync.Definition.from_file(str(SCHEMA_PATH)),
        authorization_config=appsync.AuthorizationConfig(
            default_authorization=appsync.AuthorizationMode(
                authorization_type=appsync.AuthorizationType.OIDC,
                open_id_connect_config=appsync.OpenIdConnectConfig(oidc_provider=open_id_connect_provider),
            ),
            additional_authorization_modes=[
                appsync.AuthorizationMode(
                    authorization_type=appsync.AuthorizationType.API_KEY,
                    api_key_config=appsync.ApiKeyConfig(
                        name="default",
                        description="Initial API key, replaced by the rotation Lambda",
                        expires=Expiration.after(Duration.days(days_for_key_to_last)),
                    ),
                ),
            ],
        ),
        xray_enabled=True,
        log_config=appsync.LogConfig(field_log_level=appsync.FieldLogLevel.ERROR),
    )

    CfnOutput(scope, "GraphqlApiUrl", value=api.graphql_url, description="Website metadata GraphQL endpoint")

    return api
