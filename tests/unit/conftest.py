"""
Test fixtures for Lambda function tests.

Provides fake credentials and mocked AppSync / SSM resources.
"""

import os
from typing import Any, Dict, Generator

import boto3
import pytest
from moto import mock_aws

API_ID_KEY_PATH = "/all/stacks/marble-test-maintain-metadata/graphql-api-id"
API_KEY_KEY_PATH = "/all/stacks/marble-test-maintain-metadata/graphql-api-key"


@pytest.fixture
def aws_credentials() -> None:
    """Set fake AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def rotation_env(monkeypatch: pytest.MonkeyPatch) -> Dict[str, str]:
    """Environment the rotation Lambda is deployed with."""
    env = {
        "GRAPHQL_API_ID_KEY_PATH": API_ID_KEY_PATH,
        "GRAPHQL_API_KEY_KEY_PATH": API_KEY_KEY_PATH,
        "DAYS_FOR_KEY_TO_LAST": "7",
    }
    for name, value in env.items():
        monkeypatch.setenv(name, value)
    return env


@pytest.fixture
def graphql_api(aws_credentials: None, rotation_env: Dict[str, str]) -> Generator[Dict[str, Any], None, None]:
    """Mock GraphQL API whose id is published in SSM, as the maintain-metadata stack does."""
    with mock_aws():
        appsync = boto3.client("appsync", region_name="us-east-1")
        ssm = boto3.client("ssm", region_name="us-east-1")

        api = appsync.create_graphql_api(name="marble-test-maintain-metadata-api", authenticationType="API_KEY")[
            "graphqlApi"
        ]
        ssm.put_parameter(Name=API_ID_KEY_PATH, Value=api["apiId"], Type="String")

        yield {"api_id": api["apiId"], "appsync": appsync, "ssm": ssm}


@pytest.fixture
def scheduled_event() -> Dict[str, Any]:
    """EventBridge scheduled event delivered by the RotateAPIKeysRule."""
    return {
        "version": "0",
        "id": "53dc4d37-cffa-4f76-80c9-8b7d4a4d2eaa",
        "detail-type": "Scheduled Event",
        "source": "aws.events",
        "account": "123456789012",
        "time": "2024-01-01T00:00:00Z",
        "region": "us-east-1",
        "resources": ["arn:aws:events:us-east-1:123456789012:rule/RotateAPIKeysRule"],
        "detail": {},
    }
