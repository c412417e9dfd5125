"""Tests for the s3_buckets module."""

import pytest
from aws_cdk import App, Stack, assertions
from aws_cdk import aws_s3 as s3

from marble_cdk.s3_buckets import (
    ARTIFACT_RETENTION_DAYS,
    LOG_RETENTION_DAYS,
    create_artifact_bucket,
    create_log_bucket,
    create_site_bucket,
)

BLOCK_ALL = {
    "BlockPublicAcls": True,
    "BlockPublicPolicy": True,
    "IgnorePublicAcls": True,
    "RestrictPublicBuckets": True,
}


@pytest.fixture
def stack():
    """Create a test stack."""
    app = App()
    return Stack(app, "TestStack")


class TestCreateLogBucket:
    """Tests for create_log_bucket function."""

    def test_returns_bucket(self, stack):
        """Should return an S3 bucket."""
        assert isinstance(create_log_bucket(stack), s3.Bucket)

    def test_log_delivery_acl(self, stack):
        """CloudFront needs ACL writes to the log bucket."""
        create_log_bucket(stack)
        template = assertions.Template.from_stack(stack)
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "AccessControl": "LogDeliveryWrite",
                "OwnershipControls": {"Rules": [{"ObjectOwnership": "BucketOwnerPreferred"}]},
                "PublicAccessBlockConfiguration": BLOCK_ALL,
            },
        )

    def test_logs_expire(self, stack):
        """Logs are expired by a lifecycle rule."""
        create_log_bucket(stack)
        template = assertions.Template.from_stack(stack)
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "LifecycleConfiguration": {
                    "Rules": [{"ExpirationInDays": LOG_RETENTION_DAYS, "Status": "Enabled"}],
                },
            },
        )

    def test_retained(self, stack):
        """The bucket survives stack deletion."""
        create_log_bucket(stack)
        template = assertions.Template.from_stack(stack)
        template.has_resource("AWS::S3::Bucket", {"DeletionPolicy": "Retain"})


class TestCreateSiteBucket:
    """Tests for create_site_bucket function."""

    def test_private_and_encrypted(self, stack):
        """Site content is only reachable through CloudFront."""
        create_site_bucket(stack, "marble.library.nd.edu")
        template = assertions.Template.from_stack(stack)
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "PublicAccessBlockConfiguration": BLOCK_ALL,
                "BucketEncryption": {
                    "ServerSideEncryptionConfiguration": [
                        {"ServerSideEncryptionByDefault": {"SSEAlgorithm": "AES256"}},
                    ],
                },
            },
        )

    def test_access_logs_prefixed_by_hostname(self, stack):
        """Access logs land under s3/<hostname>/ in the log bucket."""
        log_bucket = create_log_bucket(stack)
        create_site_bucket(stack, "marble.library.nd.edu", log_bucket)
        template = assertions.Template.from_stack(stack)
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {"LoggingConfiguration": {"LogFilePrefix": "s3/marble.library.nd.edu/"}},
        )

    def test_no_logging_without_log_bucket(self, stack):
        """Without a log bucket no logging configuration is rendered."""
        create_site_bucket(stack, "marble.library.nd.edu")
        template = assertions.Template.from_stack(stack)
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {"LoggingConfiguration": assertions.Match.absent()},
        )


class TestCreateArtifactBucket:
    """Tests for create_artifact_bucket function."""

    def test_artifacts_expire(self, stack):
        """Pipeline artifacts are expired by a lifecycle rule."""
        create_artifact_bucket(stack)
        template = assertions.Template.from_stack(stack)
        template.has_resource_properties(
            "AWS::S3::Bucket",
            {
                "LifecycleConfiguration": {
                    "Rules": [{"ExpirationInDays": ARTIFACT_RETENTION_DAYS, "Status": "Enabled"}],
                },
                "PublicAccessBlockConfiguration": BLOCK_ALL,
            },
        )

    def test_enforces_ssl(self, stack):
        """A bucket policy denies insecure transport."""
        create_artifact_bucket(stack)
        template = assertions.Template.from_stack(stack)
        template.has_resource_properties(
            "AWS::S3::BucketPolicy",
            {
                "PolicyDocument": {
                    "Statement": assertions.Match.array_with(
                        [
                            assertions.Match.object_like(
                                {
                                    "Effect": "Deny",
                                    "Condition": {"Bool": {"aws:SecureTransport": "false"}},
                                }
                            ),
                        ]
                    ),
                },
            },
        )
