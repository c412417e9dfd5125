"""
S3 Bucket creation for the Marble stacks.

Creates:
- Log bucket for S3 server access logs and CloudFront logs
- Site bucket for static website content
- Artifact bucket for deployment pipelines
"""

from typing import Optional

from aws_cdk import Duration, RemovalPolicy
from aws_cdk import aws_s3 as s3
from constructs import Construct

LOG_RETENTION_DAYS = 90
ARTIFACT_RETENTION_DAYS = 30


def create_log_bucket(stack: Construct) -> s3.Bucket:
    """Create the shared log bucket.

    CloudFront standard logging writes through ACLs, so the bucket keeps
    ACLs enabled with BUCKET_OWNER_PREFERRED ownership.
    """
    return s3.Bucket(
        stack,
        "LogBucket",
        encryption=s3.BucketEncryption.S3_MANAGED,
        block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
        object_ownership=s3.ObjectOwnership.BUCKET_OWNER_PREFERRED,
        access_control=s3.BucketAccessControl.LOG_DELIVERY_WRITE,
        lifecycle_rules=[s3.LifecycleRule(enabled=True, expiration=Duration.days(LOG_RETENTION_DAYS))],
        removal_policy=RemovalPolicy.RETAIN,
    )


def create_site_bucket(
    stack: Construct,
    hostname: str,
    log_bucket: Optional[s3.IBucket] = None,
) -> s3.Bucket:
    """Create the bucket holding a static site's content.

    Args:
        stack: CDK Construct (usually the Stack instance)
        hostname: Site hostname, used as the access log prefix
        log_bucket: Bucket receiving server access logs

    Returns:
        The site bucket
    """
    return s3.Bucket(
        stack,
        "SiteBucket",
        encryption=s3.BucketEncryption.S3_MANAGED,
        block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
        server_access_logs_bucket=log_bucket,
        server_access_logs_prefix=f"s3/{hostname}/" if log_bucket else None,
        removal_policy=RemovalPolicy.RETAIN,
    )


def create_artifact_bucket(stack: Construct) -> s3.Bucket:
    """Create the bucket CodePipeline stores stage artifacts in."""
    return s3.Bucket(
        stack,
        "ArtifactBucket",
        encryption=s3.BucketEncryption.S3_MANAGED,
        block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
        enforce_ssl=True,
        lifecycle_rules=[s3.LifecycleRule(enabled=True, expiration=Duration.days(ARTIFACT_RETENTION_DAYS))],
        removal_policy=RemovalPolicy.RETAIN,
    )
