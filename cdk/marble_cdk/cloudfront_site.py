"""CloudFront distribution and DNS record for a Marble static site.

This module creates and configures:
- CloudFront Origin Access Identity (OAI)
- CloudFront distribution with the SPA redirection edge function
- Optional Route53 CNAME for the site hostname
"""

from typing import TYPE_CHECKING, Any, Optional

from aws_cdk import Duration
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudfront_origins as origins
from aws_cdk import aws_route53 as route53
from constructs import Construct

if TYPE_CHECKING:
    from aws_cdk import aws_certificatemanager as acm
    from aws_cdk import aws_lambda as lambda_
    from aws_cdk import aws_s3 as s3

ERROR_PAGE_PATH = "/404.html/index.html"
ERROR_CACHING_TTL = Duration.seconds(300)
DNS_TTL = Duration.minutes(15)


def default_ttl_for(context_env_name: str) -> Duration:
    """Dev sites are never cached so every deploy shows up at once."""
    return Duration.seconds(0) if context_env_name == "dev" else Duration.days(1)


def create_cloudfront_distribution(
    scope: Construct,
    stack_name: str,
    hostname: str,
    certificate: "acm.ICertificate",
    site_bucket: "s3.IBucket",
    log_bucket: "s3.IBucket",
    redirection_lambda: "lambda_.Function",
    context_env_name: str,
) -> dict[str, Any]:
    """Create the distribution serving a static site bucket.

    Args:
        scope: CDK construct scope
        stack_name: Name of the owning stack, used in the OAI comment
        hostname: Site hostname (e.g., marble.library.nd.edu)
        certificate: Certificate covering hostname
        site_bucket: Bucket holding the site content
        log_bucket: Bucket receiving CloudFront access logs
        redirection_lambda: Origin-request edge function
        context_env_name: Deployment environment, drives the default TTL

    Returns:
        Dictionary containing origin_access_identity, cache_policy and distribution
    """
    origin_access_identity = cloudfront.OriginAccessIdentity(
        scope,
        "OriginAccessIdentity",
        comment=f"Static assets in {stack_name}",
    )
    site_bucket.grant_read(origin_access_identity)

    cache_policy = cloudfront.CachePolicy(
        scope,
        "CachePolicy",
        comment=f"Cache policy for {hostname}",
        default_ttl=default_ttl_for(context_env_name),
        min_ttl=Duration.seconds(0),
        max_ttl=Duration.days(365),
        enable_accept_encoding_gzip=True,
        enable_accept_encoding_brotli=True,
    )

    distribution = cloudfront.Distribution(
        scope,
        "Distribution",
        comment=hostname,
        domain_names=[hostname],
        certificate=certificate,
        minimum_protocol_version=cloudfront.SecurityPolicyProtocol.TLS_V1_1_2016,
        ssl_support_method=cloudfront.SSLMethod.SNI,
        default_behavior=cloudfront.BehaviorOptions(
            origin=origins.S3BucketOrigin.with_origin_access_identity(
                site_bucket,
                origin_access_identity=origin_access_identity,
            ),
            allowed_methods=cloudfront.AllowedMethods.ALLOW_GET_HEAD_OPTIONS,
            viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
            cache_policy=cache_policy,
            compress=True,
            edge_lambdas=[
                cloudfront.EdgeLambda(
                    event_type=cloudfront.LambdaEdgeEventType.ORIGIN_REQUEST,
                    function_version=redirection_lambda.current_version,
                )
            ],
        ),
        error_responses=[
            cloudfront.ErrorResponse(
                http_status=status,
                response_http_status=404,
                response_page_path=ERROR_PAGE_PATH,
                ttl=ERROR_CACHING_TTL,
            )
            for status in (403, 404)
        ],
        enable_logging=True,
        log_bucket=log_bucket,
        log_file_prefix=f"web/{hostname}",
        log_includes_cookies=True,
    )

    return {
        "origin_access_identity": origin_access_identity,
        "cache_policy": cache_policy,
        "distribution": distribution,
    }


def create_site_cname(
    scope: Construct,
    hostname: str,
    distribution: cloudfront.IDistribution,
    hosted_zone: Optional[route53.IHostedZone],
) -> route53.CnameRecord:
    """Point hostname at the distribution."""
    if hosted_zone is None:
        raise ValueError(f"Cannot create a DNS record for {hostname} without a hosted zone")
    return route53.CnameRecord(
        scope,
        "ServiceCNAME",
        record_name=hostname,
        comment=hostname,
        domain_name=distribution.distribution_domain_name,
        zone=hosted_zone,
        ttl=DNS_TTL,
    )
