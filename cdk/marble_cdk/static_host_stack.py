"""Static host stack: S3 + CloudFront hosting for one Marble website."""

from typing import Any, Optional

from aws_cdk import CfnOutput, Stack
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_s3 as s3
from aws_cdk import aws_ssm as ssm
from constructs import Construct

from .cloudfront_site import create_cloudfront_distribution, create_site_cname
from .foundation_stack import FoundationStack
from .helpers import ssm_path
from .iam_roles import create_edge_lambda_role
from .lambdas import create_spa_redirection_lambda
from .s3_buckets import create_site_bucket


class StaticHostStack(Stack):
    """A single page app served from S3 through CloudFront."""

    # The S3 bucket that will hold website contents
    bucket: s3.Bucket
    cloudfront: cloudfront.Distribution
    # Fully qualified site hostname
    hostname: str
    spa_redirection_lambda: lambda_.Function

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        context_env_name: str,
        foundation_stack: FoundationStack,
        namespace: str,
        hostname_prefix: Optional[str] = None,
        create_dns: bool = False,
        certificate_arn_path: Optional[str] = None,
        domain_name_override: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.namespace = namespace

        self.spa_redirection_lambda = create_spa_redirection_lambda(self, create_edge_lambda_role(self))

        self.hostname = f"{hostname_prefix or self.stack_name}.{self._domain_name(foundation_stack, domain_name_override)}"
        print(f"Creating static host: {self.hostname}")

        self.bucket = create_site_bucket(self, self.hostname, foundation_stack.log_bucket)

        website_certificate: acm.ICertificate
        if certificate_arn_path:
            certificate_arn = ssm.StringParameter.value_for_string_parameter(self, certificate_arn_path)
            website_certificate = acm.Certificate.from_certificate_arn(self, "WebsiteCertificate", certificate_arn)
        else:
            website_certificate = foundation_stack.certificate

        site = create_cloudfront_distribution(
            self,
            stack_name=self.stack_name,
            hostname=self.hostname,
            certificate=website_certificate,
            site_bucket=self.bucket,
            log_bucket=foundation_stack.log_bucket,
            redirection_lambda=self.spa_redirection_lambda,
            context_env_name=context_env_name,
        )
        self.cloudfront = site["distribution"]

        if create_dns:
            create_site_cname(self, self.hostname, self.cloudfront, foundation_stack.hosted_zone)

        ssm.StringParameter(
            self,
            "BucketParameter",
            parameter_name=ssm_path(self.stack_name, "site-bucket-name"),
            description="Bucket where the stack website deploys to.",
            string_value=self.bucket.bucket_name,
        )
        ssm.StringParameter(
            self,
            "DistributionParameter",
            parameter_name=ssm_path(self.stack_name, "distribution-id"),
            description="ID of the CloudFront distribution.",
            string_value=self.cloudfront.distribution_id,
        )

        CfnOutput(
            self,
            "DistributionDomainName",
            value=self.cloudfront.distribution_domain_name,
            description="The cloudfront distribution domain name.",
        )

    @staticmethod
    def _domain_name(foundation_stack: FoundationStack, domain_name_override: Optional[str]) -> str:
        if domain_name_override:
            return domain_name_override
        if foundation_stack.hosted_zone is not None:
            return foundation_stack.hosted_zone.zone_name
        return foundation_stack.domain_name
