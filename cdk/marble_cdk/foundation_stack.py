"""Foundation stack: resources shared by every Marble service stack."""

from typing import Any, Optional

from aws_cdk import CfnOutput, Stack
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_route53 as route53
from aws_cdk import aws_s3 as s3
from aws_cdk import aws_ssm as ssm
from constructs import Construct

from .dns_certificates import create_dns_and_certificates
from .helpers import ssm_path
from .s3_buckets import create_log_bucket


class FoundationStack(Stack):
    """Log bucket, hosted zone and wildcard certificate for one environment."""

    log_bucket: s3.Bucket
    hosted_zone: Optional[route53.IHostedZone]
    certificate: acm.ICertificate

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        domain_name: str,
        hosted_zone_id: Optional[str] = None,
        create_dns: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.domain_name = domain_name

        self.log_bucket = create_log_bucket(self)

        dns = create_dns_and_certificates(
            self,
            domain_name=domain_name,
            hosted_zone_id=hosted_zone_id,
            create_dns=create_dns,
        )
        self.hosted_zone = dns["hosted_zone"]
        self.certificate = dns["certificate"]

        ssm.StringParameter(
            self,
            "SSMLogBucketName",
            parameter_name=ssm_path(self.stack_name, "log-bucket-name"),
            string_value=self.log_bucket.bucket_name,
            description="Bucket receiving S3 access logs and CloudFront logs",
        )
        ssm.StringParameter(
            self,
            "SSMCertificateArn",
            parameter_name=ssm_path(self.stack_name, "certificate-arn"),
            string_value=self.certificate.certificate_arn,
            description=f"Wildcard certificate for {domain_name}",
        )
        if self.hosted_zone is not None:
            ssm.StringParameter(
                self,
                "SSMHostedZoneId",
                parameter_name=ssm_path(self.stack_name, "hosted-zone-id"),
                string_value=self.hosted_zone.hosted_zone_id,
                description=f"Route53 zone for {domain_name}",
            )

        CfnOutput(self, "LogBucketName", value=self.log_bucket.bucket_name)
