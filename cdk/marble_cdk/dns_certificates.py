"""DNS and ACM certificate configuration shared by the Marble stacks.

This module creates and configures:
- Route53 hosted zone (imported or created)
- Wildcard ACM certificate for the environment's domain
"""

from typing import Any, Optional

from aws_cdk import RemovalPolicy
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_route53 as route53
from constructs import Construct


def create_dns_and_certificates(
    scope: Construct,
    domain_name: str,
    hosted_zone_id: Optional[str] = None,
    create_dns: bool = False,
) -> dict[str, Any]:
    """Create Route53 and ACM certificate resources.

    An existing zone is imported when hosted_zone_id is given. Otherwise a
    public zone is created only when create_dns is set, and the certificate
    falls back to manual DNS validation.

    Args:
        scope: CDK construct scope
        domain_name: Environment domain (e.g., library.nd.edu)
        hosted_zone_id: Route53 zone id of an existing zone for domain_name
        create_dns: Whether this deployment manages DNS records

    Returns:
        Dictionary containing hosted_zone (or None) and certificate
    """
    hosted_zone: Optional[route53.IHostedZone] = None
    if hosted_zone_id:
        hosted_zone = route53.HostedZone.from_hosted_zone_attributes(
            scope,
            "HostedZone",
            hosted_zone_id=hosted_zone_id,
            zone_name=domain_name,
        )
    elif create_dns:
        print(f"Creating hosted zone: {domain_name}")
        hosted_zone = route53.PublicHostedZone(scope, "HostedZone", zone_name=domain_name)

    print(f"Creating wildcard certificate: *.{domain_name}")
    certificate = acm.Certificate(
        scope,
        "Certificate",
        domain_name=f"*.{domain_name}",
        validation=acm.CertificateValidation.from_dns(hosted_zone),
    )
    certificate.apply_removal_policy(RemovalPolicy.RETAIN)

    return {
        "hosted_zone": hosted_zone,
        "certificate": certificate,
    }
