"""
Shared helper utilities for CDK stack construction.

This module provides:
- Region abbreviation mapping for resource naming
- Resource naming function (rn)
- SSM parameter path construction for stack outputs
"""

import os
from typing import Callable, Optional

from aws_cdk import Stack, Token

# Region abbreviation mapping for resource naming
# Pattern: {name}-{region_abbrev}-{env} e.g. marble-website-metadata-ue1-dev
REGION_ABBREVIATIONS: dict[str, str] = {
    "us-east-1": "ue1",
    "us-east-2": "ue2",
    "us-west-1": "uw1",
    "us-west-2": "uw2",
    "eu-west-1": "ew1",
    "eu-west-2": "ew2",
    "eu-central-1": "ec1",
    "ca-central-1": "cc1",
}

# Root of every SSM parameter a stack publishes for other stacks and pipelines
SSM_STACK_ROOT = "/all/stacks"


def get_region() -> str:
    """Get the AWS region from environment variables or default to us-east-1."""
    return os.getenv("AWS_REGION") or os.getenv("CDK_DEFAULT_REGION") or "us-east-1"


def get_region_abbrev(region: Optional[str] = None) -> str:
    """Get the region abbreviation for resource naming.

    Args:
        region: AWS region code. If None, reads from environment.

    Returns:
        Region abbreviation (e.g., 'ue1' for 'us-east-1')
    """
    if region is None:
        region = get_region()
    return REGION_ABBREVIATIONS.get(region, region[:3])


def make_resource_namer(region_abbrev: str, env_name: str) -> Callable[[str], str]:
    """Create a resource naming function.

    Args:
        region_abbrev: Region abbreviation (e.g., 'ue1')
        env_name: Environment name (e.g., 'dev', 'prod')

    Returns:
        A function that takes a base name and returns a fully qualified name
    """

    def rn(name: str, abbrev: str = region_abbrev, env: str = env_name) -> str:
        """Generate resource name with region and environment suffix."""
        return f"{name}-{abbrev}-{env}"

    return rn


def ssm_base_path(stack_name: str) -> str:
    """Base SSM path under which a stack publishes its parameters."""
    return f"{SSM_STACK_ROOT}/{stack_name}"


def ssm_path(stack_name: str, name: str) -> str:
    """SSM parameter path for one published value, e.g. /all/stacks/marble-website/site-bucket-name."""
    return f"{ssm_base_path(stack_name)}/{name}"


def stack_region_abbrev(stack: Stack) -> str:
    """Region abbreviation for a stack, falling back to the environment for region-agnostic stacks."""
    if Token.is_unresolved(stack.region):
        return get_region_abbrev()
    return get_region_abbrev(stack.region)
