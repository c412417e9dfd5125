"""Instantiates the service stacks of one namespace."""

from dataclasses import dataclass
from typing import Any

import aws_cdk as cdk

from .context_env import ContextEnv
from .context_helpers import get_context_by_namespace, get_required_context, pick_context
from .foundation_stack import FoundationStack
from .maintain_metadata_stack import MaintainMetadataStack
from .metadata_store_stack import MetadataStoreStack
from .static_host_stack import StaticHostStack

# Static sites built from the staticHost context plus their own namespace
SITE_INSTANCES = ("website", "redbox")

STATIC_HOST_OPTIONS = ("hostname_prefix", "certificate_arn_path", "domain_name_override")


@dataclass
class Stacks:
    """Service stacks deployed together under one namespace."""

    foundation_stack: FoundationStack
    metadata_store_stack: MetadataStoreStack
    maintain_metadata_stack: MaintainMetadataStack
    static_host_stacks: dict[str, StaticHostStack]


def instantiate_service_stacks(app: cdk.App, namespace: str, context_env: ContextEnv) -> Stacks:
    """
    Create the foundation, metadata store, GraphQL API and static host stacks.

    Stack names are ``<namespace>-<service>``, e.g. marble-test-website.
    """
    node = app.node
    tags = {
        "Project": get_required_context(node, "projectName"),
        "Owner": get_required_context(node, "owner"),
        "Contact": get_required_context(node, "contact"),
    }

    def common(stack_name: str) -> dict[str, Any]:
        return {"stack_name": stack_name, "env": context_env.env, "tags": tags}

    foundation_stack = FoundationStack(
        app,
        f"{namespace}-foundation",
        domain_name=context_env.domain_name,
        hosted_zone_id=context_env.hosted_zone_id,
        create_dns=context_env.create_dns,
        **common(f"{namespace}-foundation"),
    )

    metadata_store_stack = MetadataStoreStack(
        app,
        f"{namespace}-metadata-store",
        namespace=namespace,
        env_name=context_env.name,
        **common(f"{namespace}-metadata-store"),
    )

    maintain_metadata_stack = MaintainMetadataStack(
        app,
        f"{namespace}-maintain-metadata",
        foundation_stack=foundation_stack,
        website_metadata_table=metadata_store_stack.website_metadata_table,
        open_id_connect_provider=get_required_context(node, "maintainMetadata:openIdConnectProvider"),
        **common(f"{namespace}-maintain-metadata"),
    )

    static_host_context = get_context_by_namespace(node, "staticHost")
    static_host_stacks: dict[str, StaticHostStack] = {}
    for instance_name in SITE_INSTANCES:
        instance_context = {**static_host_context, **get_context_by_namespace(node, instance_name)}
        static_host_stacks[instance_name] = StaticHostStack(
            app,
            f"{namespace}-{instance_name}",
            context_env_name=context_env.name,
            foundation_stack=foundation_stack,
            namespace=namespace,
            create_dns=context_env.create_dns,
            **pick_context(instance_context, STATIC_HOST_OPTIONS),
            **common(f"{namespace}-{instance_name}"),
        )

    return Stacks(
        foundation_stack=foundation_stack,
        metadata_store_stack=metadata_store_stack,
        maintain_metadata_stack=maintain_metadata_stack,
        static_host_stacks=static_host_stacks,
    )
