"""
Deployment pipelines for the Marble service stacks.

- pipeline_foundation_stack.py: artifact bucket shared by the pipelines
- namespaced_policy.py: deploy permissions scoped to target stacks
- cdk_pipeline_deploy.py: CodeBuild project running ``cdk deploy``
- stages.py, notifications.py: source, approval and notification wiring
- static_host_pipeline.py, maintain_metadata_pipeline.py: the pipeline stacks
"""

from typing import Any

import aws_cdk as cdk

from ..context_env import ContextEnv
from ..context_helpers import get_context_bool, get_context_by_namespace, get_required_context, pick_context
from ..stacks import SITE_INSTANCES, Stacks
from .maintain_metadata_pipeline import MaintainMetadataPipelineStack
from .pipeline_foundation_stack import PipelineFoundationStack
from .static_host_pipeline import StaticHostPipelineStack

STATIC_HOST_PIPELINE_OPTIONS = (
    "app_repo_owner",
    "app_repo_name",
    "app_source_branch",
    "build_output_dir",
    "build_command",
    "hostname_prefix",
)


def instantiate_pipeline_stacks(
    app: cdk.App,
    namespace: str,
    context_env: ContextEnv,
    test_stacks: Stacks,
    prod_stacks: Stacks,
) -> dict[str, cdk.Stack]:
    """
    Create the pipeline foundation and one pipeline per deployable service.

    Args:
        app: The CDK app
        namespace: Namespace shared by the pipelines (test and prod stacks add -test / -prod)
        context_env: Environment the pipelines run in
        test_stacks: Service stacks the pipelines deploy first
        prod_stacks: Service stacks deployed after approval

    Returns:
        Dictionary of pipeline stacks by name
    """
    node = app.node
    pipeline_foundation_stack = PipelineFoundationStack(
        app,
        f"{namespace}-deployment-foundation",
        env=context_env.env,
    )

    common_props: dict[str, Any] = {
        "pipeline_foundation_stack": pipeline_foundation_stack,
        "namespace": namespace,
        "env": context_env.env,
        "context_env_name": context_env.name,
        "slack_notify_stack_name": context_env.slack_notify_stack_name,
        "notification_receivers": context_env.notification_receivers,
        "owner": get_required_context(node, "owner"),
        "contact": get_required_context(node, "contact"),
        "oauth_token_path": get_required_context(node, "oauthTokenPath"),
        "infra_repo_owner": get_required_context(node, "infraRepoOwner"),
        "infra_repo_name": get_required_context(node, "infraRepoName"),
        "infra_source_branch": get_required_context(node, "infraSourceBranch"),
        "create_github_webhooks": get_context_bool(node, "createGithubWebhooks"),
        "description": f"{get_required_context(node, 'projectName')}: {get_required_context(node, 'description')}",
    }

    stacks: dict[str, cdk.Stack] = {"pipeline_foundation": pipeline_foundation_stack}

    static_host_context = get_context_by_namespace(node, "staticHost")
    for instance_name in SITE_INSTANCES:
        instance_context = {**static_host_context, **get_context_by_namespace(node, instance_name)}
        stacks[instance_name] = StaticHostPipelineStack(
            app,
            f"{namespace}-{instance_name}-deployment",
            instance_name=instance_name,
            test_stack_name=test_stacks.static_host_stacks[instance_name].stack_name,
            prod_stack_name=prod_stacks.static_host_stacks[instance_name].stack_name,
            **common_props,
            **pick_context(instance_context, STATIC_HOST_PIPELINE_OPTIONS),
        )

    stacks["maintain_metadata"] = MaintainMetadataPipelineStack(
        app,
        f"{namespace}-maintain-metadata-deployment",
        test_stack_names=(test_stacks.metadata_store_stack.stack_name, test_stacks.maintain_metadata_stack.stack_name),
        prod_stack_names=(prod_stacks.metadata_store_stack.stack_name, prod_stacks.maintain_metadata_stack.stack_name),
        **common_props,
    )

    return stacks


__all__ = ["instantiate_pipeline_stacks"]
