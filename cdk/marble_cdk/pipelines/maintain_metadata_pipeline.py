"""Deployment pipeline for the metadata store and the maintain-metadata GraphQL API."""

from typing import Any, Optional

from aws_cdk import Stack
from aws_cdk import aws_codepipeline as codepipeline
from constructs import Construct

from .cdk_pipeline_deploy import CDKPipelineDeploy
from .namespaced_policy import GlobalActions, NamespacedPolicy
from .pipeline_foundation_stack import PipelineFoundationStack
from .stages import add_notifications, create_approval, describe_changes, github_source_action


class MaintainMetadataPipelineStack(Stack):
    """Source → deploy test table and API → approval → deploy prod table and API."""

    pipeline: codepipeline.Pipeline

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        pipeline_foundation_stack: PipelineFoundationStack,
        namespace: str,
        test_stack_names: tuple[str, str],
        prod_stack_names: tuple[str, str],
        context_env_name: str,
        oauth_token_path: str,
        owner: str,
        contact: str,
        infra_repo_owner: str,
        infra_repo_name: str,
        infra_source_branch: str,
        create_github_webhooks: bool = False,
        slack_notify_stack_name: Optional[str] = None,
        notification_receivers: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        """
        Args:
            test_stack_names: (metadata store stack, maintain-metadata stack) deployed first
            prod_stack_names: The same pair for production
        """
        super().__init__(scope, construct_id, **kwargs)

        infra_source_artifact = codepipeline.Artifact("InfraCode")
        infra_source_action = github_source_action(
            "InfraCode",
            infra_source_artifact,
            owner=infra_repo_owner,
            repo=infra_repo_name,
            branch=infra_source_branch,
            oauth_token_path=oauth_token_path,
            create_github_webhooks=create_github_webhooks,
        )

        def create_deploys(stack_names: tuple[str, str], stage: str) -> list[CDKPipelineDeploy]:
            store_stack, api_stack = stack_names
            stage_namespace = f"{namespace}-{stage}"
            additional_context = {"owner": owner, "contact": contact}

            deploy_store = CDKPipelineDeploy(
                self,
                f"{stage_namespace}-store-deploy",
                target_stack=store_stack,
                infra_source_artifact=infra_source_artifact,
                namespace=stage_namespace,
                context_env_name=context_env_name,
                additional_context=additional_context,
                action_name="DeployMetadataStore",
                run_order=1,
            )
            deploy_store.project.add_to_role_policy(NamespacedPolicy.ssm(store_stack))
            deploy_store.project.add_to_role_policy(NamespacedPolicy.dynamodb(stage_namespace))

            deploy_api = CDKPipelineDeploy(
                self,
                f"{stage_namespace}-api-deploy",
                target_stack=api_stack,
                depends_on_stacks=[store_stack],
                infra_source_artifact=infra_source_artifact,
                namespace=stage_namespace,
                context_env_name=context_env_name,
                additional_context=additional_context,
                action_name="DeployMaintainMetadata",
                run_order=2,
            )
            deploy_api.project.add_to_role_policy(NamespacedPolicy.ssm(api_stack))
            deploy_api.project.add_to_role_policy(NamespacedPolicy.iam_role(api_stack))
            deploy_api.project.add_to_role_policy(NamespacedPolicy.lambda_(api_stack))
            deploy_api.project.add_to_role_policy(NamespacedPolicy.events(api_stack))
            deploy_api.project.add_to_role_policy(NamespacedPolicy.appsync())
            deploy_api.project.add_to_role_policy(NamespacedPolicy.dynamodb(stage_namespace))
            deploy_api.project.add_to_role_policy(
                NamespacedPolicy.globals_([GlobalActions.APPSYNC, GlobalActions.EVENTS, GlobalActions.CLOUDWATCH])
            )
            return [deploy_store, deploy_api]

        deploy_test = create_deploys(test_stack_names, "test")
        approval_action = create_approval(
            self,
            what="the metadata API",
            test_stack_name=test_stack_names[1],
            prod_stack_name=prod_stack_names[1],
            changes=[describe_changes("Infrastructure", infra_source_action, infra_repo_owner, infra_repo_name)],
            slack_notify_stack_name=slack_notify_stack_name,
        )
        deploy_prod = create_deploys(prod_stack_names, "prod")

        self.pipeline = codepipeline.Pipeline(
            self,
            "DeploymentPipeline",
            artifact_bucket=pipeline_foundation_stack.artifact_bucket,
            stages=[
                codepipeline.StageProps(stage_name="Source", actions=[infra_source_action]),
                codepipeline.StageProps(
                    stage_name="Test",
                    actions=[*(deploy.action for deploy in deploy_test), approval_action],
                ),
                codepipeline.StageProps(stage_name="Production", actions=[deploy.action for deploy in deploy_prod]),
            ],
        )
        add_notifications(self, self.pipeline, notification_receivers)
