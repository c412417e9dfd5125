"""Deployment pipeline for one static website instance (website, redbox, ...)."""

from typing import Any, Optional

from aws_cdk import Stack
from aws_cdk import aws_codepipeline as codepipeline
from constructs import Construct

from ..helpers import ssm_path
from .cdk_pipeline_deploy import CDKPipelineDeploy
from .namespaced_policy import GlobalActions, NamespacedPolicy
from .pipeline_foundation_stack import PipelineFoundationStack
from .stages import add_notifications, create_approval, describe_changes, github_source_action

APP_SOURCE_DIR = "$CODEBUILD_SRC_DIR_AppCode"


def site_build_commands(build_command: str) -> list[str]:
    return [f"cd {APP_SOURCE_DIR}", "npm ci", build_command, "cd $CODEBUILD_SRC_DIR"]


def site_publish_commands(stack_name: str, build_output_dir: str) -> list[str]:
    """Sync the built site into the stack's bucket and invalidate the distribution."""
    bucket_path = ssm_path(stack_name, "site-bucket-name")
    distribution_path = ssm_path(stack_name, "distribution-id")
    return [
        f"BUCKET=$(aws ssm get-parameter --name {bucket_path} --query Parameter.Value --output text)",
        f"aws s3 sync {APP_SOURCE_DIR}/{build_output_dir} s3://$BUCKET --delete",
        f"DISTRIBUTION=$(aws ssm get-parameter --name {distribution_path} --query Parameter.Value --output text)",
        "aws cloudfront create-invalidation --distribution-id $DISTRIBUTION --paths '/*'",
    ]


class StaticHostPipelineStack(Stack):
    """Source → deploy test site → approval → deploy prod site."""

    pipeline: codepipeline.Pipeline

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        instance_name: str,
        pipeline_foundation_stack: PipelineFoundationStack,
        namespace: str,
        test_stack_name: str,
        prod_stack_name: str,
        context_env_name: str,
        oauth_token_path: str,
        owner: str,
        contact: str,
        infra_repo_owner: str,
        infra_repo_name: str,
        infra_source_branch: str,
        app_repo_owner: str,
        app_repo_name: str,
        app_source_branch: str = "main",
        build_output_dir: str = "public",
        build_command: str = "npm run build",
        hostname_prefix: Optional[str] = None,
        create_github_webhooks: bool = False,
        slack_notify_stack_name: Optional[str] = None,
        notification_receivers: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
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
        app_source_artifact = codepipeline.Artifact("AppCode")
        app_source_action = github_source_action(
            "AppCode",
            app_source_artifact,
            owner=app_repo_owner,
            repo=app_repo_name,
            branch=app_source_branch,
            oauth_token_path=oauth_token_path,
            create_github_webhooks=create_github_webhooks,
        )

        def create_deploy(target_stack: str, stage: str) -> CDKPipelineDeploy:
            # Test sites get their own hostname so they never collide with prod
            prefix = hostname_prefix if stage == "prod" or hostname_prefix is None else f"{hostname_prefix}-{stage}"
            cdk_deploy = CDKPipelineDeploy(
                self,
                f"{namespace}-{stage}-deploy",
                target_stack=target_stack,
                infra_source_artifact=infra_source_artifact,
                app_source_artifact=app_source_artifact,
                namespace=f"{namespace}-{stage}",
                context_env_name=context_env_name,
                app_build_commands=site_build_commands(build_command),
                post_deploy_commands=site_publish_commands(target_stack, build_output_dir),
                additional_context={
                    f"{instance_name}:hostnamePrefix": prefix,
                    "owner": owner,
                    "contact": contact,
                },
            )
            cdk_deploy.project.add_to_role_policy(NamespacedPolicy.ssm(target_stack))
            cdk_deploy.project.add_to_role_policy(NamespacedPolicy.iam_role(target_stack))
            cdk_deploy.project.add_to_role_policy(NamespacedPolicy.s3(target_stack))
            cdk_deploy.project.add_to_role_policy(NamespacedPolicy.lambda_edge(target_stack))
            cdk_deploy.project.add_to_role_policy(NamespacedPolicy.cloudfront(target_stack))
            cdk_deploy.project.add_to_role_policy(
                NamespacedPolicy.globals_([GlobalActions.CLOUDFRONT, GlobalActions.ROUTE53, GlobalActions.S3])
            )
            return cdk_deploy

        deploy_test = create_deploy(test_stack_name, "test")
        approval_action = create_approval(
            self,
            what=instance_name,
            test_stack_name=test_stack_name,
            prod_stack_name=prod_stack_name,
            changes=[
                describe_changes("Application", app_source_action, app_repo_owner, app_repo_name),
                describe_changes("Infrastructure", infra_source_action, infra_repo_owner, infra_repo_name),
            ],
            slack_notify_stack_name=slack_notify_stack_name,
        )
        deploy_prod = create_deploy(prod_stack_name, "prod")

        self.pipeline = codepipeline.Pipeline(
            self,
            "DeploymentPipeline",
            artifact_bucket=pipeline_foundation_stack.artifact_bucket,
            stages=[
                codepipeline.StageProps(stage_name="Source", actions=[app_source_action, infra_source_action]),
                codepipeline.StageProps(stage_name="Test", actions=[deploy_test.action, approval_action]),
                codepipeline.StageProps(stage_name="Production", actions=[deploy_prod.action]),
            ],
        )
        add_notifications(self, self.pipeline, notification_receivers)
