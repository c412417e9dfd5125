"""Source and approval actions shared by the deployment pipelines."""

from typing import Optional

from aws_cdk import SecretValue
from aws_cdk import aws_codepipeline as codepipeline
from aws_cdk import aws_codepipeline_actions as codepipeline_actions
from aws_cdk import aws_sns as sns
from constructs import Construct

from .notifications import PipelineNotifications, SlackApproval

# Manual approval is always the last action of the test stage
APPROVAL_RUN_ORDER = 99


def github_source_action(
    action_name: str,
    output: codepipeline.Artifact,
    owner: str,
    repo: str,
    branch: str,
    oauth_token_path: str,
    create_github_webhooks: bool = False,
) -> codepipeline_actions.GitHubSourceAction:
    """Check out a GitHub branch with the token stored in Secrets Manager under ``oauth``."""
    return codepipeline_actions.GitHubSourceAction(
        action_name=action_name,
        output=output,
        owner=owner,
        repo=repo,
        branch=branch,
        oauth_token=SecretValue.secrets_manager(oauth_token_path, json_field="oauth"),
        trigger=(
            codepipeline_actions.GitHubTrigger.WEBHOOK
            if create_github_webhooks
            else codepipeline_actions.GitHubTrigger.POLL
        ),
    )


def describe_changes(label: str, source_action: codepipeline_actions.GitHubSourceAction, owner: str, repo: str) -> str:
    """Approval message section listing the commit a source action picked up."""
    return (
        f"*{label} Changes:*\n{source_action.variables.commit_message}\n\n"
        f"For more details on the changes, see "
        f"https://github.com/{owner}/{repo}/commit/{source_action.variables.commit_id}."
    )


def create_approval(
    scope: Construct,
    what: str,
    test_stack_name: str,
    prod_stack_name: str,
    changes: list[str],
    slack_notify_stack_name: Optional[str] = None,
) -> codepipeline_actions.ManualApprovalAction:
    """Manual approval gating promotion from the test stack to the prod stack.

    Approval requests go to an SNS topic, which is also forwarded to Slack when
    a Slack notify stack is configured.
    """
    approval_topic = sns.Topic(scope, "ApprovalTopic")
    if slack_notify_stack_name is not None:
        SlackApproval(scope, "SlackApproval", approval_topic=approval_topic, notify_stack_name=slack_notify_stack_name)

    return codepipeline_actions.ManualApprovalAction(
        action_name="Approval",
        additional_information=(
            f"A new version of {what} has been deployed to stack '{test_stack_name}' and is awaiting your approval. "
            f"If you approve these changes, they will be deployed to stack '{prod_stack_name}'.\n\n"
            + "\n\n".join(changes)
        ),
        notification_topic=approval_topic,
        run_order=APPROVAL_RUN_ORDER,
    )


def add_notifications(
    scope: Construct,
    pipeline: codepipeline.Pipeline,
    notification_receivers: Optional[str],
) -> Optional[PipelineNotifications]:
    if not notification_receivers:
        return None
    return PipelineNotifications(scope, "PipelineNotifications", pipeline=pipeline, receivers=notification_receivers)
