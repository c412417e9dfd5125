"""Approval and pipeline notification constructs."""

from typing import Optional

from aws_cdk import Fn
from aws_cdk import aws_codepipeline as codepipeline
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_sns as sns
from aws_cdk import aws_sns_subscriptions as subscriptions
from constructs import Construct


class SlackApproval(Construct):
    """Sends approval requests to Slack.

    The Slack notify stack exports the ARN of its approval Lambda as
    ``<notifyStackName>:LambdaArn``; the approval topic is subscribed to it.
    """

    def __init__(self, scope: Construct, construct_id: str, approval_topic: sns.ITopic, notify_stack_name: str) -> None:
        super().__init__(scope, construct_id)

        self.approval_lambda = lambda_.Function.from_function_arn(
            self,
            "ApprovalLambda",
            Fn.import_value(f"{notify_stack_name}:LambdaArn"),
        )
        approval_topic.add_subscription(subscriptions.LambdaSubscription(self.approval_lambda))


class PipelineNotifications(Construct):
    """Emails pipeline execution state changes to a comma separated list of receivers."""

    topic: sns.Topic

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        pipeline: codepipeline.IPipeline,
        receivers: str,
        topic_name: Optional[str] = None,
    ) -> None:
        super().__init__(scope, construct_id)

        self.topic = sns.Topic(self, "Topic", topic_name=topic_name)
        for receiver in (address.strip() for address in receivers.split(",")):
            if receiver:
                self.topic.add_subscription(subscriptions.EmailSubscription(receiver))

        self.rule = pipeline.notify_on_execution_state_change("NotificationRule", self.topic)
