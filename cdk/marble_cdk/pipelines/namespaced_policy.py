"""
IAM policy statements scoped to the stacks a deployment pipeline manages.

CodeBuild projects running ``cdk deploy`` need broad service permissions,
so every statement is narrowed to resources named after the target stack or
namespace. Services without resource-level permissions are granted through
``NamespacedPolicy.globals_``.
"""

from enum import Enum
from typing import Iterable

from aws_cdk import Aws
from aws_cdk import aws_iam as iam


class GlobalActions(Enum):
    """Action groups that only accept a wildcard resource."""

    CLOUDFRONT = "cloudfront"
    CLOUDWATCH = "cloudwatch"
    ROUTE53 = "route53"
    S3 = "s3"
    APPSYNC = "appsync"
    EVENTS = "events"


_GLOBAL_ACTIONS: dict[GlobalActions, list[str]] = {
    GlobalActions.CLOUDFRONT: [
        "cloudfront:CreateInvalidation",
        "cloudfront:*CloudFrontOriginAccessIdentity*",
        "cloudfront:*Distribution*",
        "cloudfront:*CachePolicy*",
        "cloudfront:TagResource",
        "cloudfront:UntagResource",
        "cloudfront:ListTagsForResource",
    ],
    GlobalActions.CLOUDWATCH: [
        "cloudwatch:*Alarm*",
        "cloudwatch:*Dashboard*",
        "logs:CreateLogGroup",
        "logs:DescribeLogGroups",
        "logs:PutRetentionPolicy",
    ],
    GlobalActions.ROUTE53: [
        "route53:GetHostedZone",
        "route53:ListHostedZones",
        "route53:ChangeResourceRecordSets",
        "route53:GetChange",
        "route53:ListResourceRecordSets",
    ],
    GlobalActions.S3: [
        "s3:CreateBucket",
        "s3:ListAllMyBuckets",
        "s3:GetBucketLocation",
    ],
    GlobalActions.APPSYNC: [
        "appsync:CreateGraphqlApi",
        "appsync:ListGraphqlApis",
        "appsync:TagResource",
    ],
    GlobalActions.EVENTS: [
        "events:DescribeRule",
        "events:ListRules",
    ],
}


def _arn(service: str, resource: str, region: str = Aws.REGION, account: str = Aws.ACCOUNT_ID) -> str:
    return f"arn:{Aws.PARTITION}:{service}:{region}:{account}:{resource}"


class NamespacedPolicy:
    """Factory of policy statements for one deploy target."""

    @staticmethod
    def cloudformation(stack_names: Iterable[str]) -> iam.PolicyStatement:
        """Manage the CloudFormation stacks being deployed, and read the CDK bootstrap stack."""
        resources = [_arn("cloudformation", f"stack/{name}/*") for name in stack_names]
        resources.append(_arn("cloudformation", "stack/CDKToolkit/*"))
        return iam.PolicyStatement(
            actions=[
                "cloudformation:CreateChangeSet",
                "cloudformation:DeleteChangeSet",
                "cloudformation:DescribeChangeSet",
                "cloudformation:DescribeStackEvents",
                "cloudformation:DescribeStacks",
                "cloudformation:ExecuteChangeSet",
                "cloudformation:GetTemplate",
            ],
            resources=resources,
        )

    @staticmethod
    def cdk_bootstrap() -> iam.PolicyStatement:
        """Assume the roles created by ``cdk bootstrap`` and read its version parameter."""
        return iam.PolicyStatement(
            actions=["sts:AssumeRole", "ssm:GetParameter"],
            resources=[
                f"arn:{Aws.PARTITION}:iam::{Aws.ACCOUNT_ID}:role/cdk-*",
                _arn("ssm", "parameter/cdk-bootstrap/*"),
            ],
        )

    @staticmethod
    def ssm(stack_name: str) -> iam.PolicyStatement:
        return iam.PolicyStatement(
            actions=[
                "ssm:AddTagsToResource",
                "ssm:DeleteParameter*",
                "ssm:GetParameter*",
                "ssm:PutParameter",
                "ssm:RemoveTagsFromResource",
            ],
            resources=[_arn("ssm", f"parameter/all/stacks/{stack_name}/*")],
        )

    @staticmethod
    def iam_role(stack_name: str) -> iam.PolicyStatement:
        """CDK names generated roles after the stack, so a stack prefix covers them."""
        return iam.PolicyStatement(
            actions=["iam:*"],
            resources=[f"arn:{Aws.PARTITION}:iam::{Aws.ACCOUNT_ID}:role/{stack_name}*"],
        )

    @staticmethod
    def sns(stack_name: str) -> iam.PolicyStatement:
        return iam.PolicyStatement(
            actions=["sns:*"],
            resources=[_arn("sns", f"{stack_name}*")],
        )

    @staticmethod
    def s3(stack_name: str) -> iam.PolicyStatement:
        return iam.PolicyStatement(
            actions=["s3:*"],
            resources=[f"arn:{Aws.PARTITION}:s3:::{stack_name}*"],
        )

    @staticmethod
    def lambda_(stack_name: str) -> iam.PolicyStatement:
        return iam.PolicyStatement(
            actions=["lambda:*"],
            resources=[_arn("lambda", f"function:{stack_name}*")],
        )

    @staticmethod
    def lambda_edge(stack_name: str) -> iam.PolicyStatement:
        """Edge functions replicate from us-east-1 into every region."""
        return iam.PolicyStatement(
            actions=["lambda:*", "iam:CreateServiceLinkedRole"],
            resources=[
                _arn("lambda", f"function:{stack_name}*", region="*"),
                f"arn:{Aws.PARTITION}:iam::{Aws.ACCOUNT_ID}:role/aws-service-role/*lambda*",
            ],
        )

    @staticmethod
    def cloudfront(stack_name: str) -> iam.PolicyStatement:
        """Distributions carry no stack name, so access goes through the stack's tag."""
        return iam.PolicyStatement(
            actions=["cloudfront:*"],
            resources=[f"arn:{Aws.PARTITION}:cloudfront::{Aws.ACCOUNT_ID}:distribution/*"],
            conditions={"StringEquals": {"aws:ResourceTag/aws:cloudformation:stack-name": stack_name}},
        )

    @staticmethod
    def appsync() -> iam.PolicyStatement:
        return iam.PolicyStatement(
            actions=["appsync:*"],
            resources=[_arn("appsync", "apis/*")],
        )

    @staticmethod
    def dynamodb(namespace: str) -> iam.PolicyStatement:
        return iam.PolicyStatement(
            actions=["dynamodb:*"],
            resources=[_arn("dynamodb", f"table/{namespace}*")],
        )

    @staticmethod
    def events(stack_name: str) -> iam.PolicyStatement:
        return iam.PolicyStatement(
            actions=["events:*"],
            resources=[_arn("events", f"rule/{stack_name}*")],
        )

    @staticmethod
    def globals_(actions: Iterable[GlobalActions]) -> iam.PolicyStatement:
        return iam.PolicyStatement(
            actions=[action for group in actions for action in _GLOBAL_ACTIONS[group]],
            resources=["*"],
        )
