"""Resources shared by every deployment pipeline of a namespace."""

from typing import Any

from aws_cdk import CfnOutput, Stack
from aws_cdk import aws_s3 as s3
from aws_cdk import aws_ssm as ssm
from constructs import Construct

from ..helpers import ssm_path
from ..s3_buckets import create_artifact_bucket


class PipelineFoundationStack(Stack):
    """Holds the artifact bucket the pipelines pass build artifacts through."""

    artifact_bucket: s3.Bucket

    def __init__(self, scope: Construct, construct_id: str, **kwargs: Any) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.artifact_bucket = create_artifact_bucket(self)

        ssm.StringParameter(
            self,
            "SSMArtifactBucketName",
            parameter_name=ssm_path(self.stack_name, "artifact-bucket-name"),
            string_value=self.artifact_bucket.bucket_name,
            description="Bucket holding deployment pipeline artifacts",
        )
        CfnOutput(self, "ArtifactBucketName", value=self.artifact_bucket.bucket_name)
