"""Tests for CDKPipelineDeploy."""

import json

import pytest
from aws_cdk import App, Stack, assertions
from aws_cdk import aws_codepipeline as codepipeline

from marble_cdk.pipelines.cdk_pipeline_deploy import CDKPipelineDeploy, context_args, deploy_command


class TestContextArgs:
    """Tests for context_args."""

    def test_renders_pairs(self):
        """Each value becomes a -c argument."""
        assert context_args({"namespace": "marble-test", "contextEnvName": "dev"}) == [
            "-c namespace=marble-test",
            "-c contextEnvName=dev",
        ]

    def test_skips_none(self):
        """Unset values are left to cdk.json."""
        assert context_args({"owner": None}) == []

    def test_lowercases_booleans(self):
        """Booleans are passed the way cdk.json spells them."""
        assert context_args({"createDns": True}) == ["-c createDns=true"]

    def test_quotes_spaces(self):
        """Values with spaces are quoted."""
        assert context_args({"description": "Marble site"}) == ['-c description="Marble site"']


class TestDeployCommand:
    """Tests for deploy_command."""

    def test_deploys_only_target(self):
        """Dependencies are never deployed implicitly."""
        command = deploy_command("marble-test-website", "marble-test", "dev", {"website:hostnamePrefix": "marble-test"})

        assert command == (
            "cdk deploy marble-test-website --exclusively --require-approval=never "
            "-c namespace=marble-test -c contextEnvName=dev -c website:hostnamePrefix=marble-test"
        )


class TestCDKPipelineDeploy:
    """Tests for the CodeBuild project and action."""

    @pytest.fixture
    def stack(self):
        return Stack(App(), "marble-website-deployment")

    @pytest.fixture
    def deploy(self, stack):
        return CDKPipelineDeploy(
            stack,
            "Deploy",
            target_stack="marble-test-website",
            infra_source_artifact=codepipeline.Artifact("InfraCode"),
            app_source_artifact=codepipeline.Artifact("AppCode"),
            namespace="marble-test",
            context_env_name="dev",
            app_build_commands=["npm ci"],
            post_deploy_commands=["echo published"],
            depends_on_stacks=["marble-test-foundation"],
        )

    def _build_spec(self, stack):
        template = assertions.Template.from_stack(stack)
        projects = template.find_resources("AWS::CodeBuild::Project")
        assert len(projects) == 1
        project = next(iter(projects.values()))
        return json.loads(project["Properties"]["Source"]["BuildSpec"])

    def test_build_spec_phases(self, stack, deploy):
        """Install, build the application, deploy, then publish."""
        build_spec = self._build_spec(stack)

        assert "pip install ." in build_spec["phases"]["install"]["commands"]
        assert build_spec["phases"]["pre_build"]["commands"] == ["npm ci"]
        build_commands = build_spec["phases"]["build"]["commands"]
        assert build_commands[0] == "cd cdk"
        assert build_commands[1].startswith("cdk deploy marble-test-website --exclusively")
        assert build_commands[-1] == "echo published"

    def test_no_application_build(self, stack):
        """Infrastructure-only deploys skip the build step."""
        CDKPipelineDeploy(
            stack,
            "Deploy",
            target_stack="marble-test-metadata-store",
            infra_source_artifact=codepipeline.Artifact("InfraCode"),
            namespace="marble-test",
            context_env_name="dev",
        )

        assert self._build_spec(stack)["phases"]["pre_build"]["commands"] == ["echo No application build"]

    def test_project_environment(self, stack, deploy):
        """Standard image with a 30 minute timeout."""
        template = assertions.Template.from_stack(stack)

        template.has_resource_properties(
            "AWS::CodeBuild::Project",
            {
                "Environment": assertions.Match.object_like(
                    {"ComputeType": "BUILD_GENERAL1_SMALL", "Image": "aws/codebuild/standard:7.0"}
                ),
                "TimeoutInMinutes": 30,
            },
        )

    def test_action(self, deploy):
        """The action takes the application source as an extra input."""
        assert deploy.action.action_properties.action_name == "Deploy"
        assert [artifact.artifact_name for artifact in deploy.action.action_properties.inputs] == [
            "InfraCode",
            "AppCode",
        ]
