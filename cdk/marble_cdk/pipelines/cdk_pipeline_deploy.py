"""CodeBuild project and pipeline action that run ``cdk deploy`` for one stack."""

from typing import Mapping, Optional, Sequence

from aws_cdk import Duration
from aws_cdk import aws_codebuild as codebuild
from aws_cdk import aws_codepipeline as codepipeline
from aws_cdk import aws_codepipeline_actions as codepipeline_actions
from constructs import Construct

from .namespaced_policy import NamespacedPolicy

PYTHON_VERSION = "3.12"
NODEJS_VERSION = "20"


def context_args(context: Mapping[str, object]) -> list[str]:
    """Render context values as ``-c key=value`` arguments, skipping unset ones.

    >>> context_args({"namespace": "marble-test", "owner": None})
    ['-c namespace=marble-test']
    """
    args = []
    for key, value in context.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = str(value).lower()
        if isinstance(value, str) and " " in value:
            value = f'"{value}"'
        args.append(f"-c {key}={value}")
    return args


def deploy_command(target_stack: str, namespace: str, context_env_name: str, additional_context: Mapping[str, object]) -> str:
    context = {"namespace": namespace, "contextEnvName": context_env_name, **additional_context}
    return " ".join(
        ["cdk", "deploy", target_stack, "--exclusively", "--require-approval=never", *context_args(context)]
    )


class CDKPipelineDeploy(Construct):
    """Deploys ``target_stack`` from the infrastructure source artifact.

    The CodeBuild project installs the CDK CLI and this package, runs any
    application build commands, deploys the stack and then runs any post
    deploy commands (publishing a site, for example).

    Attributes:
        project: The CodeBuild project; add extra permissions to its role
        action: The pipeline action running the project
    """

    project: codebuild.PipelineProject
    action: codepipeline_actions.CodeBuildAction

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        target_stack: str,
        infra_source_artifact: codepipeline.Artifact,
        namespace: str,
        context_env_name: str,
        cdk_directory: str = "cdk",
        depends_on_stacks: Sequence[str] = (),
        app_source_artifact: Optional[codepipeline.Artifact] = None,
        app_build_commands: Sequence[str] = (),
        post_deploy_commands: Sequence[str] = (),
        additional_context: Optional[Mapping[str, object]] = None,
        action_name: str = "Deploy",
        run_order: Optional[int] = None,
    ) -> None:
        super().__init__(scope, construct_id)

        build_spec = {
            "version": "0.2",
            "phases": {
                "install": {
                    "runtime-versions": {"python": PYTHON_VERSION, "nodejs": NODEJS_VERSION},
                    "commands": [
                        "npm install -g aws-cdk",
                        "pip install .",
                    ],
                },
                "pre_build": {"commands": list(app_build_commands) or ["echo No application build"]},
                "build": {
                    "commands": [
                        f"cd {cdk_directory}",
                        deploy_command(target_stack, namespace, context_env_name, additional_context or {}),
                        "cd $CODEBUILD_SRC_DIR",
                        *post_deploy_commands,
                    ],
                },
            },
        }
        self.project = codebuild.PipelineProject(
            self,
            "Project",
            description=f"Deploys {target_stack}",
            timeout=Duration.minutes(30),
            environment=codebuild.BuildEnvironment(
                build_image=codebuild.LinuxBuildImage.STANDARD_7_0,
                compute_type=codebuild.ComputeType.SMALL,
            ),
            build_spec=codebuild.BuildSpec.from_object(build_spec),
        )
        self.project.add_to_role_policy(NamespacedPolicy.cloudformation([target_stack, *depends_on_stacks]))
        self.project.add_to_role_policy(NamespacedPolicy.cdk_bootstrap())

        self.action = codepipeline_actions.CodeBuildAction(
            action_name=action_name,
            project=self.project,
            input=infra_source_artifact,
            extra_inputs=[app_source_artifact] if app_source_artifact is not None else None,
            run_order=run_order,
        )
