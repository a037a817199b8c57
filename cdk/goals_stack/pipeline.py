"""
Build and deploy pipeline for the web app.

Creates:
- CodeBuild project with the frontend environment variables
- Two-stage CodePipeline: Source (S3 object) then Build
"""

from dataclasses import dataclass
from typing import Callable

from aws_cdk import Aws, Duration, Tags
from aws_cdk import aws_codebuild as codebuild
from aws_cdk import aws_codepipeline as codepipeline
from aws_cdk import aws_codepipeline_actions as codepipeline_actions
from aws_cdk import aws_iam as iam
from constructs import Construct

from goals_stack.api import GoalsApi
from goals_stack.auth import CognitoAuth
from goals_stack.iam_roles import grant_start_build
from goals_stack.s3_buckets import Buckets

BUILD_TIMEOUT_MINUTES = 5


@dataclass(frozen=True)
class AssetsPipeline:
    project: codebuild.IProject
    pipeline: codepipeline.Pipeline
    source_output: codepipeline.Artifact
    build_output: codepipeline.Artifact


def build_environment_variables(
    auth: CognitoAuth,
    api: GoalsApi,
    buckets: Buckets,
) -> dict[str, codebuild.BuildEnvironmentVariable]:
    """Values the buildspec uses to configure the web app."""
    values = {
        "API_GATEWAY_REGION": Aws.REGION,
        "API_GATEWAY_URL": api.base_url,
        "COGNITO_REGION": Aws.REGION,
        "COGNITO_USER_POOL_ID": auth.user_pool.user_pool_id,
        "COGNITO_APP_CLIENT_ID": auth.user_pool_client.user_pool_client_id,
        "COGNITO_IDENTITY_POOL_ID": auth.identity_pool_id,
        "WEBSITE_BUCKET": buckets.website.bucket_name,
    }
    return {name: codebuild.BuildEnvironmentVariable(value=value) for name, value in values.items()}


def create_build_project(
    scope: Construct,
    rn: Callable[[str], str],
    project_name: str,
    build_role: iam.IRole,
    environment_variables: dict[str, codebuild.BuildEnvironmentVariable],
    build_spec_filename: str = "buildspec.yml",
) -> codebuild.PipelineProject:
    """Create the CodeBuild project that builds and publishes the web app."""
    project = codebuild.PipelineProject(
        scope,
        "CodeBuildProject",
        project_name=rn("build"),
        description=f"CodeBuild Project for {project_name}.",
        environment=codebuild.BuildEnvironment(
            compute_type=codebuild.ComputeType.SMALL,
            build_image=codebuild.LinuxBuildImage.STANDARD_7_0,
            environment_variables=environment_variables,
        ),
        role=build_role,
        build_spec=codebuild.BuildSpec.from_source_filename(build_spec_filename),
        timeout=Duration.minutes(BUILD_TIMEOUT_MINUTES),
    )
    Tags.of(project).add("app-name", project_name)
    return project


def create_assets_pipeline(
    scope: Construct,
    rn: Callable[[str], str],
    project: codebuild.IProject,
    pipeline_role: iam.Role,
    buckets: Buckets,
    source_object_key: str = "assets.zip",
) -> AssetsPipeline:
    """Create the Source -> Build pipeline.

    Args:
        scope: CDK construct scope
        rn: Resource naming function (name -> formatted name)
        project: Build project run by the Build stage
        pipeline_role: Role assumed by CodePipeline
        buckets: Source assets and pipeline artifact buckets
        source_object_key: Object key in the source assets bucket

    Returns:
        AssetsPipeline record
    """
    grant_start_build(pipeline_role, project.project_arn)

    source_output = codepipeline.Artifact(rn("SourceArtifact"))
    build_output = codepipeline.Artifact(rn("BuildArtifact"))

    pipeline = codepipeline.Pipeline(
        scope,
        "AssetsCodePipeline",
        pipeline_name=rn("Assets-Pipeline"),
        role=pipeline_role,
        artifact_bucket=buckets.pipeline_artifacts,
        stages=[
            codepipeline.StageProps(
                stage_name="Source",
                actions=[
                    codepipeline_actions.S3SourceAction(
                        action_name="s3Source",
                        bucket=buckets.source_assets,
                        bucket_key=source_object_key,
                        output=source_output,
                    )
                ],
            ),
            codepipeline.StageProps(
                stage_name="Build",
                actions=[
                    codepipeline_actions.CodeBuildAction(
                        action_name="build-and-deploy",
                        project=project,
                        input=source_output,
                        outputs=[build_output],
                    )
                ],
            ),
        ],
    )

    return AssetsPipeline(
        project=project,
        pipeline=pipeline,
        source_output=source_output,
        build_output=build_output,
    )
