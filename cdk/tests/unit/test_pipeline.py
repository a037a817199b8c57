"""Tests for the build project and assets pipeline."""

from unittest.mock import MagicMock

import pytest
from aws_cdk import assertions
from aws_cdk import aws_codebuild as codebuild

from goals_stack.helpers import NameAllocator, make_resource_namer
from goals_stack.iam_roles import create_build_role, create_pipeline_role
from goals_stack.pipeline import (
    AssetsPipeline,
    build_environment_variables,
    create_assets_pipeline,
    create_build_project,
)
from goals_stack.s3_buckets import create_s3_buckets

EXPECTED_BUILD_VARIABLES = {
    "API_GATEWAY_REGION",
    "API_GATEWAY_URL",
    "COGNITO_REGION",
    "COGNITO_USER_POOL_ID",
    "COGNITO_APP_CLIENT_ID",
    "COGNITO_IDENTITY_POOL_ID",
    "WEBSITE_BUCKET",
}


@pytest.fixture
def assets_pipeline(stack):
    """Create the build project and pipeline with placeholder environment values."""
    rn = make_resource_namer("MyCdkGoals")
    buckets = create_s3_buckets(stack, NameAllocator("aws-fullstack-template", seed=9))
    build_role = create_build_role(stack, rn, buckets.arns())
    pipeline_role = create_pipeline_role(stack, rn, buckets.arns())
    environment_variables = {
        name: codebuild.BuildEnvironmentVariable(value=f"value-{name}") for name in EXPECTED_BUILD_VARIABLES
    }
    project = create_build_project(stack, rn, "MyCdkGoals", build_role, environment_variables)
    return create_assets_pipeline(stack, rn, project, pipeline_role, buckets)


@pytest.fixture
def template(stack, assets_pipeline):
    return assertions.Template.from_stack(stack)


@pytest.fixture
def pipeline_properties(template):
    pipelines = template.find_resources("AWS::CodePipeline::Pipeline")
    assert len(pipelines) == 1
    return next(iter(pipelines.values()))["Properties"]


class TestBuildEnvironmentVariables:
    """Tests for build_environment_variables."""

    def test_exposes_exactly_the_frontend_contract(self):
        auth = MagicMock()
        auth.user_pool.user_pool_id = "pool-id"
        auth.user_pool_client.user_pool_client_id = "client-id"
        auth.identity_pool_id = "identity-pool-id"
        api = MagicMock()
        api.base_url = "https://example.execute-api.us-east-1.amazonaws.com/prod"
        buckets = MagicMock()
        buckets.website.bucket_name = "website-bucket"

        variables = build_environment_variables(auth, api, buckets)

        assert set(variables) == EXPECTED_BUILD_VARIABLES
        assert variables["API_GATEWAY_URL"].value == "https://example.execute-api.us-east-1.amazonaws.com/prod"
        assert variables["COGNITO_USER_POOL_ID"].value == "pool-id"
        assert variables["COGNITO_APP_CLIENT_ID"].value == "client-id"
        assert variables["COGNITO_IDENTITY_POOL_ID"].value == "identity-pool-id"
        assert variables["WEBSITE_BUCKET"].value == "website-bucket"


class TestCreateBuildProject:
    """Tests for create_build_project."""

    def test_project_properties(self, template):
        template.has_resource_properties(
            "AWS::CodeBuild::Project",
            {
                "Name": "MyCdkGoals-build",
                "Description": "CodeBuild Project for MyCdkGoals.",
                "TimeoutInMinutes": 5,
                "Environment": assertions.Match.object_like(
                    {"ComputeType": "BUILD_GENERAL1_SMALL", "Type": "LINUX_CONTAINER"}
                ),
                "Source": {"Type": "CODEPIPELINE", "BuildSpec": "buildspec.yml"},
                "Tags": [{"Key": "app-name", "Value": "MyCdkGoals"}],
            },
        )

    def test_environment_variables(self, template):
        project = next(iter(template.find_resources("AWS::CodeBuild::Project").values()))
        variables = project["Properties"]["Environment"]["EnvironmentVariables"]

        assert {variable["Name"] for variable in variables} == EXPECTED_BUILD_VARIABLES
        assert all(variable["Type"] == "PLAINTEXT" for variable in variables)


class TestCreateAssetsPipeline:
    """Tests for create_assets_pipeline."""

    def test_returns_record(self, assets_pipeline):
        assert isinstance(assets_pipeline, AssetsPipeline)
        assert assets_pipeline.source_output.artifact_name == "MyCdkGoals-SourceArtifact"
        assert assets_pipeline.build_output.artifact_name == "MyCdkGoals-BuildArtifact"

    def test_pipeline_name(self, pipeline_properties):
        assert pipeline_properties["Name"] == "MyCdkGoals-Assets-Pipeline"

    def test_stage_order(self, pipeline_properties):
        assert [stage["Name"] for stage in pipeline_properties["Stages"]] == ["Source", "Build"]

    def test_each_stage_has_one_action(self, pipeline_properties):
        assert [len(stage["Actions"]) for stage in pipeline_properties["Stages"]] == [1, 1]

    def test_source_action_pulls_assets_zip(self, pipeline_properties):
        source_action = pipeline_properties["Stages"][0]["Actions"][0]

        assert source_action["Name"] == "s3Source"
        assert source_action["ActionTypeId"]["Provider"] == "S3"
        assert source_action["Configuration"]["S3ObjectKey"] == "assets.zip"

    def test_build_input_is_source_output(self, pipeline_properties):
        source_action = pipeline_properties["Stages"][0]["Actions"][0]
        build_action = pipeline_properties["Stages"][1]["Actions"][0]

        assert build_action["Name"] == "build-and-deploy"
        assert build_action["ActionTypeId"]["Provider"] == "CodeBuild"
        assert build_action["InputArtifacts"] == source_action["OutputArtifacts"]
        assert source_action["OutputArtifacts"] == [{"Name": "MyCdkGoals-SourceArtifact"}]
        assert build_action["OutputArtifacts"] == [{"Name": "MyCdkGoals-BuildArtifact"}]

    def test_artifact_store_is_pipeline_artifacts_bucket(self, template, pipeline_properties):
        bucket_ref = pipeline_properties["ArtifactStore"]["Location"]["Ref"]
        bucket = template.find_resources("AWS::S3::Bucket")[bucket_ref]

        assert "codepipeline-artifacts" in bucket["Properties"]["BucketName"]

    def test_pipeline_role_can_start_build(self, template):
        template.has_resource_properties(
            "AWS::IAM::Policy",
            {
                "PolicyDocument": {
                    "Statement": assertions.Match.array_with(
                        [
                            assertions.Match.object_like(
                                {
                                    "Action": ["codebuild:BatchGetBuilds", "codebuild:StartBuild"],
                                    "Resource": {
                                        "Fn::GetAtt": [assertions.Match.string_like_regexp("CodeBuildProject"), "Arn"]
                                    },
                                }
                            )
                        ]
                    )
                }
            },
        )
