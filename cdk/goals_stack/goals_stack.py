from typing import Optional

from aws_cdk import Stack
from constructs import Construct

from goals_stack.api import create_goals_api
from goals_stack.auth import create_cognito_auth
from goals_stack.cloudfront_site import create_cloudfront_distribution
from goals_stack.dynamodb_tables import create_goals_table
from goals_stack.helpers import NameAllocator, StackConfig, make_resource_namer
from goals_stack.iam_roles import (
    create_build_role,
    create_cognito_sns_role,
    create_pipeline_role,
    create_table_access_role,
)
from goals_stack.lambdas import create_goal_functions
from goals_stack.logging import StructuredLogger
from goals_stack.outputs import create_outputs
from goals_stack.pipeline import build_environment_variables, create_assets_pipeline, create_build_project
from goals_stack.s3_buckets import create_s3_buckets, seed_source_assets


class GoalsStack(Stack):
    """
    Goals full-stack application in a single stack.

    Creates, in dependency order:
    - DynamoDB goals table and the shared table access role
    - S3 buckets for source assets, website and pipeline artifacts
    - CloudFront distribution for the website
    - Lambda functions for the goal operations
    - Cognito user pool, client and identity pool with federated roles
    - API Gateway REST API with a user pool authorizer
    - CodeBuild project and CodePipeline for the web app
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        config: Optional[StackConfig] = None,
        allocator: Optional[NameAllocator] = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        self.config = config or StackConfig()
        self.allocator = allocator or NameAllocator(self.config.bucket_prefix)
        self.logger = StructuredLogger(__name__, self.allocator.run_id, stackName=self.stack_name)

        rn = make_resource_namer(self.config.project_name)
        self.resource_name = rn

        # ====================================================================
        # Storage
        # ====================================================================

        self.goals_table = create_goals_table(self, rn, self.config.table_name)
        self.table_access_role = create_table_access_role(self, self.goals_table)
        self.logger.info("Registered goals table", table_name=rn(self.config.table_name))

        self.buckets = create_s3_buckets(self, self.allocator, self.config.website_index_document)
        self.website_deployment = seed_source_assets(
            self, self.buckets.source_assets, self.config.assets_archive_dir, self.logger
        )
        self.logger.info("Registered buckets", bucket_prefix=self.allocator.prefix)

        self.distribution = create_cloudfront_distribution(
            self, self.config.project_name, self.buckets.website, self.config.website_index_document
        )

        # ====================================================================
        # Compute
        # ====================================================================

        self.functions = create_goal_functions(
            self, rn, self.table_access_role, self.goals_table, self.config.functions_dir
        )
        self.logger.info("Registered goal functions", functions_dir=self.config.functions_dir)

        # ====================================================================
        # Identity
        # ====================================================================

        sms_external_id = rn("cognito-sms")
        self.cognito_sns_role = create_cognito_sns_role(self, sms_external_id)
        self.auth = create_cognito_auth(
            self, rn, self.config.project_name, self.cognito_sns_role, sms_external_id
        )
        self.logger.info("Registered user pool and identity pool", project_name=self.config.project_name)

        # ====================================================================
        # API
        # ====================================================================

        self.api = create_goals_api(self, self.config.project_name, self.auth.user_pool, self.functions, self.logger)
        self.logger.info("Registered REST API", rest_api_name=self.config.project_name)

        # ====================================================================
        # Build pipeline
        # ====================================================================

        bucket_arns = self.buckets.arns()
        self.build_role = create_build_role(self, rn, bucket_arns)
        self.pipeline_role = create_pipeline_role(self, rn, bucket_arns)

        self.build_project = create_build_project(
            self,
            rn,
            self.config.project_name,
            self.build_role,
            build_environment_variables(self.auth, self.api, self.buckets),
            self.config.build_spec_filename,
        )
        self.assets_pipeline = create_assets_pipeline(
            self,
            rn,
            self.build_project,
            self.pipeline_role,
            self.buckets,
            self.config.source_object_key,
        )
        self.logger.info("Registered assets pipeline", source_object_key=self.config.source_object_key)

        # ====================================================================
        # Outputs
        # ====================================================================

        self.outputs = create_outputs(self, self.buckets.website, self.distribution)
