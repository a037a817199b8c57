"""
S3 Bucket creation for the CDK stack.

Creates:
- Source assets bucket (pipeline source for the web app archive)
- Website bucket (public static website hosting)
- Pipeline artifacts bucket (CodePipeline artifact store)
"""

import os
from dataclasses import dataclass
from typing import Optional

from aws_cdk import RemovalPolicy
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from aws_cdk import aws_s3_deployment as s3deploy
from constructs import Construct

from goals_stack.helpers import NameAllocator
from goals_stack.logging import StructuredLogger


@dataclass(frozen=True)
class Buckets:
    source_assets: s3.Bucket
    website: s3.Bucket
    pipeline_artifacts: s3.Bucket

    def arns(self) -> list[str]:
        """Bucket ARNs plus the website objects, as granted to build and pipeline roles."""
        return [
            self.source_assets.bucket_arn,
            self.pipeline_artifacts.bucket_arn,
            self.website.bucket_arn,
            self.website.arn_for_objects("*"),
        ]


def create_s3_buckets(
    stack: Construct,
    allocator: NameAllocator,
    website_index_document: str = "index.html",
) -> Buckets:
    """Create S3 buckets for the application.

    Args:
        stack: CDK Construct (usually the Stack instance)
        allocator: Name allocator providing unique bucket names for this run
        website_index_document: Index and error document of the website bucket

    Returns:
        Buckets record with the three buckets
    """
    source_assets_bucket = s3.Bucket(
        stack,
        "SourceAssetBucket",
        bucket_name=allocator.bucket_name("source-assets"),
        block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
        removal_policy=RemovalPolicy.DESTROY,
        versioned=True,
    )

    # Public read is granted through the bucket policy below, so only ACLs stay blocked
    website_bucket = s3.Bucket(
        stack,
        "WebsiteBucket",
        bucket_name=allocator.bucket_name("website"),
        removal_policy=RemovalPolicy.DESTROY,
        website_index_document=website_index_document,
        website_error_document=website_index_document,
        block_public_access=s3.BlockPublicAccess(
            block_public_acls=True,
            ignore_public_acls=True,
            block_public_policy=False,
            restrict_public_buckets=False,
        ),
    )
    website_bucket.add_to_resource_policy(
        iam.PolicyStatement(
            resources=[website_bucket.arn_for_objects("*")],
            actions=["s3:Get*"],
            principals=[iam.AnyPrincipal()],
        )
    )

    pipeline_artifacts_bucket = s3.Bucket(
        stack,
        "PipelineArtifactsBucket",
        bucket_name=allocator.bucket_name("codepipeline-artifacts"),
        block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
        removal_policy=RemovalPolicy.DESTROY,
    )

    return Buckets(
        source_assets=source_assets_bucket,
        website=website_bucket,
        pipeline_artifacts=pipeline_artifacts_bucket,
    )


def seed_source_assets(
    stack: Construct,
    source_assets_bucket: s3.IBucket,
    archive_dir: Optional[str],
    logger: StructuredLogger,
) -> Optional[s3deploy.BucketDeployment]:
    """Upload the web app archive into the source assets bucket.

    Returns None when no archive directory is available.
    """
    if not archive_dir or not os.path.isdir(archive_dir):
        logger.warning("Skipping source asset seeding, archive directory not found", archive_dir=archive_dir)
        return None

    return s3deploy.BucketDeployment(
        stack,
        "S3WebsiteDeploy",
        sources=[s3deploy.Source.asset(archive_dir)],
        destination_bucket=source_assets_bucket,
    )
