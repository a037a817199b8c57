"""CloudFront distribution in front of the website bucket."""

from typing import TYPE_CHECKING

from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudfront_origins as origins
from constructs import Construct

if TYPE_CHECKING:
    from aws_cdk import aws_s3 as s3


def create_cloudfront_distribution(
    scope: Construct,
    project_name: str,
    website_bucket: "s3.Bucket",
    default_root_object: str = "index.html",
) -> cloudfront.Distribution:
    """Create the CDN distribution for the website bucket.

    Args:
        scope: CDK construct scope
        project_name: Project name used in the distribution comment
        website_bucket: Public website bucket served as the origin
        default_root_object: Object returned for requests to /

    Returns:
        The CloudFront distribution
    """
    # The bucket is publicly readable, so the website endpoint is used without an origin identity
    return cloudfront.Distribution(
        scope,
        "AssetsCdn",
        comment=f"CDN for {project_name} website",
        default_root_object=default_root_object,
        default_behavior=cloudfront.BehaviorOptions(
            origin=origins.S3StaticWebsiteOrigin(website_bucket),
        ),
    )
