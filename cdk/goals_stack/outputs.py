"""Stack outputs surfaced after deployment."""

from aws_cdk import CfnOutput
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_s3 as s3
from constructs import Construct


def cdn_url(distribution: cloudfront.IDistribution) -> str:
    # Plain http is what the web app has always been linked with
    return f"http://{distribution.distribution_domain_name}"


def create_outputs(
    scope: Construct,
    website_bucket: s3.IBucket,
    distribution: cloudfront.IDistribution,
) -> dict[str, CfnOutput]:
    """Emit the website bucket URL and the CDN URL."""
    return {
        "website_bucket_url": CfnOutput(scope, "WebsiteBucketUrl", value=website_bucket.bucket_website_url),
        "cloudfront_cdn_url": CfnOutput(scope, "CloudFrontCdnUrl", value=cdn_url(distribution)),
    }
