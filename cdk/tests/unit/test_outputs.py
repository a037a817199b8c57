"""Tests for stack outputs."""

from aws_cdk import assertions

from goals_stack.cloudfront_site import create_cloudfront_distribution
from goals_stack.helpers import NameAllocator
from goals_stack.outputs import cdn_url, create_outputs
from goals_stack.s3_buckets import create_s3_buckets


class TestCreateOutputs:
    """Tests for create_outputs."""

    def _create(self, stack):
        buckets = create_s3_buckets(stack, NameAllocator("aws-fullstack-template", seed=11))
        distribution = create_cloudfront_distribution(stack, "MyCdkGoals", buckets.website)
        return create_outputs(stack, buckets.website, distribution), distribution

    def test_exactly_two_outputs(self, stack):
        self._create(stack)
        template = assertions.Template.from_stack(stack)

        assert set(template.find_outputs("*")) == {"WebsiteBucketUrl", "CloudFrontCdnUrl"}

    def test_website_bucket_url(self, stack):
        self._create(stack)
        template = assertions.Template.from_stack(stack)
        template.has_output(
            "WebsiteBucketUrl",
            {"Value": {"Fn::GetAtt": [assertions.Match.string_like_regexp("WebsiteBucket"), "WebsiteURL"]}},
        )

    def test_cdn_url_uses_plain_http(self, stack):
        _, distribution = self._create(stack)

        resolved = stack.resolve(cdn_url(distribution))

        assert resolved == {
            "Fn::Join": ["", ["http://", {"Fn::GetAtt": [stack.get_logical_id(distribution.node.default_child), "DomainName"]}]]
        }

    def test_cdn_output_value(self, stack):
        self._create(stack)
        template = assertions.Template.from_stack(stack)
        template.has_output(
            "CloudFrontCdnUrl",
            {
                "Value": {
                    "Fn::Join": [
                        "",
                        ["http://", {"Fn::GetAtt": [assertions.Match.string_like_regexp("AssetsCdn"), "DomainName"]}],
                    ]
                }
            },
        )
