"""CloudFront distribution for static website."""

from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudfront_origins as origins
from aws_cdk import aws_s3 as s3
from constructs import Construct

from .storage import INDEX_DOCUMENT, error_document


def error_response(has_build_command: bool) -> cloudfront.ErrorResponse:
  """Response served when the origin answers 403 (object not in the bucket).

  Must match the bucket error document.
  """
  if has_build_command:
    # Routing is managed by the SPA framework
    return cloudfront.ErrorResponse(
      http_status=403,
      response_http_status=200,
      response_page_path=f"/{INDEX_DOCUMENT}",
    )
  return cloudfront.ErrorResponse(
    http_status=403,
    response_http_status=403,
    response_page_path=f"/{error_document(has_build_command)}",
  )


class CloudFrontDistribution(Construct):
  """CloudFront distribution in front of the website bucket."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket: s3.IBucket,
    certificate_arn: str,
    domain_names: list[str],
    enable_https: bool,
    has_build_command: bool,
    resource_prefix: str,
  ) -> None:
    super().__init__(scope, id)

    # HTTPS activation is a two-step process: the certificate must be
    # issued before it can be attached to the distribution
    certificate = None
    if enable_https:
      certificate = acm.Certificate.from_certificate_arn(
        self, "Certificate", certificate_arn
      )

    self.distribution = cloudfront.Distribution(
      self,
      "Distribution",
      default_behavior=cloudfront.BehaviorOptions(
        origin=origins.S3BucketOrigin.with_bucket_defaults(
          bucket, origin_id=resource_prefix
        ),
        viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
        allowed_methods=cloudfront.AllowedMethods.ALLOW_ALL,
        cached_methods=cloudfront.CachedMethods.CACHE_GET_HEAD,
        # No cookies, no query strings forwarded
        cache_policy=cloudfront.CachePolicy.CACHING_OPTIMIZED,
      ),
      domain_names=domain_names if enable_https else None,
      certificate=certificate,
      ssl_support_method=cloudfront.SSLMethod.SNI if enable_https else None,
      minimum_protocol_version=(
        cloudfront.SecurityPolicyProtocol.TLS_V1_2_2021 if enable_https else None
      ),
      default_root_object=INDEX_DOCUMENT,
      error_responses=[error_response(has_build_command)],
    )

    self.distribution.node.add_dependency(bucket)
