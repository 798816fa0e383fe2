"""S3 bucket for static website hosting."""

from aws_cdk import RemovalPolicy
from aws_cdk import aws_s3 as s3
from constructs import Construct

from infrastructure.config import bucket_name_prefix

from .initial_content import InitialContent

INDEX_DOCUMENT = "index.html"
ERROR_DOCUMENT = "error.html"


def error_document(has_build_command: bool) -> str:
  """Document served for unknown paths.

  Built websites route on the client side, so every unknown path resolves
  to the index document. Must match the CDN custom error response.
  """
  return INDEX_DOCUMENT if has_build_command else ERROR_DOCUMENT


class StorageBucket(Construct):
  """Publicly readable S3 bucket containing the website files."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    resource_prefix: str,
    has_build_command: bool,
  ) -> None:
    super().__init__(scope, id)

    self.bucket = s3.Bucket(
      self,
      "Bucket",
      bucket_name=f"{bucket_name_prefix(resource_prefix)}-website-bucket",
      website_index_document=INDEX_DOCUMENT,
      website_error_document=error_document(has_build_command),
      public_read_access=True,
      block_public_access=s3.BlockPublicAccess(
        block_public_acls=False,
        ignore_public_acls=False,
        block_public_policy=False,
        restrict_public_buckets=False,
      ),
      # Objects uploaded by the pipeline must not block stack deletion
      removal_policy=RemovalPolicy.DESTROY,
      auto_delete_objects=True,
    )

    self.initial_content = InitialContent(
      self,
      f"{resource_prefix}-initial-content",
      bucket=self.bucket,
      include_error_document=not has_build_command,
    )
