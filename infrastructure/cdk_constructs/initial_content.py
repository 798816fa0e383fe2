"""Placeholder content served until the first pipeline run completes."""

from aws_cdk import aws_s3 as s3
from aws_cdk import aws_s3_deployment as s3_deploy
from constructs import Construct

PLACEHOLDER = "It's a placeholder {} file waiting for your pipeline to end!"


class InitialContent(Construct):
  """Deploys placeholder documents to the website bucket.

  Deploys:
  - index.html, always
  - error.html, when the website has no build step (otherwise the
    index document doubles as error document)

  The pipeline overwrites both on its first successful run.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    bucket: s3.IBucket,
    include_error_document: bool,
  ) -> None:
    super().__init__(scope, id)

    self.documents = ["index.html"]
    if include_error_document:
      self.documents.append("error.html")

    self.deployment = s3_deploy.BucketDeployment(
      self,
      "Placeholders",
      sources=[
        s3_deploy.Source.data(document, PLACEHOLDER.format(document))
        for document in self.documents
      ],
      destination_bucket=bucket,
      content_type="text/html",
      prune=False,  # Don't delete files deployed by the pipeline
      retain_on_delete=True,
    )
