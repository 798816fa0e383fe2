"""Composite construct building and deploying the website on every push."""

from aws_cdk import RemovalPolicy
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_s3 as s3
from constructs import Construct

from infrastructure.config import RepositoryConfig, bucket_name_prefix

from .build import BuildProject
from .environment_variables import BuildVariable
from .pipeline import DeploymentPipeline


class ContinuousDeploymentConstruct(Construct):
  """Components required to build and deploy the website to S3.

  Creates:
  - S3 bucket for the pipeline artifacts
  - CodeBuild project building, uploading and invalidating the CDN cache
  - CodePipeline triggered by a GitHub webhook
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    resource_prefix: str,
    repository: RepositoryConfig,
    build_command: str,
    build_output_dir: str,
    build_variables: list[BuildVariable],
    website_bucket: s3.IBucket,
    distribution: cloudfront.IDistribution,
  ) -> None:
    super().__init__(scope, id)

    self.pipeline_bucket = s3.Bucket(
      self,
      "pipeline_bucket",
      bucket_name=f"{bucket_name_prefix(resource_prefix)}-codepipeline-bucket",
      block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
      removal_policy=RemovalPolicy.DESTROY,
      auto_delete_objects=True,
    )

    self.build = BuildProject(
      self,
      "build",
      resource_prefix=resource_prefix,
      build_command=build_command,
      build_output_dir=build_output_dir,
      build_variables=build_variables,
      pipeline_bucket=self.pipeline_bucket,
      website_bucket=website_bucket,
      distribution=distribution,
    )

    self.pipeline = DeploymentPipeline(
      self,
      "pipeline",
      resource_prefix=resource_prefix,
      repository=repository,
      project=self.build.project,
      artifacts_bucket=self.pipeline_bucket,
    )

    self.execution_details_url = self.pipeline.execution_details_url
