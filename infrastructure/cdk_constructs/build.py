"""CodeBuild project that builds the website and deploys it to S3."""

from pathlib import Path

from aws_cdk import ArnFormat, Fn, Stack
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_codebuild as codebuild
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct

from infrastructure.templating import BUILDSPEC_TEMPLATE, load_buildspec, render_buildspec

from .environment_variables import BuildVariable, builds_parameters_path

BUILD_TIMEOUT_MINUTES = 60
BUILD_IMAGE = "aws/codebuild/standard:7.0"


class BuildProject(Construct):
  """CodeBuild project and its least-privilege role.

  The role may only:
  - read and write the pipeline artifacts
  - write its own logs
  - read the builds environment variables of this deployment
  - deploy to the website bucket
  - invalidate the CloudFront cache
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    resource_prefix: str,
    build_command: str,
    build_output_dir: str,
    build_variables: list[BuildVariable],
    pipeline_bucket: s3.IBucket,
    website_bucket: s3.IBucket,
    distribution: cloudfront.IDistribution,
    buildspec_path: Path = BUILDSPEC_TEMPLATE,
  ) -> None:
    super().__init__(scope, id)

    stack = Stack.of(self)
    logs_group = f"{resource_prefix}_codebuild_logs_group"
    logs_group_arn = stack.format_arn(
      service="logs",
      resource="log-group",
      resource_name=logs_group,
      arn_format=ArnFormat.COLON_RESOURCE_NAME,
    )

    self.role = iam.Role(
      self,
      "Role",
      role_name=f"{resource_prefix}_codebuild_role",
      assumed_by=iam.ServicePrincipal("codebuild.amazonaws.com"),
    )

    self.policy = iam.Policy(
      self,
      "Policy",
      policy_name=f"{resource_prefix}_codebuild_role_policy",
      roles=[self.role],
      statements=[
        iam.PolicyStatement(
          actions=[
            "s3:GetObject",
            "s3:GetObjectVersion",
            "s3:PutObject",
            "s3:GetBucketAcl",
            "s3:GetBucketLocation",
          ],
          resources=[pipeline_bucket.bucket_arn, pipeline_bucket.arn_for_objects("*")],
        ),
        iam.PolicyStatement(
          actions=[
            "logs:CreateLogGroup",
            "logs:CreateLogStream",
            "logs:PutLogEvents",
          ],
          resources=[logs_group_arn, f"{logs_group_arn}:*"],
        ),
        iam.PolicyStatement(
          actions=["ssm:GetParameters"],
          resources=[
            stack.format_arn(
              service="ssm",
              resource="parameter",
              resource_name=f"{builds_parameters_path(resource_prefix).lstrip('/')}/*",
              arn_format=ArnFormat.SLASH_RESOURCE_NAME,
            )
          ],
        ),
        iam.PolicyStatement(
          actions=[
            "s3:GetObject",
            "s3:DeleteObject",
            "s3:PutObject",
            "s3:ListBucket",
          ],
          resources=[website_bucket.bucket_arn, website_bucket.arn_for_objects("*")],
        ),
        # Invalidations can't be scoped to a distribution ARN
        iam.PolicyStatement(
          actions=["cloudfront:CreateInvalidation"],
          resources=["*"],
        ),
      ],
    )

    self.buildspec = render_buildspec(
      load_buildspec(buildspec_path),
      variables={
        "BUILD_COMMAND": build_command,
        "BUILD_OUTPUT_DIR": build_output_dir,
      },
      sub_variables={
        "AWS_S3_WEBSITE_BUCKET": "WebsiteBucketName",
        "AWS_CLOUDFRONT_DISTRIBUTION_ID": "CloudFrontDistributionId",
      },
    )

    self.project = codebuild.CfnProject(
      self,
      "Project",
      name=f"{resource_prefix}_codebuild_build_project",
      service_role=self.role.role_arn,
      artifacts=codebuild.CfnProject.ArtifactsProperty(type="CODEPIPELINE"),
      source=codebuild.CfnProject.SourceProperty(
        type="CODEPIPELINE",
        build_spec=Fn.sub(
          self.buildspec,
          {
            "WebsiteBucketName": website_bucket.bucket_name,
            "CloudFrontDistributionId": distribution.distribution_id,
          },
        ),
      ),
      environment=codebuild.CfnProject.EnvironmentProperty(
        compute_type="BUILD_GENERAL1_SMALL",
        image=BUILD_IMAGE,
        type="LINUX_CONTAINER",
        environment_variables=[
          codebuild.CfnProject.EnvironmentVariableProperty(
            name=variable.key,
            value=variable.parameter_name,
            type="PARAMETER_STORE",
          )
          for variable in build_variables
        ]
        or None,
      ),
      cache=codebuild.CfnProject.ProjectCacheProperty(
        type="LOCAL",
        modes=["LOCAL_SOURCE_CACHE"],
      ),
      timeout_in_minutes=BUILD_TIMEOUT_MINUTES,
      logs_config=codebuild.CfnProject.LogsConfigProperty(
        cloud_watch_logs=codebuild.CfnProject.CloudWatchLogsConfigProperty(
          status="ENABLED",
          group_name=logs_group,
          stream_name=f"{resource_prefix}_codebuild_logs_stream",
        ),
      ),
    )

    # The buildspec references the distribution ID and the environment
    # references the parameters: both only exist once created
    self.project.node.add_dependency(self.role, self.policy, distribution)
    for variable in build_variables:
      self.project.node.add_dependency(variable.resource)

    self.project_name = self.project.ref
    self.project_arn = self.project.attr_arn
