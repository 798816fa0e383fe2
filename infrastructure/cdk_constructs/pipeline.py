"""CodePipeline pulling the website from GitHub and running the build."""

from aws_cdk import Stack
from aws_cdk import aws_codebuild as codebuild
from aws_cdk import aws_codepipeline as codepipeline
from aws_cdk import aws_iam as iam
from aws_cdk import aws_s3 as s3
from constructs import Construct

from infrastructure.config import RepositoryConfig

from .action_configuration import (
  CodeBuildConfiguration,
  GitHubSourceConfiguration,
  apply_action_configuration,
)
from .webhook_registration import WebhookRegistration

SOURCE_OUTPUT = "source_output"


class DeploymentPipeline(Construct):
  """Two-stage pipeline: Source (GitHub) then BuildAndDeploy (CodeBuild).

  Pushes to the configured branch reach the pipeline through a webhook.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    resource_prefix: str,
    repository: RepositoryConfig,
    project: codebuild.CfnProject,
    artifacts_bucket: s3.IBucket,
  ) -> None:
    super().__init__(scope, id)

    self.role = iam.Role(
      self,
      "Role",
      role_name=f"{resource_prefix}_codepipeline_role",
      assumed_by=iam.ServicePrincipal("codepipeline.amazonaws.com"),
    )

    self.policy = iam.Policy(
      self,
      "Policy",
      policy_name=f"{resource_prefix}_codepipeline_role_policy",
      roles=[self.role],
      statements=[
        iam.PolicyStatement(
          actions=[
            "s3:GetObject",
            "s3:GetObjectVersion",
            "s3:GetBucketVersioning",
            "s3:PutObject",
          ],
          resources=[artifacts_bucket.bucket_arn, artifacts_bucket.arn_for_objects("*")],
        ),
        iam.PolicyStatement(
          actions=[
            "codebuild:BatchGetBuilds",
            "codebuild:StartBuild",
          ],
          resources=[project.attr_arn],
        ),
      ],
    )
    self.policy.node.add_dependency(project)

    source_action_name = f"{resource_prefix}_source"
    self.pipeline_name = f"{resource_prefix}_codepipeline_pipeline"

    self.pipeline = codepipeline.CfnPipeline(
      self,
      "Pipeline",
      name=self.pipeline_name,
      role_arn=self.role.role_arn,
      artifact_store=codepipeline.CfnPipeline.ArtifactStoreProperty(
        location=artifacts_bucket.bucket_name,
        type="S3",
      ),
      stages=[
        codepipeline.CfnPipeline.StageDeclarationProperty(
          name="Source",
          actions=[
            codepipeline.CfnPipeline.ActionDeclarationProperty(
              name=source_action_name,
              action_type_id=codepipeline.CfnPipeline.ActionTypeIdProperty(
                category="Source",
                owner="ThirdParty",
                provider="GitHub",
                version="1",
              ),
              output_artifacts=[
                codepipeline.CfnPipeline.OutputArtifactProperty(name=SOURCE_OUTPUT)
              ],
            )
          ],
        ),
        codepipeline.CfnPipeline.StageDeclarationProperty(
          name="BuildAndDeploy",
          actions=[
            codepipeline.CfnPipeline.ActionDeclarationProperty(
              name=f"{resource_prefix}_build_and_deploy",
              action_type_id=codepipeline.CfnPipeline.ActionTypeIdProperty(
                category="Build",
                owner="AWS",
                provider="CodeBuild",
                version="1",
              ),
              input_artifacts=[
                codepipeline.CfnPipeline.InputArtifactProperty(name=SOURCE_OUTPUT)
              ],
            )
          ],
        ),
      ],
    )
    self.pipeline.node.add_dependency(self.role, self.policy, project)

    apply_action_configuration(
      self.pipeline,
      0,
      0,
      GitHubSourceConfiguration(
        owner=repository.owner,
        repo=repository.repo,
        branch=repository.branch,
        oauth_token=repository.oauth_token,
      ),
    )
    apply_action_configuration(
      self.pipeline,
      1,
      0,
      CodeBuildConfiguration(project_name=project.ref),
    )

    webhook_name = f"{resource_prefix}_codepipeline_webhook"
    self.webhook = codepipeline.CfnWebhook(
      self,
      "Webhook",
      name=webhook_name,
      target_action=source_action_name,
      target_pipeline=self.pipeline.ref,
      target_pipeline_version=1,
      authentication="GITHUB_HMAC",
      authentication_configuration=codepipeline.CfnWebhook.WebhookAuthConfigurationProperty(
        secret_token=repository.webhook_token,
      ),
      filters=[
        codepipeline.CfnWebhook.WebhookFilterRuleProperty(
          json_path="$.ref",
          match_equals="refs/heads/{Branch}",
        )
      ],
      register_with_third_party=False,
    )
    self.webhook.node.add_dependency(self.pipeline)

    self.registration = WebhookRegistration(
      self,
      "webhook_registration",
      webhook=self.webhook,
      webhook_name=webhook_name,
      pipeline_name=self.pipeline_name,
      owner=repository.owner,
      repo=repository.repo,
      resource_prefix=resource_prefix,
    )
    self.registration.node.add_dependency(self.pipeline)

    region = Stack.of(self).region
    self.execution_details_url = (
      f"https://{region}.console.aws.amazon.com/codesuite/codepipeline/pipelines/"
      f"{self.pipeline_name}/view?region={region}"
    )
