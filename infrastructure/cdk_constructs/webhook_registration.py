"""Custom Resources registering the pipeline webhook and starting the pipeline."""

from dataclasses import dataclass

from aws_cdk import ArnFormat, CustomResource, Duration, Stack
from aws_cdk import aws_codepipeline as codepipeline
from aws_cdk import aws_iam as iam
from aws_cdk import aws_lambda as lambda_
from aws_cdk import custom_resources as cr
from constructs import Construct

from infrastructure.handlers import handler_source


@dataclass(frozen=True)
class WebhookTrigger:
  """Fingerprint deciding when the side effects run again.

  CloudFormation only updates a Custom Resource whose properties changed,
  so the hooks re-run if and only if one of these values changes.
  """

  webhook_url: str
  owner: str
  repo: str

  def to_properties(self) -> dict[str, str]:
    return {
      "WebhookUrl": self.webhook_url,
      "Owner": self.owner,
      "Repo": self.repo,
    }


class WebhookRegistration(Construct):
  """Registers the webhook with GitHub then starts a first pipeline execution.

  GitHub webhooks can't be declared for personal accounts, so the
  registration goes through the CodePipeline API instead. Ordering:
  - registration happens once the webhook exists
  - updates deregister the previous webhook before registering again
  - the pipeline starts once the registration succeeded
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    webhook: codepipeline.CfnWebhook,
    webhook_name: str,
    pipeline_name: str,
    owner: str,
    repo: str,
    resource_prefix: str = "",
  ) -> None:
    super().__init__(scope, id)

    stack = Stack.of(self)

    handler = lambda_.Function(
      self,
      f"{resource_prefix}-pipeline-hooks-lambda" if resource_prefix else "Handler",
      runtime=lambda_.Runtime.PYTHON_3_12,
      handler="index.on_event",
      code=lambda_.Code.from_inline(handler_source("pipeline_hooks")),
      timeout=Duration.seconds(60),
    )

    handler.add_to_role_policy(
      iam.PolicyStatement(
        actions=[
          "codepipeline:RegisterWebhookWithThirdParty",
          "codepipeline:DeregisterWebhookWithThirdParty",
        ],
        resources=[
          stack.format_arn(
            service="codepipeline",
            resource="webhook",
            resource_name=webhook_name,
            arn_format=ArnFormat.COLON_RESOURCE_NAME,
          )
        ],
      )
    )

    handler.add_to_role_policy(
      iam.PolicyStatement(
        actions=["codepipeline:StartPipelineExecution"],
        resources=[
          stack.format_arn(
            service="codepipeline",
            resource=pipeline_name,
            arn_format=ArnFormat.NO_RESOURCE_NAME,
          )
        ],
      )
    )

    provider = cr.Provider(
      self,
      f"{resource_prefix}-pipeline-hooks-provider" if resource_prefix else "Provider",
      on_event_handler=handler,
    )

    self.trigger = WebhookTrigger(
      webhook_url=webhook.attr_url,
      owner=owner,
      repo=repo,
    )

    self.register_webhook = CustomResource(
      self,
      "register_webhook",
      service_token=provider.service_token,
      resource_type="Custom::PipelineHook",
      properties={
        "Hook": "RegisterWebhook",
        "WebhookName": webhook_name,
        **self.trigger.to_properties(),
      },
    )
    self.register_webhook.node.add_dependency(webhook)

    self.start_pipeline = CustomResource(
      self,
      "start_pipeline",
      service_token=provider.service_token,
      resource_type="Custom::PipelineHook",
      properties={
        "Hook": "StartPipeline",
        "PipelineName": pipeline_name,
        **self.trigger.to_properties(),
      },
    )
    self.start_pipeline.node.add_dependency(self.register_webhook)
