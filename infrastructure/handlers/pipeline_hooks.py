"""Custom Resource running the pipeline side effects CloudFormation can't declare.

- RegisterWebhook: registers the CodePipeline webhook with GitHub (works
  for personal accounts, unlike organization-only webhook resources).
- StartPipeline: starts a first pipeline execution.
"""

import logging

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def _deregister(codepipeline, webhook_name):
  try:
    codepipeline.deregister_webhook_with_third_party(webhookName=webhook_name)
    logger.info("Deregistered webhook %s", webhook_name)
  except ClientError as e:
    if e.response["Error"]["Code"] != "WebhookNotFoundException":
      raise
    logger.info("Webhook %s already gone", webhook_name)


def register_webhook(event, codepipeline):
  request_type = event["RequestType"]
  webhook_name = event["ResourceProperties"]["WebhookName"]

  if request_type == "Delete":
    _deregister(codepipeline, event["PhysicalResourceId"])
    return {"PhysicalResourceId": event["PhysicalResourceId"]}

  if request_type == "Update":
    # Always deregister before registering again
    _deregister(codepipeline, event["OldResourceProperties"]["WebhookName"])

  codepipeline.register_webhook_with_third_party(webhookName=webhook_name)
  logger.info("Registered webhook %s", webhook_name)
  return {"PhysicalResourceId": webhook_name}


def start_pipeline(event, codepipeline):
  pipeline_name = event["ResourceProperties"]["PipelineName"]
  physical_id = f"{pipeline_name}-start"

  if event["RequestType"] == "Delete":
    return {"PhysicalResourceId": event["PhysicalResourceId"]}

  response = codepipeline.start_pipeline_execution(name=pipeline_name)
  execution_id = response["pipelineExecutionId"]
  logger.info("Started pipeline %s execution %s", pipeline_name, execution_id)
  return {"PhysicalResourceId": physical_id, "Data": {"PipelineExecutionId": execution_id}}


HOOKS = {
  "RegisterWebhook": register_webhook,
  "StartPipeline": start_pipeline,
}


def on_event(event, context):
  hook = event["ResourceProperties"]["Hook"]
  if hook not in HOOKS:
    raise ValueError(f"Unknown pipeline hook: {hook}")
  return HOOKS[hook](event, boto3.client("codepipeline"))
