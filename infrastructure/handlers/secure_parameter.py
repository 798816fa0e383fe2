"""Custom Resource managing SSM SecureString parameters.

CloudFormation cannot create SecureString parameters, so they are put
through the SSM API.
"""

import logging

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger()
logger.setLevel(logging.INFO)


def on_event(event, context):
  request_type = event["RequestType"]
  props = event["ResourceProperties"]
  name = props["Name"]
  ssm = boto3.client("ssm")

  if request_type == "Delete":
    try:
      ssm.delete_parameter(Name=event["PhysicalResourceId"])
      logger.info("Deleted parameter %s", event["PhysicalResourceId"])
    except ClientError as e:
      if e.response["Error"]["Code"] != "ParameterNotFound":
        raise
    return {"PhysicalResourceId": event["PhysicalResourceId"]}

  request = {"Name": name, "Value": props["Value"], "Type": "SecureString"}
  if request_type == "Update" and event["PhysicalResourceId"] == name:
    # Tags can't be combined with Overwrite; they were set on creation
    ssm.put_parameter(Overwrite=True, **request)
  else:
    tags = [{"Key": k, "Value": v} for k, v in props.get("Tags", {}).items()]
    ssm.put_parameter(Tags=tags, **request)

  logger.info("Stored parameter %s", name)
  return {"PhysicalResourceId": name, "Data": {"Name": name}}
