"""Custom Resource requesting an ACM certificate validated through DNS.

The validation records are handed back to CloudFormation instead of being
written to a hosted zone: the domain owner creates them out of band.
"""

import hashlib
import logging

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger()
logger.setLevel(logging.INFO)

RECORD_FIELDS = ("Name", "Type", "Value")


def _acm(props):
  return boto3.client("acm", region_name=props.get("Region"))


def _domain_names(props):
  return [props["DomainName"], *props.get("SubjectAlternativeNames", [])]


def on_event(event, context):
  request_type = event["RequestType"]
  props = event["ResourceProperties"]

  if request_type == "Delete":
    arn = event["PhysicalResourceId"]
    if not arn.startswith("arn:"):
      # Creation failed before a certificate existed
      return {"PhysicalResourceId": arn}
    try:
      _acm(props).delete_certificate(CertificateArn=arn)
      logger.info("Deleted certificate %s", arn)
    except ClientError as e:
      if e.response["Error"]["Code"] != "ResourceNotFoundException":
        raise
    return {"PhysicalResourceId": arn}

  # Updates request a new certificate: CloudFormation deletes the old
  # physical resource once the replacement exists.
  domain_names = _domain_names(props)
  request = {
    "DomainName": domain_names[0],
    "ValidationMethod": props.get("ValidationMethod", "DNS"),
    "IdempotencyToken": hashlib.sha256(event["RequestId"].encode()).hexdigest()[:32],
  }
  if len(domain_names) > 1:
    request["SubjectAlternativeNames"] = domain_names[1:]
  if props.get("Tags"):
    request["Tags"] = [{"Key": k, "Value": v} for k, v in props["Tags"].items()]

  arn = _acm(props).request_certificate(**request)["CertificateArn"]
  logger.info("Requested certificate %s for %s", arn, domain_names)
  return {"PhysicalResourceId": arn}


def is_complete(event, context):
  if event["RequestType"] == "Delete":
    return {"IsComplete": True}

  props = event["ResourceProperties"]
  arn = event["PhysicalResourceId"]
  certificate = _acm(props).describe_certificate(CertificateArn=arn)["Certificate"]
  options = {
    option["DomainName"]: option
    for option in certificate.get("DomainValidationOptions", [])
  }

  data = {}
  for index, domain_name in enumerate(_domain_names(props)):
    record = options.get(domain_name, {}).get("ResourceRecord")
    if not record:
      logger.info("Validation record for %s not published yet", domain_name)
      return {"IsComplete": False}
    for field in RECORD_FIELDS:
      data[f"DomainValidationOptions.{index}.ResourceRecord.{field}"] = record[field]

  return {"IsComplete": True, "Data": data}
