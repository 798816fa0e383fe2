"""ACM certificate with DNS validation records handed to the domain owner."""

from dataclasses import dataclass

from aws_cdk import CustomResource, Duration
from aws_cdk import aws_iam as iam
from aws_cdk import aws_lambda as lambda_
from aws_cdk import custom_resources as cr
from constructs import Construct

from infrastructure.config import ConfigurationError
from infrastructure.handlers import handler_source

# CloudFront only accepts certificates issued in US East (N. Virginia)
CERTIFICATE_REGION = "us-east-1"


@dataclass(frozen=True)
class ValidationDnsRecord:
  """A DNS record needed to validate the certificate.

  Every field is a token resolved by CloudFormation at deployment time.
  """

  name: str
  type: str
  value: str


class SslCertificate(Construct):
  """ACM certificate validated through DNS records created out of band.

  The first domain name is the certificate's primary domain, the others
  are subject alternative names. Validation records come back in the same
  order as the domain names.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    domain_names: list[str],
    resource_prefix: str,
  ) -> None:
    if not domain_names:
      raise ConfigurationError("You must specify at least one domain name")

    super().__init__(scope, id)

    code = lambda_.Code.from_inline(handler_source("certificate_request"))

    on_event = lambda_.Function(
      self,
      f"{resource_prefix}-certificate-request-lambda",
      runtime=lambda_.Runtime.PYTHON_3_12,
      handler="index.on_event",
      code=code,
      timeout=Duration.seconds(60),
    )
    is_complete = lambda_.Function(
      self,
      f"{resource_prefix}-certificate-validation-lambda",
      runtime=lambda_.Runtime.PYTHON_3_12,
      handler="index.is_complete",
      code=code,
      timeout=Duration.seconds(60),
    )

    # RequestCertificate doesn't support resource-level permissions
    acm_policy = iam.PolicyStatement(
      actions=[
        "acm:RequestCertificate",
        "acm:DescribeCertificate",
        "acm:DeleteCertificate",
        "acm:AddTagsToCertificate",
      ],
      resources=["*"],
    )
    on_event.add_to_role_policy(acm_policy)
    is_complete.add_to_role_policy(acm_policy)

    provider = cr.Provider(
      self,
      f"{resource_prefix}-certificate-provider",
      on_event_handler=on_event,
      is_complete_handler=is_complete,
      query_interval=Duration.seconds(10),
      total_timeout=Duration.minutes(10),
    )

    properties: dict[str, object] = {
      "DomainName": domain_names[0],
      "Region": CERTIFICATE_REGION,
      "ValidationMethod": "DNS",
      "Tags": {"Name": f"{resource_prefix}_acm_certificate"},
    }
    if len(domain_names) > 1:
      properties["SubjectAlternativeNames"] = domain_names[1:]

    self.certificate = CustomResource(
      self,
      "Certificate",
      service_token=provider.service_token,
      resource_type="Custom::CertificateRequest",
      properties=properties,
    )

    self.certificate_arn = self.certificate.ref

    self.validation_records = [
      ValidationDnsRecord(
        name=self._validation_attribute(index, "Name"),
        type=self._validation_attribute(index, "Type"),
        value=self._validation_attribute(index, "Value"),
      )
      for index in range(len(domain_names))
    ]

  def _validation_attribute(self, index: int, field: str) -> str:
    return self.certificate.get_att_string(
      f"DomainValidationOptions.{index}.ResourceRecord.{field}"
    )
