"""Composite construct for the static website hosting infrastructure."""

from constructs import Construct

from infrastructure.config import ConfigurationError

from .certificate import SslCertificate
from .distribution import CloudFrontDistribution
from .environment_variables import BuildEnvironmentVariables
from .storage import StorageBucket


class StaticSiteConstruct(Construct):
  """Components required to host a static website on AWS.

  Creates:
  - SSM SecureString parameters for the builds environment variables
  - ACM certificate (DNS validated, records created out of band)
  - S3 bucket for static content, with placeholder documents
  - CloudFront distribution (HTTPS once the certificate is issued)
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    resource_prefix: str,
    domain_names: list[str],
    enable_https: bool = False,
    has_build_command: bool = False,
    build_environment: dict[str, str] | None = None,
  ) -> None:
    if not domain_names:
      raise ConfigurationError("You must specify at least one domain name")

    super().__init__(scope, id)

    self.environment_variables = BuildEnvironmentVariables(
      self,
      "environment_variables",
      environment_variables=build_environment or {},
      resource_prefix=resource_prefix,
    )

    self.ssl = SslCertificate(
      self,
      "ssl",
      domain_names=domain_names,
      resource_prefix=resource_prefix,
    )

    self.storage = StorageBucket(
      self,
      "bucket",
      resource_prefix=resource_prefix,
      has_build_command=has_build_command,
    )

    self.cdn = CloudFrontDistribution(
      self,
      "cdn",
      bucket=self.storage.bucket,
      certificate_arn=self.ssl.certificate_arn,
      domain_names=domain_names,
      enable_https=enable_https,
      has_build_command=has_build_command,
      resource_prefix=resource_prefix,
    )

    # Handles for the continuous deployment
    self.bucket = self.storage.bucket
    self.distribution = self.cdn.distribution
    self.validation_records = self.ssl.validation_records
    self.build_variables = self.environment_variables.variables
