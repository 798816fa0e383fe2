"""CDK stack for the static website and its continuous deployment."""

from typing import Any

import aws_cdk as cdk
from constructs import Construct

from infrastructure.cdk_constructs import (
  ContinuousDeploymentConstruct,
  StaticSiteConstruct,
)
from infrastructure.config import SiteConfig


class StaticWebsiteStack(cdk.Stack):
  """Stack hosting a static website deployed from a GitHub repository."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    site_config: SiteConfig,
    **kwargs: Any,
  ) -> None:
    super().__init__(scope, id, **kwargs)

    prefix = site_config.resource_names_prefix

    self.static_website = StaticSiteConstruct(
      self,
      "static_website",
      resource_prefix=prefix,
      domain_names=site_config.domain_names,
      enable_https=site_config.enable_https,
      has_build_command=site_config.has_build_command,
      build_environment=site_config.build_environment,
    )

    self.continuous_deployment = ContinuousDeploymentConstruct(
      self,
      "continuous_deployment",
      resource_prefix=prefix,
      repository=site_config.repository,
      build_command=site_config.effective_build_command,
      build_output_dir=site_config.effective_build_output_dir,
      build_variables=self.static_website.build_variables,
      website_bucket=self.static_website.bucket,
      distribution=self.static_website.distribution,
    )

    # Outputs
    cdk.CfnOutput(
      self,
      "CloudFrontDistributionUri",
      value=self.static_website.distribution.distribution_domain_name,
      description="CloudFront distribution domain name",
    )
    cdk.CfnOutput(
      self,
      "PipelineExecutionDetailsUrl",
      value=self.continuous_deployment.execution_details_url,
      description="Deployment pipeline executions in the AWS console",
    )
    for index, record in enumerate(self.static_website.validation_records):
      cdk.CfnOutput(
        self,
        f"SslValidationDnsRecord{index}",
        value=cdk.Fn.join(" ", [record.name, record.type, record.value]),
        description=(
          f"DNS record (name type value) validating {site_config.domain_names[index]}"
        ),
      )

    cdk.Tags.of(self).add("Project", "scaffold-static-website")
    cdk.Tags.of(self).add("ResourceNamesPrefix", prefix)
