"""CDK constructs for static website infrastructure."""

from .action_configuration import (
  CodeBuildConfiguration,
  GitHubSourceConfiguration,
  apply_action_configuration,
)
from .build import BuildProject
from .certificate import SslCertificate, ValidationDnsRecord
from .continuous_deployment import ContinuousDeploymentConstruct
from .distribution import CloudFrontDistribution
from .environment_variables import BuildEnvironmentVariables, BuildVariable
from .initial_content import InitialContent
from .pipeline import DeploymentPipeline
from .static_site import StaticSiteConstruct
from .storage import StorageBucket
from .webhook_registration import WebhookRegistration, WebhookTrigger

__all__ = [
  "BuildEnvironmentVariables",
  "BuildProject",
  "BuildVariable",
  "CloudFrontDistribution",
  "CodeBuildConfiguration",
  "ContinuousDeploymentConstruct",
  "DeploymentPipeline",
  "GitHubSourceConfiguration",
  "InitialContent",
  "SslCertificate",
  "StaticSiteConstruct",
  "StorageBucket",
  "ValidationDnsRecord",
  "WebhookRegistration",
  "WebhookTrigger",
  "apply_action_configuration",
]
