"""Pytest fixtures for CDK construct tests."""

from collections.abc import Callable
from typing import Any

import aws_cdk as cdk
import pytest

from infrastructure.config import RepositoryConfig, SiteConfig


@pytest.fixture
def app() -> cdk.App:
  """Create a CDK App for testing."""
  return cdk.App()


@pytest.fixture
def stack(app: cdk.App) -> cdk.Stack:
  """Create a CDK Stack for testing."""
  return cdk.Stack(app, "TestStack", env=cdk.Environment(region="us-east-1"))


@pytest.fixture
def repository() -> RepositoryConfig:
  """GitHub repository coordinates for testing."""
  return RepositoryConfig(
    owner="acme",
    repo="website",
    branch="main",
    oauth_token="oauth-token",
    webhook_token="webhook-token",
  )


@pytest.fixture
def make_site_config(repository: RepositoryConfig) -> Callable[..., SiteConfig]:
  """Build a SiteConfig with overridable defaults."""

  def factory(**overrides: Any) -> SiteConfig:
    values: dict[str, Any] = {
      "resource_names_prefix": "acme",
      "domain_names": ["acme.com"],
      "repository": repository,
      "enable_https": True,
    }
    values.update(overrides)
    return SiteConfig(**values)

  return factory
