"""Tests for the CDK application entry point."""

import logging
import tempfile
from collections.abc import Callable

import aws_cdk as cdk
import pytest

from infrastructure import app as cdk_app
from infrastructure.config import BackendConfig, SiteConfig


class TestSynthesizer:
  """Tests for the backend to synthesizer mapping."""

  def test_default_without_backend(self, make_site_config: Callable[..., SiteConfig]) -> None:
    """No backend keeps the default synthesizer."""
    assert cdk_app.synthesizer(make_site_config()) is None

  def test_backend_bucket(self, make_site_config: Callable[..., SiteConfig]) -> None:
    """A backend bucket stages the assets."""
    config = make_site_config(backend=BackendConfig(bucket="acme-state", key="website"))

    assert isinstance(cdk_app.synthesizer(config), cdk.DefaultStackSynthesizer)

  def test_lock_table_is_ignored(
    self, make_site_config: Callable[..., SiteConfig], caplog: pytest.LogCaptureFixture
  ) -> None:
    """A lock table has no counterpart and is reported."""
    config = make_site_config(
      backend=BackendConfig(bucket="acme-state", lock_table="acme-locks")
    )

    with caplog.at_level(logging.WARNING):
      cdk_app.synthesizer(config)

    assert "acme-locks" in caplog.text


class TestLoadConfig:
  """Tests for load_config."""

  def test_yaml_from_context(self) -> None:
    """A config file given as context takes precedence."""
    yaml_content = """
resource_names_prefix: acme
domain_names: [acme.com]
repository:
  owner: acme
  repo: website
  branch: main
  oauth_token: oauth-token
  webhook_token: webhook-token
"""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
      f.write(yaml_content)
      f.flush()

      config = cdk_app.load_config(cdk.App(context={"config": f.name}))

    assert config.resource_names_prefix == "acme"
    assert config.domain_names == ["acme.com"]

  def test_environment(self) -> None:
    """Without context, the environment is loaded."""
    environ = {
      "SCAFFOLD_RESOURCE_NAMES_PREFIX": "acme",
      "DOMAIN_NAMES": "acme.com",
      "GITHUB_OAUTH_TOKEN": "oauth-token",
      "GITHUB_WEBHOOK_TOKEN": "webhook-token",
      "GITHUB_REPO": "website",
      "GITHUB_REPO_OWNER": "acme",
      "GITHUB_BRANCH": "main",
    }

    config = cdk_app.load_config(cdk.App(), environ)

    assert config.repository.repo == "website"
