"""Tests for the configuration loader."""

import tempfile
from pathlib import Path

import pytest

from infrastructure.config import (
  DEFAULT_BUILD_COMMAND,
  DEFAULT_BUILD_OUTPUT_DIR,
  ConfigurationError,
  RepositoryConfig,
  SiteConfig,
  bucket_name_prefix,
)

BASE_ENV = {
  "SCAFFOLD_RESOURCE_NAMES_PREFIX": "acme",
  "DOMAIN_NAMES": "acme.com,www.acme.com",
  "ENABLE_HTTPS": "true",
  "GITHUB_OAUTH_TOKEN": "oauth-token",
  "GITHUB_WEBHOOK_TOKEN": "webhook-token",
  "GITHUB_REPO": "website",
  "GITHUB_REPO_OWNER": "acme",
  "GITHUB_BRANCH": "main",
}


class TestSiteConfig:
  """Test SiteConfig dataclass."""

  def test_default_values(self, repository: RepositoryConfig) -> None:
    """Verify default values are set correctly."""
    config = SiteConfig(
      resource_names_prefix="acme",
      domain_names=["acme.com"],
      repository=repository,
    )

    assert config.enable_https is False
    assert config.build_command is None
    assert config.build_environment == {}
    assert config.region == "us-east-1"
    assert config.profile is None
    assert config.backend is None

  def test_without_build_command(self, repository: RepositoryConfig) -> None:
    """Missing build settings fall back to no-op defaults."""
    config = SiteConfig(
      resource_names_prefix="acme",
      domain_names=["acme.com"],
      repository=repository,
    )

    assert config.has_build_command is False
    assert config.effective_build_command == DEFAULT_BUILD_COMMAND
    assert config.effective_build_output_dir == DEFAULT_BUILD_OUTPUT_DIR

  def test_with_build_command(self, repository: RepositoryConfig) -> None:
    """A build command enables the build step."""
    config = SiteConfig(
      resource_names_prefix="acme",
      domain_names=["acme.com"],
      repository=repository,
      build_command="npm run build",
      build_output_dir="dist",
    )

    assert config.has_build_command is True
    assert config.effective_build_command == "npm run build"
    assert config.effective_build_output_dir == "dist"

  def test_validate_rejects_empty_domain_names(self, repository: RepositoryConfig) -> None:
    """At least one domain name is required."""
    config = SiteConfig(resource_names_prefix="acme", domain_names=[], repository=repository)

    with pytest.raises(ConfigurationError, match="at least one domain name"):
      config.validate()

  @pytest.mark.parametrize("prefix", ["", "acme site", "acme/site", "-acme", "acmé"])
  def test_validate_rejects_invalid_prefix(
    self, repository: RepositoryConfig, prefix: str
  ) -> None:
    """The resource names prefix is restricted to a safe charset."""
    config = SiteConfig(
      resource_names_prefix=prefix, domain_names=["acme.com"], repository=repository
    )

    with pytest.raises(ConfigurationError, match="Resource names prefix"):
      config.validate()

  def test_validate_requires_repository(self) -> None:
    """Repository coordinates are required by the pipeline."""
    config = SiteConfig(
      resource_names_prefix="acme",
      domain_names=["acme.com"],
      repository=RepositoryConfig(
        owner="acme", repo="", branch="main", oauth_token="t", webhook_token="w"
      ),
    )

    with pytest.raises(ConfigurationError, match="repo is required"):
      config.validate()


class TestBucketNamePrefix:
  """Test the bucket name sanitizer."""

  def test_lowercases_and_replaces_invalid_characters(self) -> None:
    """Underscores and uppercase letters are not allowed in bucket names."""
    assert bucket_name_prefix("Acme_Site") == "acme-site"

  def test_keeps_valid_characters(self) -> None:
    """Dots and dashes are kept."""
    assert bucket_name_prefix("acme.site-1") == "acme.site-1"


class TestConfigFromEnv:
  """Test SiteConfig.from_env loading."""

  def test_load_simple_config(self) -> None:
    """Test loading a complete environment."""
    config = SiteConfig.from_env(BASE_ENV)

    assert config.resource_names_prefix == "acme"
    assert config.domain_names == ["acme.com", "www.acme.com"]
    assert config.enable_https is True
    assert config.repository.owner == "acme"
    assert config.repository.repo == "website"
    assert config.repository.branch == "main"
    assert config.has_build_command is False

  def test_https_disabled_unless_true(self) -> None:
    """Anything but "true" leaves HTTPS disabled."""
    config = SiteConfig.from_env({**BASE_ENV, "ENABLE_HTTPS": "yes"})

    assert config.enable_https is False

  def test_build_variables_become_build_environment(self) -> None:
    """BUILD_* variables are stripped of their prefix, reserved ones excluded."""
    config = SiteConfig.from_env(
      {
        **BASE_ENV,
        "BUILD_COMMAND": "npm run build",
        "BUILD_OUTPUT_DIR": "dist",
        "BUILD_API_URL": "https://api.acme.com",
        "BUILD_SECRET": "s3cr3t",
        "OTHER": "ignored",
      }
    )

    assert config.build_command == "npm run build"
    assert config.build_output_dir == "dist"
    assert config.build_environment == {
      "API_URL": "https://api.acme.com",
      "SECRET": "s3cr3t",
    }

  def test_rejects_invalid_variable_names(self) -> None:
    """Any environment variable name outside the safe pattern fails fast."""
    with pytest.raises(ConfigurationError, match="Environment variable names"):
      SiteConfig.from_env({**BASE_ENV, "BUILD_API.URL": "x"})

  def test_rejects_empty_domain_names(self) -> None:
    """Blank domain lists are rejected."""
    with pytest.raises(ConfigurationError, match="at least one domain name"):
      SiteConfig.from_env({**BASE_ENV, "DOMAIN_NAMES": " , "})

  def test_region_and_profile(self) -> None:
    """Region and profile come from the SCAFFOLD_AWS_* variables."""
    config = SiteConfig.from_env(
      {**BASE_ENV, "SCAFFOLD_AWS_REGION": "eu-west-1", "SCAFFOLD_AWS_PROFILE": "acme"}
    )

    assert config.region == "eu-west-1"
    assert config.profile == "acme"

  def test_backend(self) -> None:
    """Backend coordinates are loaded when a bucket is set."""
    config = SiteConfig.from_env(
      {
        **BASE_ENV,
        "SCAFFOLD_AWS_S3_BACKEND_BUCKET": "acme-state",
        "SCAFFOLD_AWS_S3_BACKEND_KEY": "website",
        "SCAFFOLD_AWS_S3_BACKEND_DYNAMODB_TABLE": "acme-locks",
      }
    )

    assert config.backend is not None
    assert config.backend.bucket == "acme-state"
    assert config.backend.key == "website"
    assert config.backend.lock_table == "acme-locks"

  def test_no_backend_without_bucket(self) -> None:
    """An empty backend bucket means no backend."""
    config = SiteConfig.from_env({**BASE_ENV, "SCAFFOLD_AWS_S3_BACKEND_BUCKET": ""})

    assert config.backend is None


class TestConfigFromYaml:
  """Test SiteConfig.from_yaml loading."""

  def test_load_yaml_config(self) -> None:
    """Test loading a YAML configuration."""
    yaml_content = """
resource_names_prefix: acme
domain_names:
  - acme.com
  - www.acme.com
enable_https: true
build_command: npm run build
build_output_dir: dist
build_environment:
  API_URL: https://api.acme.com
region: eu-west-1
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

      config = SiteConfig.from_yaml(Path(f.name))

    assert config.domain_names == ["acme.com", "www.acme.com"]
    assert config.enable_https is True
    assert config.build_command == "npm run build"
    assert config.build_environment == {"API_URL": "https://api.acme.com"}
    assert config.region == "eu-west-1"
    assert config.repository.branch == "main"

  def test_comma_separated_domain_names(self) -> None:
    """Domain names may be given as a comma-separated string."""
    yaml_content = """
resource_names_prefix: acme
domain_names: acme.com, www.acme.com
repository:
  owner: acme
  repo: website
  branch: main
  oauth_token: oauth-token
  webhook_token: webhook-token
backend:
  bucket: acme-state
"""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
      f.write(yaml_content)
      f.flush()

      config = SiteConfig.from_yaml(Path(f.name))

    assert config.domain_names == ["acme.com", "www.acme.com"]
    assert config.backend is not None
    assert config.backend.bucket == "acme-state"
    assert config.backend.lock_table is None

  def test_missing_repository_fails(self) -> None:
    """Validation runs on YAML configurations too."""
    yaml_content = """
resource_names_prefix: acme
domain_names: [acme.com]
"""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
      f.write(yaml_content)
      f.flush()

      with pytest.raises(ConfigurationError):
        SiteConfig.from_yaml(Path(f.name))
