"""Configuration loader for the static website infrastructure."""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

ENVIRONMENT_VARIABLE_NAME_PATTERN = re.compile(r"^[a-z0-9_-]+$", re.IGNORECASE)
RESOURCE_NAMES_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")

# Environment variables that start with this prefix become build secrets
BUILD_VARIABLES_PREFIX = "BUILD_"
RESERVED_BUILD_VARIABLES = ("BUILD_COMMAND", "BUILD_OUTPUT_DIR")

DEFAULT_BUILD_COMMAND = "echo No build command"
DEFAULT_BUILD_OUTPUT_DIR = "."


class ConfigurationError(ValueError):
  """Raised when the configuration cannot produce a valid infrastructure."""


def bucket_name_prefix(resource_names_prefix: str) -> str:
  """Make the resource names prefix usable in an S3 bucket name."""
  return re.sub(r"[^a-z0-9.-]", "-", resource_names_prefix.lower())


@dataclass
class RepositoryConfig:
  """GitHub repository used as the pipeline source."""

  owner: str
  repo: str
  branch: str
  oauth_token: str
  webhook_token: str


@dataclass
class BackendConfig:
  """Where deployment state and assets are kept."""

  bucket: str
  key: str = ""
  lock_table: str | None = None


@dataclass
class SiteConfig:
  """Configuration for the static website and its deployment pipeline."""

  resource_names_prefix: str
  domain_names: list[str]
  repository: RepositoryConfig
  enable_https: bool = False
  build_command: str | None = None
  build_output_dir: str | None = None
  build_environment: dict[str, str] = field(default_factory=dict)
  region: str = "us-east-1"
  profile: str | None = None
  backend: BackendConfig | None = None

  @property
  def has_build_command(self) -> bool:
    """Whether the website is built before being deployed (SPA routing)."""
    return bool(self.build_command)

  @property
  def effective_build_command(self) -> str:
    return self.build_command or DEFAULT_BUILD_COMMAND

  @property
  def effective_build_output_dir(self) -> str:
    return self.build_output_dir or DEFAULT_BUILD_OUTPUT_DIR

  def validate(self) -> None:
    """Check every precondition, raising ConfigurationError on the first failure."""
    if not RESOURCE_NAMES_PREFIX_PATTERN.match(self.resource_names_prefix or ""):
      raise ConfigurationError(
        "Resource names prefix must match "
        f"{RESOURCE_NAMES_PREFIX_PATTERN.pattern} format, "
        f"got {self.resource_names_prefix!r}"
      )

    if not self.domain_names:
      raise ConfigurationError("You must specify at least one domain name")

    for attribute in ("owner", "repo", "branch", "oauth_token", "webhook_token"):
      if not getattr(self.repository, attribute):
        raise ConfigurationError(f"GitHub repository {attribute} is required")

    for name in self.build_environment:
      if not ENVIRONMENT_VARIABLE_NAME_PATTERN.match(name):
        raise ConfigurationError(
          f"Build environment variable names must match "
          f"{ENVIRONMENT_VARIABLE_NAME_PATTERN.pattern} format, got {name!r}"
        )

  @classmethod
  def from_env(cls, environ: Mapping[str, str]) -> "SiteConfig":
    """Load configuration from environment variables."""
    for name in environ:
      if not ENVIRONMENT_VARIABLE_NAME_PATTERN.match(name):
        raise ConfigurationError(
          "Environment variable names must match "
          f"{ENVIRONMENT_VARIABLE_NAME_PATTERN.pattern} format, got {name!r}"
        )

    build_environment = {
      name[len(BUILD_VARIABLES_PREFIX) :]: value
      for name, value in environ.items()
      if name.startswith(BUILD_VARIABLES_PREFIX)
      and name not in RESERVED_BUILD_VARIABLES
    }

    backend = None
    if environ.get("SCAFFOLD_AWS_S3_BACKEND_BUCKET"):
      backend = BackendConfig(
        bucket=environ["SCAFFOLD_AWS_S3_BACKEND_BUCKET"],
        key=environ.get("SCAFFOLD_AWS_S3_BACKEND_KEY", ""),
        lock_table=environ.get("SCAFFOLD_AWS_S3_BACKEND_DYNAMODB_TABLE") or None,
      )

    config = cls(
      resource_names_prefix=environ.get("SCAFFOLD_RESOURCE_NAMES_PREFIX", ""),
      domain_names=_split_domain_names(environ.get("DOMAIN_NAMES", "")),
      repository=RepositoryConfig(
        owner=environ.get("GITHUB_REPO_OWNER", ""),
        repo=environ.get("GITHUB_REPO", ""),
        branch=environ.get("GITHUB_BRANCH", ""),
        oauth_token=environ.get("GITHUB_OAUTH_TOKEN", ""),
        webhook_token=environ.get("GITHUB_WEBHOOK_TOKEN", ""),
      ),
      enable_https=environ.get("ENABLE_HTTPS", "").lower() == "true",
      build_command=environ.get("BUILD_COMMAND") or None,
      build_output_dir=environ.get("BUILD_OUTPUT_DIR") or None,
      build_environment=build_environment,
      region=environ.get("SCAFFOLD_AWS_REGION") or "us-east-1",
      profile=environ.get("SCAFFOLD_AWS_PROFILE") or None,
      backend=backend,
    )
    config.validate()
    logger.info(
      "Loaded configuration from the environment (%d build variables)",
      len(build_environment),
    )
    return config

  @classmethod
  def from_yaml(cls, path: Path | str) -> "SiteConfig":
    """Load configuration from a YAML file."""
    with open(path) as f:
      data = yaml.safe_load(f) or {}

    repository_data = data.get("repository", {})
    backend_data = data.get("backend")

    domain_names = data.get("domain_names", [])
    if isinstance(domain_names, str):
      domain_names = _split_domain_names(domain_names)

    config = cls(
      resource_names_prefix=data.get("resource_names_prefix", ""),
      domain_names=list(domain_names),
      repository=RepositoryConfig(
        owner=repository_data.get("owner", ""),
        repo=repository_data.get("repo", ""),
        branch=repository_data.get("branch", ""),
        oauth_token=repository_data.get("oauth_token", ""),
        webhook_token=repository_data.get("webhook_token", ""),
      ),
      enable_https=bool(data.get("enable_https", False)),
      build_command=data.get("build_command") or None,
      build_output_dir=data.get("build_output_dir") or None,
      build_environment={
        str(k): str(v) for k, v in (data.get("build_environment") or {}).items()
      },
      region=data.get("region", "us-east-1"),
      profile=data.get("profile"),
      backend=BackendConfig(
        bucket=backend_data["bucket"],
        key=backend_data.get("key", ""),
        lock_table=backend_data.get("lock_table"),
      )
      if backend_data
      else None,
    )
    config.validate()
    logger.info("Loaded configuration from %s", path)
    return config


def _split_domain_names(value: str) -> list[str]:
  return [name.strip() for name in value.split(",") if name.strip()]
