#!/usr/bin/env python3
"""CDK application entry point for static website infrastructure."""

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import aws_cdk as cdk
import boto3
from dotenv import load_dotenv

from infrastructure.config import ConfigurationError, SiteConfig
from infrastructure.stacks.site_stack import StaticWebsiteStack

logger = logging.getLogger(__name__)

STACK_NAME = "scaffold-static-website"


def get_account_id(profile: str | None = None) -> str:
  """Get AWS account ID from current credentials."""
  sts = boto3.Session(profile_name=profile).client("sts")
  return str(sts.get_caller_identity()["Account"])


def load_config(app: cdk.App, environ: Mapping[str, str] | None = None) -> SiteConfig:
  """Load configuration from a YAML file given as context, or the environment."""
  config_path = app.node.try_get_context("config")
  if config_path:
    return SiteConfig.from_yaml(Path(config_path))

  if environ is None:
    # Populate os.environ from the project .env file
    load_dotenv(Path(__file__).parent.parent / ".env")
    environ = os.environ
  return SiteConfig.from_env(environ)


def synthesizer(config: SiteConfig) -> cdk.IStackSynthesizer | None:
  """Stage deployment assets under the configured backend bucket, if any."""
  if config.backend is None:
    return None

  if config.backend.lock_table:
    logger.warning(
      "Ignoring lock table %s: CloudFormation serializes stack operations",
      config.backend.lock_table,
    )

  return cdk.DefaultStackSynthesizer(
    file_assets_bucket_name=config.backend.bucket,
    bucket_prefix=f"{config.backend.key}/" if config.backend.key else None,
  )


def main() -> None:
  """Create CDK app with the static website stack."""
  logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

  app = cdk.App()

  try:
    config = load_config(app)
  except ConfigurationError as e:
    logger.error("Invalid configuration: %s", e)
    sys.exit(1)

  account_id = get_account_id(config.profile)
  logger.info(
    "Synthesizing %s for %s in %s",
    config.resource_names_prefix,
    ", ".join(config.domain_names),
    config.region,
  )

  StaticWebsiteStack(
    app,
    # Stack names don't allow underscores
    f"{STACK_NAME}-{config.resource_names_prefix.replace('_', '-')}",
    site_config=config,
    env=cdk.Environment(
      account=account_id,
      region=config.region,
    ),
    synthesizer=synthesizer(config),
    description=f"Static website infrastructure for {config.domain_names[0]}",
  )

  app.synth()


if __name__ == "__main__":
  main()
