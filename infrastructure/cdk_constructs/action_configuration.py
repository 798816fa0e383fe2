"""Typed configuration of the pipeline actions.

Action configurations are injected as raw property overrides addressed by
stage and action index. Reordering stages or actions silently breaks the
addressing, so every override goes through apply_action_configuration.
"""

from dataclasses import dataclass
from typing import Any, Protocol

from aws_cdk import aws_codepipeline as codepipeline


class ActionConfiguration(Protocol):
  def to_properties(self) -> dict[str, Any]: ...


@dataclass(frozen=True)
class GitHubSourceConfiguration:
  """ThirdParty/GitHub (version 1) source action configuration."""

  owner: str
  repo: str
  branch: str
  oauth_token: str
  poll_for_source_changes: bool = False

  def to_properties(self) -> dict[str, Any]:
    return {
      "Branch": self.branch,
      "OAuthToken": self.oauth_token,
      "Owner": self.owner,
      "PollForSourceChanges": self.poll_for_source_changes,
      "Repo": self.repo,
    }


@dataclass(frozen=True)
class CodeBuildConfiguration:
  """AWS/CodeBuild build action configuration."""

  project_name: str

  def to_properties(self) -> dict[str, Any]:
    return {"ProjectName": self.project_name}


def action_configuration_path(stage_index: int, action_index: int) -> str:
  return f"Stages.{stage_index}.Actions.{action_index}.Configuration"


def apply_action_configuration(
  pipeline: codepipeline.CfnPipeline,
  stage_index: int,
  action_index: int,
  configuration: ActionConfiguration,
) -> None:
  """Set the configuration of one pipeline action through a property override."""
  pipeline.add_property_override(
    action_configuration_path(stage_index, action_index),
    configuration.to_properties(),
  )
