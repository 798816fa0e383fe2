"""Build specification rendering for CloudFormation ``Fn::Sub`` embedding."""

from pathlib import Path
from typing import Any

import yaml

TEMPLATES_DIR = Path(__file__).parent / "templates"
BUILDSPEC_TEMPLATE = TEMPLATES_DIR / "buildspec.yml"


class BuildSpecError(ValueError):
  """Raised when the build specification template has an unexpected shape."""


def escape_template(value: str) -> str:
  """Escape ``${`` so Fn::Sub renders the sequence literally.

  Fn::Sub turns ``${!Literal}`` into ``${Literal}``, so the escaped value
  evaluates back to the original text.
  """
  return value.replace("${", "${!")


def escape_strings(value: Any) -> Any:
  """Recursively escape every string of a parsed YAML document."""
  if isinstance(value, str):
    return escape_template(value)
  if isinstance(value, dict):
    return {escape_strings(k): escape_strings(v) for k, v in value.items()}
  if isinstance(value, list):
    return [escape_strings(item) for item in value]
  return value


def sub_placeholder(variable_name: str) -> str:
  """Reference a Fn::Sub variable."""
  return "${" + variable_name + "}"


def load_buildspec(path: Path | str = BUILDSPEC_TEMPLATE) -> dict[str, Any]:
  """Parse a buildspec template and check it exposes an ``env.variables`` map."""
  with open(path) as f:
    buildspec = yaml.safe_load(f)

  if not isinstance(buildspec, dict):
    raise BuildSpecError(f"Build specification {path} must be a YAML mapping")

  env = buildspec.get("env")
  if not isinstance(env, dict) or not isinstance(env.get("variables"), dict):
    raise BuildSpecError(f"Build specification {path} must define an env.variables map")

  return buildspec


def render_buildspec(
  buildspec: dict[str, Any],
  *,
  variables: dict[str, str],
  sub_variables: dict[str, str],
) -> str:
  """Render a buildspec as a Fn::Sub template body.

  Every literal string, including the injected ``variables``, is escaped.
  Each entry of ``sub_variables`` maps a build variable to the Fn::Sub
  variable that will hold its deployment-time value.
  """
  rendered = escape_strings(buildspec)
  rendered["env"]["variables"].update(escape_strings(variables))

  for build_variable, sub_variable in sub_variables.items():
    rendered["env"]["variables"][build_variable] = sub_placeholder(sub_variable)

  # Wide lines keep commands unfolded
  return yaml.safe_dump(rendered, sort_keys=False, default_flow_style=False, width=1000)
