"""SSM SecureString parameters holding the builds environment variables."""

from dataclasses import dataclass

from aws_cdk import ArnFormat, CustomResource, Duration, Fn, Stack
from aws_cdk import aws_iam as iam
from aws_cdk import aws_lambda as lambda_
from aws_cdk import custom_resources as cr
from constructs import Construct

from infrastructure.handlers import handler_source
from infrastructure.templating import escape_template


def builds_parameters_path(resource_prefix: str) -> str:
  """Parameter path owned by this deployment.

  Must match the build role policy resources.
  """
  return f"/{resource_prefix}/builds-env"


@dataclass(frozen=True)
class BuildVariable:
  """A build environment variable backed by a SecureString parameter."""

  key: str
  parameter_name: str  # token: the parameter's computed name
  resource: CustomResource


class BuildEnvironmentVariables(Construct):
  """One SecureString parameter per build environment variable.

  Each parameter is tagged with the variable's original name so that
  consumers holding only a reference can recover it.
  """

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    environment_variables: dict[str, str],
    resource_prefix: str,
  ) -> None:
    super().__init__(scope, id)

    self.variables: list[BuildVariable] = []

    if not environment_variables:
      return

    path = builds_parameters_path(resource_prefix)

    handler = lambda_.Function(
      self,
      f"{resource_prefix}-secure-parameter-lambda",
      runtime=lambda_.Runtime.PYTHON_3_12,
      handler="index.on_event",
      code=lambda_.Code.from_inline(handler_source("secure_parameter")),
      timeout=Duration.seconds(30),
    )

    handler.add_to_role_policy(
      iam.PolicyStatement(
        actions=[
          "ssm:PutParameter",
          "ssm:DeleteParameter",
          "ssm:AddTagsToResource",
        ],
        resources=[
          Stack.of(self).format_arn(
            service="ssm",
            resource="parameter",
            resource_name=f"{path.lstrip('/')}/*",
            arn_format=ArnFormat.SLASH_RESOURCE_NAME,
          )
        ],
      )
    )

    provider = cr.Provider(
      self,
      f"{resource_prefix}-secure-parameter-provider",
      on_event_handler=handler,
    )

    for name, value in environment_variables.items():
      parameter = CustomResource(
        self,
        f"ssm_parameter_builds_{name.lower()}",
        service_token=provider.service_token,
        resource_type="Custom::SecureParameter",
        properties={
          "Name": f"{path}/{name}",
          # Fn::Sub renders "${!" back to "${"
          "Value": Fn.sub(escape_template(value)),
          "Tags": {"name": name},
        },
      )
      self.variables.append(
        BuildVariable(
          key=name,
          parameter_name=parameter.get_att_string("Name"),
          resource=parameter,
        )
      )
