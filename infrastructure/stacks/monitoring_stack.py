"""CDK stack for the shared website dashboard."""

from typing import Any

import aws_cdk as cdk
from aws_cdk import aws_cloudwatch as cloudwatch
from constructs import Construct


class MonitoringStack(cdk.Stack):
  """Stack owning the CloudWatch dashboard that website stacks add widgets to."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    dashboard_name: str,
    **kwargs: Any,
  ) -> None:
    super().__init__(scope, id, **kwargs)

    self.dashboard = cloudwatch.Dashboard(
      self,
      "Dashboard",
      dashboard_name=dashboard_name,
    )
