#!/usr/bin/env python3
"""CDK application entry point for Astro website infrastructure."""

import logging
import re
import sys
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import aws_cdk as cdk
import boto3

from infrastructure.config import Config, Environments
from infrastructure.stacks.domain_stack import DomainStack
from infrastructure.stacks.monitoring_stack import MonitoringStack
from infrastructure.stacks.website_stack import WebsiteStack
from infrastructure.workspace import find_workspace_root, get_pnpm_workspaces

logger = logging.getLogger(__name__)


def get_account_id() -> str:
  """Get AWS account ID from current credentials."""
  sts = boto3.client("sts")
  return str(sts.get_caller_identity()["Account"])


def get_stack_name(package: str, mode: str) -> str:
  """Stack name for a website, e.g. ``@astro-aws/docs`` -> ``Website-astro-aws-docs-static``."""
  slug = re.sub(r"[^A-Za-z0-9]+", "-", package).strip("-")
  return f"Website-{slug}-{mode}"


def main() -> None:
  """Create CDK app with a stack for each configured website."""
  logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
  app = cdk.App()

  # Load configuration
  config_path = app.node.try_get_context("config") or "websites.yaml"
  config = Config.from_yaml(Path(config_path))

  environment_override = app.node.try_get_context("environment")
  environment = (
    Environments.from_name(environment_override)
    if environment_override
    else config.environment
  )

  # Resolve workspace packages once for every website
  workspaces = get_pnpm_workspaces(find_workspace_root(config.workspace_root))

  env = cdk.Environment(account=get_account_id(), region=config.region)

  monitoring = MonitoringStack(
    app,
    f"Monitoring-{environment.value}",
    dashboard_name=f"{config.dashboard_name}-{environment.value}",
    env=env,
    description="Shared dashboard for website stacks",
  )

  domain = None
  if config.hosted_zone_name:
    domain = DomainStack(
      app,
      f"Domain-{environment.value}",
      hosted_zone_name=config.hosted_zone_name,
      env=env,
      description=f"Hosted zone and certificate for {config.hosted_zone_name}",
    )

  for website in config.websites:
    stack_name = get_stack_name(website.package, website.mode)
    logger.info("Defining %s for %s (%s)", stack_name, website.package, website.mode)
    WebsiteStack(
      app,
      stack_name,
      environment=environment,
      mode=website.mode,
      package=website.package,
      runtime=website.runtime,
      workspaces=workspaces,
      aliases=website.aliases,
      hosted_zone_name=website.hosted_zone_name,
      certificate=domain.certificate if domain is not None else None,
      hosted_zone=domain.hosted_zone if domain is not None else None,
      cloudwatch_dashboard=monitoring.dashboard,
      env=env,
      description=f"Astro website infrastructure for {website.package}",
    )

  # Tag everything the app defines
  cdk.Tags.of(app).add("Project", "astro-aws")
  cdk.Tags.of(app).add("Environment", environment.value)

  app.synth()


if __name__ == "__main__":
  main()
