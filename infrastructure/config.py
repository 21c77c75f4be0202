"""Configuration loader for the website stacks."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml

CLOUDFRONT_CERTIFICATE_REGION = "us-east-1"


class Environments(str, Enum):
  """Deployment tier."""

  PROD = "prod"
  DEV = "dev"

  @classmethod
  def from_name(cls, value: str) -> "Environments":
    """Parse an environment name, accepting long spellings."""
    aliases = {
      "prod": cls.PROD,
      "production": cls.PROD,
      "dev": cls.DEV,
      "development": cls.DEV,
    }
    try:
      return aliases[value.strip().lower()]
    except KeyError:
      raise ValueError(f"Unknown environment: {value}") from None


@dataclass
class WebsiteConfig:
  """Configuration for a single website built from a workspace package."""

  package: str
  mode: str
  runtime: str = "nodejs20"
  aliases: list[str] | None = None
  hosted_zone_name: str | None = None


@dataclass
class Config:
  """Website deployment configuration."""

  environment: Environments = Environments.DEV
  region: str = "us-east-1"
  hosted_zone_name: str | None = None
  dashboard_name: str = "AstroAWS"
  workspace_root: Path = Path(".")
  websites: list[WebsiteConfig] = field(default_factory=list)

  @classmethod
  def from_yaml(cls, path: Path | str = "websites.yaml") -> "Config":
    """Load configuration from YAML file."""
    with open(path) as f:
      data = yaml.safe_load(f) or {}

    defaults = data.get("defaults", {})
    hosted_zone_name = data.get("hosted_zone_name")
    websites: list[WebsiteConfig] = []

    for website_data in data.get("websites", []):
      # Merge defaults with website-specific config
      merged = {**defaults, **website_data}

      aliases = merged.get("aliases")
      websites.append(
        WebsiteConfig(
          package=merged["package"],
          mode=merged["mode"],
          runtime=merged.get("runtime", "nodejs20"),
          aliases=list(aliases) if aliases else None,
          hosted_zone_name=merged.get("hosted_zone_name", hosted_zone_name),
        )
      )

    # Workspace root is relative to the config file
    workspace_root = Path(path).parent / data.get("workspace_root", ".")

    # CloudFront only accepts certificates issued in us-east-1
    region = data.get("region", "us-east-1")
    if hosted_zone_name and region != CLOUDFRONT_CERTIFICATE_REGION:
      raise ValueError(
        f"Region {region} cannot hold the certificate for {hosted_zone_name}; "
        f"use {CLOUDFRONT_CERTIFICATE_REGION}"
      )

    return cls(
      environment=Environments.from_name(str(data.get("environment", "dev"))),
      region=region,
      hosted_zone_name=hosted_zone_name,
      dashboard_name=data.get("dashboard_name", "AstroAWS"),
      workspace_root=workspace_root,
      websites=websites,
    )
