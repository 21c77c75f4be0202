"""CDK stack hosting a single Astro website."""

import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import aws_cdk as cdk
from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudwatch as cloudwatch
from aws_cdk import aws_lambda as lambda_
from aws_cdk import aws_route53 as route53
from aws_cdk import aws_route53_targets as targets
from aws_cdk import aws_s3 as s3
from constructs import Construct

from infrastructure.cdk_constructs import (
  BasicGraphWidget,
  BucketOptions,
  DistributionMetric,
  DistributionOptions,
  FunctionOptions,
  WebApp,
)
from infrastructure.config import Environments
from infrastructure.workspace import get_workspace_path

CONTENT_SECURITY_POLICY = (
  "default-src 'self'; style-src 'self' 'unsafe-inline'; "
  "script-src 'self' 'unsafe-inline'; upgrade-insecure-requests"
)


def get_dist_dir(mode: str) -> str:
  """Build output subdirectory for an Astro output mode."""
  return "dist" if mode == "static" else f"dist/{mode}"


def get_domain_names(
  aliases: Sequence[str] | None,
  hosted_zone_name: str | None = None,
) -> list[str] | None:
  """Qualify each alias with the hosted zone name, when there is one."""
  if not aliases:
    return None
  return [".".join(part for part in (alias, hosted_zone_name) if part) for alias in aliases]


class WebsiteStack(cdk.Stack):
  """Stack for an Astro website built from a pnpm workspace package."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    environment: Environments,
    mode: str,
    package: str,
    runtime: str,
    workspaces: Mapping[str, Path | str],
    aliases: Sequence[str] | None = None,
    hosted_zone_name: str | None = None,
    certificate: acm.ICertificate | None = None,
    hosted_zone: route53.IHostedZone | None = None,
    cloudwatch_dashboard: cloudwatch.Dashboard | None = None,
    **kwargs: Any,
  ) -> None:
    # Resolve the package before declaring anything
    workspace_path = get_workspace_path(workspaces, package)

    super().__init__(scope, id, **kwargs)

    self.mode = mode
    self.dist_dir = get_dist_dir(mode)
    self.domain_names = get_domain_names(aliases, hosted_zone_name)
    label_prefix = mode.upper()

    cache_policy = cloudfront.CachePolicy(
      self,
      "CachePolicy",
      min_ttl=cdk.Duration.days(365),
    )

    access_log_bucket = s3.Bucket(
      self,
      "AccessLogBucket",
      access_control=s3.BucketAccessControl.LOG_DELIVERY_WRITE,
      object_ownership=s3.ObjectOwnership.OBJECT_WRITER,
      block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
      encryption=s3.BucketEncryption.S3_MANAGED,
    )

    response_headers_policy = cloudfront.ResponseHeadersPolicy(
      self,
      "ResponseHeadersPolicy",
      security_headers_behavior=cloudfront.ResponseSecurityHeadersBehavior(
        content_security_policy=cloudfront.ResponseHeadersContentSecurityPolicy(
          content_security_policy=CONTENT_SECURITY_POLICY,
          override=True,
        ),
      ),
    )

    web_acl_id = os.environ.get("WEB_ACL_ARN") or None

    self.web_app = WebApp(
      self,
      "WebApp",
      out_dir=workspace_path / self.dist_dir,
      distribution_options=DistributionOptions(
        cache_policy=cache_policy,
        api_cache_policy=cache_policy,
        response_headers_policy=response_headers_policy,
        certificate=certificate,
        comment=environment.value,
        domain_names=self.domain_names,
        error_responses=[
          cloudfront.ErrorResponse(
            http_status=403,
            response_http_status=403,
            response_page_path="/403",
          ),
        ],
        log_bucket=access_log_bucket,
        log_file_prefix="cloudfront/",
        price_class=(
          cloudfront.PriceClass.PRICE_CLASS_ALL
          if environment == Environments.PROD
          else cloudfront.PriceClass.PRICE_CLASS_100
        ),
        web_acl_id=web_acl_id,
      ),
      function_options=FunctionOptions(
        architecture=lambda_.Architecture.ARM_64,
        # No domain names yields the literal "undefined"
        environment={
          "DOMAIN": self.domain_names[0] if self.domain_names else "undefined",
        },
        runtime=lambda_.Runtime(f"{runtime}.x", lambda_.RuntimeFamily.NODEJS),
        tracing=lambda_.Tracing.ACTIVE,
      ),
      bucket_options=BucketOptions(
        server_access_logs_bucket=access_log_bucket,
        server_access_logs_prefix="s3/",
      ),
    )
    distribution = self.web_app.distribution

    if hosted_zone is not None and self.domain_names:
      target = route53.RecordTarget.from_alias(targets.CloudFrontTarget(distribution))
      for domain_name in self.domain_names:
        route53.ARecord(
          self,
          f"ARecord-{domain_name}",
          zone=hosted_zone,
          record_name=domain_name,
          target=target,
        )
        route53.AaaaRecord(
          self,
          f"AaaaRecord-{domain_name}",
          zone=hosted_zone,
          record_name=domain_name,
          target=target,
        )

    self.widgets: list[cloudwatch.ConcreteWidget] = [
      BasicGraphWidget(
        metric=DistributionMetric(
          distribution=distribution,
          label=f"{label_prefix} - CloudFront 5xx error rate",
          metric_name="5xxErrorRate",
          period=cdk.Duration.minutes(5),
          statistic="Sum",
        )
      ),
      BasicGraphWidget(
        metric=DistributionMetric(
          distribution=distribution,
          label=f"{label_prefix} - CloudFront requests",
          metric_name="Requests",
          period=cdk.Duration.minutes(5),
          statistic="Sum",
        )
      ),
    ]

    function = self.web_app.function
    if function is not None:
      self.widgets.insert(
        0,
        cloudwatch.LogQueryWidget(
          height=12,
          log_group_names=[function.log_group.log_group_name],
          query_lines=["fields @timestamp, @message", "sort @timestamp desc"],
          title=f"{label_prefix} - Lambda logs",
          width=24,
        ),
      )
      self.widgets.extend(
        [
          BasicGraphWidget(
            metric=function.metric_errors(
              label=f"{label_prefix} - Lambda failure rate",
              period=cdk.Duration.minutes(5),
              statistic="sum",
            )
          ),
          BasicGraphWidget(
            metric=function.metric_invocations(
              label=f"{label_prefix} - Lambda invocations",
              period=cdk.Duration.minutes(5),
              statistic="sum",
            )
          ),
          BasicGraphWidget(
            metric=function.metric_duration(
              label=f"{label_prefix} - Lambda duration",
              period=cdk.Duration.minutes(5),
              statistic="avg",
            )
          ),
          BasicGraphWidget(
            metric=function.metric_throttles(
              label=f"{label_prefix} - Lambda throttles",
              period=cdk.Duration.minutes(5),
              statistic="sum",
            )
          ),
        ]
      )

    if cloudwatch_dashboard is not None:
      cloudwatch_dashboard.add_widgets(*self.widgets)

    cdk.CfnOutput(
      self,
      "CloudFrontDistributionId",
      value=distribution.distribution_id,
      description="CloudFront distribution ID",
    )
    cdk.CfnOutput(
      self,
      "CloudFrontDomainName",
      value=distribution.distribution_domain_name,
      description="CloudFront distribution domain name",
    )
