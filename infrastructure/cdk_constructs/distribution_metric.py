"""CloudWatch metric for a CloudFront distribution."""

from aws_cdk import Duration
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk import aws_cloudwatch as cloudwatch


class DistributionMetric(cloudwatch.Metric):
  """CloudFront metric scoped to a single distribution.

  CloudFront publishes its metrics in us-east-1 under the ``Global`` region
  dimension regardless of where the stack is deployed.
  """

  def __init__(
    self,
    *,
    distribution: cloudfront.IDistribution,
    metric_name: str,
    label: str,
    period: Duration,
    statistic: str,
  ) -> None:
    super().__init__(
      namespace="AWS/CloudFront",
      metric_name=metric_name,
      dimensions_map={
        "DistributionId": distribution.distribution_id,
        "Region": "Global",
      },
      label=label,
      period=period,
      statistic=statistic,
      region="us-east-1",
    )
