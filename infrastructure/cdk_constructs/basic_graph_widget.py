"""Single-metric dashboard graph."""

from aws_cdk import aws_cloudwatch as cloudwatch


class BasicGraphWidget(cloudwatch.GraphWidget):
  """Graph widget plotting one metric, titled with the metric's label."""

  def __init__(
    self,
    *,
    metric: cloudwatch.Metric,
    width: int = 12,
    height: int = 6,
  ) -> None:
    super().__init__(
      left=[metric],
      title=metric.label,
      width=width,
      height=height,
    )
