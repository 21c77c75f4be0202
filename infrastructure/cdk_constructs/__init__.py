"""CDK constructs for Astro website infrastructure."""

from .basic_graph_widget import BasicGraphWidget
from .certificate import DnsValidatedCertificate
from .distribution_metric import DistributionMetric
from .web_app import BucketOptions, DistributionOptions, FunctionOptions, WebApp

__all__ = [
  "BasicGraphWidget",
  "BucketOptions",
  "DistributionMetric",
  "DistributionOptions",
  "DnsValidatedCertificate",
  "FunctionOptions",
  "WebApp",
]
