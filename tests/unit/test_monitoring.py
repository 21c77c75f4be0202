"""Tests for the dashboard helpers and supporting stacks."""

from aws_cdk import App, Duration, Environment, Stack
from aws_cdk import aws_cloudfront as cloudfront
from aws_cdk.assertions import Template

from infrastructure.cdk_constructs import BasicGraphWidget, DistributionMetric
from infrastructure.stacks import DomainStack, MonitoringStack


def make_metric(stack: Stack) -> DistributionMetric:
  distribution = cloudfront.Distribution.from_distribution_attributes(
    stack,
    "Distribution",
    distribution_id="E1234567890",
    domain_name="d111111abcdef8.cloudfront.net",
  )
  return DistributionMetric(
    distribution=distribution,
    label="STATIC - CloudFront requests",
    metric_name="Requests",
    period=Duration.minutes(5),
    statistic="Sum",
  )


class TestDistributionMetric:
  """Test DistributionMetric."""

  def test_scoped_to_distribution(self, stack: Stack) -> None:
    metric = make_metric(stack)

    assert metric.namespace == "AWS/CloudFront"
    assert metric.metric_name == "Requests"
    assert metric.dimensions == {"DistributionId": "E1234567890", "Region": "Global"}
    assert metric.region == "us-east-1"
    assert metric.label == "STATIC - CloudFront requests"


class TestBasicGraphWidget:
  """Test BasicGraphWidget."""

  def test_size(self, stack: Stack) -> None:
    widget = BasicGraphWidget(metric=make_metric(stack))

    assert widget.width == 12
    assert widget.height == 6


class TestMonitoringStack:
  """Test MonitoringStack."""

  def test_creates_dashboard(self, app: App) -> None:
    monitoring = MonitoringStack(app, "Monitoring", dashboard_name="AstroAWS-dev")
    template = Template.from_stack(monitoring)

    template.has_resource_properties(
      "AWS::CloudWatch::Dashboard",
      {"DashboardName": "AstroAWS-dev"},
    )


class TestDomainStack:
  """Test DomainStack."""

  def test_creates_certificate_with_dns_validation(self, app: App) -> None:
    """Verify the certificate covers the apex and subdomains."""
    domain = DomainStack(
      app,
      "Domain",
      hosted_zone_name="example.com",
      env=Environment(account="123456789012", region="us-east-1"),
    )
    template = Template.from_stack(domain)

    template.has_resource_properties(
      "AWS::CertificateManager::Certificate",
      {
        "DomainName": "example.com",
        "SubjectAlternativeNames": ["*.example.com"],
        "ValidationMethod": "DNS",
      },
    )
