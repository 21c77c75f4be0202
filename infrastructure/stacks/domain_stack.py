"""CDK stack for the hosted zone and certificate shared by the websites."""

from typing import Any

import aws_cdk as cdk
from aws_cdk import aws_route53 as route53
from constructs import Construct

from ..cdk_constructs.certificate import DnsValidatedCertificate


class DomainStack(cdk.Stack):
  """Looks up an existing hosted zone and issues a certificate for it."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    hosted_zone_name: str,
    **kwargs: Any,
  ) -> None:
    super().__init__(scope, id, **kwargs)

    # Lookups require an explicit account and region on the stack env
    self.hosted_zone = route53.HostedZone.from_lookup(
      self,
      "HostedZone",
      domain_name=hosted_zone_name,
    )

    # CloudFront only accepts certificates issued in us-east-1
    self.certificate = DnsValidatedCertificate(
      self,
      "Certificate",
      hosted_zone=self.hosted_zone,
      zone_name=hosted_zone_name,
    ).certificate
