"""ACM certificate with DNS validation."""

from aws_cdk import aws_certificatemanager as acm
from aws_cdk import aws_route53 as route53
from constructs import Construct


class DnsValidatedCertificate(Construct):
  """ACM certificate for a zone apex and its subdomains."""

  def __init__(
    self,
    scope: Construct,
    id: str,
    *,
    hosted_zone: route53.IHostedZone,
    zone_name: str,
  ) -> None:
    super().__init__(scope, id)

    self.certificate = acm.Certificate(
      self,
      "Certificate",
      domain_name=zone_name,
      subject_alternative_names=[f"*.{zone_name}"],
      validation=acm.CertificateValidation.from_dns(hosted_zone),
    )
