"""CDK stacks for Astro website infrastructure."""

from .domain_stack import DomainStack
from .monitoring_stack import MonitoringStack
from .website_stack import WebsiteStack

__all__ = ["DomainStack", "MonitoringStack", "WebsiteStack"]
