"""
Static site delivery components.

The topology is encapsulated in a single ComponentResource for clear
ownership, testability, and reuse. Use from the Pulumi entrypoint (e.g.
__main__.py) with values from stack configuration:

- **SiteDistribution**: private S3 origin, DNS-validated ACM certificate,
  CloudFront distribution on the site domain and 4xx/5xx error-rate alarms;
  exposes distribution_id, distribution_domain_name, certificate_arn and url.
"""

from components.distribution import SiteDistribution

__all__ = ["SiteDistribution"]
