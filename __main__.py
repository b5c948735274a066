"""
Static site delivery - IaC entrypoint.

Builds one SiteDistribution from Pulumi config:

- **Origin**: private S3 bucket named by ``bucket_name``, read by CloudFront
  through an origin access identity.
- **Edge**: CloudFront distribution on ``domain_name`` with a DNS-validated
  ACM certificate from the existing Route53 zone of the same name.
- **Monitoring**: CloudWatch alarms on the distribution's 4xx and 5xx error
  rates.

Stack exports: bucket_name, distribution_id, distribution_domain_name,
certificate_arn, site_url.
"""

import pulumi

from components import SiteDistribution
from config import StackConfig


def _component_name(project_name: str, environment: str, prefix: str) -> str:
    return f"{prefix}-{project_name}-{environment}"


def main():
    """
    Build the site distribution and export stack outputs.

    Reads config (domain_name, bucket_name, project_name, environment and the
    optional flags), instantiates the component and exports its outputs.
    """
    config = StackConfig.from_pulumi_config(pulumi.Config())
    pulumi.log.info(
        f"Serving {config.domain_name} from bucket {config.bucket_name} "
        f"({config.project_name}/{config.environment})"
    )

    site = SiteDistribution(
        name=_component_name(config.project_name, config.environment, "site"),
        bucket_name=config.bucket_name,
        domain_name=config.domain_name,
        private_zone=config.private_zone,
        enable_public_access_block=config.enable_public_access_block,
    )

    for output_name, value in [
        ("bucket_name", site.bucket_name),
        ("distribution_id", site.distribution_id),
        ("distribution_domain_name", site.distribution_domain_name),
        ("certificate_arn", site.certificate_arn),
        ("site_url", site.url),
    ]:
        pulumi.export(output_name, value)


if __name__ == "__main__":
    main()
