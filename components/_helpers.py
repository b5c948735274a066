"""
Pure helpers for policies, alarm dimensions and URLs. Testable without Pulumi runtime.

Used by the distribution component (oai_read_policy, alarm_dimensions,
site_url). No Pulumi types; all functions accept and return plain Python
types so they can be unit-tested without a Pulumi stack. Callers holding
``Output`` values pass them through ``Output.all(...).apply`` first.
"""

import json


def oai_read_policy(
    bucket_arn: str,
    oai_iam_arn: str,
) -> str:
    """
    Return a bucket policy document granting an origin access identity read access.

    The identity may only ``s3:GetObject`` on objects in the bucket; listing and
    writes are not granted, so the bucket itself stays private.

    Args:
        bucket_arn: ARN of the origin bucket (e.g. "arn:aws:s3:::my-bucket").
        oai_iam_arn: IAM ARN of the CloudFront origin access identity.

    Returns:
        Policy document serialized as JSON.
    """
    return json.dumps(
        {
            "Version": "2012-10-17",
            "Statement": [
                {
                    "Sid": "CloudFrontReadGetObject",
                    "Effect": "Allow",
                    "Principal": {"AWS": oai_iam_arn},
                    "Action": "s3:GetObject",
                    "Resource": f"{bucket_arn}/*",
                }
            ],
        }
    )


def alarm_dimensions(
    distribution_id: str,
) -> dict[str, str]:
    """
    Build the CloudWatch dimensions for a CloudFront distribution metric.

    CloudFront publishes its metrics under the "Global" region dimension.
    """
    return {
        "Region": "Global",
        "DistributionId": distribution_id,
    }


def site_url(
    domain_name: str,
) -> str:
    """Return the HTTPS URL the site is served at."""
    return f"https://{domain_name.rstrip('.')}/"
