"""
AWS static site delivery: S3 origin + ACM certificate + CloudFront + alarms.

This component builds the whole delivery topology for a single-page
application in a fixed order: origin bucket, hosted zone lookup, DNS-validated
certificate, CloudFront distribution, error-rate alarms. The bucket is not
publicly readable: CloudFront reads it through an Origin Access Identity
(OAI) that the bucket policy grants ``s3:GetObject``. The distribution serves
the domain over HTTPS with the ACM certificate, redirects HTTP to HTTPS and
rewrites 404s to ``/index.html`` so client-side routing can handle the path.

CloudFront only accepts certificates from ``us-east-1`` and publishes its
metrics there, so the certificate and the alarms use a dedicated
``us-east-1`` provider regardless of the stack's region. The hosted zone must
already exist; it is looked up, never created.
"""

from typing import Optional

import pulumi
import pulumi_aws as aws

from components._helpers import alarm_dimensions, oai_read_policy, site_url

ID: str = "sitedist:aws:SiteDistribution"

# Region CloudFront requires for viewer certificates and publishes metrics in.
CLOUDFRONT_REGION: str = "us-east-1"

ORIGIN_ID: str = "s3-origin"

DEFAULT_ROOT_OBJECT: str = "index.html"

# Applied when enable_public_access_block is True. Used by tests and callers
# to assert on secure defaults.
S3_BLOCK_PUBLIC_ACCESS: dict[str, bool] = {
    "block_public_acls": True,
    "block_public_policy": True,
    "ignore_public_acls": True,
    "restrict_public_buckets": True,
}

# SPA fallback: any 404 from the origin is served as the app entry page.
SPA_ERROR_RESPONSE: dict = {
    "error_code": 404,
    "response_code": 200,
    "response_page_path": f"/{DEFAULT_ROOT_OBJECT}",
}

# Shared by both error-rate alarms.
ALARM_SETTINGS: dict = {
    "namespace": "AWS/CloudFront",
    "period": 3600,
    "statistic": "Average",
    "unit": "Count",
    "comparison_operator": "GreaterThanThreshold",
    "evaluation_periods": 1,
    "treat_missing_data": "missing",
}

# (resource suffix, alarm name, metric name, threshold)
ERROR_RATE_ALARMS: list[tuple[str, str, str, float]] = [
    ("client-errors", "CloudFront4XX", "4xxErrorRate", 2),
    ("server-errors", "CloudFront5XX", "5xxErrorRate", 1),
]


class SiteDistribution(pulumi.ComponentResource):
    """
    Private S3 origin served by CloudFront on a custom domain, with alarms.

    Resources: Bucket, optional BucketPublicAccessBlock, us-east-1 Provider,
    Certificate, validation Record, CertificateValidation,
    OriginAccessIdentity, BucketPolicy, Distribution, two MetricAlarms.
    The hosted zone is a lookup only.

    Constructed without ``bucket_name`` and ``domain_name`` the component
    registers no child resources.
    """

    def __init__(
        self,
        name: str,
        bucket_name: Optional[str] = None,
        domain_name: Optional[str] = None,
        private_zone: bool = False,
        enable_public_access_block: bool = True,
        opts: Optional[pulumi.ResourceOptions] = None,
    ):
        """
        Declare the delivery topology for ``domain_name`` served from ``bucket_name``.

        Args:
            name: Pulumi resource name; child resources are named
                ``<name>-<suffix>``.
            bucket_name: Physical S3 bucket name (must be globally unique).
            domain_name: Site domain; an existing Route53 hosted zone with this
                name must exist in the account.
            private_zone: Look up a private rather than a public hosted zone.
            enable_public_access_block: If True (default), apply
                S3_BLOCK_PUBLIC_ACCESS so the bucket cannot be made public.
            opts: Options for the component itself.

        Raises:
            ValueError: If only one of ``bucket_name`` and ``domain_name`` is given.

        Outputs (set on self, registered for the component):
            bucket_name: Physical bucket name.
            distribution_id: CloudFront distribution id.
            distribution_domain_name: ``*.cloudfront.net`` host of the
                distribution.
            certificate_arn: ARN of the validated certificate.
            url: HTTPS URL of the site on its own domain.
        """
        if (bucket_name is None) != (domain_name is None):
            raise ValueError(
                "bucket_name and domain_name must be given together "
                f"(got bucket_name={bucket_name!r}, domain_name={domain_name!r})"
            )

        super().__init__(
            ID,
            name,
            opts=opts,
        )

        self._name = name
        self.public_access_block: Optional[aws.s3.BucketPublicAccessBlock] = None
        self.alarms: list[aws.cloudwatch.MetricAlarm] = []
        self.bucket_name: Optional[pulumi.Output[str]] = None
        self.distribution_id: Optional[pulumi.Output[str]] = None
        self.distribution_domain_name: Optional[pulumi.Output[str]] = None
        self.certificate_arn: Optional[pulumi.Output[str]] = None
        self.url: Optional[str] = None

        if bucket_name is None:
            pulumi.log.debug("No bucket or domain given; declaring no resources", self)
            self.register_outputs({})
            return

        # Child resources get parent=self so Pulumi builds a proper hierarchy:
        # lifecycle order and UI grouping.
        self._child_opts = pulumi.ResourceOptions(parent=self)
        self._cloudfront_provider = aws.Provider(
            resource_name=f"{name}-{CLOUDFRONT_REGION}",
            region=CLOUDFRONT_REGION,
            opts=self._child_opts,
        )

        self.bucket = self.build_app_bucket(
            bucket_name,
            enable_public_access_block=enable_public_access_block,
        )
        self.hosted_zone = self.lookup_hosted_zone(domain_name, private_zone)
        self.certificate_validation = self.build_distribution_certificate(
            domain_name, self.hosted_zone
        )
        self.distribution = self.build_cloudfront_distribution(
            self.bucket, domain_name, self.certificate_validation
        )
        self.alarms = self.build_alarms(self.distribution)

        self.bucket_name = self.bucket.bucket
        self.distribution_id = self.distribution.id
        self.distribution_domain_name = self.distribution.domain_name
        self.certificate_arn = self.certificate_validation.certificate_arn
        self.url = site_url(domain_name)
        self.register_outputs(
            {
                "bucket_name": self.bucket_name,
                "distribution_id": self.distribution_id,
                "distribution_domain_name": self.distribution_domain_name,
                "certificate_arn": self.certificate_arn,
                "url": self.url,
            }
        )

    def lookup_hosted_zone(
        self,
        domain_name: str,
        private_zone: bool = False,
    ) -> pulumi.Output[aws.route53.GetZoneResult]:
        """
        Look up the existing Route53 hosted zone for ``domain_name``.

        The zone is read, never created; the lookup fails during preview if
        no matching zone exists.
        """
        pulumi.log.debug(f"Looking up hosted zone {domain_name}", self)
        return aws.route53.get_zone_output(
            name=domain_name,
            private_zone=private_zone,
            opts=pulumi.InvokeOptions(parent=self),
        )

    def build_app_bucket(
        self,
        bucket_name: str,
        enable_public_access_block: bool = True,
    ) -> aws.s3.Bucket:
        pulumi.log.debug(f"Declaring origin bucket {bucket_name}", self)
        bucket = aws.s3.Bucket(
            resource_name=f"{self._name}-bucket",
            bucket=bucket_name,
            opts=self._child_opts,
        )

        if enable_public_access_block:
            self.public_access_block = aws.s3.BucketPublicAccessBlock(
                resource_name=f"{self._name}-block-public",
                bucket=bucket.id,
                opts=self._child_opts,
                **S3_BLOCK_PUBLIC_ACCESS,
            )

        return bucket

    def build_distribution_certificate(
        self,
        domain_name: str,
        hosted_zone: pulumi.Output[aws.route53.GetZoneResult],
    ) -> aws.acm.CertificateValidation:
        """
        Request an ACM certificate for ``domain_name`` and validate it through DNS.

        The validation record ACM asks for is written into ``hosted_zone``;
        the returned CertificateValidation completes only once ACM has issued
        the certificate, so resources using its ``certificate_arn`` wait for it.
        """
        pulumi.log.debug(f"Declaring DNS-validated certificate for {domain_name}", self)
        cloudfront_opts = pulumi.ResourceOptions(
            parent=self,
            provider=self._cloudfront_provider,
        )
        self.certificate = aws.acm.Certificate(
            resource_name=f"{self._name}-cert",
            domain_name=domain_name,
            validation_method="DNS",
            opts=cloudfront_opts,
        )

        # A single domain has exactly one validation option.
        option = self.certificate.domain_validation_options.apply(
            lambda options: options[0]
        )
        validation_record = aws.route53.Record(
            resource_name=f"{self._name}-cert-record",
            name=option.resource_record_name,
            type=option.resource_record_type,
            records=[option.resource_record_value],
            zone_id=hosted_zone.zone_id,
            ttl=60,
            allow_overwrite=True,
            opts=self._child_opts,
        )

        return aws.acm.CertificateValidation(
            resource_name=f"{self._name}-cert-validation",
            certificate_arn=self.certificate.arn,
            validation_record_fqdns=[validation_record.fqdn],
            opts=cloudfront_opts,
        )

    def build_cloudfront_distribution(
        self,
        bucket: aws.s3.Bucket,
        domain_name: str,
        certificate: aws.acm.CertificateValidation,
    ) -> aws.cloudfront.Distribution:
        """
        Declare the origin access identity and the CloudFront distribution.

        The bucket policy granting the identity read access is declared here
        too, and the distribution depends on it so the origin is readable
        before traffic arrives.
        """
        pulumi.log.debug(f"Declaring CloudFront distribution for {domain_name}", self)
        self.origin_access_identity = aws.cloudfront.OriginAccessIdentity(
            resource_name=f"{self._name}-oai",
            comment=f"OAI for {domain_name}",
            opts=self._child_opts,
        )

        # S3 rejects a policy written while the public access block on the same
        # bucket is still being applied.
        policy_opts = pulumi.ResourceOptions(
            parent=self,
            depends_on=[self.public_access_block]
            if self.public_access_block is not None
            else [],
        )
        bucket_policy = aws.s3.BucketPolicy(
            resource_name=f"{self._name}-policy",
            bucket=bucket.id,
            policy=pulumi.Output.all(
                bucket.arn, self.origin_access_identity.iam_arn
            ).apply(lambda args: oai_read_policy(*args)),
            opts=policy_opts,
        )

        origins = [
            aws.cloudfront.DistributionOriginArgs(
                domain_name=bucket.bucket_regional_domain_name,
                origin_id=ORIGIN_ID,
                s3_origin_config=aws.cloudfront.DistributionOriginS3OriginConfigArgs(
                    origin_access_identity=self.origin_access_identity.cloudfront_access_identity_path,
                ),
            )
        ]

        # Read-only site: no query strings or cookies reach the origin.
        forwarded_values = aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesArgs(
            query_string=False,
            cookies=aws.cloudfront.DistributionDefaultCacheBehaviorForwardedValuesCookiesArgs(
                forward="none",
            ),
        )
        default_cache_behavior = aws.cloudfront.DistributionDefaultCacheBehaviorArgs(
            target_origin_id=ORIGIN_ID,
            viewer_protocol_policy="redirect-to-https",
            allowed_methods=["GET", "HEAD"],
            cached_methods=["GET", "HEAD"],
            compress=True,
            forwarded_values=forwarded_values,
        )

        restrictions = aws.cloudfront.DistributionRestrictionsArgs(
            geo_restriction=aws.cloudfront.DistributionRestrictionsGeoRestrictionArgs(
                restriction_type="none",
            ),
        )

        viewer_certificate = aws.cloudfront.DistributionViewerCertificateArgs(
            acm_certificate_arn=certificate.certificate_arn,
            ssl_support_method="sni-only",
            minimum_protocol_version="TLSv1.2_2018",
        )

        distribution_opts = pulumi.ResourceOptions(
            parent=self,
            depends_on=[bucket_policy],
        )
        return aws.cloudfront.Distribution(
            resource_name=f"{self._name}-cdn",
            comment="App Distribution",
            enabled=True,
            http_version="http2",
            default_root_object=DEFAULT_ROOT_OBJECT,
            price_class="PriceClass_100",
            aliases=[domain_name],
            origins=origins,
            default_cache_behavior=default_cache_behavior,
            custom_error_responses=[
                aws.cloudfront.DistributionCustomErrorResponseArgs(
                    **SPA_ERROR_RESPONSE
                )
            ],
            restrictions=restrictions,
            viewer_certificate=viewer_certificate,
            opts=distribution_opts,
        )

    def build_alarms(
        self,
        distribution: aws.cloudfront.Distribution,
    ) -> list[aws.cloudwatch.MetricAlarm]:
        pulumi.log.debug("Declaring CloudFront error-rate alarms", self)
        alarm_opts = pulumi.ResourceOptions(
            parent=self,
            provider=self._cloudfront_provider,
        )
        dimensions = distribution.id.apply(alarm_dimensions)

        return [
            aws.cloudwatch.MetricAlarm(
                resource_name=f"{self._name}-{suffix}",
                name=alarm_name,
                alarm_description=f"{alarm_name} Errors",
                metric_name=metric_name,
                threshold=threshold,
                dimensions=dimensions,
                opts=alarm_opts,
                **ALARM_SETTINGS,
            )
            for suffix, alarm_name, metric_name, threshold in ERROR_RATE_ALARMS
        ]
