"""AWS connection shared by the resource adapters.

An ``AwsClient`` is passed explicitly to every adapter instead of living
in a module-level global, so tests can hand in ``MagicMock`` clients and
one process can talk to several regions at once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import boto3

from .exceptions import ValidationError
from .tags import IgnoreTagsConfig

logger = logging.getLogger(__name__)


@dataclass
class AwsClient:
    """
    Service clients plus provider-wide settings.

    Attributes:
        region: Region the clients talk to
        ec2: boto3 EC2 client (VPC IPAM endpoints)
        rds: boto3 RDS client (DB parameter group endpoints)
        default_tags: Tags applied to every taggable resource
        ignore_tags: Tags never reported nor managed
    """

    region: str
    ec2: Any
    rds: Any
    default_tags: dict[str, str] = field(default_factory=dict)
    ignore_tags: IgnoreTagsConfig = field(default_factory=IgnoreTagsConfig)

    @classmethod
    def create(
        cls,
        region: str | None = None,
        endpoint_url: str | None = None,
        profile: str | None = None,
        default_tags: dict[str, str] | None = None,
        ignore_tag_keys: tuple[str, ...] = (),
        ignore_tag_key_prefixes: tuple[str, ...] = (),
    ) -> AwsClient:
        """
        Build clients from a boto3 session.

        Args:
            region: AWS region (default: use boto3 defaults)
            endpoint_url: Optional endpoint URL (for LocalStack or other
                AWS-compatible services)
            profile: Optional named profile from the shared config
            default_tags: Tags merged into every taggable resource
            ignore_tag_keys: Tag keys to ignore on read and update
            ignore_tag_key_prefixes: Tag key prefixes to ignore

        Raises:
            ValidationError: If no region is given and none is configured
        """
        session = boto3.session.Session(profile_name=profile, region_name=region)
        resolved = session.region_name
        if not resolved:
            raise ValidationError(
                "region",
                region,
                "No region given and none configured (set AWS_REGION or pass --region)",
            )

        kwargs: dict[str, Any] = {"region_name": resolved}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url

        logger.debug("Creating AWS clients for %s (endpoint: %s)", resolved, endpoint_url)
        return cls(
            region=resolved,
            ec2=session.client("ec2", **kwargs),
            rds=session.client("rds", **kwargs),
            default_tags=dict(default_tags or {}),
            ignore_tags=IgnoreTagsConfig(
                keys=frozenset(ignore_tag_keys),
                key_prefixes=tuple(ignore_tag_key_prefixes),
            ),
        )
