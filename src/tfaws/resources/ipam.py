"""Lifecycle adapter for ``aws_vpc_ipam``."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from ..exceptions import ResourceNotFoundError, ValidationError
from ..models import Ipam, IpamConfig
from ..naming import unique_id
from ..status import IpamStatus
from .base import ResourceAdapter, error_code

logger = logging.getLogger(__name__)

DELETE_TIMEOUT = 180.0
DELETE_DELAY = 5.0


def _regions_request(regions: frozenset[str]) -> list[dict[str, str]]:
    return [{"RegionName": r} for r in sorted(regions)]


class IpamAdapter(ResourceAdapter):
    """Create, read, update and delete VPC IPAMs."""

    resource_type = "aws_vpc_ipam"

    def create(self, config: IpamConfig) -> Ipam:
        region = self.client.region
        if region not in config.operating_regions:
            raise ValidationError(
                "operating_regions",
                sorted(config.operating_regions),
                f"Must include ({region}) as an operating region",
            )

        request: dict[str, Any] = {
            "ClientToken": unique_id(),
            "OperatingRegions": _regions_request(config.operating_regions),
        }
        if config.description:
            request["Description"] = config.description

        logger.debug("Creating IPAM: %s", request)
        with self.api_error("creating", None):
            response = self.client.ec2.create_ipam(**request)

        ipam_id = response["Ipam"]["IpamId"]
        logger.info("IPAM ID: %s", ipam_id)
        return self.read(ipam_id, is_new=True)

    def find(self, ipam_id: str) -> dict[str, Any] | None:
        """Describe one IPAM; ``None`` when AWS reports it missing."""
        try:
            response = self.client.ec2.describe_ipams(IpamIds=[ipam_id])
        except ClientError as e:
            if error_code(e) == IpamStatus.NOT_FOUND.value:
                return None
            raise

        ipams = response.get("Ipams") or []
        return ipams[0] if ipams else None

    def status(self, ipam_id: str) -> tuple[dict[str, Any] | None, IpamStatus]:
        ipam = self.find(ipam_id)
        if ipam is None:
            return None, IpamStatus.NOT_FOUND
        return ipam, IpamStatus.AVAILABLE

    def read(self, ipam_id: str, *, is_new: bool = False) -> Ipam | None:
        """
        Read an IPAM.

        Returns:
            The observed state, or ``None`` if the IPAM was deleted out of band

        Raises:
            ResourceNotFoundError: If ``is_new`` and the IPAM is not visible
        """
        with self.api_error("reading", ipam_id):
            ipam = self.find(ipam_id)

        if ipam is None:
            if is_new:
                raise ResourceNotFoundError(self.resource_type, ipam_id)
            logger.warning("IPAM (%s) not found, removing from state", ipam_id)
            return None

        return Ipam.from_api(ipam)

    def update(self, ipam_id: str, old: IpamConfig, new: IpamConfig) -> Ipam | None:
        request: dict[str, Any] = {}

        if old.description != new.description:
            request["Description"] = new.description or ""

        added = new.operating_regions - old.operating_regions
        removed = old.operating_regions - new.operating_regions
        if added:
            request["AddOperatingRegions"] = _regions_request(added)
        if removed:
            request["RemoveOperatingRegions"] = _regions_request(removed)

        if request:
            logger.debug("Modifying IPAM (%s): %s", ipam_id, request)
            with self.api_error("updating", ipam_id):
                self.client.ec2.modify_ipam(IpamId=ipam_id, **request)

        return self.read(ipam_id)

    def delete(self, ipam_id: str) -> None:
        logger.debug("Deleting IPAM: %s", ipam_id)
        with self.api_error("deleting", ipam_id):
            try:
                self.client.ec2.delete_ipam(IpamId=ipam_id)
            except ClientError as e:
                if error_code(e) == IpamStatus.NOT_FOUND.value:
                    logger.info("IPAM (%s) already deleted", ipam_id)
                    return
                raise

            self.waiter(
                ipam_id,
                pending=[IpamStatus.AVAILABLE],
                target=[IpamStatus.NOT_FOUND],
                refresh=lambda: self.status(ipam_id),
                timeout=DELETE_TIMEOUT,
                delay=DELETE_DELAY,
            ).wait()
