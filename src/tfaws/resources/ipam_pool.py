"""Lifecycle adapter for ``aws_vpc_ipam_pool``."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from .. import tags
from ..exceptions import ResourceNotFoundError
from ..models import LOCALE_NONE, AddressFamily, IpamPool, IpamPoolConfig
from ..naming import unique_id
from ..status import IpamPoolStatus
from .base import ResourceAdapter, error_code

logger = logging.getLogger(__name__)

CREATE_TIMEOUT = 180.0
UPDATE_TIMEOUT = 180.0
DELETE_TIMEOUT = 180.0
AVAILABLE_DELAY = 5.0
DELETE_DELAY = 5.0

# Fields fixed at creation
_CREATE_ONLY = ("address_family", "ipam_scope_id", "locale", "source_ipam_pool_id")


class IpamPoolAdapter(ResourceAdapter):
    """Create, read, update and delete address pools inside an IPAM scope."""

    resource_type = "aws_vpc_ipam_pool"

    def create(self, config: IpamPoolConfig) -> IpamPool:
        request: dict[str, Any] = {
            "AddressFamily": config.address_family.value,
            "ClientToken": unique_id(),
            "IpamScopeId": config.ipam_scope_id,
        }

        # Only IPv6 pools can be publicly advertised
        if config.advertisable is not None and config.address_family is AddressFamily.IPV6:
            request["PubliclyAdvertisable"] = config.advertisable

        if config.allocation_default_netmask_length is not None:
            request["AllocationDefaultNetmaskLength"] = config.allocation_default_netmask_length
        if config.allocation_max_netmask_length is not None:
            request["AllocationMaxNetmaskLength"] = config.allocation_max_netmask_length
        if config.allocation_min_netmask_length is not None:
            request["AllocationMinNetmaskLength"] = config.allocation_min_netmask_length

        allocation_tags = tags.ignore_aws(config.allocation_resource_tags)
        if allocation_tags:
            request["AllocationResourceTags"] = tags.to_api(allocation_tags)

        if config.auto_import:
            request["AutoImport"] = True
        if config.description:
            request["Description"] = config.description
        if config.locale != LOCALE_NONE:
            request["Locale"] = config.locale
        if config.source_ipam_pool_id:
            request["SourceIpamPoolId"] = config.source_ipam_pool_id

        logger.debug("Creating IPAM Pool: %s", request)
        with self.api_error(f"creating in ipam scope {config.ipam_scope_id}", None):
            response = self.client.ec2.create_ipam_pool(**request)

        pool_id = response["IpamPool"]["IpamPoolId"]
        logger.info("IPAM Pool ID: %s", pool_id)

        with self.api_error("waiting for", pool_id):
            self.waiter(
                pool_id,
                pending=[IpamPoolStatus.CREATE_IN_PROGRESS],
                target=[IpamPoolStatus.CREATE_COMPLETE],
                refresh=lambda: self.status(pool_id),
                timeout=CREATE_TIMEOUT,
                delay=AVAILABLE_DELAY,
            ).wait()

        return self.read(pool_id, is_new=True)

    def find(self, pool_id: str) -> dict[str, Any] | None:
        try:
            response = self.client.ec2.describe_ipam_pools(IpamPoolIds=[pool_id])
        except ClientError as e:
            if error_code(e) == IpamPoolStatus.NOT_FOUND.value:
                return None
            raise

        pools = response.get("IpamPools") or []
        return pools[0] if pools else None

    def status(self, pool_id: str) -> tuple[dict[str, Any] | None, IpamPoolStatus]:
        pool = self.find(pool_id)
        if pool is None:
            return None, IpamPoolStatus.NOT_FOUND
        return pool, IpamPoolStatus(pool["State"])

    def read(self, pool_id: str, *, is_new: bool = False) -> IpamPool | None:
        with self.api_error("reading", pool_id):
            pool = self.find(pool_id)

        if pool is None:
            if is_new:
                raise ResourceNotFoundError(self.resource_type, pool_id)
            logger.warning("IPAM Pool (%s) not found, removing from state", pool_id)
            return None

        return IpamPool.from_api(pool)

    def update(self, pool_id: str, old: IpamPoolConfig, new: IpamPoolConfig) -> IpamPool | None:
        self.require_in_place(old, new, *_CREATE_ONLY)
        request: dict[str, Any] = {}

        if old.allocation_default_netmask_length != new.allocation_default_netmask_length:
            if new.allocation_default_netmask_length is None:
                request["ClearAllocationDefaultNetmaskLength"] = True
            else:
                request["AllocationDefaultNetmaskLength"] = new.allocation_default_netmask_length
        if (
            old.allocation_max_netmask_length != new.allocation_max_netmask_length
            and new.allocation_max_netmask_length is not None
        ):
            request["AllocationMaxNetmaskLength"] = new.allocation_max_netmask_length
        if (
            old.allocation_min_netmask_length != new.allocation_min_netmask_length
            and new.allocation_min_netmask_length is not None
        ):
            request["AllocationMinNetmaskLength"] = new.allocation_min_netmask_length
        if old.auto_import != new.auto_import:
            request["AutoImport"] = new.auto_import
        if old.description != new.description:
            request["Description"] = new.description or ""

        old_tags = tags.ignore_aws(old.allocation_resource_tags)
        new_tags = tags.ignore_aws(new.allocation_resource_tags)
        if old_tags != new_tags:
            # A changed value is a different key/value pair, so the old pair goes too
            stale = {k: v for k, v in old_tags.items() if new_tags.get(k) != v}
            if stale:
                request["RemoveAllocationResourceTags"] = tags.to_api(stale)
            added = tags.updated(old_tags, new_tags)
            if added:
                request["AddAllocationResourceTags"] = tags.to_api(added)

        if request:
            logger.debug("Updating IPAM pool (%s): %s", pool_id, request)
            with self.api_error("updating", pool_id):
                self.client.ec2.modify_ipam_pool(IpamPoolId=pool_id, **request)
                self.waiter(
                    pool_id,
                    pending=[IpamPoolStatus.MODIFY_IN_PROGRESS],
                    target=[IpamPoolStatus.MODIFY_COMPLETE],
                    refresh=lambda: self.status(pool_id),
                    timeout=UPDATE_TIMEOUT,
                    delay=AVAILABLE_DELAY,
                ).wait()

        return self.read(pool_id)

    def delete(self, pool_id: str) -> None:
        logger.debug("Deleting IPAM Pool: %s", pool_id)
        with self.api_error("deleting", pool_id):
            try:
                self.client.ec2.delete_ipam_pool(IpamPoolId=pool_id)
            except ClientError as e:
                if error_code(e) == IpamPoolStatus.NOT_FOUND.value:
                    logger.info("IPAM Pool (%s) already deleted", pool_id)
                    return
                raise

            self.waiter(
                pool_id,
                pending=[IpamPoolStatus.DELETE_IN_PROGRESS],
                target=[IpamPoolStatus.NOT_FOUND, IpamPoolStatus.DELETE_COMPLETE],
                refresh=lambda: self.status(pool_id),
                timeout=DELETE_TIMEOUT,
                delay=DELETE_DELAY,
            ).wait()
