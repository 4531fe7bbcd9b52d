"""Lifecycle adapter for ``aws_vpc_ipam_scope``."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from ..exceptions import ResourceNotFoundError
from ..models import IpamScope, IpamScopeConfig
from ..naming import unique_id
from ..status import IpamScopeStatus
from .base import ResourceAdapter, error_code

logger = logging.getLogger(__name__)

DELETE_TIMEOUT = 180.0
DELETE_DELAY = 5.0


class IpamScopeAdapter(ResourceAdapter):
    """Create, read, update and delete scopes inside a VPC IPAM."""

    resource_type = "aws_vpc_ipam_scope"

    def create(self, config: IpamScopeConfig) -> IpamScope:
        request: dict[str, Any] = {
            "ClientToken": unique_id(),
            "IpamId": config.ipam_id,
        }
        if config.description:
            request["Description"] = config.description

        logger.debug("Creating IPAM Scope: %s", request)
        with self.api_error(f"creating in ipam {config.ipam_id}", None):
            response = self.client.ec2.create_ipam_scope(**request)

        scope_id = response["IpamScope"]["IpamScopeId"]
        logger.info("IPAM Scope ID: %s", scope_id)
        return self.read(scope_id, is_new=True)

    def find(self, scope_id: str) -> dict[str, Any] | None:
        try:
            response = self.client.ec2.describe_ipam_scopes(IpamScopeIds=[scope_id])
        except ClientError as e:
            if error_code(e) == IpamScopeStatus.NOT_FOUND.value:
                return None
            raise

        scopes = response.get("IpamScopes") or []
        return scopes[0] if scopes else None

    def status(self, scope_id: str) -> tuple[dict[str, Any] | None, IpamScopeStatus]:
        scope = self.find(scope_id)
        if scope is None:
            return None, IpamScopeStatus.NOT_FOUND
        return scope, IpamScopeStatus.AVAILABLE

    def read(self, scope_id: str, *, is_new: bool = False) -> IpamScope | None:
        with self.api_error("reading", scope_id):
            scope = self.find(scope_id)

        if scope is None:
            if is_new:
                raise ResourceNotFoundError(self.resource_type, scope_id)
            logger.warning("IPAM Scope (%s) not found, removing from state", scope_id)
            return None

        return IpamScope.from_api(scope)

    def update(
        self, scope_id: str, old: IpamScopeConfig, new: IpamScopeConfig
    ) -> IpamScope | None:
        self.require_in_place(old, new, "ipam_id")
        if old.description != new.description:
            logger.debug("Updating IPAM scope (%s) description", scope_id)
            with self.api_error("updating", scope_id):
                self.client.ec2.modify_ipam_scope(
                    IpamScopeId=scope_id, Description=new.description or ""
                )

        return self.read(scope_id)

    def delete(self, scope_id: str) -> None:
        logger.debug("Deleting IPAM Scope: %s", scope_id)
        with self.api_error("deleting", scope_id):
            try:
                self.client.ec2.delete_ipam_scope(IpamScopeId=scope_id)
            except ClientError as e:
                if error_code(e) == IpamScopeStatus.NOT_FOUND.value:
                    logger.info("IPAM Scope (%s) already deleted", scope_id)
                    return
                raise

            self.waiter(
                scope_id,
                pending=[IpamScopeStatus.AVAILABLE],
                target=[IpamScopeStatus.NOT_FOUND],
                refresh=lambda: self.status(scope_id),
                timeout=DELETE_TIMEOUT,
                delay=DELETE_DELAY,
            ).wait()
