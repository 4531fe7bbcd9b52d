"""Lifecycle adapter for ``aws_rds_parameter_group``."""

from __future__ import annotations

import logging
from typing import Any

from botocore.exceptions import ClientError

from .. import tags
from ..batching import MAX_PARAMETERS_PER_CALL, chunk, iter_batches
from ..exceptions import ResourceNotFoundError, ResourceOperationError
from ..models import Parameter, ParameterGroup, ParameterGroupConfig
from ..naming import prefixed_unique_id, unique_id
from ..waiter import retry_until
from .base import ResourceAdapter, error_code

logger = logging.getLogger(__name__)

NOT_FOUND = "DBParameterGroupNotFound"
INVALID_STATE = "InvalidDBParameterGroupState"

DELETE_TIMEOUT = 180.0
DELETE_RETRY_DELAY = 5.0

USER_SOURCE = "user"

# Fields fixed at creation
_CREATE_ONLY = ("family", "description")


def _sort_key(parameter: Parameter) -> tuple[str, str, str]:
    return parameter.key


class ParameterGroupAdapter(ResourceAdapter):
    """
    Create, read, update and delete RDS DB parameter groups.

    Parameters are applied through ``ModifyDBParameterGroup`` in batches
    planned by ``tfaws.batching``; parameters dropped from the
    configuration are reset to their engine defaults.
    """

    resource_type = "aws_rds_parameter_group"

    def resolve_name(self, config: ParameterGroupConfig) -> str:
        if config.name:
            return config.name
        if config.name_prefix:
            return prefixed_unique_id(config.name_prefix)
        return unique_id()

    def create(self, config: ParameterGroupConfig) -> ParameterGroup:
        name = self.resolve_name(config)
        tags_all = tags.ignore_aws(tags.merge(self.client.default_tags, config.tags))

        request: dict[str, Any] = {
            "DBParameterGroupName": name,
            "DBParameterGroupFamily": config.family,
            "Description": config.description,
        }
        if tags_all:
            request["Tags"] = tags.to_api(tags_all)

        logger.debug("Create DB Parameter Group: %s", request)
        with self.api_error("creating", name):
            response = self.client.rds.create_db_parameter_group(**request)

        group = response["DBParameterGroup"]
        name = group["DBParameterGroupName"]
        logger.info("DB Parameter Group ID: %s", name)

        self._update_parameters(name, frozenset(), config.parameters)
        return self.read(name, parameters=config.parameters, is_new=True)

    def find(self, name: str) -> dict[str, Any] | None:
        try:
            response = self.client.rds.describe_db_parameter_groups(DBParameterGroupName=name)
        except ClientError as e:
            if error_code(e) == NOT_FOUND:
                return None
            raise

        groups = response.get("DBParameterGroups") or []
        if not groups:
            return None
        if len(groups) != 1 or groups[0].get("DBParameterGroupName") != name:
            raise ResourceOperationError(
                "reading",
                self.resource_type,
                name,
                LookupError(f"unexpected DescribeDBParameterGroups result: {groups!r}"),
            )
        return groups[0]

    def _describe_parameters(self, name: str, user_only: bool) -> list[dict[str, Any]]:
        kwargs: dict[str, Any] = {"DBParameterGroupName": name}
        if user_only:
            kwargs["Source"] = USER_SOURCE

        parameters: list[dict[str, Any]] = []
        paginator = self.client.rds.get_paginator("describe_db_parameters")
        for page in paginator.paginate(**kwargs):
            parameters.extend(page.get("Parameters", []))
        return parameters

    def read(
        self,
        name: str,
        *,
        parameters: frozenset[Parameter] | None = None,
        is_new: bool = False,
    ) -> ParameterGroup | None:
        """
        Read a DB parameter group.

        Without configured ``parameters`` (e.g., on import) only
        user-modified values are requested: any default the user also
        declared is indistinguishable from the hundreds AWS sets. With
        configured parameters, system and engine-default values are kept
        when the configuration names them, so declaring a value equal to
        the default does not look like a change on every read.

        Args:
            name: Parameter group name
            parameters: Parameters currently declared for the group
            is_new: The group was just created; a miss is an error

        Returns:
            The observed state, or ``None`` if the group was deleted out of band
        """
        configured = {p.name.lower() for p in parameters or ()}

        with self.api_error("reading", name):
            group = self.find(name)
            if group is None:
                if is_new:
                    raise ResourceNotFoundError(self.resource_type, name)
                logger.warning("DB Parameter Group (%s) not found, removing from state", name)
                return None

            described = self._describe_parameters(name, user_only=not configured)

            arn = group["DBParameterGroupArn"]
            tag_list = self.client.rds.list_tags_for_resource(ResourceName=arn).get("TagList")

        kept: list[dict[str, Any]] = []
        for p in described:
            source = p.get("Source")
            param_name = p.get("ParameterName")
            if source is None or param_name is None:
                continue
            if not configured or source == USER_SOURCE or param_name.lower() in configured:
                kept.append(p)
            else:
                logger.debug(
                    "Not persisting %s to state, as its source is %r and it isn't in the config",
                    param_name,
                    source,
                )

        tags_all = tags.ignore_config(
            tags.ignore_aws(tags.from_api(tag_list)), self.client.ignore_tags
        )

        return ParameterGroup(
            name=group["DBParameterGroupName"],
            arn=arn,
            family=group["DBParameterGroupFamily"],
            description=group.get("Description", ""),
            parameters=frozenset(Parameter.from_api(p) for p in kept if "ParameterValue" in p),
            tags=tags.remove_default_config(tags_all, self.client.default_tags),
            tags_all=tags_all,
        )

    def update(
        self,
        name: str,
        old: ParameterGroupConfig,
        new: ParameterGroupConfig,
        *,
        arn: str | None = None,
        old_tags_all: dict[str, str] | None = None,
    ) -> ParameterGroup | None:
        """
        Update parameters and tags of an existing group.

        ``old_tags_all`` is the tag set observed on the group, default tags
        included. Without it the old tags are rebuilt from ``old.tags``.
        """
        self.require_in_place(old, new, *_CREATE_ONLY)

        if old.parameters != new.parameters:
            self._update_parameters(name, old.parameters, new.parameters)

        if old_tags_all is None:
            old_tags = tags.ignore_config(
                tags.ignore_aws(tags.merge(self.client.default_tags, old.tags)),
                self.client.ignore_tags,
            )
        else:
            old_tags = dict(old_tags_all)
        new_tags = tags.ignore_config(
            tags.ignore_aws(tags.merge(self.client.default_tags, new.tags)), self.client.ignore_tags
        )
        if old_tags != new_tags:
            if arn is None:
                with self.api_error("reading", name):
                    group = self.find(name)
                if group is None:
                    raise ResourceNotFoundError(self.resource_type, name)
                arn = group["DBParameterGroupArn"]
            self._update_tags(name, arn, old_tags, new_tags)

        return self.read(name, parameters=new.parameters)

    def apply(self, name: str, config: ParameterGroupConfig) -> ParameterGroup | None:
        current = self.read(name, parameters=config.parameters)
        if current is None:
            raise ResourceNotFoundError(self.resource_type, name)
        return self.update(
            name, current.to_config(), config, arn=current.arn, old_tags_all=current.tags_all
        )

    @staticmethod
    def plan_modifications(
        old: frozenset[Parameter], new: frozenset[Parameter]
    ) -> list[list[Parameter]]:
        """Batches of ``ModifyDBParameterGroup`` calls needed to go from ``old`` to ``new``."""
        return list(iter_batches(sorted(new - old, key=_sort_key), MAX_PARAMETERS_PER_CALL))

    @staticmethod
    def plan_resets(
        old: frozenset[Parameter], new: frozenset[Parameter]
    ) -> list[list[Parameter]]:
        """Batches of ``ResetDBParameterGroup`` calls for parameters no longer declared."""
        kept = {p.name.lower() for p in new}
        dropped = {p.name.lower(): p for p in old if p.name.lower() not in kept}
        return list(chunk(sorted(dropped.values(), key=_sort_key), MAX_PARAMETERS_PER_CALL))

    def _update_parameters(
        self, name: str, old: frozenset[Parameter], new: frozenset[Parameter]
    ) -> None:
        for batch in self.plan_modifications(old, new):
            request = {
                "DBParameterGroupName": name,
                "Parameters": [p.to_api() for p in batch],
            }
            logger.debug("Modify DB Parameter Group: %s", request)
            with self.api_error("modifying", name):
                self.client.rds.modify_db_parameter_group(**request)

        for batch in self.plan_resets(old, new):
            request = {
                "DBParameterGroupName": name,
                "Parameters": [p.to_api() for p in batch],
                "ResetAllParameters": False,
            }
            logger.debug("Reset DB Parameter Group: %s", request)
            with self.api_error("resetting", name):
                self.client.rds.reset_db_parameter_group(**request)

    def _update_tags(
        self, name: str, arn: str, old: dict[str, str], new: dict[str, str]
    ) -> None:
        with self.api_error("updating tags of", name):
            removed = tags.removed(old, new)
            if removed:
                self.client.rds.remove_tags_from_resource(
                    ResourceName=arn, TagKeys=sorted(removed)
                )
            updated = tags.updated(old, new)
            if updated:
                self.client.rds.add_tags_to_resource(ResourceName=arn, Tags=tags.to_api(updated))

    def delete(self, name: str) -> None:
        def attempt() -> None:
            try:
                self.client.rds.delete_db_parameter_group(DBParameterGroupName=name)
            except ClientError as e:
                if error_code(e) == NOT_FOUND:
                    logger.info("DB Parameter Group (%s) already deleted", name)
                    return
                raise

        logger.debug("Deleting RDS DB Parameter Group: %s", name)
        with self.api_error("deleting", name):
            retry_until(
                attempt,
                timeout=DELETE_TIMEOUT,
                retryable=lambda e: error_code(e) == INVALID_STATE,
                delay=DELETE_RETRY_DELAY,
                clock=self.clock,
                sleep=self.sleep,
            )
