"""Core models for tfaws.

Two kinds of records live here:

- Configuration records (``*Config``) describe what the caller declares.
  They are built with ``from_dict`` from YAML/JSON-shaped data and reject
  malformed input with ``ValidationError``.
- State records (``Ipam``, ``IpamScope``, ``IpamPool``, ``ParameterGroup``)
  are built with ``from_api`` from AWS responses. Computed attributes
  only ever come from these.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .exceptions import ValidationError
from .naming import (
    validate_parameter_group_name,
    validate_parameter_group_name_prefix,
    validate_region_name,
)
from .status import IpamPoolStatus

DEFAULT_PARAMETER_GROUP_DESCRIPTION = "Managed by tfaws"
LOCALE_NONE = "None"


def _arn_resource_id(arn: str) -> str:
    """Return the id part of an ARN like ``arn:aws:ec2::123:ipam/ipam-0abc``."""
    return arn.split("/")[1]


def _optional_str(d: dict[str, Any], key: str) -> str | None:
    value = d.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(key, value, "Must be a string")
    return value


def _required_str(d: dict[str, Any], key: str) -> str:
    value = _optional_str(d, key)
    if not value:
        raise ValidationError(key, value, "Required")
    return value


def _netmask(d: dict[str, Any], key: str) -> int | None:
    value = d.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(key, value, "Must be an integer")
    if not 0 <= value <= 128:
        raise ValidationError(key, value, "Must be between 0 and 128")
    return value


def _tag_map(d: dict[str, Any], key: str) -> dict[str, str]:
    value = d.get(key) or {}
    if not isinstance(value, dict):
        raise ValidationError(key, value, "Must be a mapping of tag keys to values")
    return {str(k): str(v) for k, v in value.items()}


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------


class ApplyMethod(str, Enum):
    """When a parameter value takes effect."""

    IMMEDIATE = "immediate"
    PENDING_REBOOT = "pending-reboot"

    @classmethod
    def parse(cls, value: str | None) -> ApplyMethod:
        """Parse an apply method case-insensitively; ``None`` means immediate."""
        if value is None:
            return cls.IMMEDIATE
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValidationError(
                "apply_method",
                value,
                f"Must be one of: {', '.join(m.value for m in cls)}",
            ) from None


@dataclass(frozen=True, eq=False)
class Parameter:
    """
    One named setting applied to a DB parameter group.

    Two parameters are the same set member when their lower-cased names,
    apply methods and values match. Reads lower-case names, so comparing
    raw fields would report a change for every mixed-case declaration.

    Attributes:
        name: Parameter name (e.g., "character_set_server")
        value: String-encoded value
        apply_method: Immediate or on next reboot
    """

    name: str
    value: str
    apply_method: ApplyMethod = ApplyMethod.IMMEDIATE

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.name.lower(), self.apply_method.value, self.value)

    @property
    def pending_reboot(self) -> bool:
        return self.apply_method is ApplyMethod.PENDING_REBOOT

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Parameter):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Parameter:
        name = d.get("name")
        if not name or not isinstance(name, str):
            raise ValidationError("parameter.name", name, "Required")
        if "value" not in d or d["value"] is None:
            raise ValidationError("parameter.value", None, f"Required for parameter '{name}'")
        raw = d["value"]
        # YAML turns `on`/`1` into bools and ints; RDS wants strings
        if isinstance(raw, bool):
            value = "1" if raw else "0"
        elif isinstance(raw, int | float | str):
            value = str(raw)
        else:
            raise ValidationError("parameter.value", raw, "Must be a scalar")
        return cls(name=name, value=value, apply_method=ApplyMethod.parse(d.get("apply_method")))

    @classmethod
    def from_api(cls, p: dict[str, Any]) -> Parameter:
        """Build from an RDS ``Parameter`` structure (names are lower-cased)."""
        return cls(
            name=p["ParameterName"].lower(),
            value=p["ParameterValue"],
            apply_method=ApplyMethod.parse(p.get("ApplyMethod")),
        )

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "value": self.value, "apply_method": self.apply_method.value}

    def to_api(self) -> dict[str, str]:
        return {
            "ParameterName": self.name,
            "ParameterValue": self.value,
            "ApplyMethod": self.apply_method.value,
        }


def parse_parameters(items: list[dict[str, Any]] | None) -> frozenset[Parameter]:
    """Parse a list of parameter dicts, rejecting duplicate names."""
    parameters: dict[str, Parameter] = {}
    for item in items or []:
        if not isinstance(item, dict):
            raise ValidationError("parameters", item, "Each parameter must be a mapping")
        parameter = Parameter.from_dict(item)
        lowered = parameter.name.lower()
        if lowered in parameters:
            raise ValidationError("parameters", parameter.name, "Declared more than once")
        parameters[lowered] = parameter
    return frozenset(parameters.values())


# ---------------------------------------------------------------------------
# VPC IPAM
# ---------------------------------------------------------------------------


class AddressFamily(str, Enum):
    IPV4 = "ipv4"
    IPV6 = "ipv6"


def _operating_regions(d: dict[str, Any]) -> frozenset[str]:
    raw = d.get("operating_regions")
    if not raw:
        raise ValidationError("operating_regions", raw, "At least one operating region is required")
    regions: set[str] = set()
    for entry in raw:
        region = entry.get("region_name") if isinstance(entry, dict) else entry
        validate_region_name(region)
        regions.add(region)
    return frozenset(regions)


@dataclass(frozen=True)
class IpamConfig:
    """Declared configuration of an ``aws_vpc_ipam``."""

    operating_regions: frozenset[str]
    description: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> IpamConfig:
        return cls(
            operating_regions=_operating_regions(d),
            description=_optional_str(d, "description"),
        )


@dataclass(frozen=True)
class Ipam:
    """Observed state of an ``aws_vpc_ipam``."""

    ipam_id: str
    arn: str
    operating_regions: frozenset[str]
    description: str | None = None
    private_default_scope_id: str | None = None
    public_default_scope_id: str | None = None
    scope_count: int = 0

    @classmethod
    def from_api(cls, ipam: dict[str, Any]) -> Ipam:
        return cls(
            ipam_id=ipam["IpamId"],
            arn=ipam["IpamArn"],
            operating_regions=frozenset(
                r["RegionName"] for r in ipam.get("OperatingRegions", [])
            ),
            description=ipam.get("Description"),
            private_default_scope_id=ipam.get("PrivateDefaultScopeId"),
            public_default_scope_id=ipam.get("PublicDefaultScopeId"),
            scope_count=ipam.get("ScopeCount", 0),
        )

    def to_config(self) -> IpamConfig:
        return IpamConfig(operating_regions=self.operating_regions, description=self.description)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.ipam_id,
            "arn": self.arn,
            "description": self.description,
            "operating_regions": [{"region_name": r} for r in sorted(self.operating_regions)],
            "private_default_scope_id": self.private_default_scope_id,
            "public_default_scope_id": self.public_default_scope_id,
            "scope_count": self.scope_count,
        }


@dataclass(frozen=True)
class IpamScopeConfig:
    """Declared configuration of an ``aws_vpc_ipam_scope``."""

    ipam_id: str
    description: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> IpamScopeConfig:
        return cls(ipam_id=_required_str(d, "ipam_id"), description=_optional_str(d, "description"))


@dataclass(frozen=True)
class IpamScope:
    """Observed state of an ``aws_vpc_ipam_scope``."""

    ipam_scope_id: str
    arn: str
    ipam_arn: str
    ipam_id: str
    ipam_scope_type: str | None = None
    description: str | None = None
    is_default: bool = False
    pool_count: int = 0

    @classmethod
    def from_api(cls, scope: dict[str, Any]) -> IpamScope:
        return cls(
            ipam_scope_id=scope["IpamScopeId"],
            arn=scope["IpamScopeArn"],
            ipam_arn=scope["IpamArn"],
            ipam_id=_arn_resource_id(scope["IpamArn"]),
            ipam_scope_type=scope.get("IpamScopeType"),
            description=scope.get("Description"),
            is_default=scope.get("IsDefault", False),
            pool_count=scope.get("PoolCount", 0),
        )

    def to_config(self) -> IpamScopeConfig:
        return IpamScopeConfig(ipam_id=self.ipam_id, description=self.description)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.ipam_scope_id,
            "arn": self.arn,
            "description": self.description,
            "ipam_arn": self.ipam_arn,
            "ipam_id": self.ipam_id,
            "ipam_scope_type": self.ipam_scope_type,
            "is_default": self.is_default,
            "pool_count": self.pool_count,
        }


@dataclass(frozen=True)
class IpamPoolConfig:
    """Declared configuration of an ``aws_vpc_ipam_pool``."""

    address_family: AddressFamily
    ipam_scope_id: str
    advertisable: bool | None = None
    allocation_default_netmask_length: int | None = None
    allocation_max_netmask_length: int | None = None
    allocation_min_netmask_length: int | None = None
    allocation_resource_tags: dict[str, str] = field(default_factory=dict)
    auto_import: bool = False
    description: str | None = None
    locale: str = LOCALE_NONE
    source_ipam_pool_id: str | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> IpamPoolConfig:
        family = d.get("address_family")
        try:
            address_family = AddressFamily(family)
        except ValueError:
            raise ValidationError("address_family", family, "Must be 'ipv4' or 'ipv6'") from None

        locale = d.get("locale") or LOCALE_NONE
        if locale != LOCALE_NONE:
            validate_region_name(locale)

        advertisable = d.get("advertisable")
        if advertisable is not None and not isinstance(advertisable, bool):
            raise ValidationError("advertisable", advertisable, "Must be a boolean")

        auto_import = d.get("auto_import", False)
        if not isinstance(auto_import, bool):
            raise ValidationError("auto_import", auto_import, "Must be a boolean")

        return cls(
            address_family=address_family,
            ipam_scope_id=_required_str(d, "ipam_scope_id"),
            advertisable=advertisable,
            allocation_default_netmask_length=_netmask(d, "allocation_default_netmask_length"),
            allocation_max_netmask_length=_netmask(d, "allocation_max_netmask_length"),
            allocation_min_netmask_length=_netmask(d, "allocation_min_netmask_length"),
            allocation_resource_tags=_tag_map(d, "allocation_resource_tags"),
            auto_import=auto_import,
            description=_optional_str(d, "description"),
            locale=locale,
            source_ipam_pool_id=_optional_str(d, "source_ipam_pool_id"),
        )


@dataclass(frozen=True)
class IpamPool:
    """Observed state of an ``aws_vpc_ipam_pool``."""

    ipam_pool_id: str
    arn: str
    address_family: str
    ipam_scope_id: str
    state: IpamPoolStatus
    advertisable: bool | None = None
    allocation_default_netmask_length: int | None = None
    allocation_max_netmask_length: int | None = None
    allocation_min_netmask_length: int | None = None
    allocation_resource_tags: dict[str, str] = field(default_factory=dict)
    auto_import: bool = False
    description: str | None = None
    ipam_scope_type: str | None = None
    locale: str = LOCALE_NONE
    pool_depth: int = 0
    source_ipam_pool_id: str | None = None

    @classmethod
    def from_api(cls, pool: dict[str, Any]) -> IpamPool:
        return cls(
            ipam_pool_id=pool["IpamPoolId"],
            arn=pool["IpamPoolArn"],
            address_family=pool["AddressFamily"],
            ipam_scope_id=_arn_resource_id(pool["IpamScopeArn"]),
            state=IpamPoolStatus(pool["State"]),
            advertisable=pool.get("PubliclyAdvertisable"),
            allocation_default_netmask_length=pool.get("AllocationDefaultNetmaskLength"),
            allocation_max_netmask_length=pool.get("AllocationMaxNetmaskLength"),
            allocation_min_netmask_length=pool.get("AllocationMinNetmaskLength"),
            allocation_resource_tags={
                t["Key"]: t["Value"] for t in pool.get("AllocationResourceTags", [])
            },
            auto_import=pool.get("AutoImport", False),
            description=pool.get("Description"),
            ipam_scope_type=pool.get("IpamScopeType"),
            locale=pool.get("Locale") or LOCALE_NONE,
            pool_depth=pool.get("PoolDepth", 0),
            source_ipam_pool_id=pool.get("SourceIpamPoolId"),
        )

    def to_config(self) -> IpamPoolConfig:
        return IpamPoolConfig(
            address_family=AddressFamily(self.address_family),
            ipam_scope_id=self.ipam_scope_id,
            advertisable=self.advertisable,
            allocation_default_netmask_length=self.allocation_default_netmask_length,
            allocation_max_netmask_length=self.allocation_max_netmask_length,
            allocation_min_netmask_length=self.allocation_min_netmask_length,
            allocation_resource_tags=dict(self.allocation_resource_tags),
            auto_import=self.auto_import,
            description=self.description,
            locale=self.locale,
            source_ipam_pool_id=self.source_ipam_pool_id,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.ipam_pool_id,
            "arn": self.arn,
            "address_family": self.address_family,
            "advertisable": self.advertisable,
            "allocation_default_netmask_length": self.allocation_default_netmask_length,
            "allocation_max_netmask_length": self.allocation_max_netmask_length,
            "allocation_min_netmask_length": self.allocation_min_netmask_length,
            "allocation_resource_tags": dict(self.allocation_resource_tags),
            "auto_import": self.auto_import,
            "description": self.description,
            "ipam_scope_id": self.ipam_scope_id,
            "ipam_scope_type": self.ipam_scope_type,
            "locale": self.locale,
            "pool_depth": self.pool_depth,
            "source_ipam_pool_id": self.source_ipam_pool_id,
            "state": self.state.value,
        }


# ---------------------------------------------------------------------------
# RDS DB Parameter Group
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParameterGroupConfig:
    """Declared configuration of an ``aws_rds_parameter_group``."""

    family: str
    name: str | None = None
    name_prefix: str | None = None
    description: str = DEFAULT_PARAMETER_GROUP_DESCRIPTION
    parameters: frozenset[Parameter] = frozenset()
    tags: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.name and self.name_prefix:
            raise ValidationError("name", self.name, "Conflicts with name_prefix")
        if self.name:
            validate_parameter_group_name(self.name)
        if self.name_prefix:
            validate_parameter_group_name_prefix(self.name_prefix)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ParameterGroupConfig:
        return cls(
            family=_required_str(d, "family"),
            name=_optional_str(d, "name"),
            name_prefix=_optional_str(d, "name_prefix"),
            description=_optional_str(d, "description") or DEFAULT_PARAMETER_GROUP_DESCRIPTION,
            parameters=parse_parameters(d.get("parameters")),
            tags=_tag_map(d, "tags"),
        )


@dataclass(frozen=True)
class ParameterGroup:
    """Observed state of an ``aws_rds_parameter_group``."""

    name: str
    arn: str
    family: str
    description: str
    parameters: frozenset[Parameter] = frozenset()
    tags: dict[str, str] = field(default_factory=dict)
    tags_all: dict[str, str] = field(default_factory=dict)

    def to_config(self) -> ParameterGroupConfig:
        return ParameterGroupConfig(
            family=self.family,
            name=self.name,
            description=self.description,
            parameters=self.parameters,
            tags=dict(self.tags),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.name,
            "name": self.name,
            "arn": self.arn,
            "family": self.family,
            "description": self.description,
            "parameters": [p.to_dict() for p in sorted(self.parameters, key=lambda p: p.key)],
            "tags": dict(self.tags),
            "tags_all": dict(self.tags_all),
        }
