"""Resource naming utilities.

This module provides centralized validation and generation for resource names:
- AWS region names (IPAM operating regions, pool locales)
- RDS DB parameter group names and name prefixes
- Unique identifiers for client tokens and generated group names
"""

import re

from ulid import ULID

from .exceptions import ValidationError

UNIQUE_ID_PREFIX = "tfaws-"
"""Prefix of identifiers produced by ``unique_id()``."""

ENDPOINT_ENV_VAR = "TFAWS_ENDPOINT_URL"
"""Environment variable for overriding the AWS endpoint (e.g., LocalStack)."""

LOG_LEVEL_ENV_VAR = "TFAWS_LOG_LEVEL"
"""Environment variable for the CLI log level."""

REGION_PATTERN = re.compile(r"^[a-z]{2}(-[a-z]+)+-\d$")

# Parameter group names: lowercase alphanumerics and hyphens, starting with a letter
PARAMETER_GROUP_PATTERN = re.compile(r"^[a-z][0-9a-z-]*$")
PARAMETER_GROUP_NAME_MAX_LENGTH = 255
# Leaves room for the 26-character unique suffix
PARAMETER_GROUP_PREFIX_MAX_LENGTH = 229


def validate_region_name(region: str) -> None:
    """
    Validate an AWS region name (e.g., 'us-east-1').

    Raises:
        ValidationError: If the name does not look like a region
    """
    if not region:
        raise ValidationError("region_name", region, "Region name cannot be empty")
    if not REGION_PATTERN.match(region):
        raise ValidationError(
            "region_name",
            region,
            "Must look like an AWS region name (e.g., 'us-east-1').",
        )


def _validate_group_charset(field: str, name: str) -> None:
    if not name:
        raise ValidationError(field, name, "Name cannot be empty")
    if not PARAMETER_GROUP_PATTERN.match(name):
        if not name[0].isalpha():
            raise ValidationError(field, name, "First character must be a letter.")
        raise ValidationError(
            field,
            name,
            "Only lowercase alphanumeric characters and hyphens allowed.",
        )
    if "--" in name:
        raise ValidationError(field, name, "Cannot contain two consecutive hyphens.")


def validate_parameter_group_name(name: str) -> None:
    """
    Validate an RDS DB parameter group name.

    Args:
        name: The user-provided group name

    Raises:
        ValidationError: If the name breaks RDS naming rules
    """
    _validate_group_charset("name", name)
    if name.endswith("-"):
        raise ValidationError("name", name, "Cannot end with a hyphen.")
    if len(name) > PARAMETER_GROUP_NAME_MAX_LENGTH:
        raise ValidationError(
            "name",
            name,
            f"Cannot be longer than {PARAMETER_GROUP_NAME_MAX_LENGTH} characters.",
        )


def validate_parameter_group_name_prefix(prefix: str) -> None:
    """
    Validate an RDS DB parameter group name prefix.

    A prefix may end with a hyphen since a unique suffix follows it.

    Raises:
        ValidationError: If the prefix breaks RDS naming rules
    """
    _validate_group_charset("name_prefix", prefix)
    if len(prefix) > PARAMETER_GROUP_PREFIX_MAX_LENGTH:
        raise ValidationError(
            "name_prefix",
            prefix,
            f"Cannot be longer than {PARAMETER_GROUP_PREFIX_MAX_LENGTH} characters.",
        )


def prefixed_unique_id(prefix: str) -> str:
    """
    Generate an identifier that starts with ``prefix``.

    The suffix is a lower-cased ULID, which sorts by creation time and
    only uses characters valid in RDS names.

    Args:
        prefix: Leading part of the identifier

    Returns:
        ``prefix`` + 26-character ULID
    """
    return f"{prefix}{str(ULID()).lower()}"


def unique_id() -> str:
    """Generate a unique identifier with the default ``tfaws-`` prefix."""
    return prefixed_unique_id(UNIQUE_ID_PREFIX)
