"""Closed status vocabularies for polled resources.

Each resource kind gets its own enum so that a status reported by a
refresh function is always one of a known set. Parsing an unknown
string raises ``ValueError`` instead of silently comparing unequal.
"""

from enum import Enum


class IpamStatus(str, Enum):
    """Observed status of a VPC IPAM."""

    AVAILABLE = "Available"
    NOT_FOUND = "InvalidIpamId.NotFound"


class IpamScopeStatus(str, Enum):
    """Observed status of a VPC IPAM scope."""

    AVAILABLE = "Available"
    NOT_FOUND = "InvalidIpamScopeId.NotFound"


class IpamPoolStatus(str, Enum):
    """
    Observed status of a VPC IPAM pool.

    Mirrors the EC2 ``IpamPoolState`` values, plus ``NOT_FOUND`` once the
    pool is gone from ``DescribeIpamPools``.
    """

    CREATE_IN_PROGRESS = "create-in-progress"
    CREATE_COMPLETE = "create-complete"
    CREATE_FAILED = "create-failed"
    MODIFY_IN_PROGRESS = "modify-in-progress"
    MODIFY_COMPLETE = "modify-complete"
    MODIFY_FAILED = "modify-failed"
    DELETE_IN_PROGRESS = "delete-in-progress"
    DELETE_COMPLETE = "delete-complete"
    DELETE_FAILED = "delete-failed"
    ISOLATE_IN_PROGRESS = "isolate-in-progress"
    ISOLATE_COMPLETE = "isolate-complete"
    RESTORE_IN_PROGRESS = "restore-in-progress"
    NOT_FOUND = "InvalidIpamPoolId.NotFound"
