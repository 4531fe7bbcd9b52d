"""Lifecycle adapters, one per managed AWS resource type."""

from .base import ResourceAdapter, error_code
from .ipam import IpamAdapter
from .ipam_pool import IpamPoolAdapter
from .ipam_scope import IpamScopeAdapter
from .parameter_group import ParameterGroupAdapter

__all__ = [
    "IpamAdapter",
    "IpamPoolAdapter",
    "IpamScopeAdapter",
    "ParameterGroupAdapter",
    "ResourceAdapter",
    "error_code",
]
