"""
tfaws: declarative lifecycle adapters for AWS resources.

Each adapter maps create/read/update/delete onto AWS API calls for one
resource type, polls eventually-consistent resources until they settle,
and reports the observed state back as a typed record:

- ``aws_vpc_ipam``, ``aws_vpc_ipam_scope``, ``aws_vpc_ipam_pool`` (EC2)
- ``aws_rds_parameter_group`` (RDS), with parameter updates split into
  prioritised batches of at most 20

Example:
    from tfaws import AwsClient, ParameterGroupAdapter, ParameterGroupConfig

    client = AwsClient.create(region="us-east-1")
    groups = ParameterGroupAdapter(client)
    group = groups.create(
        ParameterGroupConfig.from_dict(
            {
                "family": "mysql8.0",
                "name": "app-db",
                "parameters": [
                    {"name": "character_set_server", "value": "utf8mb4"},
                    {"name": "max_connections", "value": "500"},
                ],
            }
        )
    )
"""

from importlib.metadata import PackageNotFoundError, version

from .batching import MAX_PARAMETERS_PER_CALL, iter_batches, plan_batch
from .client import AwsClient
from .exceptions import (
    ResourceError,
    ResourceNotFoundError,
    ResourceOperationError,
    TfawsError,
    UnexpectedStateError,
    ValidationError,
    WaitTimeoutError,
)
from .models import (
    AddressFamily,
    ApplyMethod,
    Ipam,
    IpamConfig,
    IpamPool,
    IpamPoolConfig,
    IpamScope,
    IpamScopeConfig,
    Parameter,
    ParameterGroup,
    ParameterGroupConfig,
)
from .resources import IpamAdapter, IpamPoolAdapter, IpamScopeAdapter, ParameterGroupAdapter
from .status import IpamPoolStatus, IpamScopeStatus, IpamStatus
from .tags import IgnoreTagsConfig
from .waiter import StateWaiter

try:
    __version__ = version("tfaws")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Connection
    "AwsClient",
    "IgnoreTagsConfig",
    # Adapters
    "IpamAdapter",
    "IpamPoolAdapter",
    "IpamScopeAdapter",
    "ParameterGroupAdapter",
    # Models
    "AddressFamily",
    "ApplyMethod",
    "Ipam",
    "IpamConfig",
    "IpamPool",
    "IpamPoolConfig",
    "IpamScope",
    "IpamScopeConfig",
    "Parameter",
    "ParameterGroup",
    "ParameterGroupConfig",
    # Status
    "IpamPoolStatus",
    "IpamScopeStatus",
    "IpamStatus",
    "StateWaiter",
    # Batching
    "MAX_PARAMETERS_PER_CALL",
    "iter_batches",
    "plan_batch",
    # Exceptions
    "TfawsError",
    "ValidationError",
    "ResourceError",
    "ResourceNotFoundError",
    "ResourceOperationError",
    "UnexpectedStateError",
    "WaitTimeoutError",
]
