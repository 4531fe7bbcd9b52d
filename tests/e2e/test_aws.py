"""End-to-end tests against real AWS.

These tests create and delete a real RDS DB parameter group. They need:
1. Valid AWS credentials allowed to manage RDS parameter groups in us-east-1
2. The --run-aws pytest flag

To run:
    pytest tests/e2e/test_aws.py --run-aws -v
"""

import pytest

from tfaws import AwsClient
from tfaws.models import ApplyMethod, Parameter, ParameterGroupConfig
from tfaws.naming import prefixed_unique_id
from tfaws.resources import ParameterGroupAdapter

pytestmark = pytest.mark.aws

REBOOT = ApplyMethod.PENDING_REBOOT


@pytest.fixture
def adapter():
    return ParameterGroupAdapter(AwsClient.create(region="us-east-1"))


@pytest.fixture
def group_name(adapter):
    """Unique group name; the group is deleted after the test."""
    name = prefixed_unique_id("tfaws-e2e-")
    yield name
    adapter.delete(name)


class TestParameterGroupLifecycle:
    """Create, apply and delete a MySQL 8.0 parameter group."""

    def test_round_trip(self, adapter, group_name):
        """Declared parameters are set, dropped ones reset, and delete removes the group."""
        config = ParameterGroupConfig(
            family="mysql8.0",
            name=group_name,
            parameters=frozenset(
                {
                    Parameter("character_set_server", "utf8mb4", REBOOT),
                    Parameter("max_connections", "150", REBOOT),
                    Parameter("wait_timeout", "600"),
                }
            ),
            tags={"purpose": "tfaws-e2e"},
        )

        created = adapter.create(config)

        assert created.name == group_name
        assert {p.name: p.value for p in created.parameters} == {
            "character_set_server": "utf8mb4",
            "max_connections": "150",
            "wait_timeout": "600",
        }
        assert created.tags == {"purpose": "tfaws-e2e"}

        changed = ParameterGroupConfig(
            family="mysql8.0",
            name=group_name,
            parameters=frozenset(
                {
                    Parameter("character_set_server", "utf8mb4", REBOOT),
                    Parameter("max_connections", "200", REBOOT),
                }
            ),
        )

        applied = adapter.apply(group_name, changed)

        values = {p.name: p.value for p in applied.parameters}
        assert values["max_connections"] == "200"
        assert "wait_timeout" not in values
        assert applied.tags == {}

        adapter.delete(group_name)
        assert adapter.read(group_name) is None
