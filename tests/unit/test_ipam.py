"""Tests for the aws_vpc_ipam adapter."""

import pytest
from botocore.exceptions import ClientError

from tfaws.exceptions import (
    ResourceNotFoundError,
    ResourceOperationError,
    ValidationError,
    WaitTimeoutError,
)
from tfaws.models import IpamConfig
from tfaws.resources import IpamAdapter

NOT_FOUND = ClientError(
    {"Error": {"Code": "InvalidIpamId.NotFound", "Message": "not found"}}, "DescribeIpams"
)


def _ipam(ipam_id="ipam-0123", regions=("us-east-1",), description=None):
    ipam = {
        "IpamId": ipam_id,
        "IpamArn": f"arn:aws:ec2::123456789012:ipam/{ipam_id}",
        "OperatingRegions": [{"RegionName": r} for r in regions],
        "PrivateDefaultScopeId": "ipam-scope-priv",
        "PublicDefaultScopeId": "ipam-scope-pub",
        "ScopeCount": 2,
    }
    if description is not None:
        ipam["Description"] = description
    return ipam


@pytest.fixture
def adapter(aws_client, clock):
    return IpamAdapter(aws_client, clock=clock, sleep=clock.sleep)


class TestCreate:
    """Tests for IpamAdapter.create()."""

    def test_create(self, adapter, aws_client):
        """Create sends sorted operating regions and reads the result back."""
        ec2 = aws_client.ec2
        ec2.create_ipam.return_value = {"Ipam": {"IpamId": "ipam-0123"}}
        ec2.describe_ipams.return_value = {
            "Ipams": [_ipam(regions=("us-east-1", "eu-west-1"), description="main")]
        }

        ipam = adapter.create(
            IpamConfig(frozenset({"us-east-1", "eu-west-1"}), description="main")
        )

        kwargs = ec2.create_ipam.call_args[1]
        assert kwargs["OperatingRegions"] == [
            {"RegionName": "eu-west-1"},
            {"RegionName": "us-east-1"},
        ]
        assert kwargs["Description"] == "main"
        assert kwargs["ClientToken"].startswith("tfaws-")
        ec2.describe_ipams.assert_called_once_with(IpamIds=["ipam-0123"])
        assert ipam.ipam_id == "ipam-0123"
        assert ipam.public_default_scope_id == "ipam-scope-pub"

    def test_current_region_required(self, adapter, aws_client):
        """The client's own region must be an operating region."""
        with pytest.raises(ValidationError, match=r"Must include \(us-east-1\)"):
            adapter.create(IpamConfig(frozenset({"eu-west-1"})))
        aws_client.ec2.create_ipam.assert_not_called()

    def test_api_error_wrapped(self, adapter, aws_client):
        """API errors are wrapped with the resource type."""
        aws_client.ec2.create_ipam.side_effect = ClientError(
            {"Error": {"Code": "UnauthorizedOperation", "Message": "denied"}}, "CreateIpam"
        )

        with pytest.raises(ResourceOperationError) as exc_info:
            adapter.create(IpamConfig(frozenset({"us-east-1"})))

        assert exc_info.value.operation == "creating"
        assert exc_info.value.resource_type == "aws_vpc_ipam"
        assert isinstance(exc_info.value.__cause__, ClientError)

    def test_missing_after_create(self, adapter, aws_client):
        """A freshly created IPAM that cannot be read is an error."""
        aws_client.ec2.create_ipam.return_value = {"Ipam": {"IpamId": "ipam-0123"}}
        aws_client.ec2.describe_ipams.return_value = {"Ipams": []}

        with pytest.raises(ResourceNotFoundError):
            adapter.create(IpamConfig(frozenset({"us-east-1"})))


class TestRead:
    """Tests for IpamAdapter.read()."""

    def test_not_found_returns_none(self, adapter, aws_client):
        """A missing IPAM reads as None."""
        aws_client.ec2.describe_ipams.side_effect = NOT_FOUND
        assert adapter.read("ipam-0123") is None

    def test_empty_result_returns_none(self, adapter, aws_client):
        """An empty describe result reads as None."""
        aws_client.ec2.describe_ipams.return_value = {"Ipams": []}
        assert adapter.read("ipam-0123") is None

    def test_other_error_wrapped(self, adapter, aws_client):
        """Other API errors surface as ResourceOperationError."""
        aws_client.ec2.describe_ipams.side_effect = ClientError(
            {"Error": {"Code": "RequestLimitExceeded", "Message": "slow"}}, "DescribeIpams"
        )
        with pytest.raises(ResourceOperationError) as exc_info:
            adapter.read("ipam-0123")
        assert exc_info.value.operation == "reading"


class TestUpdate:
    """Tests for IpamAdapter.update()."""

    def test_region_diff(self, adapter, aws_client):
        """Only added and removed regions are sent."""
        aws_client.ec2.describe_ipams.return_value = {
            "Ipams": [_ipam(regions=("us-east-1", "us-west-2"))]
        }

        adapter.update(
            "ipam-0123",
            IpamConfig(frozenset({"us-east-1", "eu-west-1"})),
            IpamConfig(frozenset({"us-east-1", "us-west-2"})),
        )

        aws_client.ec2.modify_ipam.assert_called_once_with(
            IpamId="ipam-0123",
            AddOperatingRegions=[{"RegionName": "us-west-2"}],
            RemoveOperatingRegions=[{"RegionName": "eu-west-1"}],
        )

    def test_description_only(self, adapter, aws_client):
        """A description change is sent even when regions are unchanged."""
        aws_client.ec2.describe_ipams.return_value = {"Ipams": [_ipam(description="new")]}
        regions = frozenset({"us-east-1"})

        adapter.update("ipam-0123", IpamConfig(regions, "old"), IpamConfig(regions, "new"))

        aws_client.ec2.modify_ipam.assert_called_once_with(IpamId="ipam-0123", Description="new")

    def test_no_change(self, adapter, aws_client):
        """Nothing is sent when nothing changed."""
        aws_client.ec2.describe_ipams.return_value = {"Ipams": [_ipam()]}
        config = IpamConfig(frozenset({"us-east-1"}))

        adapter.update("ipam-0123", config, config)

        aws_client.ec2.modify_ipam.assert_not_called()

    def test_apply_diffs_against_remote(self, adapter, aws_client):
        """apply() uses the observed state as the old configuration."""
        aws_client.ec2.describe_ipams.return_value = {"Ipams": [_ipam(description="old")]}

        adapter.apply("ipam-0123", IpamConfig(frozenset({"us-east-1"}), "new"))

        aws_client.ec2.modify_ipam.assert_called_once_with(IpamId="ipam-0123", Description="new")

    def test_apply_missing(self, adapter, aws_client):
        """apply() on a missing IPAM raises."""
        aws_client.ec2.describe_ipams.side_effect = NOT_FOUND
        with pytest.raises(ResourceNotFoundError):
            adapter.apply("ipam-0123", IpamConfig(frozenset({"us-east-1"})))


class TestDelete:
    """Tests for IpamAdapter.delete()."""

    def test_waits_until_gone(self, adapter, aws_client, clock):
        """Delete polls until the IPAM is not found."""
        aws_client.ec2.describe_ipams.side_effect = [{"Ipams": [_ipam()]}, NOT_FOUND]

        adapter.delete("ipam-0123")

        aws_client.ec2.delete_ipam.assert_called_once_with(IpamId="ipam-0123")
        assert aws_client.ec2.describe_ipams.call_count == 2
        assert clock.sleeps == [5, 5]

    def test_already_deleted(self, adapter, aws_client):
        """Deleting a missing IPAM succeeds without polling."""
        aws_client.ec2.delete_ipam.side_effect = NOT_FOUND

        adapter.delete("ipam-0123")

        aws_client.ec2.describe_ipams.assert_not_called()

    def test_timeout(self, adapter, aws_client):
        """An IPAM that never disappears times out."""
        aws_client.ec2.describe_ipams.return_value = {"Ipams": [_ipam()]}

        with pytest.raises(WaitTimeoutError) as exc_info:
            adapter.delete("ipam-0123")

        assert exc_info.value.expected == ["InvalidIpamId.NotFound"]
        assert exc_info.value.last_status == "Available"
