"""Unit test fixtures: mocked AWS clients and a fake clock."""

from unittest.mock import MagicMock

import pytest
from moto import mock_aws

from tfaws.client import AwsClient


class FakeClock:
    """Monotonic clock that only advances when ``sleep`` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    """A fake clock; pass ``clock`` and ``clock.sleep`` to adapters."""
    return FakeClock()


@pytest.fixture
def aws_client():
    """AwsClient with MagicMock service clients in us-east-1."""
    return AwsClient(region="us-east-1", ec2=MagicMock(), rds=MagicMock())


@pytest.fixture
def mock_rds(aws_credentials):
    """Real boto3 clients backed by moto."""
    with mock_aws():
        yield AwsClient.create(region="us-east-1")
