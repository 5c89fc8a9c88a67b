"""Unit test fixtures."""

from unittest.mock import AsyncMock, patch

import pytest

from cfn_stack import Stack
from tests.fixtures.cloudformation import FakeCloudFormation
from tests.fixtures.progress import RecordingSink

TEMPLATE = """\
Description: Test Stack for cfn-stack
Parameters:
  Env:
    Type: String
Outputs:
  Role:
    Value: !Ref SomeRole
Resources:
  SomeRole:
    Type: AWS::IAM::Role
"""


@pytest.fixture
def template() -> str:
    return TEMPLATE


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def fake_cfn() -> FakeCloudFormation:
    return FakeCloudFormation()


@pytest.fixture
def stack(fake_cfn, sink):
    """Stack controller wired to the in-memory CloudFormation, without poll delay."""
    with patch.object(Stack, "_get_client", new_callable=AsyncMock) as mock_get_client:
        mock_get_client.return_value = fake_cfn
        yield Stack("test-stack", region="us-east-1", poll_interval=0, sink=sink)
