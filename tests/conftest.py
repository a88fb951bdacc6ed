"""Shared pytest fixtures for all test modules."""

import os
import tempfile
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

# Loggers are created at import time; keep their files out of the working tree
os.environ.setdefault("IMAGEBUILDER_LOG_DIR", tempfile.mkdtemp(prefix="imagebuilder-logs-"))

from imagebuilder.core.aws.ec2 import EC2Manager  # noqa: E402
from imagebuilder.core.models import AWSConfig  # noqa: E402


def make_client_error(code, operation="DescribeInstances", message="boom"):
    """Build a real botocore ClientError with the given AWS error code."""
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def no_sleep(seconds):
    return None


@pytest.fixture
def client_error():
    return make_client_error


@pytest.fixture
def ec2_client():
    """A MagicMock standing in for a boto3 EC2 client."""
    return MagicMock(name="ec2_client")


@pytest.fixture
def regional_clients():
    """Per-region EC2 client mocks, created on first use."""
    clients = {}

    def _get(region):
        if region not in clients:
            clients[region] = MagicMock(name=f"ec2_client[{region}]")
        return clients[region]

    _get.clients = clients
    return _get


@pytest.fixture
def session(regional_clients):
    """A boto3 Session mock whose ``client("ec2", region_name=...)`` is per region."""
    mock_session = MagicMock(name="session")
    mock_session.client.side_effect = lambda service, region_name=None: regional_clients(region_name)
    return mock_session


@pytest.fixture
def ec2(session, regional_clients):
    """EC2Manager in us-east-1 backed by ``regional_clients("us-east-1")``."""
    return EC2Manager(session, "us-east-1", ec2_client=regional_clients("us-east-1"))


@pytest.fixture
def aws_config(tmp_path):
    key_file = tmp_path / "id_rsa.pub"
    key_file.write_bytes(b"ssh-rsa AAAAB3NzaC1yc2E test@example\n")
    return AWSConfig(
        region="us-east-1",
        image_id="ami-0123456789abcdef0",
        instance_type="m5.large",
        ssh_public_key=str(key_file),
    )


def subnets_response(*subnets):
    return {"Subnets": [{"SubnetId": s, "VpcId": f"vpc-{s[7:]}"} for s in subnets]}


def instances_response(*instances):
    return {"Reservations": [{"Instances": list(instances)}]}
