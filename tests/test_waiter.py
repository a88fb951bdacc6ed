"""Unit tests for core/aws/waiter: public IP polling, SSH dialing, termination."""

import socket
import threading
from unittest.mock import MagicMock

import paramiko
import pytest

from conftest import instances_response, make_client_error
from imagebuilder.core.aws.instance import AWSInstance
from imagebuilder.core.aws.waiter import ReachabilityWaiter
from imagebuilder.core.cloud import SSHSessionConfig
from imagebuilder.utils.exceptions import (
    CloudOperationError,
    LookupFailure,
    NotFoundError,
    WaitCancelledError,
    WaitTimeoutError,
)


def describe_sequence(client, addresses):
    """Make describe_instances report ``addresses`` in turn (last one repeats)."""
    responses = [
        instances_response({"InstanceId": "i-123", "PublicIpAddress": address} if address else {"InstanceId": "i-123"})
        for address in addresses
    ]

    def _describe(**kwargs):
        index = min(client.describe_instances.call_count - 1, len(responses) - 1)
        return responses[index]

    client.describe_instances.side_effect = _describe


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def waiter(sleeps):
    return ReachabilityWaiter(sleep=sleeps.append)


@pytest.fixture
def instance(ec2, ec2_client, waiter):
    ec2.ec2_client = ec2_client
    return AWSInstance("i-123", ec2, waiter=waiter)


def test_public_address_returned_after_exactly_n_polls(instance, ec2_client, waiter, sleeps):
    describe_sequence(ec2_client, [None, None, None, "203.0.113.10"])

    address = waiter.wait_for_public_address(instance)

    assert address == "203.0.113.10"
    assert ec2_client.describe_instances.call_count == 4
    assert sleeps == [5, 5, 5]
    assert instance.public_ip == "203.0.113.10"


def test_public_address_available_immediately(instance, ec2_client, sleeps):
    describe_sequence(ec2_client, ["203.0.113.10"])

    assert instance.wait_public_ip() == "203.0.113.10"
    assert sleeps == []


def test_public_address_describe_error_stops_polling(instance, ec2_client, waiter):
    ec2_client.describe_instances.side_effect = make_client_error("AuthFailure")

    with pytest.raises(LookupFailure):
        waiter.wait_for_public_address(instance)

    assert ec2_client.describe_instances.call_count == 1


def test_public_address_instance_gone(instance, ec2_client, waiter):
    ec2_client.describe_instances.side_effect = make_client_error("InvalidInstanceID.NotFound")

    with pytest.raises(NotFoundError):
        waiter.wait_for_public_address(instance)


def test_public_address_timeout(ec2, ec2_client):
    ec2.ec2_client = ec2_client
    describe_sequence(ec2_client, [None])
    now = [0.0]

    def fake_sleep(seconds):
        now[0] += seconds

    waiter = ReachabilityWaiter(sleep=fake_sleep, clock=lambda: now[0])
    instance = AWSInstance("i-123", ec2, waiter=waiter)

    with pytest.raises(WaitTimeoutError):
        waiter.wait_for_public_address(instance, timeout=12)

    # polls at t=0, 5, 10, 12 then gives up
    assert ec2_client.describe_instances.call_count == 4


def test_public_address_cancelled(instance, ec2_client, waiter):
    describe_sequence(ec2_client, [None])
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(WaitCancelledError):
        waiter.wait_for_public_address(instance, cancel=cancel)

    assert ec2_client.describe_instances.call_count == 1


def test_dial_retries_until_ssh_answers(ec2, ec2_client, sleeps):
    ec2.ec2_client = ec2_client
    describe_sequence(ec2_client, ["203.0.113.10"])
    client = MagicMock(name="ssh_client")
    connect = MagicMock(
        side_effect=[
            socket.error("connection refused"),
            paramiko.SSHException("banner"),
            client,
        ]
    )
    waiter = ReachabilityWaiter(sleep=sleeps.append, connect=connect)
    instance = AWSInstance("i-123", ec2, waiter=waiter)
    ssh_config = SSHSessionConfig(username="admin")

    session = instance.dial_ssh(ssh_config)

    assert session is client
    assert connect.call_count == 3
    connect.assert_called_with("203.0.113.10", ssh_config)
    assert sleeps == [5, 5]


def test_dial_does_not_retry_unexpected_errors(ec2, ec2_client, sleeps):
    ec2.ec2_client = ec2_client
    describe_sequence(ec2_client, ["203.0.113.10"])
    connect = MagicMock(side_effect=ValueError("bad config"))
    waiter = ReachabilityWaiter(sleep=sleeps.append, connect=connect)

    with pytest.raises(ValueError):
        waiter.dial(AWSInstance("i-123", ec2, waiter=waiter), SSHSessionConfig())

    assert connect.call_count == 1


def test_shutdown_terminates_once(instance, ec2_client):
    instance.shutdown()

    ec2_client.terminate_instances.assert_called_once_with(InstanceIds=["i-123"])


def test_shutdown_error_propagates_without_retry(instance, ec2_client):
    ec2_client.terminate_instances.side_effect = make_client_error("RequestLimitExceeded", "TerminateInstances")

    with pytest.raises(CloudOperationError):
        instance.shutdown()

    ec2_client.terminate_instances.assert_called_once()
