"""Unit tests for core/aws/provisioner: launching and tagging the build instance."""

from dataclasses import replace

import pytest

from conftest import make_client_error, subnets_response
from imagebuilder.core.aws.instance import AWSInstance
from imagebuilder.core.aws.provisioner import InstanceProvisioner
from imagebuilder.core.constants import TAG_ROLE_KEY
from imagebuilder.utils.exceptions import CloudOperationError, ConfigurationError


@pytest.fixture
def backend(ec2, ec2_client):
    """EC2 client mock with one tagged subnet, one tagged group and an existing key."""
    ec2.ec2_client = ec2_client
    ec2_client.describe_subnets.return_value = subnets_response("subnet-aaa")
    ec2_client.describe_security_groups.return_value = {"SecurityGroups": [{"GroupId": "sg-1"}]}
    ec2_client.describe_key_pairs.return_value = {"KeyPairs": [{"KeyName": "existing"}]}
    ec2_client.run_instances.return_value = {"Instances": [{"InstanceId": "i-123"}]}
    return ec2_client


def test_create_launches_and_tags(ec2, backend, aws_config):
    instance = InstanceProvisioner(ec2).create(aws_config)

    assert isinstance(instance, AWSInstance)
    assert instance.id == "i-123"

    kwargs = backend.run_instances.call_args.kwargs
    assert kwargs["ImageId"] == "ami-0123456789abcdef0"
    assert kwargs["InstanceType"] == "m5.large"
    assert kwargs["MinCount"] == kwargs["MaxCount"] == 1
    interface = kwargs["NetworkInterfaces"][0]
    assert interface["AssociatePublicIpAddress"] is True
    assert interface["SubnetId"] == "subnet-aaa"
    assert interface["Groups"] == ["sg-1"]

    backend.create_tags.assert_called_once()
    tag_kwargs = backend.create_tags.call_args.kwargs
    assert tag_kwargs["Resources"] == ["i-123"]
    assert tag_kwargs["Tags"][0]["Key"] == TAG_ROLE_KEY
    backend.terminate_instances.assert_not_called()


def test_create_uses_explicit_settings(ec2, backend, aws_config):
    config = replace(
        aws_config, subnet_id="subnet-explicit", security_group_id="sg-explicit", ssh_key_name="mykey"
    )
    backend.describe_subnets.return_value = subnets_response("subnet-explicit")

    InstanceProvisioner(ec2).create(config)

    backend.describe_subnets.assert_called_once_with(SubnetIds=["subnet-explicit"])
    backend.describe_security_groups.assert_not_called()
    backend.describe_key_pairs.assert_not_called()
    assert backend.run_instances.call_args.kwargs["KeyName"] == "mykey"


def test_create_without_subnet_is_configuration_error(ec2, backend, aws_config):
    backend.describe_subnets.return_value = {"Subnets": []}

    with pytest.raises(ConfigurationError, match="SubnetID"):
        InstanceProvisioner(ec2).create(aws_config)

    backend.run_instances.assert_not_called()


def test_create_with_unknown_subnet_is_configuration_error(ec2, backend, aws_config):
    backend.describe_subnets.side_effect = make_client_error("InvalidSubnetID.NotFound", "DescribeSubnets")

    with pytest.raises(ConfigurationError, match="could not find subnet"):
        InstanceProvisioner(ec2).create(replace(aws_config, subnet_id="subnet-gone"))


def test_create_without_security_group_is_configuration_error(ec2, backend, aws_config):
    backend.describe_security_groups.return_value = {"SecurityGroups": []}

    with pytest.raises(ConfigurationError, match="SecurityGroupID"):
        InstanceProvisioner(ec2).create(aws_config)


@pytest.mark.parametrize("field", ["image_id", "instance_type"])
def test_create_requires_image_and_instance_type(ec2, backend, aws_config, field):
    with pytest.raises(ConfigurationError):
        InstanceProvisioner(ec2).create(replace(aws_config, **{field: ""}))

    backend.run_instances.assert_not_called()


def test_create_empty_instance_id_is_error(ec2, backend, aws_config):
    backend.run_instances.return_value = {"Instances": [{"InstanceId": ""}]}

    with pytest.raises(CloudOperationError, match="empty InstanceId"):
        InstanceProvisioner(ec2).create(aws_config)


def test_tag_failure_terminates_once_and_raises_tag_error(ec2, backend, aws_config):
    backend.create_tags.side_effect = make_client_error("RequestLimitExceeded", "CreateTags")

    with pytest.raises(CloudOperationError) as exc_info:
        InstanceProvisioner(ec2).create(aws_config)

    assert exc_info.value.operation == "CreateTags"
    assert exc_info.value.secondary_failure is None
    backend.terminate_instances.assert_called_once_with(InstanceIds=["i-123"])


def test_tag_failure_with_failed_cleanup_reports_leak(ec2, backend, aws_config):
    backend.create_tags.side_effect = make_client_error("RequestLimitExceeded", "CreateTags")
    backend.terminate_instances.side_effect = make_client_error("UnauthorizedOperation", "TerminateInstances")

    with pytest.raises(CloudOperationError) as exc_info:
        InstanceProvisioner(ec2).create(aws_config)

    error = exc_info.value
    assert error.operation == "CreateTags"
    assert isinstance(error.secondary_failure, CloudOperationError)
    assert error.secondary_failure.operation == "TerminateInstances"
    backend.terminate_instances.assert_called_once()


def test_interrupted_tagging_still_terminates(ec2, backend, aws_config):
    backend.create_tags.side_effect = KeyboardInterrupt()

    with pytest.raises(KeyboardInterrupt):
        InstanceProvisioner(ec2).create(aws_config)

    backend.terminate_instances.assert_called_once_with(InstanceIds=["i-123"])
