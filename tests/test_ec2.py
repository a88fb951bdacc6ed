"""Unit tests for EC2Manager request building and error translation."""

import pytest
from botocore.exceptions import EndpointConnectionError

from conftest import instances_response, make_client_error
from imagebuilder.core.aws.ec2 import EC2Manager, error_code
from imagebuilder.utils.exceptions import CloudOperationError, LookupFailure


@pytest.fixture
def manager(ec2, ec2_client):
    ec2.ec2_client = ec2_client
    return ec2


def test_error_code():
    assert error_code(make_client_error("InvalidKeyPair.Duplicate")) == "InvalidKeyPair.Duplicate"
    assert error_code(ValueError("x")) == ""


def test_describe_error_is_lookup_failure(manager, ec2_client):
    ec2_client.describe_subnets.side_effect = make_client_error("UnauthorizedOperation", "DescribeSubnets")

    with pytest.raises(LookupFailure) as exc_info:
        manager.find_subnets_by_tag("k8s.io/role/imagebuilder")

    assert exc_info.value.operation == "DescribeSubnets"
    assert "UnauthorizedOperation" in str(exc_info.value)


def test_mutating_error_is_cloud_operation_error(manager, ec2_client):
    ec2_client.create_tags.side_effect = make_client_error("RequestLimitExceeded", "CreateTags")

    with pytest.raises(CloudOperationError) as exc_info:
        manager.tag_resource("i-1", {"k": "v"})

    assert not isinstance(exc_info.value, LookupFailure)
    assert exc_info.value.resource == "i-1"


def test_connection_error_is_translated(manager, ec2_client):
    ec2_client.describe_regions.side_effect = EndpointConnectionError(endpoint_url="https://ec2.example")

    with pytest.raises(LookupFailure):
        manager.describe_regions()


def test_describe_instance_not_found_is_none(manager, ec2_client):
    ec2_client.describe_instances.side_effect = make_client_error("InvalidInstanceID.NotFound")

    assert manager.describe_instance("i-gone") is None


def test_describe_instance_rejects_other_ids(manager, ec2_client):
    ec2_client.describe_instances.return_value = instances_response({"InstanceId": "i-other"})

    with pytest.raises(LookupFailure):
        manager.describe_instance("i-1")


def test_missing_key_pair_is_empty(manager, ec2_client):
    ec2_client.describe_key_pairs.side_effect = make_client_error("InvalidKeyPair.NotFound", "DescribeKeyPairs")

    assert manager.find_key_pairs("imagebuilder-abc") == []


def test_tags_rendered_as_key_value_list(manager, ec2_client):
    manager.tag_resource("i-1", {"k8s.io/role/imagebuilder": "'"})

    ec2_client.create_tags.assert_called_once_with(
        Resources=["i-1"], Tags=[{"Key": "k8s.io/role/imagebuilder", "Value": "'"}]
    )


def test_describe_regions_names(manager, ec2_client):
    ec2_client.describe_regions.return_value = {
        "Regions": [{"RegionName": "us-east-1"}, {"RegionName": ""}, {"RegionName": "eu-west-1"}]
    }

    assert manager.describe_regions() == ["us-east-1", "eu-west-1"]


def test_copy_image_without_description(manager, ec2_client):
    ec2_client.copy_image.return_value = {"ImageId": "ami-copy"}

    image_id = manager.copy_image("img", "", "ami-src", "us-east-1", "img-us-east-1")

    assert image_id == "ami-copy"
    assert "Description" not in ec2_client.copy_image.call_args.kwargs


def test_copy_image_empty_id(manager, ec2_client):
    ec2_client.copy_image.return_value = {}

    with pytest.raises(CloudOperationError):
        manager.copy_image("img", "d", "ami-src", "us-east-1", "img-us-east-1")


def test_for_region(ec2, session, regional_clients):
    assert ec2.for_region("us-east-1") is ec2

    other = ec2.for_region("eu-west-1")

    assert isinstance(other, EC2Manager)
    assert other.region == "eu-west-1"
    assert other.ec2_client is regional_clients("eu-west-1")
    session.client.assert_called_with("ec2", region_name="eu-west-1")
