"""EC2 Manager: thin request/response layer over the boto3 EC2 client.

Every call either returns plain response data or raises a typed error:
describe calls raise LookupFailure, mutating calls raise CloudOperationError.
A handful of describe calls map the backend's "not found" error codes to an
empty result.
"""

from typing import Any, Callable, Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from imagebuilder.core.constants import KEY_PAIR_NOT_FOUND, PUBLIC_LAUNCH_GROUP
from imagebuilder.utils.exceptions import CloudOperationError, LookupFailure
from imagebuilder.utils.logger import setup_logger


def error_code(error: Exception) -> str:
    """Return the AWS error code of a ClientError, or an empty string."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "")
    return ""


def tag_filter(tag_key: str) -> Dict[str, Any]:
    return {"Name": "tag-key", "Values": [tag_key]}


class EC2Manager:
    """AWS EC2 resource manager bound to a single region."""

    def __init__(self, session: boto3.Session, region: str, ec2_client=None):
        """Initialize EC2Manager."""
        self.session = session
        self.region = region
        self.ec2_client = ec2_client or session.client("ec2", region_name=region)
        self.logger = setup_logger(__name__, "ec2_manager.log")

    def for_region(self, region: str) -> "EC2Manager":
        """Return a manager for another region sharing this session."""
        if region == self.region:
            return self
        return EC2Manager(self.session, region)

    def _call(
        self,
        operation: str,
        method: Callable[..., Dict[str, Any]],
        resource: Optional[str] = None,
        lookup: bool = False,
        not_found_codes: tuple = (),
        **params,
    ) -> Optional[Dict[str, Any]]:
        """Invoke a client method, translating botocore errors.

        Returns None when the backend answers with one of ``not_found_codes``.
        """
        self.logger.debug(f"AWS {operation} region={self.region} resource={resource or '-'}")
        try:
            return method(**params)
        except ClientError as e:
            if error_code(e) in not_found_codes:
                return None
            error_class = LookupFailure if lookup else CloudOperationError
            raise error_class(operation, str(e), resource) from e
        except BotoCoreError as e:
            error_class = LookupFailure if lookup else CloudOperationError
            raise error_class(operation, str(e), resource) from e

    # Instances

    def describe_instance(self, instance_id: str) -> Optional[Dict[str, Any]]:
        """Describe one instance, returning None if it does not exist."""
        response = self._call(
            "DescribeInstances",
            self.ec2_client.describe_instances,
            resource=instance_id,
            lookup=True,
            not_found_codes=("InvalidInstanceID.NotFound",),
            InstanceIds=[instance_id],
        )
        if response is None:
            return None

        for reservation in response.get("Reservations", []):
            for instance in reservation.get("Instances", []):
                if instance.get("InstanceId") != instance_id:
                    raise LookupFailure(
                        "DescribeInstances",
                        f"unexpected instance {instance.get('InstanceId')!r} in response",
                        instance_id,
                    )
                return instance
        return None

    def find_instances_by_tag(self, tag_key: str) -> List[Dict[str, Any]]:
        """Find instances carrying ``tag_key``, in backend listing order."""
        response = self._call(
            "DescribeInstances",
            self.ec2_client.describe_instances,
            resource=f"tag-key={tag_key}",
            lookup=True,
            Filters=[tag_filter(tag_key)],
        )
        instances = []
        for reservation in response.get("Reservations", []):
            for instance in reservation.get("Instances", []):
                instances.append(instance)
        return instances

    def run_instance(
        self,
        image_id: str,
        instance_type: str,
        key_name: str,
        subnet_id: str,
        security_group_id: str,
    ) -> List[Dict[str, Any]]:
        """Launch exactly one instance with a public IP on its primary interface."""
        self.logger.info(
            f"AWS RunInstances InstanceType={instance_type!r} ImageId={image_id!r} KeyName={key_name!r}"
        )
        response = self._call(
            "RunInstances",
            self.ec2_client.run_instances,
            resource=image_id,
            ImageId=image_id,
            InstanceType=instance_type,
            KeyName=key_name,
            MinCount=1,
            MaxCount=1,
            NetworkInterfaces=[
                {
                    "DeviceIndex": 0,
                    "AssociatePublicIpAddress": True,
                    "SubnetId": subnet_id,
                    "Groups": [security_group_id],
                }
            ],
        )
        return response.get("Instances", [])

    def terminate_instance(self, instance_id: str) -> None:
        self._call(
            "TerminateInstances",
            self.ec2_client.terminate_instances,
            resource=instance_id,
            InstanceIds=[instance_id],
        )

    def tag_resource(self, resource_id: str, tags: Dict[str, str]) -> None:
        """Add tags to a resource."""
        self._call(
            "CreateTags",
            self.ec2_client.create_tags,
            resource=resource_id,
            Resources=[resource_id],
            Tags=[{"Key": k, "Value": v} for k, v in tags.items()],
        )

    # Network

    def find_subnets_by_tag(self, tag_key: str) -> List[Dict[str, Any]]:
        response = self._call(
            "DescribeSubnets",
            self.ec2_client.describe_subnets,
            resource=f"tag-key={tag_key}",
            lookup=True,
            Filters=[tag_filter(tag_key)],
        )
        return response.get("Subnets", [])

    def describe_subnet(self, subnet_id: str) -> Optional[Dict[str, Any]]:
        response = self._call(
            "DescribeSubnets",
            self.ec2_client.describe_subnets,
            resource=subnet_id,
            lookup=True,
            not_found_codes=("InvalidSubnetID.NotFound",),
            SubnetIds=[subnet_id],
        )
        if response is None:
            return None
        subnets = response.get("Subnets", [])
        return subnets[0] if subnets else None

    def find_security_groups_by_tag(self, tag_key: str, vpc_id: str) -> List[Dict[str, Any]]:
        response = self._call(
            "DescribeSecurityGroups",
            self.ec2_client.describe_security_groups,
            resource=f"tag-key={tag_key} vpc-id={vpc_id}",
            lookup=True,
            Filters=[tag_filter(tag_key), {"Name": "vpc-id", "Values": [vpc_id]}],
        )
        return response.get("SecurityGroups", [])

    def describe_regions(self) -> List[str]:
        """List the names of all regions enabled for the account."""
        response = self._call(
            "DescribeRegions",
            self.ec2_client.describe_regions,
            lookup=True,
        )
        return [r["RegionName"] for r in response.get("Regions", []) if r.get("RegionName")]

    # Key pairs

    def find_key_pairs(self, key_name: str) -> List[Dict[str, Any]]:
        """Describe key pairs by name; a missing key yields an empty list."""
        response = self._call(
            "DescribeKeyPairs",
            self.ec2_client.describe_key_pairs,
            resource=key_name,
            lookup=True,
            not_found_codes=(KEY_PAIR_NOT_FOUND,),
            KeyNames=[key_name],
        )
        if response is None:
            return []
        return response.get("KeyPairs", [])

    def import_key_pair(self, key_name: str, public_key_material: bytes) -> str:
        response = self._call(
            "ImportKeyPair",
            self.ec2_client.import_key_pair,
            resource=key_name,
            KeyName=key_name,
            PublicKeyMaterial=public_key_material,
        )
        return response.get("KeyName") or key_name

    # Images

    def describe_images(
        self,
        image_ids: Optional[List[str]] = None,
        filters: Optional[List[Dict[str, Any]]] = None,
        owners: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Describe AMI images."""
        params: Dict[str, Any] = {}
        if image_ids:
            params["ImageIds"] = image_ids
        if filters:
            params["Filters"] = filters
        if owners:
            params["Owners"] = owners
        response = self._call(
            "DescribeImages",
            self.ec2_client.describe_images,
            resource=",".join(image_ids) if image_ids else None,
            lookup=True,
            **params,
        )
        return response.get("Images", [])

    def find_images_by_name(self, name: str) -> List[Dict[str, Any]]:
        """Find images owned by this account with the given name."""
        return self.describe_images(
            filters=[{"Name": "name", "Values": [name]}], owners=["self"]
        )

    def make_image_public(self, image_id: str) -> None:
        """Grant launch permission to all accounts. Safe to repeat."""
        self._call(
            "ModifyImageAttribute",
            self.ec2_client.modify_image_attribute,
            resource=image_id,
            ImageId=image_id,
            LaunchPermission={"Add": [{"Group": PUBLIC_LAUNCH_GROUP}]},
        )

    def copy_image(
        self,
        name: str,
        description: str,
        source_image_id: str,
        source_region: str,
        client_token: str,
    ) -> str:
        """Copy an image into this manager's region, returning the new image id."""
        params: Dict[str, Any] = {
            "ClientToken": client_token,
            "Name": name,
            "SourceImageId": source_image_id,
            "SourceRegion": source_region,
        }
        if description:
            params["Description"] = description
        response = self._call(
            "CopyImage",
            self.ec2_client.copy_image,
            resource=f"{source_image_id} -> {self.region}",
            **params,
        )
        image_id = response.get("ImageId", "")
        if not image_id:
            raise CloudOperationError("CopyImage", "response contained no ImageId", source_image_id)
        return image_id


def create_ec2_manager(session: boto3.Session, region: str) -> EC2Manager:
    """Create EC2Manager instance."""
    return EC2Manager(session, region)
