"""Launching the build instance."""

from typing import Optional

from imagebuilder.core.aws.ec2 import EC2Manager
from imagebuilder.core.aws.instance import AWSInstance
from imagebuilder.core.aws.locator import ResourceLocator
from imagebuilder.core.aws.waiter import ReachabilityWaiter
from imagebuilder.core.constants import TAG_ROLE_KEY, TAG_ROLE_VALUE
from imagebuilder.core.models import AWSConfig
from imagebuilder.utils.exceptions import (
    CloudOperationError,
    ConfigurationError,
)
from imagebuilder.utils.logger import setup_logger

logger = setup_logger(__name__, "provisioner.log")


class InstanceProvisioner:
    """Creates a tagged build instance from an AWSConfig.

    Nothing here is retried. If tagging the new instance fails the instance
    is terminated again, because an untagged instance cannot be rediscovered
    by a later run.
    """

    def __init__(
        self,
        ec2: EC2Manager,
        locator: Optional[ResourceLocator] = None,
        waiter: Optional[ReachabilityWaiter] = None,
    ):
        self.ec2 = ec2
        self.locator = locator or ResourceLocator(ec2)
        self.waiter = waiter

    def resolve_ssh_key_name(self, config: AWSConfig) -> str:
        if config.ssh_key_name:
            return config.ssh_key_name
        return self.locator.ensure_ssh_key(config.ssh_public_key)

    def resolve_subnet(self, config: AWSConfig) -> dict:
        """Return the subnet description for the configured or tagged subnet."""
        subnet_id = config.subnet_id
        if not subnet_id:
            subnet = self.locator.find_subnet()
            if subnet is not None:
                subnet_id = subnet.get("SubnetId", "")
            if not subnet_id:
                raise ConfigurationError(
                    f"SubnetID must be specified, or a subnet must be tagged with {TAG_ROLE_KEY!r}"
                )

        subnet = self.locator.describe_subnet(subnet_id)
        if subnet is None:
            raise ConfigurationError(f"could not find subnet {subnet_id!r}")
        return subnet

    def resolve_security_group(self, config: AWSConfig, vpc_id: str) -> str:
        if config.security_group_id:
            return config.security_group_id

        group_id = ""
        group = self.locator.find_security_group(vpc_id)
        if group is not None:
            group_id = group.get("GroupId", "")
        if not group_id:
            raise ConfigurationError(
                f"SecurityGroupID must be specified, or a security group for VPC {vpc_id!r} "
                f"must be tagged with {TAG_ROLE_KEY!r}"
            )
        return group_id

    def create(self, config: AWSConfig) -> AWSInstance:
        """Launch one instance and tag it with the role tag."""
        key_name = self.resolve_ssh_key_name(config)

        subnet = self.resolve_subnet(config)
        subnet_id = subnet["SubnetId"]

        security_group_id = self.resolve_security_group(config, subnet.get("VpcId", ""))

        if not config.image_id:
            raise ConfigurationError("ImageID must be specified")
        if not config.instance_type:
            raise ConfigurationError("InstanceType must be specified")

        instances = self.ec2.run_instance(
            image_id=config.image_id,
            instance_type=config.instance_type,
            key_name=key_name,
            subnet_id=subnet_id,
            security_group_id=security_group_id,
        )
        if not instances:
            raise CloudOperationError("RunInstances", "instance was not returned by AWS RunInstances")

        instance = instances[0]
        instance_id = instance.get("InstanceId", "")
        if not instance_id:
            raise CloudOperationError("RunInstances", "AWS RunInstances call returned empty InstanceId")

        try:
            self.ec2.tag_resource(instance_id, {TAG_ROLE_KEY: TAG_ROLE_VALUE})
        except BaseException as e:
            logger.warning(f"Tagging instance {instance_id!r} failed; will terminate to prevent leaking")
            self._terminate_untagged(instance_id, e)
            raise

        logger.info(f"Created instance {instance_id!r}")
        return AWSInstance(instance_id, self.ec2, instance=instance, waiter=self.waiter)

    def _terminate_untagged(self, instance_id: str, primary: BaseException) -> None:
        try:
            self.ec2.terminate_instance(instance_id)
        except Exception as e:
            logger.warning(f"error terminating instance {instance_id!r}, will leak instance: {e}")
            primary.secondary_failure = e
