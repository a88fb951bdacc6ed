"""AWS implementation of the Cloud contract."""

from typing import Dict, Optional

import boto3

from imagebuilder.core.aws.ec2 import EC2Manager, create_ec2_manager
from imagebuilder.core.aws.image import AWSImage
from imagebuilder.core.aws.instance import AWSInstance
from imagebuilder.core.aws.locator import ResourceLocator
from imagebuilder.core.aws.provisioner import InstanceProvisioner
from imagebuilder.core.aws.publisher import ImagePublisher
from imagebuilder.core.aws.replicator import ImageReplicator, find_image_by_name
from imagebuilder.core.aws.waiter import ReachabilityWaiter
from imagebuilder.core.cloud import Cloud
from imagebuilder.core.models import AWSConfig
from imagebuilder.utils.exceptions import ConfigurationError, LookupFailure
from imagebuilder.utils.logger import setup_logger

logger = setup_logger(__name__, "cloud.log")


class AWSCloud(Cloud):
    """Helper for talking to an AWS account."""

    def __init__(
        self,
        ec2: EC2Manager,
        config: AWSConfig,
        waiter: Optional[ReachabilityWaiter] = None,
        publisher: Optional[ImagePublisher] = None,
    ):
        self.ec2 = ec2
        self.config = config
        self.waiter = waiter or ReachabilityWaiter()
        self.publisher = publisher or ImagePublisher()
        self.replicator = ImageReplicator(self.publisher)
        self.locator = ResourceLocator(ec2, strict=config.strict_tag_discovery)
        self.provisioner = InstanceProvisioner(ec2, self.locator, self.waiter)

    @classmethod
    def from_session(cls, session: boto3.Session, config: AWSConfig) -> "AWSCloud":
        return cls(create_ec2_manager(session, config.region), config)

    def get_instance(self) -> Optional[AWSInstance]:
        """Return the live instance matching our tag, or None if not found."""
        instance = self.locator.find_instance()
        if instance is None:
            return None

        instance_id = instance.get("InstanceId", "")
        if not instance_id:
            raise LookupFailure("DescribeInstances", "found instance with empty instance ID")

        logger.info(f"Found existing instance: {instance_id!r}")
        return AWSInstance(instance_id, self.ec2, instance=instance, cloud=self, waiter=self.waiter)

    def create_instance(self) -> AWSInstance:
        """Create an instance for building an image."""
        instance = self.provisioner.create(self.config)
        instance.cloud = self
        return instance

    def find_image(self, image_name: str) -> Optional[AWSImage]:
        """Find a registered image by name."""
        image = find_image_by_name(self.ec2, image_name)
        if image is None:
            return None
        return AWSImage(
            image["ImageId"],
            self.ec2,
            image=image,
            publisher=self.publisher,
            replicator=self.replicator,
        )

    def get_extra_env(self) -> Dict[str, str]:
        """AWS credentials for the build step."""
        credentials = self.ec2.session.get_credentials()
        if credentials is None:
            raise ConfigurationError("unable to determine EC2 credentials")

        frozen = credentials.get_frozen_credentials()
        env = {
            "AWS_ACCESS_KEY": frozen.access_key,
            "AWS_SECRET_KEY": frozen.secret_key,
        }
        if frozen.token:
            env["AWS_SESSION_TOKEN"] = frozen.token
        return env
