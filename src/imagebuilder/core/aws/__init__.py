"""AWS core modules."""

from .ec2 import EC2Manager, create_ec2_manager
from .locator import ResourceLocator
from .provisioner import InstanceProvisioner
from .waiter import ReachabilityWaiter
from .publisher import ImagePublisher
from .replicator import ImageReplicator
from .instance import AWSInstance
from .image import AWSImage
from .cloud import AWSCloud

__all__ = [
    "EC2Manager",
    "create_ec2_manager",
    "ResourceLocator",
    "InstanceProvisioner",
    "ReachabilityWaiter",
    "ImagePublisher",
    "ImageReplicator",
    "AWSInstance",
    "AWSImage",
    "AWSCloud",
]
