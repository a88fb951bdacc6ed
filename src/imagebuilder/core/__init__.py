"""Core image builder module."""

from .cloud import Cloud, Instance, Image, SSHSessionConfig
from .aws import (
    AWSCloud,
    AWSImage,
    AWSInstance,
    EC2Manager,
    ImagePublisher,
    ImageReplicator,
    InstanceProvisioner,
    ReachabilityWaiter,
    ResourceLocator,
)
from .models import (
    AWSConfig,
    ImageInfo,
    ImageState,
    InstanceInfo,
    InstanceState,
)
from .constants import TAG_ROLE_KEY

__all__ = [
    # Contract
    "Cloud",
    "Instance",
    "Image",
    "SSHSessionConfig",
    # AWS
    "AWSCloud",
    "AWSImage",
    "AWSInstance",
    "EC2Manager",
    "ImagePublisher",
    "ImageReplicator",
    "InstanceProvisioner",
    "ReachabilityWaiter",
    "ResourceLocator",
    # Models
    "AWSConfig",
    "ImageInfo",
    "ImageState",
    "InstanceInfo",
    "InstanceState",
    # Constants
    "TAG_ROLE_KEY",
]
