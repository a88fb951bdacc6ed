"""AWS build instance handle."""

from threading import Event
from typing import TYPE_CHECKING, Any, Dict, Optional

from imagebuilder.core.aws.ec2 import EC2Manager
from imagebuilder.core.aws.waiter import ReachabilityWaiter
from imagebuilder.core.cloud import Instance, SSHSessionConfig
from imagebuilder.core.models import InstanceInfo

if TYPE_CHECKING:
    from imagebuilder.core.aws.cloud import AWSCloud


class AWSInstance(Instance):
    """An EC2 instance used for building an image."""

    def __init__(
        self,
        instance_id: str,
        ec2: EC2Manager,
        instance: Optional[Dict[str, Any]] = None,
        cloud: Optional["AWSCloud"] = None,
        waiter: Optional[ReachabilityWaiter] = None,
    ):
        self.instance_id = instance_id
        self.ec2 = ec2
        self.instance = instance or {}
        self.cloud = cloud
        self.waiter = waiter or ReachabilityWaiter()

    @property
    def id(self) -> str:
        return self.instance_id

    @property
    def public_ip(self) -> Optional[str]:
        """Public IP from the last description, if any."""
        return self.info.public_ip

    @property
    def info(self) -> InstanceInfo:
        return InstanceInfo.from_aws_instance({"InstanceId": self.instance_id, **self.instance})

    def wait_public_ip(self, timeout: Optional[float] = None, cancel: Optional[Event] = None) -> str:
        """Wait for the instance to get a public IP, returning it."""
        return self.waiter.wait_for_public_address(self, timeout, cancel)

    def dial_ssh(
        self,
        ssh_config: SSHSessionConfig,
        timeout: Optional[float] = None,
        cancel: Optional[Event] = None,
    ) -> Any:
        return self.waiter.dial(self, ssh_config, timeout, cancel)

    def shutdown(self) -> None:
        self.waiter.terminate(self)

    def __repr__(self) -> str:
        return f"AWSInstance[id={self.instance_id}]"
