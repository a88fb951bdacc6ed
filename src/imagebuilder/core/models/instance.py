"""Simple Instance Data Models

Simple data models for the EC2 build instance."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class InstanceState(Enum):
    """EC2 Instance states that end an instance's life."""
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"


@dataclass
class InstanceInfo:
    """Simple build instance information model."""
    instance_id: str
    state: str = ""
    public_ip: Optional[str] = None

    @property
    def is_terminated(self) -> bool:
        return self.state in (
            InstanceState.SHUTTING_DOWN.value,
            InstanceState.TERMINATED.value,
        )

    @classmethod
    def from_aws_instance(cls, instance: Dict[str, Any]) -> "InstanceInfo":
        """Create InstanceInfo from AWS instance data."""
        return cls(
            instance_id=instance.get("InstanceId", ""),
            state=instance.get("State", {}).get("Name", ""),
            public_ip=instance.get("PublicIpAddress") or None,
        )
