"""Configuration model for the AWS build account."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from imagebuilder.core.constants import (
    DEFAULT_AWS_REGION,
    DEFAULT_SSH_PORT,
    DEFAULT_SSH_USERNAME,
)


@dataclass(frozen=True)
class AWSConfig:
    """Settings describing where and how to launch the build instance.

    Empty ``subnet_id``, ``security_group_id`` and ``ssh_key_name`` mean the
    value is discovered (tagged subnet and security group) or derived (SSH
    key imported from ``ssh_public_key``).
    """

    region: str = DEFAULT_AWS_REGION
    image_id: str = ""
    instance_type: str = ""
    subnet_id: str = ""
    security_group_id: str = ""
    ssh_key_name: str = ""
    ssh_public_key: str = "~/.ssh/id_rsa.pub"
    ssh_private_key: str = ""
    ssh_username: str = DEFAULT_SSH_USERNAME
    ssh_port: int = DEFAULT_SSH_PORT
    strict_tag_discovery: bool = False
    profile: Optional[str] = None
    role_arn: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AWSConfig":
        """Create AWSConfig from the ``aws`` settings section, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in (data or {}).items() if k in known and v is not None}
        if "ssh_port" in values:
            try:
                values["ssh_port"] = int(values["ssh_port"])
            except (TypeError, ValueError):
                raise ValueError(f"ssh_port must be an integer, got {values['ssh_port']!r}") from None
        if "strict_tag_discovery" in values:
            values["strict_tag_discovery"] = _as_bool(values["strict_tag_discovery"])
        for key in ("region", "image_id", "instance_type", "subnet_id", "security_group_id", "ssh_key_name"):
            if key in values:
                values[key] = str(values[key]).strip()
        return cls(**values)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
