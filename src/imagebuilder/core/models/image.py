"""Simple data models for AWS AMI management."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class ImageState(Enum):
    """AMI states the publisher cares about."""
    PENDING = "pending"
    AVAILABLE = "available"


@dataclass
class ImageInfo:
    """Simple AMI information model."""
    image_id: str
    name: str
    description: str = ""
    state: str = ImageState.PENDING.value

    @property
    def is_available(self) -> bool:
        return self.state == ImageState.AVAILABLE.value

    @classmethod
    def from_aws_image(cls, image: Dict[str, Any]) -> "ImageInfo":
        """Create ImageInfo from AWS image data."""
        return cls(
            image_id=image.get("ImageId", ""),
            name=image.get("Name", ""),
            description=image.get("Description", ""),
            state=image.get("State", ImageState.PENDING.value),
        )
