"""AWS image (AMI) handle."""

from threading import Event
from typing import Any, Dict, Optional

from imagebuilder.core.aws.ec2 import EC2Manager
from imagebuilder.core.aws.publisher import ImagePublisher
from imagebuilder.core.aws.replicator import ImageReplicator
from imagebuilder.core.cloud import Image
from imagebuilder.core.models import ImageInfo


class AWSImage(Image):
    """An AMI in one region."""

    def __init__(
        self,
        image_id: str,
        ec2: EC2Manager,
        image: Optional[Dict[str, Any]] = None,
        publisher: Optional[ImagePublisher] = None,
        replicator: Optional[ImageReplicator] = None,
    ):
        self.image_id = image_id
        self.ec2 = ec2
        self.image = image or {}
        self.publisher = publisher or ImagePublisher()
        self.replicator = replicator or ImageReplicator(self.publisher)

    @property
    def id(self) -> str:
        return self.image_id

    @property
    def region(self) -> str:
        return self.ec2.region

    @property
    def name(self) -> str:
        return self.image.get("Name", "")

    @property
    def description(self) -> str:
        return self.image.get("Description", "")

    @property
    def info(self) -> ImageInfo:
        return ImageInfo.from_aws_image({"ImageId": self.image_id, **self.image})

    def ensure_public(self, timeout: Optional[float] = None, cancel: Optional[Event] = None) -> None:
        """Make the image accessible outside the current account."""
        self.publisher.ensure_public(self, timeout, cancel)

    def replicate_image(
        self,
        make_public: bool,
        timeout: Optional[float] = None,
        cancel: Optional[Event] = None,
    ) -> Dict[str, "AWSImage"]:
        """Copy the image to all accessible AWS regions."""
        return self.replicator.replicate(self, make_public, timeout, cancel)

    def __repr__(self) -> str:
        return f"AWSImage[id={self.image_id}]"
