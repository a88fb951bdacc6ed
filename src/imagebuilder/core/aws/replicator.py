"""Copying an image into every region of the account."""

from threading import Event
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from botocore.exceptions import BotoCoreError

from imagebuilder.core.aws.publisher import ImagePublisher
from imagebuilder.utils.exceptions import (
    AmbiguityError,
    CloudOperationError,
    ImageBuilderError,
    NotFoundError,
    ReplicationFailure,
)
from imagebuilder.utils.logger import setup_logger

if TYPE_CHECKING:
    from imagebuilder.core.aws.ec2 import EC2Manager
    from imagebuilder.core.aws.image import AWSImage

logger = setup_logger(__name__, "replicator.log")


def copy_token(image_name: str, region: str) -> str:
    """Idempotency token for copying ``image_name`` into ``region``."""
    return f"{image_name}-{region}"


class ImageReplicator:
    """Sequentially copies an image to all regions, optionally publishing each copy.

    Regions that already hold an image with the same name are reused, so a
    failed run can simply be repeated. Within one run the first error stops
    everything: it is raised as ReplicationFailure naming the region, with
    the partial region map attached.
    """

    def __init__(self, publisher: Optional[ImagePublisher] = None):
        self.publisher = publisher or ImagePublisher()

    def replicate(
        self,
        source: "AWSImage",
        make_public: bool,
        timeout: Optional[float] = None,
        cancel: Optional[Event] = None,
    ) -> Dict[str, "AWSImage"]:
        images: Dict[str, "AWSImage"] = {source.region: source}

        try:
            name, description = self._source_identity(source)
            regions = source.ec2.describe_regions()
        except (ImageBuilderError, BotoCoreError) as e:
            raise ReplicationFailure(source.region, f"error listing ec2 regions: {e}", images) from e

        for region in regions:
            if region in images:
                continue
            try:
                images[region] = self.copy_to_region(source, region, name, description)
            except (ImageBuilderError, BotoCoreError) as e:
                raise ReplicationFailure(region, f"error copying image to region: {e}", images) from e

        if make_public:
            published: Dict[str, "AWSImage"] = {}
            for region, image in images.items():
                try:
                    self.publisher.ensure_public(image, timeout, cancel)
                except (ImageBuilderError, BotoCoreError) as e:
                    raise ReplicationFailure(
                        region, f"error making image public: {e}", published
                    ) from e
                published[region] = image

        return images

    def copy_to_region(
        self, source: "AWSImage", region: str, name: str, description: str
    ) -> "AWSImage":
        """Return the image named ``name`` in ``region``, copying it there if absent."""
        from imagebuilder.core.aws.image import AWSImage

        target = source.ec2.for_region(region)

        existing = find_image_by_name(target, name)
        if existing is not None:
            image_id = existing["ImageId"]
            logger.info(f"Image {name!r} already present in {region} as {image_id}")
            return AWSImage(image_id, target, image=existing, publisher=self.publisher, replicator=self)

        logger.info(f"AWS CopyImage Image={source.id!r}, Region={region!r}")
        image_id = target.copy_image(
            name=name,
            description=description,
            source_image_id=source.id,
            source_region=source.region,
            client_token=copy_token(name, region),
        )
        return AWSImage(
            image_id,
            target,
            image={"ImageId": image_id, "Name": name, "Description": description},
            publisher=self.publisher,
            replicator=self,
        )

    def _source_identity(self, source: "AWSImage") -> Tuple[str, str]:
        if not source.name:
            images = source.ec2.describe_images(image_ids=[source.id])
            if not images:
                raise NotFoundError(f"image not found {source.id!r}")
            source.image = images[0]
        return source.name, source.description


def find_image_by_name(ec2: "EC2Manager", image_name: str) -> Optional[dict]:
    """Find this account's image named ``image_name``; names are unique per owner."""
    images = ec2.find_images_by_name(image_name)
    if not images:
        return None
    if len(images) != 1:
        raise AmbiguityError(f"found multiple matching images for name: {image_name!r}")

    image = images[0]
    if not image.get("ImageId"):
        raise CloudOperationError("DescribeImages", f"found image with empty ImageId: {image_name!r}")
    return image
