"""Making an image public once it is available."""

import time
from threading import Event
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from imagebuilder.core.constants import IMAGE_POLL_INTERVAL
from imagebuilder.utils.exceptions import AmbiguityError, NotFoundError
from imagebuilder.utils.logger import setup_logger
from imagebuilder.utils.polling import PollControl

if TYPE_CHECKING:
    from imagebuilder.core.aws.image import AWSImage

logger = setup_logger(__name__, "publisher.log")


class ImagePublisher:
    """Waits for an image to become available, then grants launch permission to all."""

    def __init__(
        self,
        poll_interval: float = IMAGE_POLL_INTERVAL,
        sleep: Optional[Callable[[float], Any]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.poll_interval = poll_interval
        self.sleep = sleep
        self.clock = clock

    def wait_available(
        self,
        image: "AWSImage",
        timeout: Optional[float] = None,
        cancel: Optional[Event] = None,
    ) -> Dict[str, Any]:
        """Poll the image until its state is available, returning its description."""
        control = PollControl(timeout, cancel, self.sleep, self.clock)
        while True:
            images = image.ec2.describe_images(image_ids=[image.id])
            if not images:
                raise NotFoundError(f"image not found {image.id!r}")
            if len(images) != 1:
                raise AmbiguityError(f"multiple images found with ID {image.id!r}")

            description = images[0]
            image.image = description
            info = image.info
            logger.debug(f"image state {info.state!r}")
            if info.is_available:
                return description

            logger.info(f"Image not yet available ({image.id}); waiting")
            control.pause(self.poll_interval, f"image {image.id} to become available")

    def ensure_public(
        self,
        image: "AWSImage",
        timeout: Optional[float] = None,
        cancel: Optional[Event] = None,
    ) -> None:
        self.wait_available(image, timeout, cancel)

        # Idempotent, so always issued rather than checked first
        logger.info(f"Making image {image.id!r} public in {image.region}")
        image.ec2.make_image_public(image.id)
