#!/usr/bin/env python3
"""
Publish Image Job

Makes a built image public and optionally replicates it to every region the
account can see.
"""

from typing import Any, Dict, Optional

from .base import BaseJob
from imagebuilder.utils.exceptions import ReplicationFailure


class PublishImageJob(BaseJob):
    """Job to publish and replicate an image"""

    def __init__(self, config_manager=None, cloud=None):
        super().__init__(config_manager, job_name="publish_image", cloud=cloud)

    def execute(self, **kwargs) -> Dict[str, Any]:
        image_name: Optional[str] = kwargs.get("image_name")
        region: Optional[str] = kwargs.get("region")
        make_public = kwargs.get("make_public", True)
        replicate = kwargs.get("replicate", False)
        timeout: Optional[float] = kwargs.get("timeout")

        if not image_name:
            return {"status": "error", "message": "image_name must be provided"}

        try:
            cloud = self.get_cloud(region=region)
            image = cloud.find_image(image_name)
            if image is None:
                return {
                    "status": "error",
                    "message": f"No image found with name: {image_name}",
                    "correlation_id": self.correlation_id,
                }

            self.logger.info(f"[{self.correlation_id}] Found image {image.id} ({image_name}) in {image.region}")

            if replicate:
                images = image.replicate_image(make_public, timeout=timeout)
            else:
                if make_public:
                    image.ensure_public(timeout=timeout)
                images = {image.region: image}

            regions = {region_name: img.id for region_name, img in images.items()}
            return {
                "status": "success",
                "message": f"Published image {image_name} in {len(regions)} region(s)",
                "image_name": image_name,
                "public": make_public,
                "images": regions,
                "correlation_id": self.correlation_id,
            }

        except ReplicationFailure as e:
            result = self.error_result("replicate image", e)
            result["failed_region"] = e.region
            result["images"] = {region_name: img.id for region_name, img in e.images.items()}
            return result
        except Exception as e:
            return self.error_result("publish image", e)
