"""Image builder jobs package."""

from .base import BaseJob
from .create_instance import CreateInstanceJob
from .publish_image import PublishImageJob
from .shutdown_instance import ShutdownInstanceJob

__all__ = [
    "BaseJob",
    "CreateInstanceJob",
    "PublishImageJob",
    "ShutdownInstanceJob",
]
