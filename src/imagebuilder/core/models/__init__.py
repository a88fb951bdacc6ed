"""Simple data models for image builder resources."""

# Config models
from .config import AWSConfig

# Instance models
from .instance import (
    InstanceState,
    InstanceInfo,
)

# Image models
from .image import (
    ImageState,
    ImageInfo,
)

__all__ = [
    # Config models
    "AWSConfig",
    # Instance models
    "InstanceState",
    "InstanceInfo",
    # Image models
    "ImageState",
    "ImageInfo",
]
