"""imagebuilder - build, publish and replicate machine images."""

__version__ = "1.0.0"
