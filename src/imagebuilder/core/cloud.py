"""Backend-neutral contract for building and publishing images.

Jobs and the CLI only hold these types; each cloud provider supplies its own
implementation (see ``imagebuilder.core.aws``).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from threading import Event
from typing import Any, Dict, Optional

from imagebuilder.core.constants import DEFAULT_SSH_PORT, DEFAULT_SSH_USERNAME


@dataclass(frozen=True)
class SSHSessionConfig:
    """How to open the remote shell on a build instance."""

    username: str = DEFAULT_SSH_USERNAME
    port: int = DEFAULT_SSH_PORT
    key_filename: Optional[str] = None
    connect_timeout: float = 30.0


class Instance(ABC):
    """A running build instance."""

    @property
    @abstractmethod
    def id(self) -> str:
        pass

    @abstractmethod
    def dial_ssh(
        self,
        ssh_config: SSHSessionConfig,
        timeout: Optional[float] = None,
        cancel: Optional[Event] = None,
    ) -> Any:
        """Wait for the instance to accept SSH and return a connected client."""

    @abstractmethod
    def shutdown(self) -> None:
        """Terminate the instance."""


class Image(ABC):
    """A publishable disk image in one region."""

    @property
    @abstractmethod
    def id(self) -> str:
        pass

    @property
    @abstractmethod
    def region(self) -> str:
        pass

    @abstractmethod
    def ensure_public(self, timeout: Optional[float] = None, cancel: Optional[Event] = None) -> None:
        """Wait for the image to become available, then make it public."""

    @abstractmethod
    def replicate_image(
        self,
        make_public: bool,
        timeout: Optional[float] = None,
        cancel: Optional[Event] = None,
    ) -> Dict[str, "Image"]:
        """Copy the image into every reachable region, keyed by region name."""


class Cloud(ABC):
    """A cloud account the image builder works in."""

    @abstractmethod
    def get_instance(self) -> Optional[Instance]:
        """Return the existing build instance, or None."""

    @abstractmethod
    def create_instance(self) -> Instance:
        """Launch a new build instance."""

    @abstractmethod
    def find_image(self, image_name: str) -> Optional[Image]:
        """Find a registered image by name, or None."""

    @abstractmethod
    def get_extra_env(self) -> Dict[str, str]:
        """Environment variables the build step needs to talk to this cloud."""
