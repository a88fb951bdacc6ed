"""Base job class for image builder operations."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import boto3
import uuid
from imagebuilder.core.aws.cloud import AWSCloud
from imagebuilder.core.cloud import Cloud
from imagebuilder.core.models import AWSConfig
from imagebuilder.utils.logger import setup_logger
from imagebuilder.utils.config import ConfigManager
from imagebuilder.utils.session import SessionManager


class BaseJob(ABC):
    """Base class for all image builder jobs.

    Jobs are the CLI-facing layer: they build the cloud from configuration,
    call the core, and turn the outcome into a status dictionary.
    """

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        job_name: Optional[str] = None,
        cloud: Optional[Cloud] = None,
    ):
        """Initialize the job with configuration."""
        self.config_manager = config_manager or ConfigManager()
        self.job_name = job_name or self.__class__.__name__.lower().replace("job", "")
        self.correlation_id = str(uuid.uuid4())[:8]  # Short correlation ID for tracking
        self._cloud = cloud

        self.logger = setup_logger(
            name=self.__class__.__module__,
            log_file=f"{self.job_name}.log",
            level=self.config_manager.get_logging_level(),
        )

    def aws_config(self, **overrides: Any) -> AWSConfig:
        return self.config_manager.get_aws_config(**overrides)

    def create_aws_session(self, config: AWSConfig) -> boto3.Session:
        """Create AWS session from the configured profile, assuming a role if set."""
        role = f" assuming {config.role_arn}" if config.role_arn else ""
        self.logger.info(
            f"[{self.correlation_id}] Creating AWS session in {config.region}{role}"
        )
        return SessionManager.get_session(
            region=config.region,
            profile=config.profile,
            role_arn=config.role_arn,
            role_session_name=f"imagebuilder-{self.job_name}",
        )

    def get_cloud(self, **overrides: Any) -> Cloud:
        """Return the injected cloud, or build an AWSCloud from configuration."""
        if self._cloud is None:
            config = self.aws_config(**overrides)
            self._cloud = AWSCloud.from_session(self.create_aws_session(config), config)
        return self._cloud

    def error_result(self, action: str, error: Exception) -> Dict[str, Any]:
        self.logger.error(f"[{self.correlation_id}] Failed to {action}: {error}")
        result = {
            "status": "error",
            "message": f"Failed to {action}: {error}",
            "error_type": type(error).__name__,
            "correlation_id": self.correlation_id,
        }
        secondary = getattr(error, "secondary_failure", None)
        if secondary is not None:
            result["secondary_failure"] = str(secondary)
        return result

    @abstractmethod
    def execute(self, **kwargs) -> Dict[str, Any]:
        """Execute the job with given parameters."""
        pass
