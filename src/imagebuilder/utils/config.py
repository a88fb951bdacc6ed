#!/usr/bin/env python3
"""
utils/config.py

Simple configuration management utilities.
Provides centralized configuration loading.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional

from imagebuilder.core.models import AWSConfig
from .exceptions import ConfigurationError
from .logger import setup_logger

logger = setup_logger(__name__, "config.log")

# Environment variables overriding keys of the ``aws`` section
AWS_ENV_OVERRIDES = {
    "region": "AWS_REGION",
    "profile": "AWS_PROFILE",
    "image_id": "IMAGEBUILDER_IMAGE_ID",
    "instance_type": "IMAGEBUILDER_INSTANCE_TYPE",
    "subnet_id": "IMAGEBUILDER_SUBNET_ID",
    "security_group_id": "IMAGEBUILDER_SECURITY_GROUP_ID",
    "ssh_key_name": "IMAGEBUILDER_SSH_KEY_NAME",
}


class ConfigManager:
    """
    Simple configuration manager.

    Features:
    - YAML configuration loading
    - Environment variable override support
    """

    def __init__(self, config_dir: Optional[Path] = None, config_file: Optional[Path] = None):
        """
        Initialize ConfigManager.

        Args:
            config_dir: Custom config directory path (defaults to PROJECT_ROOT/configs)
            config_file: Explicit settings file; must exist when given
        """
        self.project_root = Path(__file__).parent.parent.parent.parent
        self.config_dir = Path(config_dir) if config_dir else (self.project_root / "configs")
        self.explicit_file = config_file is not None

        if config_file is not None:
            self.settings_file = Path(config_file).expanduser()
            return

        # Try both .yml and .yaml extensions
        yml_file = self.config_dir / "settings.yml"
        yaml_file = self.config_dir / "settings.yaml"

        if yml_file.exists():
            self.settings_file = yml_file
        else:
            self.settings_file = yaml_file  # Default to .yaml for error messages

    def _load_yaml_file(self, file_path: Path) -> Dict[str, Any]:
        """
        Load a YAML file safely.
        """
        if not file_path.exists():
            if self.explicit_file:
                raise ConfigurationError(f"Config file not found: {file_path}")
            logger.warning(f"Config file not found: {file_path}")
            return {}

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Error loading {file_path}: {e}") from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigurationError(f"Config file {file_path} must contain a mapping")
        return content

    def load_settings(self) -> Dict[str, Any]:
        """
        Load application settings.
        """
        return self._load_yaml_file(self.settings_file)

    def get_value(
        self, key_path: str, default: Any = None, env_var: Optional[str] = None
    ) -> Any:
        """
        Get configuration value with dot notation support and environment variable override.
        """
        # Check environment variable first
        if env_var and env_var in os.environ:
            return os.environ[env_var]

        current = self.config
        try:
            for key in key_path.split("."):
                current = current[key]
            return current
        except (KeyError, TypeError):
            return default

    def get_aws_section(self) -> Dict[str, Any]:
        """Get AWS-specific configuration section with environment overrides applied."""
        section = dict(self.get_value("aws", {}) or {})
        for key, env_var in AWS_ENV_OVERRIDES.items():
            if os.environ.get(env_var):
                section[key] = os.environ[env_var]
        return section

    def get_aws_config(self, **overrides: Any) -> AWSConfig:
        """Build the AWSConfig; keyword overrides (e.g. from CLI flags) win when not None."""
        section = self.get_aws_section()
        section.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return AWSConfig.from_dict(section)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid aws settings in {self.settings_file}: {e}") from e

    def get_aws_region(self) -> str:
        """Get AWS region with environment variable override support."""
        return self.get_aws_config().region

    def get_logging_level(self) -> str:
        """Get logging level."""
        return self.get_value("logging.level", "INFO", env_var="LOG_LEVEL")

    @property
    def config(self) -> Dict[str, Any]:
        """Get the full configuration as a cached property."""
        if not hasattr(self, "_cached_config"):
            self._cached_config = self.load_settings()
        return self._cached_config

    def reload_config(self) -> None:
        """Force reload of configuration from file."""
        if hasattr(self, "_cached_config"):
            delattr(self, "_cached_config")
