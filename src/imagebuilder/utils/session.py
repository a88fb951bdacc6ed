#!/usr/bin/env python3
"""
utils/session.py

Session management utilities for AWS interactions.

Provides functions and classes to handle AWS session creation and role assumption.
"""

import boto3
from typing import Optional
from botocore.exceptions import BotoCoreError, ClientError

from .exceptions import ConfigurationError, ValidationRules
from .logger import setup_logger

logger = setup_logger(__name__, "session.log")


def assume_role(
    role_arn: str,
    region: str,
    role_session_name: str = "imagebuilder",
    base_session: Optional[boto3.Session] = None,
) -> boto3.Session:
    """Assumes a role and returns a boto3 Session using its temporary credentials."""
    if not ValidationRules.validate_role_arn(role_arn):
        raise ConfigurationError(f"Invalid IAM role ARN: {role_arn}")

    base_session = base_session or boto3.Session(region_name=region)
    try:
        sts_client = base_session.client("sts", region_name=region)
        response = sts_client.assume_role(RoleArn=role_arn, RoleSessionName=role_session_name)
        credentials = response["Credentials"]
    except ClientError as e:
        error_code = e.response["Error"]["Code"]
        raise ConfigurationError(f"Failed to assume role {role_arn}: {error_code} - {e}") from e
    except BotoCoreError as e:
        raise ConfigurationError(f"Failed to assume role {role_arn}: {e}") from e

    logger.info(f"Assumed role {role_arn} as session {role_session_name!r}")
    return boto3.Session(
        aws_access_key_id=credentials["AccessKeyId"],
        aws_secret_access_key=credentials["SecretAccessKey"],
        aws_session_token=credentials["SessionToken"],
        region_name=region,
    )


class SessionManager:
    """Manages AWS sessions for role assumption and credential handling."""

    @classmethod
    def get_session(
        cls,
        region: str,
        profile: Optional[str] = None,
        role_arn: Optional[str] = None,
        role_session_name: str = "imagebuilder",
    ) -> boto3.Session:
        """Create a boto3 Session from a profile or the default credential chain,
        assuming ``role_arn`` on top of it when given."""
        try:
            session = boto3.Session(profile_name=profile or None, region_name=region)
        except BotoCoreError as e:
            raise ConfigurationError(f"Failed to create AWS session: {e}") from e

        if role_arn:
            return assume_role(role_arn, region, role_session_name, base_session=session)
        return session
