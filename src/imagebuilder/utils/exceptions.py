"""Exception classes for image builder operations.

Every error raised by the core derives from ImageBuilderError so callers can
catch the whole family at once. Errors carry the resource and operation they
concern in their message, and the underlying botocore/paramiko error is
chained as ``__cause__``.
"""

import re
from typing import Dict, Optional


class ImageBuilderError(Exception):
    """Base class for image builder errors.

    ``secondary_failure`` holds an error raised while cleaning up after this
    one (for example a failed compensating termination). It never replaces
    the primary error.
    """

    def __init__(self, message: str = "", secondary_failure: Optional[BaseException] = None):
        super().__init__(message)
        self.secondary_failure = secondary_failure


class ConfigurationError(ImageBuilderError):
    """A required setting is missing and cannot be derived."""

    pass


class CloudOperationError(ImageBuilderError):
    """A call to the cloud backend failed."""

    def __init__(self, operation: str, message: str, resource: Optional[str] = None):
        self.operation = operation
        self.resource = resource
        target = f" ({resource})" if resource else ""
        super().__init__(f"error making AWS {operation} call{target}: {message}")


class LookupFailure(CloudOperationError):
    """A discovery or describe call failed (not the same as zero results)."""

    pass


class NotFoundError(ImageBuilderError):
    """A resource assumed to exist does not."""

    pass


class AmbiguityError(ImageBuilderError):
    """More than one resource matched where exactly one was required."""

    pass


class ReplicationFailure(ImageBuilderError):
    """Replication stopped at ``region``.

    ``images`` holds the regional images recorded before the failure.
    """

    def __init__(self, region: str, message: str, images: Optional[Dict] = None):
        super().__init__(f"region {region}: {message}")
        self.region = region
        self.images = dict(images or {})


class WaitAbortedError(ImageBuilderError):
    """A polling wait ended before its condition was met."""

    pass


class WaitTimeoutError(WaitAbortedError):
    """The caller-supplied deadline passed."""

    pass


class WaitCancelledError(WaitAbortedError):
    """The caller-supplied cancel signal was set."""

    pass


class ValidationRules:
    """Validation utilities for AWS resources."""

    @staticmethod
    def validate_role_arn(role_arn: str) -> bool:
        """Validate IAM role ARN format."""
        return bool(re.match(r"^arn:aws[\w-]*:iam::\d{12}:role/.+$", role_arn))
