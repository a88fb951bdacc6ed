#!/usr/bin/env python3
"""Core constants for image builder operations."""

# Tagging Constants
TAG_ROLE_KEY = "k8s.io/role/imagebuilder"
TAG_ROLE_VALUE = "'"
SSH_KEY_NAME_PREFIX = "imagebuilder-"

# Polling Constants (seconds)
PUBLIC_IP_POLL_INTERVAL = 5
SSH_RETRY_INTERVAL = 5
IMAGE_POLL_INTERVAL = 10

# AWS Service Constants
DEFAULT_AWS_REGION = "us-east-1"
DEFAULT_SSH_PORT = 22
DEFAULT_SSH_USERNAME = "admin"
PUBLIC_LAUNCH_GROUP = "all"

# EC2 Error Codes
KEY_PAIR_NOT_FOUND = "InvalidKeyPair.NotFound"
KEY_PAIR_DUPLICATE = "InvalidKeyPair.Duplicate"
