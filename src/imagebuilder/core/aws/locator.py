"""Tag-based discovery of the resources needed to launch a build instance."""

import hashlib
from typing import Any, Callable, Dict, List, Optional

from imagebuilder.core.aws.ec2 import EC2Manager, error_code
from imagebuilder.core.constants import (
    KEY_PAIR_DUPLICATE,
    SSH_KEY_NAME_PREFIX,
    TAG_ROLE_KEY,
)
from imagebuilder.core.models import InstanceInfo
from imagebuilder.utils.exceptions import AmbiguityError, CloudOperationError
from imagebuilder.utils.files import read_file
from imagebuilder.utils.logger import setup_logger

logger = setup_logger(__name__, "locator.log")


def ssh_key_name(public_key: bytes) -> str:
    """Derive the key pair name from the key material."""
    # TODO: switch to the OpenSSH or AWS key fingerprint so names match the console
    return SSH_KEY_NAME_PREFIX + hashlib.md5(public_key).hexdigest()


class ResourceLocator:
    """Finds tagged subnets, security groups and instances, and ensures the SSH key.

    Lookups are read-only. When several resources carry the role tag the
    first one in listing order wins, unless ``strict`` is set, in which case
    AmbiguityError is raised.
    """

    def __init__(
        self,
        ec2: EC2Manager,
        tag_key: str = TAG_ROLE_KEY,
        strict: bool = False,
        file_reader: Callable[[str], bytes] = read_file,
    ):
        self.ec2 = ec2
        self.tag_key = tag_key
        self.strict = strict
        self.file_reader = file_reader

    def _first(self, kind: str, resources: List[Dict[str, Any]], id_key: str) -> Optional[Dict[str, Any]]:
        if not resources:
            return None
        if len(resources) > 1:
            ids = [r.get(id_key) for r in resources]
            if self.strict:
                raise AmbiguityError(f"found multiple {kind}s tagged with {self.tag_key!r}: {ids}")
            logger.warning(f"Found multiple {kind}s tagged with {self.tag_key!r} ({ids}); using {ids[0]}")
        return resources[0]

    def find_subnet(self) -> Optional[Dict[str, Any]]:
        """Return a subnet tagged with the role tag, if one exists."""
        return self._first("subnet", self.ec2.find_subnets_by_tag(self.tag_key), "SubnetId")

    def describe_subnet(self, subnet_id: str) -> Optional[Dict[str, Any]]:
        return self.ec2.describe_subnet(subnet_id)

    def find_security_group(self, vpc_id: str) -> Optional[Dict[str, Any]]:
        """Return a security group in ``vpc_id`` tagged with the role tag, if one exists."""
        groups = self.ec2.find_security_groups_by_tag(self.tag_key, vpc_id)
        return self._first("security group", groups, "GroupId")

    def find_instance(self) -> Optional[Dict[str, Any]]:
        """Return a live instance tagged with the role tag, if one exists."""
        instances = [
            i
            for i in self.ec2.find_instances_by_tag(self.tag_key)
            if not InstanceInfo.from_aws_instance(i).is_terminated
        ]
        return self._first("instance", instances, "InstanceId")

    def find_ssh_key(self, name: str) -> Optional[Dict[str, Any]]:
        key_pairs = self.ec2.find_key_pairs(name)
        if not key_pairs:
            return None
        if len(key_pairs) != 1:
            raise AmbiguityError(f"found multiple AWS KeyPairs with name {name!r}")
        return key_pairs[0]

    def ensure_ssh_key(self, public_key_path: str) -> str:
        """Import the public key unless a key pair with its derived name exists.

        Returns the key pair name. Running this twice with the same key
        material performs at most one import.
        """
        public_key = self.file_reader(public_key_path)
        name = ssh_key_name(public_key)

        key = self.find_ssh_key(name)
        if key is not None:
            return key.get("KeyName") or name

        logger.info(f"Creating AWS KeyPair with name {name!r}")
        try:
            return self.ec2.import_key_pair(name, public_key)
        except CloudOperationError as e:
            # Lost a race with a concurrent import of the same material
            if error_code(e.__cause__) == KEY_PAIR_DUPLICATE:
                return name
            raise
