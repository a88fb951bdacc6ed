"""Waiting for a build instance to become reachable over SSH."""

import time
from threading import Event
from typing import TYPE_CHECKING, Any, Callable, Optional

import paramiko

from imagebuilder.core.cloud import SSHSessionConfig
from imagebuilder.core.constants import PUBLIC_IP_POLL_INTERVAL, SSH_RETRY_INTERVAL
from imagebuilder.utils.exceptions import NotFoundError
from imagebuilder.utils.logger import setup_logger
from imagebuilder.utils.polling import PollControl

if TYPE_CHECKING:
    from imagebuilder.core.aws.instance import AWSInstance

logger = setup_logger(__name__, "waiter.log")


def connect_ssh(host: str, ssh_config: SSHSessionConfig) -> paramiko.SSHClient:
    """Open a paramiko SSH client to ``host``."""
    client = paramiko.SSHClient()
    # Host key of a freshly launched instance is unknown
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
    kwargs = {
        "hostname": host,
        "port": ssh_config.port,
        "username": ssh_config.username,
        "timeout": ssh_config.connect_timeout,
    }
    if ssh_config.key_filename:
        kwargs["key_filename"] = ssh_config.key_filename
    try:
        client.connect(**kwargs)
    except Exception:
        client.close()
        raise
    return client


class ReachabilityWaiter:
    """Polls an instance until it has a public IP, then dials SSH.

    Both loops poll at a fixed interval and, by default, forever. Pass
    ``timeout`` (seconds) or a ``cancel`` event to bound them.
    """

    def __init__(
        self,
        poll_interval: float = PUBLIC_IP_POLL_INTERVAL,
        ssh_retry_interval: float = SSH_RETRY_INTERVAL,
        sleep: Optional[Callable[[float], Any]] = None,
        connect: Callable[[str, SSHSessionConfig], Any] = connect_ssh,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.poll_interval = poll_interval
        self.ssh_retry_interval = ssh_retry_interval
        self.sleep = sleep
        self.connect = connect
        self.clock = clock

    def wait_for_public_address(
        self,
        instance: "AWSInstance",
        timeout: Optional[float] = None,
        cancel: Optional[Event] = None,
    ) -> str:
        """Re-describe the instance until it reports a public IP, and return it."""
        control = PollControl(timeout, cancel, self.sleep, self.clock)
        while True:
            description = instance.ec2.describe_instance(instance.id)
            if description is None:
                raise NotFoundError(f"instance {instance.id!r} not found")
            instance.instance = description

            public_ip = instance.info.public_ip
            if public_ip:
                logger.info(f"Instance public IP is {public_ip!r}")
                return public_ip

            logger.debug(f"Sleeping before requerying instance for public IP: {instance.id!r}")
            control.pause(self.poll_interval, f"public IP of instance {instance.id}")

    def dial(
        self,
        instance: "AWSInstance",
        ssh_config: SSHSessionConfig,
        timeout: Optional[float] = None,
        cancel: Optional[Event] = None,
    ) -> Any:
        """Connect over SSH, retrying every few seconds until sshd answers."""
        started = self.clock()
        public_ip = self.wait_for_public_address(instance, timeout, cancel)

        remaining = None
        if timeout is not None:
            remaining = max(0.0, timeout - (self.clock() - started))
        control = PollControl(remaining, cancel, self.sleep, self.clock)

        while True:
            try:
                session = self.connect(public_ip, ssh_config)
            except (paramiko.SSHException, OSError) as e:
                # Cannot tell a booting sshd from a broken configuration
                logger.warning(f"error connecting to SSH on server {public_ip!r}: {e}")
                control.pause(self.ssh_retry_interval, f"SSH on {public_ip}")
                continue

            logger.info(f"Connected to {ssh_config.username}@{public_ip}:{ssh_config.port}")
            return session

    def terminate(self, instance: "AWSInstance") -> None:
        """Terminate the instance. Errors propagate, nothing is retried."""
        logger.info(f"Terminating instance {instance.id!r}")
        instance.ec2.terminate_instance(instance.id)
