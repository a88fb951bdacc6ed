#!/usr/bin/env python3

import os
from typing import Any, Dict, Optional

from .base import BaseJob
from imagebuilder.core.cloud import SSHSessionConfig


class CreateInstanceJob(BaseJob):
    """Job to bring up the build instance and wait for SSH"""

    def __init__(self, config_manager=None, cloud=None):
        super().__init__(config_manager, job_name="create_instance", cloud=cloud)

    def execute(self, **kwargs) -> Dict[str, Any]:
        """Reuse the tagged build instance or launch a new one"""
        region: Optional[str] = kwargs.get("region")
        wait_ssh = kwargs.get("wait_ssh", True)
        timeout: Optional[float] = kwargs.get("timeout")

        try:
            cloud = self.get_cloud(region=region)

            created = False
            instance = cloud.get_instance()
            if instance is None:
                self.logger.info(f"[{self.correlation_id}] No tagged instance found; creating one")
                instance = cloud.create_instance()
                created = True

            result = {
                "status": "success",
                "instance_id": instance.id,
                "created": created,
                "correlation_id": self.correlation_id,
            }

            if wait_ssh:
                config = self.aws_config(region=region)
                ssh_config = SSHSessionConfig(
                    username=config.ssh_username,
                    port=config.ssh_port,
                    key_filename=os.path.expanduser(config.ssh_private_key) if config.ssh_private_key else None,
                )
                client = instance.dial_ssh(ssh_config, timeout=timeout)
                client.close()
                result["ssh_ready"] = True

            public_ip = getattr(instance, "public_ip", None)
            if public_ip:
                result["public_ip"] = public_ip

            verb = "Created" if created else "Reusing"
            result["message"] = f"{verb} instance {instance.id}"
            self.logger.info(f"[{self.correlation_id}] {result['message']}")
            return result

        except Exception as e:
            return self.error_result("create instance", e)
