#!/usr/bin/env python3

from typing import Any, Dict

from .base import BaseJob


class ShutdownInstanceJob(BaseJob):
    """Job to terminate the tagged build instance"""

    def __init__(self, config_manager=None, cloud=None):
        super().__init__(config_manager, job_name="shutdown_instance", cloud=cloud)

    def execute(self, **kwargs) -> Dict[str, Any]:
        try:
            cloud = self.get_cloud(region=kwargs.get("region"))
            instance = cloud.get_instance()
            if instance is None:
                return {
                    "status": "success",
                    "message": "No build instance found; nothing to terminate",
                    "correlation_id": self.correlation_id,
                }

            instance.shutdown()
            return {
                "status": "success",
                "message": f"Terminated instance {instance.id}",
                "instance_id": instance.id,
                "correlation_id": self.correlation_id,
            }

        except Exception as e:
            return self.error_result("terminate instance", e)
