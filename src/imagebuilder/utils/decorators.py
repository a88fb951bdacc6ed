"""Simplified decorator patterns for image builder operations."""

import click
import importlib
import yaml
from functools import wraps
from typing import Any, Callable, Dict, Optional, Type

from imagebuilder.jobs.base import BaseJob
from imagebuilder.utils.config import ConfigManager
from imagebuilder.utils.logger import setup_logger

# Centralized job registry
JOB_REGISTRY = {
    "instance": {
        "create": "imagebuilder.jobs.create_instance.CreateInstanceJob",
        "shutdown": "imagebuilder.jobs.shutdown_instance.ShutdownInstanceJob",
    },
    "image": {
        "publish": "imagebuilder.jobs.publish_image.PublishImageJob",
    },
}

# CLI parameter name -> job parameter name
PARAMETER_MAP = {
    "name": "image_name",
    "public": "make_public",
}


def get_job_class(operation_type: str, func_name: str) -> Type[BaseJob]:
    """Dynamically resolve job class based on operation type and function name.

    Raises:
        ValueError: If operation type or function name is not recognized
    """
    registry = JOB_REGISTRY.get(operation_type, {})

    for keyword, job_path in registry.items():
        if keyword in func_name:
            module_path, class_name = job_path.rsplit(".", 1)
            module = importlib.import_module(module_path)
            return getattr(module, class_name)

    raise ValueError(f"Unknown {operation_type} operation: {func_name}")


def handle_operation_error(operation_name: str, error: Exception) -> None:
    """Centralized error handling for operations."""
    error_msg = f"Error in {operation_name}: {str(error)}"
    click.echo(error_msg, err=True)

    logger = setup_logger("imagebuilder.errors", "errors.log")
    logger.error(
        error_msg,
        extra={"operation": operation_name, "error_type": type(error).__name__},
    )


def format_result(results: Any) -> str:
    if isinstance(results, dict):
        return yaml.safe_dump(results, default_flow_style=False, sort_keys=False)
    return str(results)


def handle_output(
    results: Any,
    output_path: Optional[str] = None,
    correlation_id: Optional[str] = None,
) -> None:
    """Log the operation outcome and print or save it."""
    logger = setup_logger("imagebuilder.output", "operations.log")

    if isinstance(results, dict):
        logger.info(
            f"[{correlation_id or 'N/A'}] Operation completed with status "
            f"{results.get('status', 'unknown')}: {results.get('message', '')}"
        )
    else:
        logger.info(f"[{correlation_id or 'N/A'}] Operation completed: {type(results).__name__}")

    text = format_result(results)
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text)
        click.echo(f"Results saved to {output_path}")
        logger.info(f"[{correlation_id or 'N/A'}] Results saved to {output_path}")
    else:
        click.echo(text)


def job_kwargs(ctx: click.Context, kwargs: Dict[str, Any]) -> Dict[str, Any]:
    """Translate CLI parameters into job parameters."""
    params = {}
    for key, value in kwargs.items():
        if key in ("force", "dry_run", "verbose", "output"):
            continue
        params[PARAMETER_MAP.get(key, key)] = value
    params.setdefault("region", (ctx.obj or {}).get("region"))
    return params


def aws_operation(job_class: Type[BaseJob], requires_confirmation: bool = False):
    """Simplified decorator for image builder operations.

    Args:
        job_class: The job class to execute
        requires_confirmation: Whether to require user confirmation
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(ctx, **kwargs):
            operation_name = func.__name__
            func(ctx, **kwargs)

            # Pre-execution confirmation
            if requires_confirmation and not kwargs.get("force", False):
                if not click.confirm(f"Continue with {operation_name}?"):
                    click.echo("Operation cancelled by user.")
                    return None

            if kwargs.get("dry_run", False):
                click.echo(f"[DRY RUN] Would execute {operation_name} with {job_kwargs(ctx, kwargs)}")
                return None

            try:
                config_file = (ctx.obj or {}).get("config_file")
                job = job_class(ConfigManager(config_file=config_file) if config_file else None)
                result = job.execute(**job_kwargs(ctx, kwargs))
            except Exception as e:
                handle_operation_error(operation_name, e)
                ctx.exit(1)

            handle_output(result, kwargs.get("output"), getattr(job, "correlation_id", None))
            if isinstance(result, dict) and result.get("status") == "error":
                ctx.exit(1)
            return result

        return wrapper

    return decorator


# Generic operation decorator
def operation_decorator(operation_type: str, requires_confirmation: bool = True):
    """Generic decorator for all operation types."""

    def decorator(func: Callable) -> Callable:
        job_class = get_job_class(operation_type, func.__name__)
        return aws_operation(
            job_class=job_class,
            requires_confirmation=requires_confirmation,
        )(func)

    return decorator


def instance_operation(requires_confirmation: bool = True):
    """Decorator for build instance operations."""
    return operation_decorator("instance", requires_confirmation)


def image_operation(requires_confirmation: bool = True):
    """Decorator for image operations."""
    return operation_decorator("image", requires_confirmation)
