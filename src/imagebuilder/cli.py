#!/usr/bin/env python3
"""
imagebuilder CLI
Launch a build instance, then publish and replicate the resulting image
"""

import click

from imagebuilder import __version__
from imagebuilder.utils.decorators import (
    image_operation,
    instance_operation,
)
from imagebuilder.utils.logger import set_console_level, setup_logger


def setup_logging(verbose: bool = False):
    level = "DEBUG" if verbose else "INFO"
    logger = setup_logger("imagebuilder.cli", "cli.log", level)
    set_console_level(level)
    return logger


# Common CLI options
def add_common_options(func):
    func = click.option("--output", type=click.Path(), help="Output file path")(func)
    func = click.option("--force", is_flag=True, help="Skip confirmation prompts")(func)
    func = click.option("--verbose", is_flag=True, help="Enable verbose output")(func)
    func = click.option(
        "--dry-run", is_flag=True, help="Preview changes without executing"
    )(func)
    return func


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    help="Settings file (default: configs/settings.yaml)",
)
@click.option("--region", default=None, help="AWS region (overrides settings)")
@click.pass_context
def cli(ctx, config_file, region):
    """imagebuilder - build and publish machine images"""
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file
    ctx.obj["region"] = region


@cli.command()
@click.option("--wait-ssh/--no-wait-ssh", default=True, help="Wait until the instance accepts SSH")
@click.option("--timeout", type=float, default=None, help="Give up waiting after this many seconds")
@add_common_options
@click.pass_context
@instance_operation(requires_confirmation=False)
def create_instance(ctx, wait_ssh, timeout, output, force, verbose, dry_run):
    """Find or launch the tagged build instance

    An instance already tagged from an earlier run is reused.
    """
    setup_logging(verbose)


@cli.command()
@click.option("--name", required=True, help="Name of the image to publish")
@click.option("--replicate", is_flag=True, help="Copy the image to every region")
@click.option("--public/--no-public", default=True, help="Grant launch permission to all accounts")
@click.option("--timeout", type=float, default=None, help="Give up waiting for each image after this many seconds")
@add_common_options
@click.pass_context
@image_operation(requires_confirmation=True)
def publish_image(ctx, name, replicate, public, timeout, output, force, verbose, dry_run):
    """Make an image public, optionally replicating it

    Regions already holding an image of the same name are reused.
    """
    setup_logging(verbose)


@cli.command()
@add_common_options
@click.pass_context
@instance_operation(requires_confirmation=True)
def shutdown_instance(ctx, output, force, verbose, dry_run):
    """Terminate the tagged build instance"""
    setup_logging(verbose)


@cli.command()
def version():
    """Show version information"""
    click.echo(f"imagebuilder {__version__}")


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
