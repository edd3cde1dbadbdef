"""
Command Line Interface for dockrel.
"""
import os

import click

from ..BUILDERS.dockerfile_builder import DockerfileBuilder, render
from ..HOOKS.release_hooks import DockerReleaseHooks
from ..PARSERS.config_parser import DEFAULT_CONFIG_FILE, ConfigParser
from ..RUNNERS.build_runner import BuildRunner
from ..exceptions import DockrelError


@click.group()
@click.option('--file', '-f', default=DEFAULT_CONFIG_FILE, help='Project file path')
@click.pass_context
def cli(ctx, file):
    """
    dockrel - Dockerize a release.

    Generates a Dockerfile for the release described in the project file
    and builds the image with the container build tool.
    """
    ctx.ensure_object(dict)
    ctx.obj['file'] = file
    ctx.obj['base_dir'] = os.path.dirname(os.path.abspath(file))


def _fail(ctx, error):
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def _load_release(ctx):
    try:
        return ConfigParser().parse(ctx.obj['file'])
    except DockrelError as e:
        _fail(ctx, e)


@cli.command()
@click.option('--print', 'print_only', is_flag=True, help='Print the Dockerfile instead of writing it')
@click.pass_context
def dockerfile(ctx, print_only):
    """Generate the Dockerfile for the release."""
    release = _load_release(ctx)
    try:
        if print_only:
            click.echo(render(release.dockerfile, release.name), nl=False)
            return
        DockerfileBuilder(ctx.obj['base_dir']).build(release.dockerfile, release.name)
    except DockrelError as e:
        _fail(ctx, e)


@cli.command()
@click.option('--tag', '-t', default=None, help='Image tag, defaults to <name>:<version>')
@click.pass_context
def build(ctx, tag):
    """Build the image from the generated Dockerfile."""
    release = _load_release(ctx)
    tag = tag or release.image_tag
    runner = BuildRunner(ctx.obj['base_dir'], release.build_tool)
    try:
        runner.build(tag)
    except DockrelError as e:
        _fail(ctx, e)
    click.echo(f"Built {tag}")


@cli.command()
@click.pass_context
def release(ctx):
    """Run the release hooks: generate the Dockerfile, then build the image."""
    release_config = _load_release(ctx)
    if not release_config.docker:
        click.echo("Docker is disabled for this release, nothing to do.")
        return

    hooks = DockerReleaseHooks(ctx.obj['base_dir'])
    try:
        hooks.before_release(release_config)
        hooks.after_package(release_config)
    except DockrelError as e:
        _fail(ctx, e)
    click.echo(f"Built {release_config.image_tag}")


def main():
    """
    Main entry point for the CLI.
    """
    cli(obj={})


if __name__ == '__main__':
    main()
