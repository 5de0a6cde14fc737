#!/usr/bin/env python3

import click
import dataclasses
import os
from pathlib import Path

from pkgmeta.config import load_config, configure_logging, workspace_from_config, github_settings
from pkgmeta.commands.register import register_cmd
from pkgmeta.commands.tag import tag_cmd
from pkgmeta.commands.publish import publish_cmd
from pkgmeta.commands.submit import submit_cmd
from pkgmeta.commands.check import check_cmd
from pkgmeta.commands.config import config_cmd


@click.group()
@click.version_option(package_name='pkgmeta')
@click.option('--packages-dir', type=click.Path(file_okay=False), default=None,
              help='Directory holding package repositories')
@click.option('--registry', type=click.Path(file_okay=False), default=None,
              help='Registry working copy')
@click.option('-v', '--verbose', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, packages_dir, registry, verbose):
    """pkgmeta - Version tagging and registry publishing for packages.

    Tags package versions, records them in a git-backed registry of
    package metadata and publishes registry changes as a pull request.
    """
    config = load_config()
    configure_logging(config, verbose)

    workspace = workspace_from_config(config)
    if packages_dir:
        packages_dir = Path(os.path.expanduser(packages_dir))
        workspace = dataclasses.replace(workspace, packages_dir=packages_dir)
        if not config.get('registry', {}).get('path'):
            workspace = dataclasses.replace(workspace, registry=packages_dir / 'METADATA')
    if registry:
        workspace = dataclasses.replace(workspace, registry=Path(os.path.expanduser(registry)))

    ctx.obj = {
        'config': config,
        'workspace': workspace,
        'git_timeout': config.get('git', {}).get('timeout_seconds', 300),
        'github': github_settings(config),
    }


cli.add_command(register_cmd)
cli.add_command(tag_cmd)
cli.add_command(publish_cmd)
cli.add_command(submit_cmd)
cli.add_command(check_cmd)
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
