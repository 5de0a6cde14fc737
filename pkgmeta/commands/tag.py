"""
Handles the 'tag' command.
"""

import click
from rich.console import Console

from ..cli_utils import standard_command, json_option
from ..infra.git_client import GitClient
from ..services.tagger import Tagger
from ..version_policy import parse_version_or_selector

console = Console()


@click.command(name='tag')
@click.argument('pkg')
@click.argument('version', default='bump', required=False)
@click.option('--force', is_flag=True, help='Skip version checks and overwrite the registry entry')
@click.option('--commit', 'commitish', default='HEAD', show_default=True, help='Commit to tag')
@json_option
@click.pass_obj
@standard_command
def tag_cmd(obj, pkg, version, force, commitish, json_output):
    """Tag a package version.

    PKG: Package name (repository at <packages_dir>/PKG)
    VERSION: A version number, or one of bump, patch, minor, major
    (default: bump)

    Selectors are applied to the highest existing version that is an
    ancestor of the tagged commit. If the package is registered, the
    registry entry is written and committed too; the tag is removed
    again if that fails.

    Examples:

    \b
        pkgmeta tag Foo minor
        pkgmeta tag Foo 1.2.0 --commit=abc1234
        pkgmeta tag Foo 0.3.0- --force
    """
    requested = parse_version_or_selector(version)
    tagger = Tagger(obj['workspace'], git=GitClient(timeout=obj['git_timeout']))
    result = tagger.tag(pkg, requested, force=force, commitish=commitish)

    if not json_output:
        kind = "rewritable" if result.rewritable else "immutable"
        console.print(f"[green]✓[/green] Tagged [bold]{pkg}[/bold] {result.version.tag_name} "
                      f"({kind}) at {result.commit[:10]}")
        if result.registered:
            state = "committed" if result.committed else "unchanged"
            console.print(f"  registry entry {state}")
    return result
