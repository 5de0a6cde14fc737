"""
Handles the 'register' command.
"""

import click
from rich.console import Console

from ..cli_utils import standard_command, json_option
from ..infra.git_client import GitClient
from ..services.registrar import Registrar

console = Console()


@click.command(name='register')
@click.argument('pkg')
@click.argument('url', required=False)
@json_option
@click.pass_obj
@standard_command
def register_cmd(obj, pkg, url, json_output):
    """Register a package in the registry.

    PKG: Package name (repository at <packages_dir>/PKG)
    URL: Canonical remote url (default: the package's origin url)

    Records the url and one entry for every existing version tag, then
    commits the registry.

    Examples:

    \b
        pkgmeta register Foo
        pkgmeta register Foo https://github.com/owner/Foo.jl.git
    """
    workspace = obj['workspace']
    registrar = Registrar(workspace, git=GitClient(timeout=obj['git_timeout']))
    result = registrar.register(pkg, url)

    if not json_output:
        versions = ", ".join(v.tag_name for v in result.versions) or "no versions"
        state = "committed" if result.committed else "nothing to commit"
        console.print(f"[green]✓[/green] Registered [bold]{pkg}[/bold] at {result.url} ({versions}; {state})")
    return result
