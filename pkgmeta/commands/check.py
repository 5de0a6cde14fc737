"""
Handles the 'check' command.
"""

import click
from rich.console import Console

from ..cli_utils import standard_command, json_option
from ..services.consistency import ConsistencyChecker

console = Console()


@click.command(name='check')
@click.argument('packages', nargs=-1)
@json_option
@click.pass_obj
@standard_command
def check_cmd(obj, packages, json_output):
    """Validate registry requirements.

    PACKAGES: Limit the satisfiability check to these packages and
    their dependents (default: all)
    """
    ConsistencyChecker(obj['workspace']).check_metadata(set(packages))
    scope = ", ".join(sorted(packages)) or "all packages"
    if json_output:
        return {'operation': 'check', 'packages': sorted(packages), 'ok': True}
    console.print(f"[green]✓[/green] Registry is consistent ({scope})")
    return None
