"""
Handles the 'submit' command.
"""

import click
from rich.console import Console

from ..cli_utils import standard_command, json_option
from ..infra.git_client import GitClient
from ..infra.github_client import GitHubClient
from ..services.pull_request_service import PullRequestCreator

console = Console()


@click.command(name='submit')
@click.argument('pkg')
@click.argument('commit', default='', required=False)
@json_option
@click.pass_obj
@standard_command
def submit_cmd(obj, pkg, commit, json_output):
    """Push a package commit to your fork for a pull request.

    PKG: Package name (repository at <packages_dir>/PKG)
    COMMIT: Commit to submit (default: HEAD)

    The upstream is the url recorded in the registry, or the package's
    origin when it is not registered.
    """
    creator = PullRequestCreator(
        git=GitClient(timeout=obj['git_timeout']),
        github=GitHubClient(**obj['github']),
    )
    result = creator.submit(obj['workspace'], pkg, commit)

    if not json_output:
        console.print("To create a pull-request, open:")
        console.print(f"  {result.compare_url}")
    return result
