"""
Handles the 'publish' command.
"""

import click
from rich.console import Console
from rich.table import Table

from ..cli_utils import standard_command, json_option
from ..infra.git_client import GitClient
from ..infra.github_client import GitHubClient
from ..services.publish_service import PublishWorkflow
from ..services.pull_request_service import PullRequestCreator

console = Console()


@click.command(name='publish')
@click.argument('branch', required=False)
@json_option
@click.pass_obj
@standard_command
def publish_cmd(obj, branch, json_output):
    """Publish registry changes.

    BRANCH: Registry branch to publish (default: configured branch)

    Verifies every changed version entry against the package's tag,
    validates the registry, pushes the tags and pushes the registry
    branch to your fork for a pull request.
    """
    git = GitClient(timeout=obj['git_timeout'])
    github = GitHubClient(**obj['github'])
    workflow = PublishWorkflow(
        obj['workspace'],
        git=git,
        pull_requests=PullRequestCreator(git=git, github=github),
    )
    result = workflow.publish(branch)

    if not json_output:
        if result.pushed:
            table = Table(title=f"Published tags ({result.branch})")
            table.add_column("Package", style="cyan")
            table.add_column("Temporary (forced)")
            table.add_column("Permanent")
            for pushed in result.pushed:
                table.add_row(pushed.package, ", ".join(pushed.forced), ", ".join(pushed.unforced))
            console.print(table)
        if result.pull_request:
            console.print("To create a pull-request, open:")
            console.print(f"  {result.pull_request.compare_url}")
    return result
