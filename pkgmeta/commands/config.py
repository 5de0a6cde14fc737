import click
import json

from ..config import load_config, save_config, get_config_path, get_default_config


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("init")
@click.option("--packages-dir", default=None, help="Directory holding package repositories")
@click.option("--registry", default=None, help="Registry working copy (default: <packages-dir>/METADATA)")
def init_config(packages_dir, registry):
    """Write a configuration file with default settings."""
    config_path = get_config_path()
    if config_path.exists():
        click.echo(f"Configuration already exists at {config_path}")
        return
    config = get_default_config()
    if packages_dir:
        config["general"]["packages_dir"] = packages_dir
    if registry:
        config["registry"]["path"] = registry
    saved = save_config(config)
    click.echo(f"Configuration created at {saved}")


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
def show_config(pretty, path):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    if path:
        config_path = get_config_path()
        print(json.dumps({"config_path": str(config_path)}))
        return

    config = load_config()

    if pretty:
        # Pretty print for human readability
        print(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        # Default: single-line JSON (JSONL)
        print(json.dumps(config, ensure_ascii=False))
