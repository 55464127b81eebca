import click
from pathlib import Path
import json

from releaselog.config import get_config_path, get_default_config, load_config, save_config
from releaselog.exit_codes import CommandError, exit_with_code


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


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
        click.echo(json.dumps({"config_path": str(get_config_path())}))
        return

    try:
        config = load_config()
    except CommandError as e:
        exit_with_code(e.exit_code, f"Error: {e}")

    if pretty:
        # Pretty print for human readability
        click.echo(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        # Default: single-line JSON (JSONL)
        click.echo(json.dumps(config, ensure_ascii=False))


@config_cmd.command("init")
@click.option("--format", "fmt", type=click.Choice(["json", "toml", "yaml"]), default="json",
              help="Config file format (default: json)")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init_config(fmt, force):
    """Write the default configuration to ~/.releaselog/."""
    config_path = get_config_path().with_suffix(f".{fmt}")

    if config_path.exists() and not force:
        exit_with_code(1, f"Configuration already exists at {config_path}. Use --force to overwrite.")

    try:
        written = save_config(get_default_config(), Path(config_path))
    except CommandError as e:
        exit_with_code(e.exit_code, f"Error: {e}")

    click.echo(f"Default configuration written to {written}")
