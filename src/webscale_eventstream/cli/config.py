"""CLI: eventstream status | eventstream config set"""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from webscale_eventstream.config import FLAGS, SCOPE_DEFAULT, SCOPE_WEBSITE, FileConfig, is_truthy, load_config

console = Console()


@click.command("status")
@click.option("--website", "website_code", default=None, help="Website code to resolve flags for")
def status_cmd(website_code: Optional[str]):
    """Show the event stream flags."""
    reader = FileConfig(website_code=website_code)
    scope = SCOPE_WEBSITE if website_code else SCOPE_DEFAULT
    table = Table(title=f"Event stream ({website_code or 'default'})")
    table.add_column("Flag", style="bold")
    table.add_column("Path")
    table.add_column("Value")
    for name, path in FLAGS.items():
        value = reader.is_set_flag(path, scope)
        table.add_row(name, path, "[green]on[/green]" if value else "[dim]off[/dim]")
    console.print(table)
    if not load_config():
        console.print("[dim]No config file yet. Run `eventstream config set enabled true`.[/dim]")


@click.group()
def config():
    """Config file commands."""


@config.command("set")
@click.argument("flag", type=click.Choice(sorted(FLAGS)))
@click.argument("value")
@click.option("--website", "website_code", default=None, help="Set for one website instead of the default scope")
def config_set(flag: str, value: str, website_code: Optional[str]):
    """Set FLAG (enabled|logging) to VALUE."""
    FileConfig().set_value(FLAGS[flag], is_truthy(value), website_code=website_code)
    scope = f"website {website_code}" if website_code else "default scope"
    console.print(f"[green]{flag} = {is_truthy(value)}[/green] [dim]({scope})[/dim]")
