"""
Janus CLI: `janus` command.

Commands:
  janus info                    Server version and plugins
  janus config show|set-url     Saved gateway URL
  janus rooms <cmd>             VideoRoom management
  janus streams <cmd>           Streaming mountpoints
  janus events <plugin>         Print long-poll events for a fresh handle
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install janus-http[cli]")

from janus_http import __version__
from janus_http.client import AsyncJanus
from janus_http.transport.http import DEFAULT_BASE_URL

console = Console()
CONFIG_FILE = Path.home() / ".janus" / "config.json"


def _load_config() -> dict:
    try:
        return json.loads(CONFIG_FILE.read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def _save_config(cfg: dict) -> None:
    CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_FILE.write_text(json.dumps(cfg, indent=2))


def _resolve_base_url(option: Optional[str]) -> str:
    return option or _load_config().get("base_url") or DEFAULT_BASE_URL


def _get_client() -> AsyncJanus:
    ctx = click.get_current_context()
    obj = ctx.find_root().obj or {}
    return AsyncJanus(base_url=_resolve_base_url(obj.get("base_url")))


def _run(coro):
    return asyncio.run(coro)


async def _with_handle(plugin: str, action):
    """Run ``action(client, session_id, handle_id)`` on a short-lived session."""
    async with _get_client() as client:
        session = await client.create_session()
        handle_id = await client.attach(session.id, plugin)
        return await action(client, session.id, handle_id)


@click.group()
@click.version_option(__version__)
@click.option("--base-url", envvar="JANUS_URL", default=None, help="Janus REST endpoint, e.g. http://host:8088/janus")
@click.option("-v", "--verbose", is_flag=True, help="Log protocol traffic")
@click.pass_context
def main(ctx: click.Context, base_url: Optional[str], verbose: bool):
    """Janus CLI: talk to a Janus WebRTC gateway over its REST API."""
    ctx.obj = {"base_url": base_url}
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@main.command("info")
@click.option("--json-output", "--json", is_flag=True)
def info_cmd(json_output: bool):
    """Show server version and plugins."""

    async def _info():
        async with _get_client() as client:
            with console.status("Querying server..."):
                info = await client.info()
        if json_output:
            click.echo(info.model_dump_json(indent=2))
            return
        console.print(f"[bold]{info.name}[/bold] {info.version_string or info.version}")
        for plugin_id, plugin in sorted(info.plugins.items()):
            console.print(f"  [cyan]{plugin_id}[/cyan] {plugin.version_string or ''}")

    _run(_info())


@click.group("config")
def config():
    """Saved CLI settings."""


@config.command("show")
def config_show():
    """Print the gateway URL in use."""
    cfg = _load_config()
    console.print(f"base_url: {cfg.get('base_url', DEFAULT_BASE_URL)}")
    console.print(f"[dim]{CONFIG_FILE}[/dim]")


@config.command("set-url")
@click.argument("url")
def config_set_url(url: str):
    """Save the gateway URL."""
    _save_config({**_load_config(), "base_url": url.rstrip("/")})
    console.print(f"[green]Saved base_url {url}[/green]")


# Register subcommands from separate modules
from janus_http.cli.events import events_cmd
from janus_http.cli.rooms import rooms
from janus_http.cli.streams import streams

main.add_command(config)
main.add_command(rooms)
main.add_command(streams)
main.add_command(events_cmd)


if __name__ == "__main__":
    main()
