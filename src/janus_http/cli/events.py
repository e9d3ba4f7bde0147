"""CLI: janus events"""

import asyncio
import json
from typing import Optional

import click
from rich.console import Console

console = Console()


def _get_client():
    from janus_http.cli.main import _get_client
    return _get_client()


def _run(coro):
    from janus_http.cli.main import _run
    return _run(coro)


@click.command("events")
@click.argument("plugin")
@click.option("--seconds", default=None, type=float, help="Stop after this long")
@click.option("--json-output", "--json", is_flag=True)
def events_cmd(plugin: str, seconds: Optional[float], json_output: bool):
    """Attach PLUGIN on a new session and print its long-poll events."""

    async def _listen():
        async with _get_client() as client:
            session = await client.create_session()
            handle_id = await client.attach(session.id, plugin)
            console.print(f"[dim]Session {session.id}, handle {handle_id}. Ctrl+C to exit.[/dim]")

            async def _print():
                async for event in session.events():
                    if json_output:
                        click.echo(json.dumps(event.model_dump(mode="json", exclude_none=True)))
                    else:
                        console.print(f"[cyan]{event.janus}[/cyan] sender={event.sender} {event.plugin_payload}")

            try:
                await asyncio.wait_for(_print(), timeout=seconds)
            except asyncio.TimeoutError:
                pass

    try:
        _run(_listen())
    except KeyboardInterrupt:
        pass
