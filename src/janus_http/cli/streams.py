"""CLI: janus streams list|create|destroy|watch"""

import asyncio
import json

import click
from rich.console import Console
from rich.table import Table

from janus_http.messages import check_plugin_error
from janus_http.session import has_jsep

console = Console()


def _get_client():
    from janus_http.cli.main import _get_client
    return _get_client()


def _with_handle(plugin, action):
    from janus_http.cli.main import _with_handle
    return _with_handle(plugin, action)


def _run(coro):
    from janus_http.cli.main import _run
    return _run(coro)


@click.group()
def streams():
    """Streaming mountpoints."""


@streams.command("list")
@click.option("--json-output", "--json", is_flag=True)
def streams_list(json_output):
    """List mountpoints."""

    async def _list():
        result = await _with_handle("streaming", lambda c, s, h: c.streaming.list(s, h))
        check_plugin_error(result)
        data = (result.get("plugindata") or {}).get("data") or {}
        if json_output:
            click.echo(json.dumps(data, indent=2))
            return
        table = Table(title="Mountpoints")
        table.add_column("ID", style="bold")
        table.add_column("Type")
        table.add_column("Description")
        for mp in data.get("list", []):
            table.add_row(str(mp.get("id")), mp.get("type", ""), mp.get("description", ""))
        console.print(table)

    _run(_list())


@streams.command("create")
@click.argument("stream_id", type=int)
@click.argument("name")
def streams_create(stream_id, name):
    """Create an RTP mountpoint (VP8 on 8004, Opus on 8005)."""

    async def _create():
        async with _get_client() as client:
            session = await client.create_session()
            result = await client.create_stream(session.id, stream_id, name)
        check_plugin_error(result)
        console.print(f"[green]Mountpoint {stream_id} ({name}) created.[/green]")

    _run(_create())


@streams.command("destroy")
@click.argument("stream_id", type=int)
@click.option("--secret", default=None)
def streams_destroy(stream_id, secret):
    """Destroy a mountpoint."""

    async def _destroy():
        result = await _with_handle("streaming", lambda c, s, h: c.streaming.destroy(s, h, stream_id, secret=secret))
        check_plugin_error(result)
        console.print(f"[green]Mountpoint {stream_id} destroyed.[/green]")

    _run(_destroy())


@streams.command("watch")
@click.argument("stream_id", type=int)
@click.option("--video-mid", default=None)
@click.option("--audio-mid", default=None)
@click.option("--timeout", default=15.0, type=float)
def streams_watch(stream_id, video_mid, audio_mid, timeout):
    """Request a mountpoint and print the SDP offer Janus sends back."""

    async def _watch():
        async with _get_client() as client:
            session = await client.create_session()
            handle_id = await client.attach(session.id, "streaming")
            offer = session.expect(handle_id, has_jsep)
            ack = await client.streaming.watch(session.id, handle_id, stream_id, video_mid=video_mid, audio_mid=audio_mid)
            console.print(f"[dim]watch -> {ack.get('janus')}[/dim]")
            with console.status("Waiting for SDP offer on the long poll..."):
                try:
                    event = await asyncio.wait_for(offer, timeout=timeout)
                except asyncio.TimeoutError:
                    console.print(f"[red]No SDP offer within {timeout}s.[/red]")
                    raise SystemExit(1)
            check_plugin_error(event)
            console.print(f"[green]{event.jsep.type}[/green] from handle {event.sender}:")
            click.echo(event.jsep.sdp)

    _run(_watch())
