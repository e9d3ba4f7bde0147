"""CLI: janus rooms list|participants|create|destroy"""

import json
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from janus_http.messages import check_plugin_error

console = Console()


def _with_handle(plugin, action):
    from janus_http.cli.main import _with_handle
    return _with_handle(plugin, action)


def _run(coro):
    from janus_http.cli.main import _run
    return _run(coro)


def _plugin_data(result: dict) -> dict:
    check_plugin_error(result)
    return (result.get("plugindata") or {}).get("data") or {}


@click.group()
def rooms():
    """VideoRoom management."""


@rooms.command("list")
@click.option("--json-output", "--json", is_flag=True)
def rooms_list(json_output):
    """List rooms."""

    async def _list():
        result = await _with_handle("videoroom", lambda c, s, h: c.videoroom.list_rooms(s, h))
        data = _plugin_data(result)
        if json_output:
            click.echo(json.dumps(data, indent=2))
            return
        table = Table(title=f"Rooms ({len(data.get('list', []))})")
        table.add_column("Room", style="bold")
        table.add_column("Description")
        table.add_column("Participants")
        table.add_column("Max publishers")
        for room in data.get("list", []):
            table.add_row(
                str(room.get("room")), room.get("description", ""),
                str(room.get("num_participants", "")), str(room.get("max_publishers", "")),
            )
        console.print(table)

    _run(_list())


@rooms.command("participants")
@click.argument("room", type=int)
@click.option("--json-output", "--json", is_flag=True)
def rooms_participants(room, json_output):
    """List participants of a room."""

    async def _participants():
        result = await _with_handle("videoroom", lambda c, s, h: c.videoroom.list_participants(s, h, room))
        data = _plugin_data(result)
        if json_output:
            click.echo(json.dumps(data, indent=2))
            return
        table = Table(title=f"Room {room}")
        table.add_column("ID", style="bold")
        table.add_column("Display")
        table.add_column("Publisher")
        for p in data.get("participants", []):
            table.add_row(str(p.get("id")), p.get("display", ""), "yes" if p.get("publisher") else "no")
        console.print(table)

    _run(_participants())


@rooms.command("create")
@click.argument("room", type=int)
@click.option("--description", default=None)
@click.option("--secret", default=None)
@click.option("--bitrate", default=0, type=int)
@click.option("--publishers", default=None, help="Comma separated allow-list")
@click.option("--record", is_flag=True)
@click.option("--rec-dir", default=None)
@click.option("--private", "is_private", is_flag=True)
def rooms_create(room, description: Optional[str], secret: Optional[str], bitrate, publishers, record, rec_dir, is_private):
    """Create a room."""

    async def _create():
        result = await _with_handle("videoroom", lambda c, s, h: c.videoroom.create_room(
            s, h, room, description=description, secret=secret, bitrate=bitrate,
            publishers=publishers, record=record, rec_dir=rec_dir, is_private=is_private,
        ))
        _plugin_data(result)
        console.print(f"[green]Room {room} created.[/green]")

    _run(_create())


@rooms.command("destroy")
@click.argument("room", type=int)
@click.option("--secret", default=None)
def rooms_destroy(room, secret):
    """Destroy a room."""

    async def _destroy():
        result = await _with_handle("videoroom", lambda c, s, h: c.videoroom.destroy_room(s, h, room, secret=secret))
        _plugin_data(result)
        console.print(f"[green]Room {room} destroyed.[/green]")

    _run(_destroy())
