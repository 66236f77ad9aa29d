"""
datalayer CLI - inspect and edit a store from the command line.

Every command prints the operation's JSON envelope. sessionStorage only lives
as long as the process, so it starts out empty on every invocation.
"""

import asyncio
import json
import logging
from pathlib import Path

import click

from datalayer.core.backend import BackendError, BackendSelector, ConfigurationError
from datalayer.core.backend.local_storage import to_json
from datalayer.core.config import load_config
from datalayer.core.storage import HostEnvironment
from datalayer.utils.logger import get_logger, setup_logging


def _echo_envelope(envelope, err: bool = False):
    click.echo(json.dumps(envelope, indent=2, default=str), err=err)


def _run(ctx, operation):
    """Run ``operation(backend)`` on a fresh event loop and print its envelope."""
    async def runner():
        backend = ctx.obj["selector"].build(ctx.obj["host"])
        return await operation(backend)

    try:
        envelope = asyncio.run(runner())
    except BackendError as e:
        get_logger("cli").debug(f"Operation rejected: {e}")
        _echo_envelope(e.envelope, err=True)
        ctx.exit(1)
    _echo_envelope(envelope)


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--backend", default=None, help="localStorage or sessionStorage")
@click.option("--data-dir", default=None, help="Data directory")
@click.option("--env-file", default=None, help="Read settings from this .env file")
@click.version_option(version="0.1.0")
@click.pass_context
def cli(ctx, debug, backend, data_dir, env_file):
    """Key-value record store over localStorage/sessionStorage namespaces"""
    level = logging.DEBUG if debug else logging.WARNING
    setup_logging(level=level, force=True)

    try:
        config = load_config(env_file)
        selector = BackendSelector.from_config(config)
        if backend is not None:
            selector.select_backend(backend)
    except ConfigurationError as e:
        raise click.BadParameter(str(e), param_hint="--backend") from e

    directory = Path(data_dir).expanduser() if data_dir else config.data_dir
    host = HostEnvironment.create(directory, db_name=config.db_name, quota=config.quota_bytes)
    ctx.call_on_close(host.close)

    ctx.ensure_object(dict)
    ctx.obj["selector"] = selector
    ctx.obj["host"] = host


@cli.command("create")
@click.argument("value")
@click.option("--key", default=None, help="Store under this key instead of the record's id")
@click.pass_context
def create(ctx, value, key):
    """Store a JSON record"""
    record = to_json(value)
    options = {"key": key} if key is not None else None
    _run(ctx, lambda backend: backend.create(record, options))


@cli.command("get")
@click.argument("key")
@click.pass_context
def get(ctx, key):
    """Show the record stored at KEY"""
    _run(ctx, lambda backend: backend.get(key))


@cli.command("list")
@click.pass_context
def list_records(ctx):
    """Show every record"""
    _run(ctx, lambda backend: backend.list())


@cli.command("update")
@click.argument("key")
@click.argument("value")
@click.pass_context
def update(ctx, key, value):
    """Replace the record at KEY with a JSON object"""
    record = to_json(value)
    _run(ctx, lambda backend: backend.update(key, record))


@cli.command("rm")
@click.argument("key")
@click.pass_context
def remove(ctx, key):
    """Remove the record at KEY"""
    _run(ctx, lambda backend: backend.remove(key))


@cli.command("clear")
@click.confirmation_option(prompt="Remove every record?")
@click.pass_context
def clear(ctx):
    """Remove every record"""
    _run(ctx, lambda backend: backend.remove_all())


if __name__ == "__main__":
    cli()
