"""API server command."""

import click
import uvicorn

from famfin.api.app import create_application
from famfin.config import get_settings


@click.command("serve")
@click.option("--host", help="Interface to bind (default from FAMFIN_API_HOST)")
@click.option("--port", type=int, help="Port to listen on (default from FAMFIN_API_PORT)")
@click.pass_context
def serve(ctx, host: str | None, port: int | None):
    """Run the REST API over the configured storage."""
    settings = get_settings()
    app = create_application(storage=ctx.obj["db"], settings=settings)
    uvicorn.run(
        app,
        host=host or settings.api_host,
        port=port or settings.api_port,
        log_level=settings.log_level.lower(),
    )


def register_commands(cli):
    """Register serve command with main CLI."""
    cli.add_command(serve)
