"""Run the API server."""

from typing import Optional

import click
import uvicorn

from timebill.cli.error_handlers import ErrorHandler
from timebill.cli.utils.formatters import format_info
from timebill.config import get_config
from timebill.config.logging_config import LoggingConfig, configure_logging


@click.command(name="serve")
@click.option("--host", default=None, help="Bind address (default: HOST setting)")
@click.option("--port", type=int, default=None, help="Port (default: PORT setting)")
@click.option("--reload", is_flag=True, help="Restart on code changes (development)")
@click.pass_context
def serve(ctx: click.Context, host: Optional[str], port: Optional[int], reload: bool):
    """Serve the REST API with uvicorn."""
    with ErrorHandler(ctx.obj["debug"]):
        config = get_config()
        host = host or config.host
        port = port or config.port
        configure_logging(
            LoggingConfig.from_env(default_level="DEBUG" if ctx.obj["debug"] else config.log_level)
        )

        click.echo(format_info(f"Serving Timebill API on http://{host}:{port}/api"))
        uvicorn.run(
            "timebill.api.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=reload,
            log_config=None,
        )
