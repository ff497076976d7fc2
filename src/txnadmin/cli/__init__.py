"""txnadmin CLI: typer application and shared helpers."""

from pathlib import Path
from typing import Any, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..client import AdminClient, HttpTransactionsClient
from ..commands import CommandDispatcher
from ..config import AdminSettings, load_settings
from ..exceptions import TxnAdminError, UnknownCommandError, ValidationError
from ..logging_config import setup_logging

# ── Shared state ────────────────────────────────────────────────────────────

app = typer.Typer(help="Admin tooling for the transaction coordination subsystem")
console = Console()
err_console = Console(stderr=True)

transactions_app = typer.Typer(no_args_is_help=True)
app.add_typer(transactions_app, name="transactions", help="Operations on transactions")

EXIT_REMOTE_FAILURE = 1
EXIT_VALIDATION_FAILURE = 2


@app.callback()
def main(
    ctx: typer.Context,
    admin_url: Optional[str] = typer.Option(None, "--admin-url", help="Broker web service URL"),
    auth_token: Optional[str] = typer.Option(None, "--auth-token", help="Bearer token for the admin API"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to a YAML client config"),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds"),
):
    """Admin tooling for the transaction coordination subsystem."""
    load_dotenv()
    try:
        settings = load_settings(
            config,
            web_service_url=admin_url,
            auth_token=auth_token,
            timeout_seconds=timeout,
        )
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(EXIT_VALIDATION_FAILURE)

    setup_logging(settings.log_level)
    ctx.obj = settings


# ── Shared helpers ──────────────────────────────────────────────────────────

def build_client(settings: AdminSettings) -> AdminClient:
    return HttpTransactionsClient(
        settings.web_service_url,
        auth_token=settings.auth_token,
        timeout_seconds=settings.timeout_seconds,
    )


def run_command(ctx: typer.Context, name: str, **flags: Any) -> Any:
    """Dispatch one admin command, print its result, and map errors to exit codes."""
    settings = ctx.obj if isinstance(ctx.obj, AdminSettings) else load_settings()
    try:
        with build_client(settings) as client:
            dispatcher = CommandDispatcher(client)
            command = dispatcher.get(name)
            result = dispatcher.dispatch(name, flags)
    except (ValidationError, UnknownCommandError) as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(EXIT_VALIDATION_FAILURE)
    except TxnAdminError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(EXIT_REMOTE_FAILURE)

    if command.prints_result:
        console.print_json(data=result)
    return result


@app.command("version")
def show_version():
    """Show the txnadmin version."""
    console.print(f"txnadmin {__version__}")


# ── Register submodule commands (import triggers decorator registration) ────

from . import transactions_cmds  # noqa: E402, F401
