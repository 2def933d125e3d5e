"""Main CLI entry point for Instasight."""

import logging
from typing import Optional

import typer
from rich.console import Console

from instasight import __version__
from instasight.cli.report import report_app
from instasight.config import get_settings

app = typer.Typer(
    name="instasight",
    help="Instasight - Instagram insights and publishing over the Facebook Graph API",
    no_args_is_help=True,
)

console = Console()

# Register sub-commands
app.add_typer(report_app, name="report", help="Print account reports in the terminal")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (defaults to HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port (defaults to PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the web server."""
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not settings.is_facebook_configured:
        console.print("[yellow][!][/yellow] Facebook app credentials not set (login disabled)")
    if not settings.is_openai_configured:
        console.print("[yellow][!][/yellow] OpenAI API key not set (AI analysis disabled)")

    uvicorn.run(
        "instasight.web.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def version():
    """Show the Instasight version."""
    console.print(f"Instasight v{__version__}")


@app.command()
def status():
    """Show the configuration status."""
    settings = get_settings()

    console.print("[bold blue]Instasight Status[/bold blue]\n")
    console.print("[bold]Configuration:[/bold]")
    console.print(f"  Facebook app: {'[green][+][/green]' if settings.is_facebook_configured else '[red][x][/red]'}")
    console.print(f"  OpenAI API: {'[green][+][/green]' if settings.is_openai_configured else '[red][x][/red]'}")
    console.print(f"  Graph API version: {settings.graph_api_version}")
    console.print(f"  OpenAI model: {settings.openai_model}")
    console.print(f"  Environment: {settings.environment}")
    if settings.facebook_redirect_uri:
        console.print(f"  Redirect URI: {settings.facebook_redirect_uri}")


if __name__ == "__main__":
    app()
