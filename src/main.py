"""CLI entry point for the Lead Enrichment service."""

import asyncio
import json

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from config.settings import settings
from src.models.lead import BatchOutcome, EnrichmentOptions, ModelRef
from src.pipeline.orchestrator import EnrichmentOrchestrator
from src.utils.logger import setup_logging

console = Console()


def _model_ref(value: str | None) -> ModelRef | None:
    """Parse ``provider/model`` into a ModelRef."""
    if not value:
        return None
    provider, sep, name = value.partition("/")
    if not sep or not provider or not name:
        raise click.BadParameter(f"expected PROVIDER/MODEL, got {value!r}")
    return ModelRef(provider=provider, name=name)


@click.group()
@click.version_option(version="0.1.0", prog_name="Lead Enrichment")
def cli():
    """Lead Enrichment.

    Derive a company from each email, research it through the chat backend,
    score it against the 90-point rubric and extract CRM fields.
    """
    pass


@cli.command()
@click.argument("emails", nargs=-1, required=True)
@click.option("--chat-model", default=None, help="Chat model as PROVIDER/MODEL (default: auto-detect)")
@click.option(
    "--embedding-model", default=None, help="Embedding model as PROVIDER/MODEL (default: auto-detect)"
)
@click.option(
    "--focus-mode",
    default=None,
    help=f"Backend focus mode (default: {settings.default_focus_mode})",
)
@click.option(
    "--optimization-mode",
    default=None,
    help=f"Backend optimization mode (default: {settings.default_optimization_mode})",
)
@click.option("--system-instructions", default=None, help="Extra instructions for the chat backend")
@click.option("--json", "as_json", is_flag=True, help="Print the raw batch outcome as JSON")
def enrich(
    emails: tuple[str, ...],
    chat_model: str | None,
    embedding_model: str | None,
    focus_mode: str | None,
    optimization_mode: str | None,
    system_instructions: str | None,
    as_json: bool,
):
    """Enrich one or more EMAILS.

    Example:
        lead-enrich enrich jane@acme.io
        lead-enrich enrich jane@acme.io bob@globex.com --json
    """
    setup_logging()

    options = EnrichmentOptions(
        chat_model_provider=_model_ref(chat_model),
        embedding_model_provider=_model_ref(embedding_model),
        focus_mode=focus_mode,
        optimization_mode=optimization_mode,
        system_instructions=system_instructions,
    )

    if not as_json:
        console.print(Panel.fit(
            f"[bold blue]Lead Enrichment[/bold blue]\n\n"
            f"Emails: [green]{len(emails)}[/green]\n"
            f"Chat backend: {settings.chat_backend_url}\n"
            f"Focus mode: {focus_mode or settings.default_focus_mode}\n"
            f"Scoring model: {settings.llm_provider}",
            title="Configuration",
        ))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
        disable=as_json,
    ) as progress:
        task = progress.add_task("[cyan]Enriching leads...", total=len(emails))

        def progress_callback(email: str, current: int, total: int):
            progress.update(
                task,
                description=f"[cyan]Enriching {email}",
                completed=current - 1,
                total=total,
            )

        async def run() -> BatchOutcome:
            orchestrator = EnrichmentOrchestrator(progress_callback=progress_callback)
            try:
                return await orchestrator.enrich_batch(list(emails), options)
            finally:
                await orchestrator.close()

        outcome = asyncio.run(run())
        progress.update(task, completed=progress.tasks[0].total)

    if as_json:
        click.echo(json.dumps(outcome.model_dump(mode="json", by_alias=True), indent=2))
    else:
        _display_results(outcome)

    if not outcome.success:
        raise SystemExit(1)


def _display_results(outcome: BatchOutcome):
    """Display batch results in a nice format."""
    console.print()

    table = Table(title="Enrichment Results", show_header=True, header_style="bold magenta")
    table.add_column("Email", style="cyan")
    table.add_column("Company")
    table.add_column("Score", justify="right")
    table.add_column("City")
    table.add_column("Status")

    for result in outcome.results:
        fields = result.structured_fields or {}
        score = f"{result.score:.0f}/90" if result.score is not None else "-"
        status = "[green]ok[/green]" if result.succeeded else f"[red]{result.error}[/red]"
        table.add_row(result.email, result.company, score, fields.get("City") or "-", status)

    console.print(table)

    for error in outcome.errors:
        console.print(f"[red]Error:[/red] {error}")

    if outcome.success:
        console.print("\n[bold green]Done![/bold green]")


@cli.command()
def config():
    """Show current configuration."""
    table = Table(title="Current Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    for key, value in settings.model_dump().items():
        if "key" in key.lower() or "secret" in key.lower():
            value = "***" if value else "Not set"
        table.add_row(key, str(value))

    console.print(table)


@cli.command()
@click.option("--host", "-h", default=None, help="Host to bind to (default: 0.0.0.0)")
@click.option("--port", "-p", default=None, type=int, help="Port to bind to (default: 8000)")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development")
def serve(host: str | None, port: int | None, reload: bool):
    """Start the API server.

    Example:
        lead-enrich serve
        lead-enrich serve --host 0.0.0.0 --port 8080 --reload
    """
    import uvicorn

    api_host = host or settings.api_host
    api_port = port or settings.api_port

    console.print(Panel.fit(
        f"[bold blue]Lead Enrichment API Server[/bold blue]\n\n"
        f"Host: [green]{api_host}[/green]\n"
        f"Port: [green]{api_port}[/green]\n"
        f"Reload: {'Enabled' if reload else 'Disabled'}\n"
        f"Docs: [cyan]http://{api_host}:{api_port}/docs[/cyan]",
        title="Starting API Server",
    ))

    uvicorn.run(
        "src.api.app:app",
        host=api_host,
        port=api_port,
        reload=reload,
    )


if __name__ == "__main__":
    cli()
