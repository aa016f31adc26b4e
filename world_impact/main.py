# world_impact/main.py

"""
Command-line interface (CLI) entry point for the World Impact Analyzer.

Runs a single analysis from the terminal, serves the HTTP API and
initializes the database.
"""
import json
import sys
from typing import Optional
from uuid import uuid4

import click
import uvicorn
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

import config.settings as settings

from world_impact.db.connection import Database
from world_impact.graph.workflow import build_workflow
from world_impact.models.inputs import AnalysisRequest, format_validation_errors
from world_impact.models.outputs import AnalyzeResponse, HistoricalFigureAnalysis
from world_impact.observability.tracer import setup_tracing_environment
from world_impact.utils.logger import get_logger

# Initialize logger and console immediately
logger = get_logger("CLI")
console = Console()

# --- Helper Functions for Output Formatting ---


def print_score_table(result: HistoricalFigureAnalysis, status: str):
    """Prints the headline scores of an analysis."""
    console.rule(f"[bold]{result.name}[/bold] ({status})", style="bold magenta")

    table = Table(
        title="Impact Scores",
        show_header=True,
        header_style="bold blue",
        padding=(0, 1),
    )
    table.add_column("Metric", style="dim")
    table.add_column("Score", justify="right")

    table.add_row("Worldly Impact", f"[bold]{result.worldly_impact_score:.0f}[/]", end_section=True)
    table.add_row("Reach", f"{result.reach_score:.0f}")
    table.add_row("Influence", f"{result.influence_score:.0f}")
    table.add_row("Innovation", f"{result.innovation_score:.0f}")
    table.add_row("Longevity", f"{result.longevity_score:.0f}")
    table.add_row("Controversy", f"[yellow]{result.controversy_score:.0f}[/]")

    sentiment = result.sentiment_index
    table.add_row(
        "Sentiment",
        f"[green]+{sentiment.positive:.0f}[/] / {sentiment.mixed:.0f} / [red]-{sentiment.negative:.0f}[/]",
    )

    console.print(table)


def print_summary(result: HistoricalFigureAnalysis):
    """Prints the narrative summary and major contributions."""
    console.rule("[bold]Summary[/bold]", style="bold cyan")
    console.print(result.summary)

    if result.major_contributions:
        console.print("\n[bold]Major Contributions:[/bold]")
        for contribution in result.major_contributions:
            date = f" ({contribution.date})" if contribution.date else ""
            console.print(f"  [cyan]- {contribution.title}{date}[/cyan]: {contribution.summary}")


# --- CLI Command Group ---


@click.group()
def cli():
    """World Impact Analyzer CLI."""
    # Settings are loaded here once for configuration
    settings.get_settings()


@cli.command()
@click.option("--name", required=True, type=str, help="Name of the historical figure.")
@click.option("--chat-id", type=str, default=None, help="Chat UUID to link the analysis to (generated if omitted).")
@click.option("--user", "user_id", type=str, default="cli", show_default=True, help="User id recorded on the chat.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the raw JSON response.")
def analyze(name: str, chat_id: Optional[str], user_id: str, as_json: bool):
    """
    Analyzes one historical figure, printing progress as each stage starts.
    """
    settings_instance = settings.get_settings()

    # 1. Prepare the input request model
    try:
        request = AnalysisRequest(person_name=name, chat_id=chat_id or str(uuid4()))
    except ValidationError as e:
        console.print(f"[bold red]Input Error:[/bold red] {format_validation_errors(e)}")
        sys.exit(2)

    # 2. Initialize Core Components
    setup_tracing_environment(settings_instance)
    database = Database(settings_instance.database_url, echo=settings_instance.database_echo)
    database.create_all()
    try:
        workflow = build_workflow(settings_instance, database)
    except ValueError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {e}")
        sys.exit(1)

    # 3. Cache fast path, otherwise stream the pipeline
    response: Optional[AnalyzeResponse] = workflow.check_cache(request.person_name)
    if response is None:
        with console.status("Starting analysis...") as status:
            for event in workflow.stream(request, user_id):
                if event.type == "status":
                    status.update(f"[{event.progress:>3}%] {event.content.message}")
                elif event.type == "error":
                    console.print(f"[bold red]Analysis Failed:[/bold red] {event.content}")
                    sys.exit(1)
                else:
                    response = event.content

    # 4. Final Output Processing
    if as_json:
        click.echo(json.dumps(response.model_dump(mode="json"), indent=2))
        return

    print_score_table(response.result, response.status)
    print_summary(response.result)


@cli.command()
@click.option("--host", type=str, default=None, help="Bind address (defaults to API_HOST).")
@click.option("--port", type=int, default=None, help="Port (defaults to API_PORT).")
@click.option("--reload", is_flag=True, default=False, help="Reload on code changes.")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """
    Serves the HTTP API with uvicorn.
    """
    settings_instance = settings.get_settings()
    uvicorn.run(
        "world_impact.api.app:create_app",
        factory=True,
        host=host or settings_instance.api_host,
        port=port or settings_instance.api_port,
        reload=reload,
    )


@cli.command("init-db")
def init_db():
    """
    Creates the database tables that do not exist yet.
    """
    settings_instance = settings.get_settings()
    database = Database(settings_instance.database_url, echo=settings_instance.database_echo)
    database.create_all()
    console.print(f"[green]Database ready:[/green] {settings_instance.database_url}")


# --- Main Execution ---

if __name__ == "__main__":
    cli()
