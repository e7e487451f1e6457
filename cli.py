"""
Deck Search - Command Line Interface
Fuzzy and AI search over presentation decks from the terminal.
"""
import asyncio
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from decksearch.config import settings
from decksearch.data_models import SearchHit
from decksearch.errors import ConfigurationError, DeckLoadError, UpstreamError
from decksearch.formatting import summarize_text
from decksearch.retrieval import FilterSelection
from decksearch.services import SearchService

cli = typer.Typer(help="Deck Search CLI")
console = Console()


def load_service() -> SearchService:
    """Creates the search service and loads every deck, exiting on failure."""
    service = SearchService(config=settings)
    try:
        asyncio.run(service.refresh())
    except (ConfigurationError, DeckLoadError) as e:
        console.print(f"[red]Failed to load slide decks: {e}[/red]")
        raise typer.Exit(code=1)
    return service


def show_hits(hits: List[SearchHit], title: str) -> None:
    if not hits:
        console.print("[yellow]No slides found.[/yellow]")
        return

    table = Table(title=title)
    table.add_column("#", style="dim")
    table.add_column("Deck", style="cyan")
    table.add_column("Slide", justify="right")
    table.add_column("Category", style="magenta")
    table.add_column("Match", justify="right", style="yellow")
    table.add_column("Summary")

    for rank, hit in enumerate(hits, 1):
        slide = hit.slide
        relevance = f"{hit.relevance:.0f}%" if hit.relevance is not None else "-"
        table.add_row(
            str(rank),
            slide.deck_display_name[:40],
            str(slide.slide_number),
            slide.category,
            relevance,
            summarize_text(slide.text, 120) or "",
        )

    console.print(table)


@cli.command()
def search(
    query: str = typer.Argument("", help="Free-text query; empty lists the first slides"),
    deck: str = typer.Option("All", "--deck"),
    category: str = typer.Option("All", "--category"),
    service_name: str = typer.Option("All", "--service"),
    office: str = typer.Option("All", "--office"),
    client: str = typer.Option("All", "--client"),
    business_type: str = typer.Option("All", "--business-type"),
    industry: str = typer.Option("All", "--industry"),
):
    """Fuzzy search slides, narrowed by filters."""
    service = load_service()
    filters = FilterSelection(
        deck=deck,
        category=category,
        service=service_name,
        office=office,
        client=client,
        business_type=business_type,
        industry=industry,
    )
    result = service.search(query, filters)
    show_hits(result.hits, f"Results for '{query}'" if query.strip() else "Slides")

    if result.suggestions:
        console.print(Panel("\n".join(result.suggestions), title="Suggestions", border_style="blue"))


@cli.command("ai-search")
def ai_search(query: str = typer.Argument(..., help="Natural-language question")):
    """Ask the AI assistant which slides are relevant."""
    if not query.strip():
        console.print("[red]AI query is required.[/red]")
        raise typer.Exit(code=2)

    service = load_service()
    console.print("[dim]Asking the AI assistant...[/dim]\n")
    try:
        result = asyncio.run(service.ai_search(query))
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)
    except UpstreamError as e:
        console.print(f"[red]Failed to get a response from the AI assistant: {e}[/red]")
        raise typer.Exit(code=1)

    show_hits([SearchHit(slide=s) for s in result.slides], f"AI results for '{query}'")
    dropped = len(result.references) - len(result.slides)
    if dropped:
        console.print(f"[dim]{dropped} referenced slides were not found locally[/dim]")


@cli.command()
def facets(
    search_text: Optional[str] = typer.Option(None, "--filter", help="Only show values containing this text"),
):
    """Show filter values and slide counts."""
    from decksearch.retrieval import narrow_options

    service = load_service()
    for dimension, values in service.facets().items():
        counts = dict(values)
        table = Table(title=dimension)
        table.add_column("Value", style="cyan")
        table.add_column("Slides", justify="right")
        for value in narrow_options([v for v, _ in values], search_text or ""):
            table.add_row(value, str(counts[value]))
        console.print(table)


@cli.command()
def status():
    """Show configuration and source file checks."""
    table = Table(title="Deck Search Status")
    table.add_column("Check", style="cyan")
    table.add_column("Value")
    table.add_column("State", style="green")

    manifest = settings.manifest_path
    index = settings.data_dir / settings.index_file
    table.add_row("Decks directory", str(settings.data_dir), "OK" if settings.data_dir.is_dir() else "MISSING")
    table.add_row("Manifest", manifest.name, "OK" if manifest.is_file() else "MISSING")
    table.add_row("Case study index", index.name, "OK" if index.is_file() else "NOT USED")
    table.add_row("Gemini API key", "GEMINI_API_KEY", "SET" if settings.gemini_api_key else "NOT SET")
    table.add_row("Gemini model", settings.gemini_model, "")
    console.print(table)


@cli.command()
def serve(
    host: str = typer.Option(settings.api_host, "--host", "-h"),
    port: int = typer.Option(settings.api_port, "--port", "-p")
):
    """Start the FastAPI server."""
    import uvicorn
    console.print(f"[cyan]Server at http://{host}:{port} | Docs at /docs[/cyan]")
    uvicorn.run("decksearch.api.app:app", host=host, port=port)


if __name__ == "__main__":
    cli()
