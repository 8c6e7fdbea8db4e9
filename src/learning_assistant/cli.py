import asyncio
import logging

import httpx
import typer  # type: ignore
from rich.console import Console  # type: ignore
from rich.table import Table  # type: ignore

from learning_assistant.config import Settings
from learning_assistant.enhanced_search import EnhancedSearch
from learning_assistant.news_service import NewsError, NewsService
from learning_assistant.ranking import calculate_quality_score
from learning_assistant.search_client import build_search_provider
from learning_assistant.types import NewsArticle, SearchResult

app = typer.Typer(help="learning-assistant search CLI")
console = Console()

logging.basicConfig(level=logging.WARNING)


def _load_settings() -> Settings:
    try:
        return Settings.from_env()
    except RuntimeError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise typer.Exit(code=1) from e


@app.command("search")
def search(
    query: str = typer.Argument(..., help="Topic to learn about"),
    debug: bool = typer.Option(False, "--debug", help="Log pipeline stages"),
) -> None:
    """Run the ranking pipeline and show the ranked learning resources."""
    settings = _load_settings()

    async def _run() -> list[SearchResult]:
        async with httpx.AsyncClient() as client:
            pipeline = EnhancedSearch(
                provider=build_search_provider(settings, client),
                max_results=settings.search_max_results,
                debug_logging=debug or settings.search_debug_logging,
            )
            return await pipeline.search(query)

    if debug:
        logging.getLogger("learning_assistant").setLevel(logging.INFO)

    with console.status(f"Searching for '{query}'..."):
        results = asyncio.run(_run())

    if not results:
        console.print("[yellow]No results found.[/yellow]")
        return

    table = Table(title=f"Results for '{query}' ({len(results)})")
    table.add_column("Score", justify="right", style="magenta")
    table.add_column("Title", style="bold cyan")
    table.add_column("Type", style="green")
    table.add_column("Difficulty", style="yellow")
    table.add_column("Lang")
    table.add_column("URL", style="blue underline")

    for res in results:
        table.add_row(
            f"{calculate_quality_score(res):.2f}",
            res.title,
            res.type,
            res.difficulty,
            res.metadata.language,
            res.url,
        )

    console.print(table)


@app.command("news")
def news(topic: str = typer.Argument(..., help="News topic")) -> None:
    """Fetch recent news articles for a topic."""
    settings = _load_settings()

    async def _run() -> list[NewsArticle]:
        async with httpx.AsyncClient() as client:
            service = NewsService(
                provider=build_search_provider(settings, client),
                max_results=settings.news_max_results,
            )
            return await service.fetch_news_for_topic(topic)

    with console.status(f"Fetching news for '{topic}'..."):
        try:
            articles = asyncio.run(_run())
        except NewsError as e:
            console.print(f"[red]News lookup failed:[/red] {e.user_message}")
            raise typer.Exit(code=1) from e

    if not articles:
        console.print("[yellow]No articles found.[/yellow]")
        return

    table = Table(title=f"News for '{topic}' ({len(articles)})")
    table.add_column("Title", style="bold cyan")
    table.add_column("Source", style="green")
    table.add_column("Published", style="white")
    table.add_column("URL", style="blue underline")

    for article in articles:
        table.add_row(article.title, article.source, article.published_at, article.url)

    console.print(table)


if __name__ == "__main__":
    app()
