"""CLI commands for terminal reports on a connected account."""

from typing import NoReturn, Optional

import httpx
import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from instasight.config import get_settings
from instasight.services.ai.analyzer import InsightsAnalyzer
from instasight.services.ai.openai_client import AnalysisError
from instasight.services.graph import metrics
from instasight.services.graph.client import FacebookGraphError, GraphClient

report_app = typer.Typer(help="Print account reports in the terminal")
console = Console()

TokenOption = typer.Option(
    ..., "--token", "-t", envvar="INSTAGRAM_PAGE_TOKEN", help="Page access token"
)
AccountOption = typer.Option(
    ..., "--account", "-a", envvar="INSTAGRAM_BUSINESS_ID", help="Instagram business account ID"
)


def get_client(token: str, account: str) -> GraphClient:
    """Create a Graph client for the given page token."""
    return GraphClient(access_token=token, instagram_business_id=account, settings=get_settings())


def _fail(e: Exception) -> NoReturn:
    if isinstance(e, FacebookGraphError) and e.is_invalid_token:
        console.print("[red]Error:[/red] Access token expired or revoked. Reconnect the page.")
    else:
        console.print(f"[red]Error:[/red] {e}")
    raise typer.Exit(1)


def _format_number(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, float) and not value.is_integer():
        return f"{value:,.2f}"
    return f"{int(value):,}"


@report_app.command("media")
def list_media(
    token: str = TokenOption,
    account: str = AccountOption,
    limit: int = typer.Option(12, "--limit", "-l", help="Number of posts"),
):
    """List recent posts."""
    try:
        with get_client(token, account) as client:
            media = client.fetch_media(limit=limit)
    except (FacebookGraphError, httpx.HTTPError) as e:
        _fail(e)

    if not media:
        console.print("[yellow]No posts found.[/yellow]")
        return

    table = Table(title="Recent Posts", show_header=True)
    table.add_column("Media ID", style="dim")
    table.add_column("Type")
    table.add_column("Posted")
    table.add_column("Likes", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("Caption")

    for item in media:
        caption = (item.caption or "").replace("\n", " ")
        table.add_row(
            item.id,
            item.media_type,
            (item.timestamp or "")[:10],
            str(item.like_count or 0),
            str(item.comments_count or 0),
            caption[:40] + ("..." if len(caption) > 40 else ""),
        )

    console.print(table)


@report_app.command("insights")
def account_insights(
    token: str = TokenOption,
    account: str = AccountOption,
    days: int = typer.Option(28, "--days", "-d", help="Insight period in days"),
):
    """Show account insights for the last 7 and 28 days."""
    try:
        with get_client(token, account) as client:
            insights = client.fetch_account_insights(period_days=days)
    except (FacebookGraphError, httpx.HTTPError) as e:
        _fail(e)

    console.print(Panel(
        f"Followers: {_format_number(insights.follower_count)}",
        title="[bold blue]Account Insights[/bold blue]",
    ))

    table = Table(show_header=True)
    table.add_column("Metric")
    table.add_column("Last 7 days", justify="right")
    table.add_column("Last 28 days", justify="right")

    for name in metrics.ACCOUNT_METRIC_ORDER:
        totals = insights.daily_totals.get(name)
        if totals is None:
            continue
        table.add_row(
            metrics.ACCOUNT_METRIC_LABELS.get(name, name),
            _format_number(totals.last_7_days),
            _format_number(totals.last_28_days),
        )

    console.print(table)


@report_app.command("post")
def post_insights(
    media_id: str = typer.Argument(..., help="Media ID"),
    media_type: Optional[str] = typer.Option(None, "--type", help="Media type, e.g. REELS"),
    token: str = TokenOption,
    account: str = AccountOption,
):
    """Show insights for a single post."""
    try:
        with get_client(token, account) as client:
            insights = client.fetch_media_insights(media_id, media_type)
    except (FacebookGraphError, httpx.HTTPError) as e:
        _fail(e)

    if not insights:
        console.print("[yellow]No insights available for this post.[/yellow]")
        return

    table = Table(title=f"Insights for {media_id}", show_header=True)
    table.add_column("Metric")
    table.add_column("Value", justify="right")

    for name in metrics.MEDIA_METRIC_ORDER:
        if name in insights:
            table.add_row(metrics.MEDIA_METRIC_LABELS[name], _format_number(insights[name]))

    console.print(table)


@report_app.command("leaderboard")
def leaderboard(
    token: str = TokenOption,
    account: str = AccountOption,
):
    """Rank recent posts by likes plus comments."""
    try:
        with get_client(token, account) as client:
            media = client.fetch_media(limit=25)
    except (FacebookGraphError, httpx.HTTPError) as e:
        _fail(e)

    if not media:
        console.print("[yellow]No posts found.[/yellow]")
        return

    rows = metrics.build_leaderboard(metrics.rank_media_by_engagement(media))

    table = Table(title=f"Top Posts (of {len(media)})", show_header=True)
    table.add_column("#", justify="right")
    table.add_column("Media ID", style="dim")
    table.add_column("Engagement", justify="right")
    table.add_column("Likes", justify="right")
    table.add_column("Comments", justify="right")
    table.add_column("Permalink")

    for row in rows:
        table.add_row(
            str(row.position),
            row.id,
            str(row.engagement),
            str(row.like_count),
            str(row.comments_count),
            row.permalink or "",
        )

    console.print(table)


@report_app.command("analyze")
def analyze(
    token: str = TokenOption,
    account: str = AccountOption,
):
    """Run the AI analysis of recent posts."""
    settings = get_settings()
    if not settings.is_openai_configured:
        console.print("[red]Error:[/red] OpenAI API key not configured.")
        console.print("Set OPENAI_API_KEY in your environment or .env file.")
        raise typer.Exit(1)

    console.print("[bold blue]Summarizing posts and generating recommendations...[/bold blue]")

    try:
        with get_client(token, account) as client:
            analyzer = InsightsAnalyzer(client)
            posts = analyzer.collect_post_summaries()
            if not posts:
                console.print("[yellow]No Instagram posts available yet.[/yellow]")
                return
            result = analyzer.analyze(posts)
    except (FacebookGraphError, AnalysisError, httpx.HTTPError) as e:
        _fail(e)

    console.print(f"Model: {result.model} - Reviewed posts: {result.analyzed_posts}\n")
    console.print(Markdown(result.summary))
