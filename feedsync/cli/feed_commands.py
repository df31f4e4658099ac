"""
CLI commands for running and inspecting supplier feeds
"""

import asyncio
from typing import Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

from feedsync.core.database import db_manager, init_db
from feedsync.core.exceptions import ConfigurationError, NotFoundError, WriteError
from feedsync.core.logging import setup_logging
from feedsync.models.feed import FeedMode, SupplierFeed
from feedsync.repositories import FeedRepository
from feedsync.schemas.feed import FeedRunSummary
from feedsync.services import FeedRunOrchestrator
from feedsync.services.profiles import get_profile

app = typer.Typer(help="Supplier feed ingestion")
console = Console()


async def _init_db():
    try:
        await init_db()
    finally:
        await db_manager.close()


async def _list_feeds():
    try:
        async with db_manager.session() as session:
            return await FeedRepository(session).get_multi(order_by="created_at")
    finally:
        await db_manager.close()


async def _add_feed(feed: SupplierFeed) -> UUID:
    try:
        async with db_manager.session() as session:
            session.add(feed)
            await session.commit()
            return feed.id
    finally:
        await db_manager.close()


async def _run_feeds(op: Optional[FeedMode], feed_id: Optional[UUID]) -> FeedRunSummary:
    try:
        async with db_manager.session() as session:
            return await FeedRunOrchestrator(session).run(op=op, feed_id=feed_id)
    finally:
        await db_manager.close()


@app.callback()
def main(log_level: str = typer.Option("INFO", help="Log level")):
    setup_logging(log_level)


@app.command("init-db")
def init_database():
    """Create catalog and feed tables"""
    asyncio.run(_init_db())
    console.print("[green]Tables created[/green]")


@app.command("list")
def list_feeds():
    """Show configured feeds and their last run"""
    feeds = asyncio.run(_list_feeds())

    table = Table(title="Supplier feeds")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Mode", style="yellow")
    table.add_column("Enabled")
    table.add_column("Last run")
    table.add_column("Last status")

    for feed in feeds:
        status = feed.last_status or ""
        style = "red" if status.startswith("error") else "green"
        table.add_row(
            str(feed.id),
            feed.name,
            feed.mode.value,
            "yes" if feed.enabled else "no",
            feed.last_run.isoformat(timespec="seconds") if feed.last_run else "-",
            f"[{style}]{status}[/{style}]" if status else "-",
        )

    console.print(table)


@app.command("add")
def add_feed(
    name: str = typer.Argument(..., help="Display name"),
    url: str = typer.Argument(..., help="Feed URL"),
    item_path: Optional[str] = typer.Option(None, help="Dotted path to the offer list (profile default when omitted)"),
    sku_path: Optional[str] = typer.Option(None),
    name_path: Optional[str] = typer.Option(None),
    description_path: Optional[str] = typer.Option(None),
    price_path: Optional[str] = typer.Option(None),
    stock_path: Optional[str] = typer.Option(None),
    photo_path: Optional[str] = typer.Option(None, help="Comma separated; {n} expands to numbered variants"),
    category_path: Optional[str] = typer.Option(None),
    category_list_path: Optional[str] = typer.Option(None),
    mode: FeedMode = typer.Option(FeedMode.STOCK_ONLY),
    profile: str = typer.Option("generic", help="Vendor profile: generic or yml"),
    disabled: bool = typer.Option(False, "--disabled", help="Register without enabling"),
):
    """Register a supplier feed"""
    try:
        vendor = get_profile(profile)
    except ConfigurationError as e:
        raise typer.BadParameter(str(e), param_hint="--profile")
    if not (item_path or vendor.item_path):
        raise typer.BadParameter("required for the generic profile", param_hint="--item-path")

    feed = SupplierFeed(
        name=name,
        url=url,
        item_path=item_path or vendor.item_path,
        sku_path=sku_path,
        name_path=name_path,
        description_path=description_path,
        price_path=price_path,
        stock_path=stock_path,
        photo_path=photo_path,
        category_path=category_path,
        category_list_path=category_list_path,
        mode=mode,
        vendor_profile=vendor.name,
        enabled=not disabled,
    )
    feed_id = asyncio.run(_add_feed(feed))
    console.print(f"Registered feed [cyan]{name}[/cyan] as [bold]{feed_id}[/bold]")


@app.command("run")
def run_feeds(
    op: Optional[FeedMode] = typer.Option(None, help="Mode for all enabled feeds"),
    feed_id: Optional[str] = typer.Option(None, help="Run only this feed, in its own mode"),
):
    """Run enabled feeds, or one feed"""
    if op and feed_id:
        console.print("[yellow]--op is ignored when --feed-id is given[/yellow]")
    try:
        target = UUID(feed_id) if feed_id else None
    except ValueError:
        raise typer.BadParameter(f"'{feed_id}' is not a feed id", param_hint="--feed-id")

    try:
        summary = asyncio.run(_run_feeds(op, target))
    except NotFoundError as e:
        console.print(f"[red]{e.detail}[/red]")
        raise typer.Exit(code=1)
    except WriteError as e:
        console.print(f"[red]Feed status not recorded: {e.message}[/red]")
        raise typer.Exit(code=1)

    table = Table(title="Feed run")
    table.add_column("Feed", style="dim")
    table.add_column("Mode", style="yellow")
    table.add_column("Seen", justify="right")
    table.add_column("Created", justify="right")
    table.add_column("Updated", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Status")

    for result in summary.results:
        status = result.status_line()
        table.add_row(
            str(result.feed_id),
            result.mode.value,
            str(result.seen),
            str(result.created),
            str(result.updated),
            str(result.skipped),
            f"[green]{status}[/green]" if result.ok else f"[red]{status}[/red]",
        )

    console.print(table)
    console.print(f"Total written: [bold]{summary.updated}[/bold]")
    if summary.failed:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
