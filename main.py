#!/usr/bin/env python3
"""
StoryCurator - Content Aggregation & Curation Pipeline
======================================================

Command line entry point for running and inspecting the pipeline.

Usage:
    python main.py --help                          # Show all commands
    python main.py check-config                    # Validate configuration
    python main.py aggregate tech_news --limit 10  # Fetch raw items
    python main.py curate learning_resources       # Fetch and curate
    python main.py share tech_news C0123456789     # Post a daily curation
    python main.py jobs "python remote"            # Curated job listings
    python main.py learn javascript                # Curated learning resources
    python main.py history C0123456789             # Recently shared items
"""

import sys
import asyncio
import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent))

from storycurator.config.settings import GatewayKind, load_settings
from storycurator.delivery.block_formatter import blocks_to_text
from storycurator.models.content import ContentCategory
from storycurator.pipeline import open_pipeline
from storycurator.storage.posting_ledger import SQLitePostingLedger
from storycurator.utils.logging import configure_application_logging
from storycurator.utils.exceptions import StoryCuratorError, get_user_friendly_message

console = Console()

CATEGORY_CHOICE = click.Choice([c.value for c in ContentCategory], case_sensitive=False)


def _load(ctx):
    """Load settings and configure logging once per command."""
    settings = load_settings(validate=False)
    configure_application_logging(
        log_level="DEBUG" if ctx.obj.get('debug') else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging
    )
    return settings


def _print_blocks(blocks):
    console.print(blocks_to_text(blocks), markup=False, highlight=False)


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, debug):
    """StoryCurator - AI-curated content for learner communities."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
def check_config():
    """Validate configuration and environment variables."""
    console.print("[bold blue]🔧 Checking StoryCurator Configuration[/bold blue]")

    try:
        settings = load_settings(validate=False)
    except StoryCuratorError as e:
        console.print(f"[bold red]❌ Configuration error: {e}[/bold red]")
        sys.exit(1)

    table = Table(title="Configuration Status")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Details")

    checks = [
        ("Sources", _check_sources_config),
        ("AI Provider", _check_ai_config),
        ("Gateway", _check_gateway_config),
        ("Ledger", _check_ledger_config),
        ("Logging", _check_logging_config),
    ]

    all_passed = True
    for name, check_func in checks:
        status, details = check_func(settings)
        table.add_row(name, "✅ Valid" if status else "❌ Invalid", details)
        if not status:
            all_passed = False

    console.print(table)

    if all_passed:
        console.print("[bold green]✅ All configuration checks passed![/bold green]")
    else:
        console.print("[bold red]❌ Configuration validation failed[/bold red]")
        sys.exit(1)


@cli.command()
@click.argument('category', type=CATEGORY_CHOICE)
@click.option('--limit', default=10, show_default=True, help='Maximum number of items')
@click.pass_context
def aggregate(ctx, category, limit):
    """Fetch raw items for a category from all of its sources."""
    settings = _load(ctx)

    async def run():
        async with open_pipeline(settings, with_gateway=False) as pipeline:
            return await pipeline.aggregator.aggregate_content(category, limit)

    items = asyncio.run(run())
    if not items:
        console.print(f"[yellow]⚠️ No items found for {category}[/yellow]")
        return

    table = Table(title=f"{category} ({len(items)} items)")
    table.add_column("#", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Source", style="green")
    table.add_column("URL", style="blue")

    for index, item in enumerate(items, 1):
        title = item.title[:60] + "..." if len(item.title) > 60 else item.title
        table.add_row(str(index), title, item.source, item.url)

    console.print(table)


@cli.command()
@click.argument('category', type=CATEGORY_CHOICE)
@click.option('--limit', default=10, show_default=True, help='Items to aggregate before curating')
@click.option('--as-json', is_flag=True, help='Print the curation result as JSON')
@click.pass_context
def curate(ctx, category, limit, as_json):
    """Fetch and curate items for a category without posting."""
    settings = _load(ctx)

    async def run():
        async with open_pipeline(settings, with_gateway=False) as pipeline:
            items = await pipeline.aggregator.aggregate_content(category, limit)
            return await pipeline.curator.curate_content(items, category)

    result = asyncio.run(run())

    if as_json:
        click.echo(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))
        return

    console.print(f"[bold]{result.summary}[/bold]")
    if result.recommended_for:
        console.print(f"[italic]Recommended for: {', '.join(result.recommended_for)}[/italic]")

    for index, item in enumerate(result.items, 1):
        console.print(f"\n[cyan]{index}. {item.title}[/cyan] [dim]({item.difficulty.value})[/dim]")
        console.print(f"   {item.url}", highlight=False)
        console.print(f"   {item.why_valuable}")


@cli.command()
@click.argument('category', type=CATEGORY_CHOICE)
@click.argument('channel_id')
@click.option('--gateway', type=click.Choice([g.value for g in GatewayKind]),
              help='Override the configured messaging gateway')
@click.option('--dry-run', is_flag=True, help='Render the message without posting')
@click.pass_context
def share(ctx, category, channel_id, gateway, dry_run):
    """Curate a category and post it to a channel."""
    settings = _load(ctx)
    gateway_kind = GatewayKind(gateway) if gateway else None

    async def run_dry():
        async with open_pipeline(settings, with_gateway=False) as pipeline:
            publisher = pipeline.publisher
            items = await pipeline.aggregator.aggregate_content(category, publisher.share_limit)
            result = await pipeline.curator.curate_content(items, category)
            if not result.items:
                return None
            return publisher.formatter.create_blocks(result, category)

    async def run_share():
        async with open_pipeline(settings, gateway_kind=gateway_kind) as pipeline:
            return await pipeline.publisher.share_content(category, channel_id)

    if dry_run:
        blocks = asyncio.run(run_dry())
        if blocks is None:
            console.print(f"[yellow]⚠️ Nothing to share for {category}[/yellow]")
        else:
            _print_blocks(blocks)
        return

    result = asyncio.run(run_share())
    if result.success and result.items_shared:
        console.print(f"[bold green]✅ Shared {result.items_shared} {category} items to {channel_id}[/bold green]")
    elif result.success:
        console.print(f"[yellow]⚠️ Nothing shared: {result.reason}[/yellow]")
    else:
        console.print(f"[bold red]❌ Share failed: {result.error}[/bold red]")
        sys.exit(1)


@cli.command()
@click.argument('keywords', required=False)
@click.pass_context
def jobs(ctx, keywords):
    """Show curated job listings, optionally filtered by KEYWORDS."""
    settings = _load(ctx)

    async def run():
        async with open_pipeline(settings, with_gateway=False) as pipeline:
            return await pipeline.publisher.get_curated_jobs(keywords)

    _print_blocks(asyncio.run(run()))


@cli.command()
@click.argument('topic', required=False)
@click.pass_context
def learn(ctx, topic):
    """Show curated learning resources, optionally about TOPIC."""
    settings = _load(ctx)

    async def run():
        async with open_pipeline(settings, with_gateway=False) as pipeline:
            return await pipeline.publisher.get_curated_learning_resources(topic)

    _print_blocks(asyncio.run(run()))


@cli.command()
@click.argument('channel_id')
@click.option('--limit', default=20, show_default=True, help='Number of records to show')
@click.pass_context
def history(ctx, channel_id, limit):
    """Show items recently shared to a channel."""
    settings = _load(ctx)
    if not settings.ledger.enabled:
        console.print("[yellow]⚠️ Posting ledger is disabled[/yellow]")
        return

    try:
        records = SQLitePostingLedger(settings.ledger.path).history(channel_id, limit)
    except StoryCuratorError as e:
        console.print(f"[bold red]❌ Error reading ledger: {e}[/bold red]")
        sys.exit(1)

    if not records:
        console.print(f"[yellow]⚠️ Nothing shared to {channel_id} yet[/yellow]")
        return

    table = Table(title=f"Shared to {channel_id}")
    table.add_column("Shared At", style="green")
    table.add_column("Category", style="cyan")
    table.add_column("URL", style="blue")
    table.add_column("Message")

    for record in records:
        table.add_row(
            record.shared_at.strftime("%Y-%m-%d %H:%M"),
            record.category,
            record.url,
            record.message_ref or "-",
        )

    console.print(table)


# Helper functions for configuration checks
def _check_sources_config(settings) -> tuple[bool, str]:
    counts = {category.value: len(configs) for category, configs in settings.sources.categories.items()}
    if not any(counts.values()):
        return False, "No sources configured"
    return True, ", ".join(f"{name}: {count}" for name, count in counts.items())


def _check_ai_config(settings) -> tuple[bool, str]:
    provider = settings.ai.provider.value
    if not settings.ai.get_api_key():
        return True, f"{provider}: no API key, fallback curation only"
    return True, f"{provider}: {settings.ai.get_model()}"


def _check_gateway_config(settings) -> tuple[bool, str]:
    gateway = settings.publishing.gateway
    if gateway == GatewayKind.TELEGRAM:
        token = settings.telegram.bot_token
        if not token:
            return False, "Telegram bot token not set"
        if len(token.split(':')) != 2:
            return False, "Invalid Telegram bot token format"
        return True, "Telegram bot token configured"

    if not settings.slack.bot_token:
        return False, "Slack bot token not set"
    return True, f"Slack via {settings.slack.api_base_url}"


def _check_ledger_config(settings) -> tuple[bool, str]:
    if not settings.ledger.enabled:
        return True, "Disabled"
    try:
        Path(settings.ledger.path).parent.mkdir(parents=True, exist_ok=True)
        return True, f"Path: {settings.ledger.path}"
    except OSError as e:
        return False, str(e)


def _check_logging_config(settings) -> tuple[bool, str]:
    try:
        if settings.logging.file_path:
            Path(settings.logging.file_path).parent.mkdir(parents=True, exist_ok=True)
        return True, f"Level: {settings.logging.level.value}, Console: {settings.logging.console_logging}"
    except OSError as e:
        return False, str(e)


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 StoryCurator interrupted by user[/yellow]")
        sys.exit(130)
    except StoryCuratorError as e:
        console.print(f"\n[bold red]❌ {get_user_friendly_message(e)}[/bold red]")
        sys.exit(1)
