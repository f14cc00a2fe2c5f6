"""Command-line interface for Anacan.

This module provides the commands that provision the remote schema, seed
demo content, maintain menus and the offline cache, and run the dev server.
"""

import asyncio
from typing import Any, Coroutine, NoReturn, TypeVar

import click

from anacan.core.config import MissingApiKeyError, Settings, get_settings
from anacan.core.logging import configure_logging, get_logger
from anacan.domain.catalog import (
    SEED_SETS,
    get_collection,
    select_collections,
    select_seed_records,
)
from anacan.domain.entities.provisioning import ProvisioningReport
from anacan.domain.services import (
    AttributeResizer,
    ContentService,
    MenuSynchronizer,
    OfflineSync,
    ProvisioningAbortedError,
    ResourceOperationRunner,
    RetryPolicy,
    SchemaProvisioner,
    SeedLoader,
    SettlePolicy,
)
from anacan.infrastructure.appwrite import AppwriteClient, AppwriteError
from anacan.infrastructure.persistence import OfflineCache, get_db_manager

T = TypeVar("T")

# Attributes rebuilt by fix-post-content
POST_CONTENT_ATTRIBUTES = ["content_az", "content_ru"]


def fail(message: str) -> NoReturn:
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


def admin_client(settings: Settings) -> AppwriteClient:
    """Client authenticated with the admin key; exits 1 if the key is missing."""
    try:
        return AppwriteClient.from_settings(settings, admin=True)
    except MissingApiKeyError as e:
        fail(str(e))


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine, turning remote failures into exit code 1."""
    try:
        return asyncio.run(coro)
    except ProvisioningAbortedError as e:
        echo_report(e.report)
        fail(e.message)
    except AppwriteError as e:
        fail(e.message)


def echo_report(report: ProvisioningReport) -> None:
    for outcome in report.failures:
        click.echo(
            f"  FAILED {outcome.resource_type} {outcome.resource_id} "
            f"({outcome.reason.value if outcome.reason else 'unknown'}): {outcome.error}"
        )
    click.echo(report.summary())


def runner_for(settings: Settings) -> ResourceOperationRunner:
    return ResourceOperationRunner(RetryPolicy.from_settings(settings))


@click.group()
@click.version_option(version="0.1.0", prog_name="Anacan")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides ANACAN_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Anacan.az - schema provisioning, seeding and dev server."""
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)
    ctx.obj = settings


@cli.command()
@click.option(
    "--collection",
    "collection_ids",
    multiple=True,
    help="Provision only this collection (repeatable)",
)
@click.pass_obj
def provision(settings: Settings, collection_ids: tuple[str, ...]) -> None:
    """Create the database, collections, attributes and indexes.

    Existing resources are skipped, so running this twice is harmless.
    """
    try:
        definitions = select_collections(collection_ids or None)
    except KeyError as e:
        fail(f"Unknown collection: {e.args[0]}")

    client = admin_client(settings)

    async def provision_all() -> ProvisioningReport:
        async with client:
            provisioner = SchemaProvisioner(
                client,
                settings.appwrite_database_id,
                runner=runner_for(settings),
                settle=SettlePolicy.from_settings(settings),
            )
            return await provisioner.provision(definitions)

    echo_report(run(provision_all()))


@cli.command()
@click.argument("seed_sets", nargs=-1)
@click.pass_obj
def seed(settings: Settings, seed_sets: tuple[str, ...]) -> None:
    """Create demo content (categories, forums, ad_spaces, stories, pages).

    With no arguments every seed set is loaded.
    """
    try:
        records = select_seed_records(seed_sets or None)
    except KeyError as e:
        fail(f"Unknown seed set: {e.args[0]} (available: {', '.join(SEED_SETS)})")

    client = admin_client(settings)

    async def seed_all() -> ProvisioningReport:
        async with client:
            loader = SeedLoader(client, settings.appwrite_database_id, runner=runner_for(settings))
            return await loader.load(records)

    echo_report(run(seed_all()))


@cli.command("sync-menus")
@click.pass_obj
def sync_menus(settings: Settings) -> None:
    """Add missing category and page entries to the header and footer menus."""
    client = admin_client(settings)

    async def sync_all():
        async with client:
            return await MenuSynchronizer(client, settings.appwrite_database_id).sync()

    for result in run(sync_all()):
        action = "created" if result.created else "updated"
        click.echo(
            f"{result.location}: {action}, {result.added} added, {result.total} total"
        )


@cli.command("fix-post-content")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_obj
def fix_post_content(settings: Settings, yes: bool) -> None:
    """Recreate posts.content_az and posts.content_ru at the maximum size.

    Deleting an attribute deletes its values in every post.
    """
    if not yes and not click.confirm(
        "This deletes posts.content_az and posts.content_ru with all their data. Continue?",
        default=False,
    ):
        click.echo("Cancelled.")
        return

    client = admin_client(settings)

    async def rebuild() -> ProvisioningReport:
        async with client:
            resizer = AttributeResizer(
                client,
                settings.appwrite_database_id,
                runner=runner_for(settings),
                delete_delay=settings.attribute_settle_delay,
                recreate_barrier_delay=settings.index_barrier_delay,
                create_delay=settings.attribute_settle_delay,
            )
            return await resizer.rebuild(get_collection("posts"), POST_CONTENT_ATTRIBUTES)

    echo_report(run(rebuild()))


@cli.command("cache-sync")
@click.option("--limit", type=int, default=500, show_default=True, help="Posts to cache")
@click.pass_obj
def cache_sync(settings: Settings, limit: int) -> None:
    """Write the newest published posts into the offline cache."""
    client = AppwriteClient.from_settings(settings, admin=False)

    async def sync():
        cache = OfflineCache(get_db_manager())
        try:
            async with client:
                content = ContentService(client, settings.appwrite_database_id)
                return await OfflineSync(content, cache).sync_posts(limit=limit)
        finally:
            await cache.close()

    result = run(sync())
    click.echo(f"Cached: {result.written}  Skipped: {result.skipped}")


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload")
@click.pass_obj
def serve(settings: Settings, host: str | None, port: int | None, reload: bool) -> None:
    """Start the dev server (sitemaps, RSS feed, robots.txt)."""
    import uvicorn

    bind_host = host or settings.host
    bind_port = port or settings.port

    get_logger(__name__).info(
        "Starting dev server",
        host=bind_host,
        port=bind_port,
        reload=reload,
        environment=settings.environment,
    )

    uvicorn.run(
        "anacan.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@cli.command()
@click.pass_obj
def info(settings: Settings) -> None:
    """Display Anacan configuration."""
    click.echo(f"""
Anacan v{settings.app_version}
{'=' * 40}

Remote Service:
  Endpoint:     {settings.appwrite_endpoint}
  Project:      {settings.appwrite_project_id}
  Database:     {settings.appwrite_database_id}
  API Key:      {'set' if settings.appwrite_api_key else 'missing'}

Retry Policy:
  Attempts:     {settings.retry_max_attempts}
  Base Delay:   {settings.retry_base_delay}s
  Max Delay:    {settings.retry_max_delay}s

Dev Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Site URL:     {settings.site_url}

Offline Cache:
  URL:          {settings.offline_cache_url}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `anacan` command is run
    or when using `python -m anacan`.
    """
    cli()


if __name__ == "__main__":
    main()
