"""Main CLI entry point for the AR demo companion."""

import logging
import sys

import click
import httpx
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ardemo import __version__
from ardemo.config import settings
from ardemo.container import AppContainer
from ardemo.deeplink import MugURLParameters, PanoramaURLParameters, SupportedDemo
from ardemo.exceptions import ARDemoError, CacheInitializationError
from ardemo.services.content import ContentClient
from ardemo.services.logger_service import cleanup_old_logs, log_performance, setup_logging
from ardemo.services.mug import MugModel
from ardemo.services.panorama import PanoramaModel

console = Console()
logger = logging.getLogger(__name__)


def get_container(ctx: click.Context) -> AppContainer:
    """Build the composition root once per invocation."""
    if "container" not in ctx.obj:
        try:
            ctx.obj["container"] = AppContainer(settings)
        except CacheInitializationError as e:
            console.print(f"[red]✗ {e}[/red]")
            sys.exit(1)
    return ctx.obj["container"]


def fail(message: str) -> None:
    console.print(f"[red]✗ {escape(message)}[/red]")
    sys.exit(1)


def print_parameters(parameters: MugURLParameters | PanoramaURLParameters) -> None:
    table = Table(title=f"{parameters.demo_type.value.title()} parameters")
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", style="green")
    for name, value in parameters.model_dump().items():
        if name.endswith("_color") and value is not None:
            value = f"0x{value:06X}"
        table.add_row(name, "-" if value is None else str(value))
    console.print(table)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose (DEBUG) logging",
)
@click.pass_context
def cli(ctx, verbose: bool):
    """
    AR Demo companion - open deep links and fetch demo assets.

    Parses mug and panorama deep links, downloads their assets from the
    content server and keeps them in an ETag-validated local cache.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_logging(settings, verbose=verbose)
    cleanup_old_logs(settings.log_dir, max_age_days=settings.log_max_age_days)


@cli.command("open")
@click.argument("url")
@click.pass_context
def open_url(ctx, url: str):
    """Validate a deep link and remember it."""
    container = get_container(ctx)
    result = container.router.open_url(url)
    if not result.ok:
        fail(result.error_message)

    console.print(f"[green]✓ {result.demo.value} demo link is valid[/green]")
    print_parameters(result.parameters)


@cli.command()
@click.argument("url")
@click.option(
    "--all-images",
    is_flag=True,
    help="Panorama only: download every image of the location",
)
@click.option(
    "--locations",
    is_flag=True,
    help="Panorama only: also list the available locations",
)
@click.pass_context
def fetch(ctx, url: str, all_images: bool, locations: bool):
    """Open a deep link and download everything its demo needs."""
    container = get_container(ctx)
    result = container.router.open_url(url)
    if not result.ok:
        fail(result.error_message)

    try:
        if result.demo is SupportedDemo.MUG:
            _fetch_mug(result.parameters, container)
        else:
            _fetch_panorama(result.parameters, container, all_images, locations)
    except ARDemoError as e:
        fail(str(e))
    except httpx.HTTPError as e:
        logger.debug("Delivery request failed", exc_info=True)
        fail(f"Content server request failed: {e}")


def _fetch_mug(parameters: MugURLParameters, container: AppContainer) -> None:
    client = ContentClient(parameters.ocm_url, parameters.token, timeout=container.settings.http_timeout)
    model = MugModel(parameters, container.asset_cache, client=client)
    try:
        with log_performance("Fetch mug assets", logger):
            materials = model.fetch()
    finally:
        client.close()

    table = Table(title="Mug materials")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Main mesh", materials.main_mesh)
    table.add_row("Image meshes", ", ".join(materials.image_meshes))
    table.add_row("Text meshes", ", ".join(materials.text_meshes) or "-")
    table.add_row("Price", "-" if materials.price is None else f"{materials.price:.2f}")
    table.add_row("Model", str(materials.model_path))
    table.add_row("Decal", str(materials.decal_path))
    table.add_row("Mug color (rgb)", ", ".join(f"{c:.2f}" for c in model.mug_color_rgb))
    console.print(table)


def _fetch_panorama(
    parameters: PanoramaURLParameters,
    container: AppContainer,
    all_images: bool,
    locations: bool,
) -> None:
    client = ContentClient(parameters.ocm_url, parameters.token, timeout=container.settings.http_timeout)
    model = PanoramaModel(parameters, container.asset_cache, client=client)
    try:
        with log_performance("Fetch panorama", logger):
            model.load()
            if all_images:
                for _ in range(len(model.experience.items) - 1):
                    model.show_next()
            if locations:
                model.list_locations()
    finally:
        client.close()

    table = Table(title=f"📍 {model.experience.location}")
    table.add_column("#", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Angle", style="yellow")
    table.add_column("FOV", style="yellow")
    table.add_column("File", style="green")
    for index, item in enumerate(model.experience.items):
        table.add_row(
            str(index),
            item.title or item.identifier,
            f"{item.horizontal_angle:g}",
            str(item.field_of_view),
            str(item.path) if item.path else "[dim]not downloaded[/dim]",
        )
    console.print(table)

    if locations:
        console.print("\n[bold cyan]Available locations[/bold cyan]")
        for asset in model.locations:
            console.print(f"  • {asset.name} [dim]({asset.id})[/dim]")


@cli.command()
@click.argument(
    "demo",
    type=click.Choice(["mug", "panorama", "all"]),
    default="all",
)
@click.option("--clear", is_flag=True, help="Forget the listed URLs")
@click.pass_context
def recent(ctx, demo: str, clear: bool):
    """List (or clear) previously opened deep links."""
    container = get_container(ctx)
    lists = {
        "mug": container.mug_urls,
        "panorama": container.panorama_urls,
    }
    selected = lists if demo == "all" else {demo: lists[demo]}

    for name, url_cache in selected.items():
        if clear:
            url_cache.clear()
            console.print(f"[green]✓ Cleared recent {name} links[/green]")
            continue

        console.print(f"\n[bold cyan]Recent {name} links[/bold cyan]")
        if not url_cache.items:
            console.print("  [dim]none[/dim]")
        for url in url_cache.items:
            console.print(f"  • {escape(url)}", soft_wrap=True)


@cli.command("cache-info")
@click.pass_context
def cache_info(ctx):
    """Show the downloaded assets tracked by the cache."""
    cache = get_container(ctx).asset_cache
    stats = cache.get_stats()

    table = Table(title="Asset cache")
    table.add_column("Key", style="cyan")
    table.add_column("File", style="green")
    table.add_column("ETag", style="yellow")
    for key, entry in cache.entries().items():
        table.add_row(key, entry.filename, entry.etag or "-")
    console.print(table)
    console.print(
        f"{stats['total_entries']} entries, {stats['size_bytes'] / 1024:.1f} KiB "
        f"in {cache.saved_files_dir}"
    )


@cli.command("clear-cache")
@click.confirmation_option(prompt="Delete all downloaded assets?")
@click.pass_context
def clear_cache(ctx):
    """Delete every downloaded asset and empty the cache listing."""
    if not get_container(ctx).asset_cache.clear():
        fail("Unable to clear the asset cache, see the log for details")
    console.print("[green]✓ Asset cache cleared[/green]")


@cli.command("sample-url")
@click.argument("demo", type=click.Choice(["mug", "panorama"]))
@click.pass_context
def sample_url(ctx, demo: str):
    """Print a deep link built from the demo parameters file."""
    parameters = get_container(ctx).demo_parameters()
    if demo == "mug":
        url = parameters.mug_url(settings.deep_link_scheme)
    else:
        url = parameters.panorama_url(settings.deep_link_scheme)
    click.echo(url)


@cli.command("make-mug-url")
@click.option("--url", "ocm_url", required=True, help="Content server URL")
@click.option("--token", required=True, help="Channel token")
@click.option("--asset-id", required=True, help="Mug content item ID")
@click.option("--image-id", required=True, help="Decal image ID")
@click.option("--mug-color", required=True, help="Mug color, e.g. 0x84AFD9")
@click.option("--text", default=None, help="Custom text")
@click.option("--text-color", default=None, help="Custom text color, e.g. 0x050505")
@click.pass_context
def make_mug_url(ctx, ocm_url, token, asset_id, image_id, mug_color, text, text_color):
    """Build and remember a mug deep link from entered values."""
    try:
        parameters = MugURLParameters.from_form(
            ocm_url, token, asset_id, image_id, mug_color, text, text_color
        )
    except ARDemoError as e:
        fail(str(e))

    url = parameters.to_url(settings.deep_link_scheme)
    get_container(ctx).mug_urls.store(url)
    click.echo(url)


@cli.command("make-panorama-url")
@click.option("--url", "ocm_url", required=True, help="Content server URL")
@click.option("--token", required=True, help="Channel token")
@click.option("--asset-id", required=True, help="Location content item ID")
@click.pass_context
def make_panorama_url(ctx, ocm_url, token, asset_id):
    """Build and remember a panorama deep link from entered values."""
    try:
        parameters = PanoramaURLParameters.from_form(ocm_url, token, asset_id)
    except ARDemoError as e:
        fail(str(e))

    url = parameters.to_url(settings.deep_link_scheme)
    get_container(ctx).panorama_urls.store(url)
    click.echo(url)


if __name__ == "__main__":
    cli()
