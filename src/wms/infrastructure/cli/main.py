import click
from pydantic import ValidationError as SettingsError

from wms.config import LOG_LEVELS, get_settings
from wms.infrastructure.cli.catalog_commands import (
    location_add,
    location_delete,
    location_list,
    location_update,
    product_add,
    product_delete,
    product_list,
    product_update,
)
from wms.infrastructure.cli.manifest_commands import (
    manifest_delete,
    manifest_ingest,
    manifest_list,
    manifest_show,
)
from wms.infrastructure.cli.order_commands import (
    order_allocate,
    order_cancel,
    order_complete,
    order_list,
    order_show,
)
from wms.infrastructure.cli.unit_commands import (
    unit_eligible,
    unit_movements,
    unit_place,
    unit_relocate,
    unit_retire,
    unit_show,
)
from wms.logging_config import configure_logging


@click.group()
@click.option("--actor", envvar="WMS_ACTOR", default=None, help="Who is performing the operation.")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (defaults to WMS_LOG_LEVEL).",
)
@click.pass_context
def cli(ctx: click.Context, actor: str | None, log_level: str | None) -> None:
    """WMS: Warehouse inventory and dispatch"""
    try:
        settings = get_settings()
    except SettingsError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    configure_logging(level=(log_level or settings.log_level).upper())
    ctx.obj = {"actor": actor or settings.actor}


@cli.group()
def catalog() -> None:
    """Manage products and locations."""


@cli.group()
def manifest() -> None:
    """Ingest and inspect supplier manifests."""


@cli.group()
def unit() -> None:
    """Place, move and inspect inventory units."""


@cli.group()
def order() -> None:
    """Allocate and manage dispatch orders."""


# Register subcommands
catalog.add_command(product_add)
catalog.add_command(product_delete)
catalog.add_command(product_list)
catalog.add_command(product_update)
catalog.add_command(location_add)
catalog.add_command(location_delete)
catalog.add_command(location_list)
catalog.add_command(location_update)
manifest.add_command(manifest_delete)
manifest.add_command(manifest_ingest)
manifest.add_command(manifest_list)
manifest.add_command(manifest_show)
unit.add_command(unit_eligible)
unit.add_command(unit_movements)
unit.add_command(unit_place)
unit.add_command(unit_relocate)
unit.add_command(unit_retire)
unit.add_command(unit_show)
order.add_command(order_allocate)
order.add_command(order_cancel)
order.add_command(order_complete)
order.add_command(order_list)
order.add_command(order_show)
