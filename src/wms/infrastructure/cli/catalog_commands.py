"""CLI commands for the catalog: products and storage locations."""

from __future__ import annotations

import click

from wms.application.add_location import AddLocationHandler
from wms.application.add_product import AddProductHandler
from wms.application.delete_location import DeleteLocationHandler
from wms.application.delete_product import DeleteProductHandler
from wms.application.list_catalog import ListLocationsHandler, ListProductsHandler
from wms.application.update_location import UpdateLocationHandler
from wms.application.update_product import UpdateProductHandler
from wms.domain.exceptions import DomainException
from wms.infrastructure.bootstrap import uow_factory

# --- Products -----------------------------------------------------------------


@click.command("product-add")
@click.option("--sku", required=True, help="Stock keeping unit.")
@click.option("--name", required=True, help="Product name.")
@click.option(
    "--kind",
    "unit_kind",
    required=True,
    type=click.Choice(["measured", "discrete"], case_sensitive=False),
    help="How units of this product are tracked.",
)
@click.option("--default-quantity", default=None, help="Default quantity for measured units.")
@click.option("--description", default=None, help="Free-text description.")
def product_add(
    sku: str,
    name: str,
    unit_kind: str,
    default_quantity: str | None,
    description: str | None,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(uow_factory())

    try:
        product = handler.handle(
            sku=sku,
            name=name,
            unit_kind=unit_kind,
            default_quantity=default_quantity,
            description=description,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product.sku} '{product.name}' added ({product.unit_kind.value.lower()})")


@click.command("product-list")
@click.option("--active-only", is_flag=True, default=False, help="Hide inactive products.")
def product_list(active_only: bool) -> None:
    """List all products in the catalog."""
    products = ListProductsHandler(uow_factory()).handle(active_only=active_only)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'SKU':<14} {'Name':<24} {'Kind':<10} {'Default':>10} {'Active':>7}")
    click.echo("-" * 69)
    for p in products:
        default = str(p.default_quantity) if p.default_quantity is not None else "-"
        click.echo(
            f"{p.sku:<14} {p.name:<24} {p.unit_kind.value.lower():<10} "
            f"{default:>10} {'yes' if p.is_active else 'no':>7}"
        )


@click.command("product-update")
@click.option("--sku", required=True, help="SKU of the product to update.")
@click.option("--name", default=None, help="New name.")
@click.option("--default-quantity", default=None, help="New default quantity.")
@click.option("--active/--inactive", "is_active", default=None, help="Activate or deactivate.")
def product_update(
    sku: str,
    name: str | None,
    default_quantity: str | None,
    is_active: bool | None,
) -> None:
    """Update a product's name, default quantity or active flag."""
    handler = UpdateProductHandler(uow_factory())

    try:
        handler.handle(sku=sku, name=name, default_quantity=default_quantity, is_active=is_active)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {sku} updated")


@click.command("product-delete")
@click.option("--sku", required=True, help="SKU of the product to delete.")
def product_delete(sku: str) -> None:
    """Delete a product no unit refers to."""
    try:
        DeleteProductHandler(uow_factory()).handle(sku)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {sku} deleted")


# --- Locations ----------------------------------------------------------------


@click.command("location-add")
@click.option("--aisle", required=True)
@click.option("--rack", required=True)
@click.option("--level", required=True)
@click.option("--position", required=True)
@click.option("--scan-code", default=None, help="Barcode scanned at placement.")
def location_add(aisle: str, rack: str, level: str, position: str, scan_code: str | None) -> None:
    """Add a storage location."""
    handler = AddLocationHandler(uow_factory())

    try:
        location = handler.handle(aisle, rack, level, position, scan_code=scan_code)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Location #{location.id} {location.coordinate} added")


@click.command("location-list")
def location_list() -> None:
    """List all storage locations."""
    locations = ListLocationsHandler(uow_factory()).handle()

    if not locations:
        click.echo("No locations found.")
        return

    click.echo(f"{'ID':<6} {'Coordinate':<20} {'Scan code':<16}")
    click.echo("-" * 44)
    for loc in locations:
        click.echo(f"{loc.id:<6} {str(loc.coordinate):<20} {loc.scan_code or '-':<16}")


@click.command("location-update")
@click.option("--id", "location_id", required=True, type=int, help="Location ID.")
@click.option("--scan-code", required=True, help="New scan code.")
def location_update(location_id: int, scan_code: str) -> None:
    """Assign a new scan code to a location."""
    try:
        UpdateLocationHandler(uow_factory()).handle(location_id, scan_code)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Location #{location_id} scan code set to {scan_code}")


@click.command("location-delete")
@click.option("--id", "location_id", required=True, type=int, help="Location ID.")
def location_delete(location_id: int) -> None:
    """Delete an empty location."""
    try:
        DeleteLocationHandler(uow_factory()).handle(location_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Location #{location_id} deleted")
