"""CLI commands for inventory units and the movement ledger."""

from __future__ import annotations

import click

from wms.application.list_eligible_units import ListEligibleUnitsHandler
from wms.application.list_movements import ListMovementsHandler
from wms.application.place_unit import PlaceUnitHandler
from wms.application.relocate_unit import RelocateUnitHandler
from wms.application.retire_unit import RetireUnitHandler
from wms.application.show_unit import ShowUnitHandler
from wms.domain.exceptions import DomainException
from wms.infrastructure.bootstrap import clock, uow_factory


def _where(location_id: int | None) -> str:
    return f"#{location_id}" if location_id is not None else "-"


@click.command("place")
@click.option("--serial", required=True, help="Serial of the unit being put away.")
@click.option("--location", "location_code", required=True, help="Scan code of the location.")
@click.pass_obj
def unit_place(obj: dict, serial: str, location_code: str) -> None:
    """Verify a quarantined unit and place it into a location."""
    handler = PlaceUnitHandler(uow_factory(), clock())

    try:
        unit_id = handler.handle(serial, location_code, actor=obj["actor"])
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Unit #{unit_id} ({serial}) placed at {location_code}")


@click.command("relocate")
@click.option("--id", "unit_id", required=True, type=int, help="Unit ID.")
@click.option("--to", "location_id", required=True, type=int, help="Destination location ID.")
@click.option("--reason", default=None, help="Why the unit is moved.")
@click.pass_obj
def unit_relocate(obj: dict, unit_id: int, location_id: int, reason: str | None) -> None:
    """Move a placed unit to another location."""
    handler = RelocateUnitHandler(uow_factory(), clock())

    try:
        handler.handle(unit_id, location_id, reason=reason, actor=obj["actor"])
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Unit #{unit_id} moved to location #{location_id}")


@click.command("retire")
@click.option("--id", "unit_id", required=True, type=int, help="Unit ID.")
@click.option("--reason", default=None, help="Why the unit is written off.")
@click.pass_obj
def unit_retire(obj: dict, unit_id: int, reason: str | None) -> None:
    """Write off an available unit."""
    handler = RetireUnitHandler(uow_factory(), clock())

    try:
        handler.handle(unit_id, reason=reason, actor=obj["actor"])
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Unit #{unit_id} retired")


@click.command("show")
@click.option("--id", "unit_id", type=int, default=None, help="Unit ID.")
@click.option("--serial", default=None, help="Unit serial.")
def unit_show(unit_id: int | None, serial: str | None) -> None:
    """Show one unit by ID or serial."""
    if unit_id is None and not serial:
        raise click.ClickException("Give --id or --serial")

    try:
        u = ShowUnitHandler(uow_factory()).handle(unit_id=unit_id, serial=serial)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Unit #{u.id} {u.serial}  (status={u.status})")
    click.echo(f"Product:   {u.product_sku}")
    click.echo(f"Location:  {_where(u.location_id)}")
    if u.original_quantity is not None:
        click.echo(
            f"Quantity:  {u.remaining_quantity} of {u.original_quantity} ({u.consumed_quantity} consumed)"
        )
    click.echo(f"Admitted:  {u.admitted_at}")


@click.command("movements")
@click.option("--id", "unit_id", required=True, type=int, help="Unit ID.")
def unit_movements(unit_id: int) -> None:
    """Show the movement trail of a unit."""
    try:
        records = list(ListMovementsHandler(uow_factory()).handle(unit_id))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not records:
        click.echo("No movements recorded.")
        return

    click.echo(f"{'#':<6} {'From':>6} {'To':>6}  {'Reason':<24} {'Actor':<12} {'When'}")
    click.echo("-" * 84)
    for r in records:
        click.echo(
            f"{r.id:<6} {_where(r.from_location_id):>6} {_where(r.to_location_id):>6}  "
            f"{r.reason:<24} {r.actor or '-':<12} {r.recorded_at}"
        )


@click.command("eligible")
@click.option("--sku", required=True, help="Product SKU.")
def unit_eligible(sku: str) -> None:
    """List allocatable units of a product, oldest first."""
    try:
        units = list(ListEligibleUnitsHandler(uow_factory()).handle(sku))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not units:
        click.echo(f"No eligible units for {sku}.")
        return

    click.echo(f"{'ID':<6} {'Serial':<18} {'Remaining':>10}  {'Admitted'}")
    click.echo("-" * 62)
    for u in units:
        click.echo(f"{u.unit_id:<6} {u.serial:<18} {u.remaining_quantity or '-':>10}  {u.admitted_at}")
