"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from wms.application.allocate_order import AllocateOrderHandler
from wms.application.cancel_order import CancelOrderHandler
from wms.application.complete_order import CompleteOrderHandler
from wms.application.dto import AllocationLineSpec, OrderDTO
from wms.application.show_order import ListOrdersHandler, ShowOrderHandler
from wms.domain.exceptions import DomainException, ManualReviewRequired
from wms.infrastructure.bootstrap import clock, uow_factory


def _parse_lines(raw: str) -> list[AllocationLineSpec]:
    """Parse '12,15:2.5' into AllocationLineSpec list."""
    specs: list[AllocationLineSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        unit_str, _, qty = entry.partition(":")
        try:
            unit_id = int(unit_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid unit '{unit_str}'. Expected 'UnitID' or 'UnitID:Quantity'."
            )
        specs.append(AllocationLineSpec(unit_id=unit_id, quantity=qty.strip() or None))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_id}")
    click.echo(f"Dispatch: {dto.dispatch_date}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo()
    click.echo(f"  {'Unit':<6} {'Serial':<18} {'SKU':<14} {'Qty':>10} {'Depleted':>9}")
    click.echo(f"  {'-'*61}")
    for line in dto.lines:
        click.echo(
            f"  {line.unit_id:<6} {line.serial:<18} {line.product_sku:<14} "
            f"{line.quantity or '-':>10} {'yes' if line.depleted else 'no':>9}"
        )
    if dto.needs_review:
        click.echo()
        click.echo("Needs manual review:")
        for reason in dto.review_reasons:
            click.echo(f"  - {reason}")


@click.command("allocate")
@click.option("--customer", required=True, help="Customer reference.")
@click.option("--lines", required=True, help="Units as 'UnitID[:Qty],UnitID[:Qty]'.")
@click.option("--notes", default=None, help="Free-text notes.")
@click.pass_obj
def order_allocate(obj: dict, customer: str, lines: str, notes: str | None) -> None:
    """Allocate units to a customer and dispatch them."""
    specs = _parse_lines(lines)
    handler = AllocateOrderHandler(uow_factory(), clock())

    try:
        order_id = handler.handle(customer, specs, notes=notes, actor=obj["actor"])
        dto = ShowOrderHandler(uow_factory()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
def order_show(order_id: int) -> None:
    """Show details of an existing order."""
    try:
        dto = ShowOrderHandler(uow_factory()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
def order_list() -> None:
    """List all orders."""
    orders = ListOrdersHandler(uow_factory()).handle()

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'Customer':<20} {'Status':<12} {'Lines':>6} {'Review':>7}")
    click.echo("-" * 55)
    for o in orders:
        click.echo(
            f"{o.id:<6} {o.customer_id:<20} {o.status:<12} {len(o.lines):>6} "
            f"{'yes' if o.needs_review else '':>7}"
        )


@click.command("cancel")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to cancel.")
@click.pass_obj
def order_cancel(obj: dict, order_id: int) -> None:
    """Cancel an order and return its stock."""
    handler = CancelOrderHandler(uow_factory(), clock())

    try:
        handler.handle(order_id, actor=obj["actor"])
    except ManualReviewRequired as exc:
        click.echo(f"Order #{order_id} flagged for manual review:", err=True)
        for reason in exc.reasons:
            click.echo(f"  - {reason}", err=True)
        raise click.ClickException("Cancellation needs manual review; nothing was reversed.")
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled, stock returned.")


@click.command("complete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to complete.")
def order_complete(order_id: int) -> None:
    """Mark a processing order as completed."""
    try:
        CompleteOrderHandler(uow_factory()).handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} completed.")
