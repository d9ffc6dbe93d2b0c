"""CLI commands for supplier manifests."""

from __future__ import annotations

from datetime import date

import click

from wms.application.delete_manifest import DeleteManifestHandler
from wms.application.dto import ManifestLineSpec
from wms.application.ingest_manifest import IngestManifestHandler
from wms.application.show_manifest import ListManifestsHandler, ShowManifestHandler
from wms.domain.exceptions import DomainException
from wms.infrastructure.bootstrap import clock, uow_factory


def _parse_lines(raw: str) -> list[ManifestLineSpec]:
    """Parse 'SN-1:CABLE:25.5,SN-2:BOLT' into ManifestLineSpec list."""
    specs: list[ManifestLineSpec] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        parts = [p.strip() for p in entry.split(":")]
        if len(parts) not in (2, 3):
            raise click.BadParameter(
                f"Invalid line format '{entry}'. Expected 'Serial:SKU' or 'Serial:SKU:Quantity'."
            )
        quantity = parts[2] if len(parts) == 3 else None
        specs.append(ManifestLineSpec(serial=parts[0], sku=parts[1], quantity=quantity))
    return specs


@click.command("ingest")
@click.option("--supplier", default=None, help="Supplier name (defaults to N/A).")
@click.option("--arrival", "arrival_date", default=None, help="Arrival date (YYYY-MM-DD).")
@click.option("--lines", required=True, help="Lines as 'Serial:SKU[:Qty],Serial:SKU[:Qty]'.")
def manifest_ingest(supplier: str | None, arrival_date: str | None, lines: str) -> None:
    """Admit the units of a supplier manifest into quarantine."""
    specs = _parse_lines(lines)
    try:
        arrival = date.fromisoformat(arrival_date) if arrival_date else None
    except ValueError:
        raise click.BadParameter(f"Invalid arrival date '{arrival_date}'.")

    handler = IngestManifestHandler(uow_factory(), clock())

    try:
        result = handler.handle(supplier=supplier, arrival_date=arrival, lines=specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Manifest #{result.manifest_id} ingested: {result.admitted_count} unit(s) admitted")
    if result.skipped_skus:
        click.echo(f"Skipped unknown SKUs: {', '.join(result.skipped_skus)}")


@click.command("show")
@click.option("--id", "manifest_id", required=True, type=int, help="Manifest ID to display.")
def manifest_show(manifest_id: int) -> None:
    """Show a manifest with its units."""
    try:
        dto = ShowManifestHandler(uow_factory()).handle(manifest_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Manifest #{dto.id}  (status={dto.status})")
    click.echo(f"Supplier: {dto.supplier}")
    click.echo(f"Arrival:  {dto.arrival_date}")
    if dto.skipped_skus:
        click.echo(f"Skipped:  {', '.join(dto.skipped_skus)}")
    click.echo()
    click.echo(f"  {'ID':<6} {'Serial':<18} {'SKU':<14} {'Status':<12} {'Remaining':>10}")
    click.echo(f"  {'-'*64}")
    for u in dto.units:
        click.echo(
            f"  {u.id:<6} {u.serial:<18} {u.product_sku:<14} {u.status:<12} "
            f"{u.remaining_quantity or '-':>10}"
        )


@click.command("list")
def manifest_list() -> None:
    """List manifests, newest first."""
    manifests = ListManifestsHandler(uow_factory()).handle()

    if not manifests:
        click.echo("No manifests found.")
        return

    click.echo(f"{'ID':<6} {'Supplier':<20} {'Arrival':<12} {'Status':<12}")
    click.echo("-" * 52)
    for m in manifests:
        click.echo(f"{m.id:<6} {m.supplier:<20} {str(m.arrival_date):<12} {m.status:<12}")


@click.command("delete")
@click.option("--id", "manifest_id", required=True, type=int, help="Manifest ID to delete.")
def manifest_delete(manifest_id: int) -> None:
    """Delete a manifest whose units are all still in quarantine."""
    try:
        removed = DeleteManifestHandler(uow_factory()).handle(manifest_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Manifest #{manifest_id} deleted with {removed} unit(s)")
