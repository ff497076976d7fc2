"""``transactions`` subcommands: coordinator, buffer and pending-ack introspection."""

from __future__ import annotations

from typing import Optional

import typer

from . import console, run_command, transactions_app


# ── Coordinators ────────────────────────────────────────────────────────────

@transactions_app.command("coordinator-stats")
def coordinator_stats(
    ctx: typer.Context,
    coordinator_id: Optional[str] = typer.Option(None, "-c", "--coordinator-id", help="The coordinator id"),
):
    """Get transaction coordinator stats."""
    run_command(ctx, "coordinator-stats", coordinator_id=coordinator_id)


@transactions_app.command("coordinator-internal-stats")
def coordinator_internal_stats(
    ctx: typer.Context,
    coordinator_id: Optional[str] = typer.Option(None, "-c", "--coordinator-id", help="The coordinator id"),
    metadata: bool = typer.Option(False, "-m", "--metadata", help="Flag to include ledger metadata"),
):
    """Get transaction coordinator internal stats."""
    run_command(ctx, "coordinator-internal-stats", coordinator_id=coordinator_id, metadata=metadata)


@transactions_app.command("scale-transactionCoordinators")
def scale_transaction_coordinators(
    ctx: typer.Context,
    replicas: Optional[str] = typer.Option(None, "-r", "--replicas", help="The scale of the transaction coordinators"),
):
    """Update the scale of transaction coordinators."""
    scaled = run_command(ctx, "scale-transactionCoordinators", replicas=replicas)
    console.print(f"[green]Transaction coordinators scaled to {scaled} replicas.[/green]")


@transactions_app.command("slow-transactions")
def slow_transactions(
    ctx: typer.Context,
    coordinator_id: Optional[str] = typer.Option(None, "-c", "--coordinator-id", help="The coordinator id"),
    time_spec: str = typer.Option("1s", "-t", "--time", help="The transaction timeout time. (eg: 1s, 10s, 1m, 5h, 3d)"),
):
    """Get slow transactions."""
    run_command(ctx, "slow-transactions", coordinator_id=coordinator_id, timeout_ms=time_spec)


# ── Transactions ────────────────────────────────────────────────────────────

@transactions_app.command("transaction-metadata")
def transaction_metadata(
    ctx: typer.Context,
    most_sig_bits: Optional[str] = typer.Option(None, "-m", "--most-sig-bits", help="The most sig bits"),
    least_sig_bits: Optional[str] = typer.Option(None, "-l", "--least-sig-bits", help="The least sig bits"),
):
    """Get transaction metadata."""
    run_command(ctx, "transaction-metadata", most_sig_bits=most_sig_bits, least_sig_bits=least_sig_bits)


@transactions_app.command("transaction-in-buffer-stats")
def transaction_in_buffer_stats(
    ctx: typer.Context,
    most_sig_bits: Optional[str] = typer.Option(None, "-m", "--most-sig-bits", help="The most sig bits"),
    least_sig_bits: Optional[str] = typer.Option(None, "-l", "--least-sig-bits", help="The least sig bits"),
    topic: Optional[str] = typer.Option(None, "-t", "--topic", help="The topic name"),
):
    """Get transaction in buffer stats."""
    run_command(
        ctx,
        "transaction-in-buffer-stats",
        most_sig_bits=most_sig_bits,
        least_sig_bits=least_sig_bits,
        topic=topic,
    )


@transactions_app.command("transaction-in-pending-ack-stats")
def transaction_in_pending_ack_stats(
    ctx: typer.Context,
    most_sig_bits: Optional[str] = typer.Option(None, "-m", "--most-sig-bits", help="The most sig bits"),
    least_sig_bits: Optional[str] = typer.Option(None, "-l", "--least-sig-bits", help="The least sig bits"),
    topic: Optional[str] = typer.Option(None, "-t", "--topic", help="The topic name"),
    sub_name: Optional[str] = typer.Option(None, "-s", "--sub-name", help="The subscription name"),
):
    """Get transaction in pending ack stats."""
    run_command(
        ctx,
        "transaction-in-pending-ack-stats",
        most_sig_bits=most_sig_bits,
        least_sig_bits=least_sig_bits,
        topic=topic,
        subscription=sub_name,
    )


# ── Buffers and pending acks ────────────────────────────────────────────────

@transactions_app.command("transaction-buffer-stats")
def transaction_buffer_stats(
    ctx: typer.Context,
    topic: Optional[str] = typer.Option(None, "-t", "--topic", help="The topic"),
    low_water_mark: bool = typer.Option(
        False, "-l", "--low-water-mark",
        help="Whether to get information about lowWaterMarks stored in transaction buffer.",
    ),
):
    """Get transaction buffer stats."""
    run_command(ctx, "transaction-buffer-stats", topic=topic, low_water_marks=low_water_mark)


@transactions_app.command("pending-ack-stats")
def pending_ack_stats(
    ctx: typer.Context,
    topic: Optional[str] = typer.Option(None, "-t", "--topic", help="The topic name"),
    sub_name: Optional[str] = typer.Option(None, "-s", "--sub-name", help="The subscription name"),
    low_water_mark: bool = typer.Option(
        False, "-l", "--low-water-mark",
        help="Whether to get information about lowWaterMarks stored in transaction pending ack.",
    ),
):
    """Get transaction pending ack stats."""
    run_command(ctx, "pending-ack-stats", topic=topic, subscription=sub_name, low_water_marks=low_water_mark)


@transactions_app.command("pending-ack-internal-stats")
def pending_ack_internal_stats(
    ctx: typer.Context,
    topic: Optional[str] = typer.Option(None, "-t", "--topic", help="Topic name"),
    subscription_name: Optional[str] = typer.Option(None, "-s", "--subscription-name", help="Subscription name"),
    metadata: bool = typer.Option(False, "-m", "--metadata", help="Flag to include ledger metadata"),
):
    """Get pending ack internal stats."""
    run_command(
        ctx,
        "pending-ack-internal-stats",
        topic=topic,
        subscription=subscription_name,
        metadata=metadata,
    )


@transactions_app.command("position-stats-in-pending-ack")
def position_stats_in_pending_ack(
    ctx: typer.Context,
    topic: Optional[str] = typer.Option(None, "-t", "--topic", help="The topic name"),
    subscription_name: Optional[str] = typer.Option(None, "-s", "--subscription-name", help="Subscription name"),
    ledger_id: Optional[str] = typer.Option(None, "-l", "--ledger-id", help="Ledger ID of the position"),
    entry_id: Optional[str] = typer.Option(None, "-e", "--entry-id", help="Entry ID of the position"),
    batch_index: Optional[str] = typer.Option(None, "-b", "--batch-index", help="Batch index of the position"),
):
    """Get the position stats in transaction pending ack."""
    run_command(
        ctx,
        "position-stats-in-pending-ack",
        topic=topic,
        subscription=subscription_name,
        ledger_id=ledger_id,
        entry_id=entry_id,
        batch_index=batch_index,
    )
