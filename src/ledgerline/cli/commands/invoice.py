"""Invoice payment tracking commands."""

import click
from ledgerline.cli.error_handling import handle_domain_error
from ledgerline.cli.input_parsing import parse_amount_or_exit, parse_date_or_exit
from ledgerline.domain.entities import INVOICE_STATUSES
from ledgerline.domain.invoice import InvoiceService
from ledgerline.utils.amount_parser import format_money


@click.group()
def invoice_group():
    """Track invoices and payments."""
    pass


@invoice_group.command("create")
@click.argument("invoice_number")
@click.option("--total", required=True, help="Invoice total")
@click.option("--status", type=click.Choice(INVOICE_STATUSES), default="draft", show_default=True)
@click.option("--due-date", help="Due date (YYYY-MM-DD)")
@click.pass_context
def create_invoice(ctx, invoice_number: str, total: str, status: str, due_date: str | None):
    """Create an invoice.

    Examples:
        ledgerline invoice create INV-1001 --total 500 --status sent --due-date 2024-02-15
    """
    service = InvoiceService(ctx.obj["db"])

    invoice_total = parse_amount_or_exit(ctx, total, "total")
    due = parse_date_or_exit(ctx, due_date, "due date")

    try:
        invoice_id = service.create_invoice(
            invoice_number=invoice_number, total=invoice_total, status=status, due_date=due
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created invoice {invoice_number} (ID: {invoice_id})")


@invoice_group.command("list")
@click.option("--status", type=click.Choice(INVOICE_STATUSES), help="Only invoices with this status")
@click.pass_context
def list_invoices(ctx, status: str | None):
    """List invoices."""
    service = InvoiceService(ctx.obj["db"])

    invoices = service.list_invoices(status=status)
    if not invoices:
        click.echo("No invoices found.")
        return

    click.echo(f"\n{'ID':<5} {'Number':<14} {'Status':<10} {'Total':>12} {'Paid':>12} {'Due':>12}")
    click.echo("-" * 70)
    for inv in invoices:
        click.echo(
            f"{inv.id:<5} {inv.invoice_number:<14} {inv.status:<10} {format_money(inv.total):>12} "
            f"{format_money(inv.amount_paid):>12} {format_money(inv.balance_due):>12}"
        )


@invoice_group.command("show")
@click.argument("invoice_id", type=int)
@click.pass_context
def show_invoice(ctx, invoice_id: int):
    """Show an invoice and its payment history."""
    service = InvoiceService(ctx.obj["db"])

    try:
        invoice = service.require_invoice(invoice_id)
        payments = service.list_payments(invoice_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nInvoice {invoice.invoice_number} (ID: {invoice.id})")
    click.echo(f"  Status: {invoice.status}")
    click.echo(f"  Total: {format_money(invoice.total)}")
    click.echo(f"  Paid: {format_money(invoice.amount_paid)}")
    click.echo(f"  Balance due: {format_money(invoice.balance_due)}")
    if invoice.due_date:
        click.echo(f"  Due date: {invoice.due_date}")
    if invoice.paid_date:
        click.echo(f"  Paid date: {invoice.paid_date}")

    if payments:
        click.echo("\nPayments:")
        for p in payments:
            details = ", ".join(x for x in (p.payment_method, p.reference) if x)
            suffix = f" ({details})" if details else ""
            click.echo(f"  {p.date}  {format_money(p.amount):>12}{suffix}")


@invoice_group.command("pay")
@click.argument("invoice_id", type=int)
@click.option("--amount", required=True, help="Payment amount")
@click.option("--date", "paid_on", default="today", show_default=True, help="Payment date")
@click.option("--method", help="Payment method (check, transfer, card, ...)")
@click.option("--reference", help="Check number or transfer reference")
@click.option("--notes", help="Notes")
@click.pass_context
def pay_invoice(
    ctx,
    invoice_id: int,
    amount: str,
    paid_on: str,
    method: str | None,
    reference: str | None,
    notes: str | None,
):
    """Record a payment against an invoice.

    Examples:
        ledgerline invoice pay 1 --amount 200
        ledgerline invoice pay 1 --amount 300 --date 2024-02-10 --method check --reference 1042
    """
    service = InvoiceService(ctx.obj["db"])

    payment_amount = parse_amount_or_exit(ctx, amount)
    payment_date = parse_date_or_exit(ctx, paid_on)

    try:
        invoice = service.record_payment(
            invoice_id,
            payment_amount,
            payment_date,
            payment_method=method,
            reference=reference,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded payment of {format_money(payment_amount)} on invoice {invoice.invoice_number}")
    click.echo(f"  Balance due: {format_money(invoice.balance_due)}")
    click.echo(f"  Status: {invoice.status}")


@invoice_group.command("status")
@click.argument("invoice_id", type=int)
@click.argument("status", type=click.Choice(INVOICE_STATUSES))
@click.pass_context
def set_invoice_status(ctx, invoice_id: int, status: str):
    """Change an invoice's status."""
    service = InvoiceService(ctx.obj["db"])

    try:
        service.set_status(invoice_id, status)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Invoice {invoice_id} status set to {status}")


def register_commands(cli):
    """Register invoice commands with main CLI."""
    cli.add_command(invoice_group, name="invoice")
