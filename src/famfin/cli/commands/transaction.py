"""Transaction management commands."""

import click

from famfin.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import (
    resolve_card_or_exit,
    resolve_category_or_exit,
    resolve_member_or_exit,
)
from famfin.domain.calculations import (
    calculate_dual_running_balances,
    calculate_transaction_totals,
    get_transaction_status,
)
from famfin.domain.card import CardService
from famfin.domain.category import CategoryService
from famfin.domain.entities import TransactionType
from famfin.domain.errors import DomainError
from famfin.domain.family import FamilyMemberService
from famfin.domain.transaction import TransactionService
from famfin.utils.amount_parser import format_currency, parse_amount
from famfin.utils.date_parser import format_brazilian_date, parse_date


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@period_options
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    help="Only income or only expenses",
)
@click.option("--category", help="Category name or ID")
@click.option("--card", help="Credit card name, last four digits or ID")
@click.option("--member", help="Family member name or ID")
@click.option("--paid/--unpaid", "is_paid", default=None, help="Filter by payment status")
@click.option("--balances", is_flag=True, help="Show running real and projected balances")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    transaction_type: str | None,
    category: str | None,
    card: str | None,
    member: str | None,
    is_paid: bool | None,
    balances: bool,
    **period_kwargs,
):
    """View transactions with optional filters, newest first.

    Use --balances to add the running real balance (paid only) and the
    projected balance (everything) after each transaction.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj.get("user_id")
    service = TransactionService(db, user_id=user_id)
    category_service = CategoryService(db, user_id=user_id)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(period_kwargs),
    )

    filters = {
        "start_date": start,
        "end_date": end,
        "transaction_type": TransactionType(transaction_type.lower()) if transaction_type else None,
        "is_paid": is_paid,
    }
    if category:
        filters["category_id"] = resolve_category_or_exit(ctx, category_service, category).id
    if card:
        filters["card_id"] = resolve_card_or_exit(ctx, CardService(db, user_id=user_id), card).id
    if member:
        filters["family_member_id"] = resolve_member_or_exit(
            ctx, FamilyMemberService(db, user_id=user_id), member
        ).id

    transactions = service.list_transactions(**filters)
    if not transactions:
        click.echo("No transactions found.")
        return

    running = calculate_dual_running_balances(transactions) if balances else None
    categories = {cat.id: cat.name for cat in category_service.list_categories()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    header = f"{'Date':<12} {'Name':<30} {'Category':<16} {'Amount':>16} {'Status':<12}"
    if running is not None:
        header += f" {'Real':>16} {'Previsto':>16}"
    click.echo("-" * len(header))
    click.echo(header)
    click.echo("-" * len(header))

    for txn in transactions:
        sign = "+" if txn.type == TransactionType.INCOME else "-"
        name = txn.name
        if txn.installments_total:
            name = f"{name} ({txn.installment_number}/{txn.installments_total})"
        line = (
            f"{format_brazilian_date(txn.date):<12} {name[:30]:<30} "
            f"{categories.get(txn.category_id, '')[:16]:<16} "
            f"{sign + format_currency(txn.amount):>16} "
            f"{get_transaction_status(txn).label:<12}"
        )
        if running is not None:
            line += (
                f" {format_currency(running.saldo_real[txn.id]):>16}"
                f" {format_currency(running.saldo_previsto[txn.id]):>16}"
            )
        click.echo(line)
        click.echo(f"  ID: {txn.id}")

    totals = calculate_transaction_totals(transactions)
    click.echo("-" * len(header))
    click.echo(
        f"TOTAL  Income: {format_currency(totals['income'])} | "
        f"Expenses: {format_currency(totals['expense'])} | "
        f"Balance: {format_currency(totals['balance'])} | Count: {len(transactions)}"
    )


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--name", help="Transaction name")
@click.option("--date", "date_str", help="Transaction date")
@click.option("--amount", help="Positive amount")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    help="Transaction type",
)
@click.option("--category", help="Category name or ID")
@click.option("--description", help="Description, or empty string to clear")
@click.option("--due-date", help="Due date, or empty string to clear")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    name: str | None,
    date_str: str | None,
    amount: str | None,
    transaction_type: str | None,
    category: str | None,
    description: str | None,
    due_date: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        famfin transaction update <id> --amount 75,00
        famfin transaction update <id> --category Lazer --description ""
    """
    db = ctx.obj["db"]
    user_id = ctx.obj.get("user_id")
    service = TransactionService(db, user_id=user_id)

    updates = {}
    try:
        if name is not None:
            updates["name"] = name
        if date_str is not None:
            updates["date"] = parse_date(date_str)
        if amount is not None:
            updates["amount"] = parse_amount(amount)
        if due_date is not None:
            updates["due_date"] = parse_date(due_date) if due_date else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if transaction_type is not None:
        updates["type"] = transaction_type.lower()
    if description is not None:
        updates["description"] = description or None
    if category is not None:
        updates["category_id"] = resolve_category_or_exit(
            ctx, CategoryService(db, user_id=user_id), category
        ).id

    if not updates:
        click.echo("Nothing to update.")
        return

    try:
        service.update_transaction(transaction_id, updates)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("pay")
@click.argument("transaction_id")
@click.option("--undo", is_flag=True, help="Mark as unpaid instead")
@click.pass_context
def pay_transaction(ctx, transaction_id: str, undo: bool) -> None:
    """Mark a transaction as paid (or unpaid with --undo)."""
    service = TransactionService(ctx.obj["db"], user_id=ctx.obj.get("user_id"))
    try:
        txn = service.mark_paid(transaction_id, paid=not undo)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    state = "paid" if txn.is_paid else "unpaid"
    click.echo(f"Marked transaction {transaction_id} as {state}")


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        famfin transaction delete <id>
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db, user_id=ctx.obj.get("user_id"))

    # Get transaction info for display
    txn = transaction_service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    # Confirm deletion
    if not yes and not click.confirm(
        f"Are you sure you want to delete '{txn.name}' ({format_currency(txn.amount)})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        transaction_service.delete_transaction(transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted transaction {transaction_id}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
