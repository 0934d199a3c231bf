"""Add transaction command."""

import click

from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import (
    resolve_card_or_exit,
    resolve_category_or_exit,
    resolve_member_or_exit,
)
from famfin.domain.card import CardService
from famfin.domain.category import CategoryService
from famfin.domain.entities import CategoryType, TransactionMode
from famfin.domain.errors import DomainError
from famfin.domain.family import FamilyMemberService
from famfin.domain.transaction import TransactionService
from famfin.utils.amount_parser import format_currency, parse_amount
from famfin.utils.date_parser import format_brazilian_date, parse_date


@click.command("add")
@click.option("--name", required=True, help="Short transaction name")
@click.option(
    "--date",
    "date_str",
    required=True,
    help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today', 'hoje')",
)
@click.option("--amount", required=True, help="Positive amount (e.g., 123.45 or 1.234,56)")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    default="expense",
    help="Transaction type (default: expense)",
)
@click.option("--category", required=True, help="Category name or ID")
@click.option("--description", help="Longer description")
@click.option("--card", help="Credit card name, last four digits or ID")
@click.option("--member", help="Family member name or ID")
@click.option("--due-date", help="Due date (same formats as --date)")
@click.option("--paid", is_flag=True, help="Mark as already paid")
@click.option("--installments", type=int, help="Split into N monthly installments")
@click.option("--recurring", type=int, help="Repeat monthly for N months")
@click.pass_context
def add_transaction(
    ctx,
    name: str,
    date_str: str,
    amount: str,
    transaction_type: str,
    category: str,
    description: str | None,
    card: str | None,
    member: str | None,
    due_date: str | None,
    paid: bool,
    installments: int | None,
    recurring: int | None,
):
    """Add a transaction manually.

    Examples:
        famfin add --name "Mercado" --date hoje --amount 250,40 --category Alimentação
        famfin add --name "Salário" --date 2024-01-05 --amount 5000 --type income --category Salário --paid
        famfin add --name "TV" --date 2024-01-10 --amount 300 --category Compras --installments 10
    """
    db = ctx.obj["db"]
    user_id = ctx.obj.get("user_id")
    transaction_service = TransactionService(db, user_id=user_id)

    try:
        txn_date = parse_date(date_str)
        txn_due_date = parse_date(due_date) if due_date else None
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    category_type = CategoryType(transaction_type.lower())
    category_obj = resolve_category_or_exit(
        ctx, CategoryService(db, user_id=user_id), category, category_type
    )

    payload = {
        "date": txn_date,
        "amount": txn_amount,
        "type": transaction_type.lower(),
        "category_id": category_obj.id,
        "name": name,
        "description": description,
        "due_date": txn_due_date,
        "is_paid": paid,
    }
    if card:
        payload["card_id"] = resolve_card_or_exit(ctx, CardService(db, user_id=user_id), card).id
    if member:
        payload["family_member_id"] = resolve_member_or_exit(
            ctx, FamilyMemberService(db, user_id=user_id), member
        ).id
    if installments:
        payload.update(
            mode=TransactionMode.PARCELADA.value,
            installment_number=1,
            installments_total=installments,
        )
    elif recurring:
        payload.update(is_recurring=True, recurring_months=recurring)

    try:
        created = transaction_service.create_transaction(payload)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    first = created[0]
    click.echo(f"Created {len(created)} transaction(s)")
    click.echo(f"  ID: {first.id}")
    click.echo(f"  Name: {first.name}")
    click.echo(f"  Date: {format_brazilian_date(first.date)}")
    click.echo(f"  Amount: {format_currency(first.amount)} ({first.type.value})")
    click.echo(f"  Category: {category_obj.name}")
    if len(created) > 1:
        click.echo(f"  Last: {format_brazilian_date(created[-1].date)}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
