"""Summary command."""

from decimal import Decimal

import click

from famfin.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from famfin.cli.resolution import resolve_card_or_exit, resolve_member_or_exit
from famfin.domain.calculations import calculate_summary, calculate_transaction_totals
from famfin.domain.card import CardService
from famfin.domain.category import CategoryService
from famfin.domain.entities import TransactionType
from famfin.domain.family import FamilyMemberService
from famfin.domain.transaction import TransactionService
from famfin.utils.amount_parser import format_currency
from famfin.utils.date_parser import format_brazilian_date


def _period_label(start, end) -> str:
    if start is None and end is None:
        return "all time"
    if start is None:
        return f"until {format_brazilian_date(end)}"
    if end is None:
        return f"since {format_brazilian_date(start)}"
    return f"{format_brazilian_date(start)} - {format_brazilian_date(end)}"


@click.command("summary")
@period_options
@click.option("--card", help="Only transactions of this credit card")
@click.option("--member", help="Only transactions of this family member")
@click.option("--by-category", is_flag=True, help="Break expenses down by category")
@click.pass_context
def summary(
    ctx,
    start_date: str | None,
    end_date: str | None,
    card: str | None,
    member: str | None,
    by_category: bool,
    **period_kwargs,
):
    """Show realized, pending and projected balances.

    Saldo real counts paid transactions only. A receber and a pagar are the
    unpaid income and expenses; saldo previsto is where the balance ends up
    once everything is settled.

    Examples:
        famfin summary --this-month
        famfin summary --start-date 01/01/2024 --end-date 31/03/2024 --by-category
    """
    db = ctx.obj["db"]
    user_id = ctx.obj.get("user_id")
    service = TransactionService(db, user_id=user_id)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(period_kwargs),
    )

    filters = {"start_date": start, "end_date": end}
    if card:
        filters["card_id"] = resolve_card_or_exit(ctx, CardService(db, user_id=user_id), card).id
    if member:
        filters["family_member_id"] = resolve_member_or_exit(
            ctx, FamilyMemberService(db, user_id=user_id), member
        ).id

    transactions = service.list_transactions(**filters)
    result = calculate_summary(transactions)
    totals = calculate_transaction_totals(transactions)

    click.echo(f"\nSummary ({_period_label(start, end)}), {len(transactions)} transaction(s)")
    click.echo("=" * 44)
    click.echo(f"{'Saldo real':<20} {format_currency(result.saldo_real):>22}")
    click.echo(f"{'A receber':<20} {format_currency(result.a_receber):>22}")
    click.echo(f"{'A pagar':<20} {format_currency(result.a_pagar):>22}")
    click.echo(f"{'Saldo previsto':<20} {format_currency(result.saldo_previsto):>22}")
    click.echo("-" * 44)
    click.echo(f"{'Total income':<20} {format_currency(totals['income']):>22}")
    click.echo(f"{'Total expenses':<20} {format_currency(totals['expense']):>22}")

    if by_category:
        names = {
            cat.id: cat.name
            for cat in CategoryService(db, user_id=user_id).list_categories()
        }
        per_category: dict[str, Decimal] = {}
        for txn in transactions:
            if txn.type != TransactionType.EXPENSE:
                continue
            key = names.get(txn.category_id, "?")
            per_category[key] = per_category.get(key, Decimal("0")) + txn.amount

        click.echo("\nExpenses by category:")
        for name, amount in sorted(per_category.items(), key=lambda item: item[1], reverse=True):
            click.echo(f"  {name:<24} {format_currency(amount):>18}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
