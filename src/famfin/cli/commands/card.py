"""Credit card management commands."""

import click

from famfin.cli.error_handling import handle_domain_error
from famfin.cli.resolution import resolve_card_or_exit, resolve_member_or_exit
from famfin.domain.card import CardService
from famfin.domain.errors import DomainError
from famfin.domain.family import FamilyMemberService
from famfin.utils.amount_parser import format_currency, parse_amount


@click.group()
def card_group():
    """Manage credit cards."""
    pass


@card_group.command("list")
@click.pass_context
def list_cards(ctx):
    """List credit cards."""
    service = CardService(ctx.obj["db"], user_id=ctx.obj.get("user_id"))

    cards = service.list_cards()
    if not cards:
        click.echo("No cards found.")
        return

    click.echo(f"\n{'Name':<20} {'Digits':<8} {'Type':<10} {'Holder':<16} {'Limit':>16} {'Cycle':<8}")
    click.echo("-" * 84)
    for card in cards:
        limit = format_currency(card.limit) if card.limit is not None else "-"
        cycle = f"{card.closing_day or '-'}/{card.due_day or '-'}"
        click.echo(
            f"{card.name[:20]:<20} {card.last_four_digits:<8} {card.card_type.value:<10} "
            f"{card.holder[:16]:<16} {limit:>16} {cycle:<8}"
        )
        click.echo(f"  ID: {card.id}")


@card_group.command("create")
@click.argument("name")
@click.option("--last-four", required=True, help="Last four digits of the card number")
@click.option(
    "--type",
    "card_type",
    type=click.Choice(["physical", "virtual"], case_sensitive=False),
    default="physical",
    help="Card type (default: physical)",
)
@click.option("--holder", required=True, help="Name printed on the card")
@click.option("--purpose", default="pessoal", help="What the card is used for (default: pessoal)")
@click.option("--color", default="#8b5cf6", help="Hex color (default: #8b5cf6)")
@click.option("--limit", help="Credit limit")
@click.option("--closing-day", type=int, help="Invoice closing day (1-31)")
@click.option("--due-day", type=int, help="Invoice due day (1-31)")
@click.option("--member", help="Family member who holds the card (name or ID)")
@click.pass_context
def create_card(
    ctx,
    name: str,
    last_four: str,
    card_type: str,
    holder: str,
    purpose: str,
    color: str,
    limit: str | None,
    closing_day: int | None,
    due_day: int | None,
    member: str | None,
):
    """Create a credit card.

    Examples:
        famfin card create "Nubank Roxinho" --last-four 1234 --holder "Maria" --closing-day 3 --due-day 10
    """
    db = ctx.obj["db"]
    user_id = ctx.obj.get("user_id")
    service = CardService(db, user_id=user_id)

    payload = {
        "name": name,
        "last_four_digits": last_four,
        "card_type": card_type.lower(),
        "holder": holder,
        "purpose": purpose,
        "color": color,
        "closing_day": closing_day,
        "due_day": due_day,
    }
    if limit is not None:
        try:
            payload["limit"] = parse_amount(limit)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)
    if member:
        payload["holder_family_member_id"] = resolve_member_or_exit(
            ctx, FamilyMemberService(db, user_id=user_id), member
        ).id

    try:
        card = service.create_card(payload)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created card '{card.name}' ending in {card.last_four_digits} (ID: {card.id})")


@card_group.command("delete")
@click.argument("card")
@click.pass_context
def delete_card(ctx, card: str):
    """Delete a credit card."""
    service = CardService(ctx.obj["db"], user_id=ctx.obj.get("user_id"))
    card_obj = resolve_card_or_exit(ctx, service, card)

    try:
        service.delete_card(card_obj.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted card '{card_obj.name}'")


def register_commands(cli):
    """Register card commands with main CLI."""
    cli.add_command(card_group, name="card")
