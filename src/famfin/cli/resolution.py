"""CLI helpers for resolving names or IDs to entities."""

import click

from famfin.domain.category import CategoryService
from famfin.domain.card import CardService
from famfin.domain.entities import Category, CategoryType, CreditCard, FamilyMember
from famfin.domain.family import FamilyMemberService
from famfin.domain.schemas import is_valid_uuid


def resolve_category_or_exit(
    ctx: click.Context,
    service: CategoryService,
    value: str,
    category_type: CategoryType | None = None,
) -> Category:
    """Resolve a category ID or name, or exit with a CLI error.

    Names are matched case-insensitively within the given type, since
    "Outros" exists for both income and expense.
    """
    category = service.get_category(value) if is_valid_uuid(value) else None
    if category is None:
        category = service.find_category_by_name(value, category_type)
    if category is None:
        click.echo(f"Error: Category '{value}' not found", err=True)
        ctx.exit(1)
    return category


def resolve_card_or_exit(ctx: click.Context, service: CardService, value: str) -> CreditCard:
    """Resolve a card ID, name or last four digits, or exit with a CLI error."""
    card = service.get_card(value) if is_valid_uuid(value) else None
    if card is None:
        wanted = value.strip().lower()
        for candidate in service.list_cards():
            if candidate.name.lower() == wanted or candidate.last_four_digits == wanted:
                card = candidate
                break
    if card is None:
        click.echo(f"Error: Card '{value}' not found", err=True)
        ctx.exit(1)
    return card


def resolve_member_or_exit(
    ctx: click.Context, service: FamilyMemberService, value: str
) -> FamilyMember:
    """Resolve a family member ID or name, or exit with a CLI error."""
    member = service.get_member(value) if is_valid_uuid(value) else None
    if member is None:
        member = service.find_by_name(value)
    if member is None:
        click.echo(f"Error: Family member '{value}' not found", err=True)
        ctx.exit(1)
    return member
