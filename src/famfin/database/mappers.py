"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: the ORM stores enums as plain
strings and a few columns under different names, the domain never sees that.
"""

from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional

from famfin.domain import entities as domain
from famfin.database.models import (
    Category as ORMCategory,
    CreditCard as ORMCreditCard,
    FamilyMember as ORMFamilyMember,
    Transaction as ORMTransaction,
)

# Domain field name -> ORM attribute name, where they differ
_FAMILY_MEMBER_COLUMNS = {"relationship": "relationship_type"}


def _decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _plain(value: Any) -> Any:
    """Unwrap enums so they can be stored in string columns."""
    return value.value if isinstance(value, Enum) else value


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        type=domain.CategoryType(orm_category.type),
        color=orm_category.color,
        icon=orm_category.icon,
        parent_id=orm_category.parent_id,
        user_id=orm_category.user_id,
    )


def family_member_to_domain(orm_member: ORMFamilyMember) -> domain.FamilyMember:
    """Convert SQLAlchemy FamilyMember model to domain FamilyMember entity."""
    return domain.FamilyMember(
        id=orm_member.id,
        name=orm_member.name,
        relationship=domain.Relationship(orm_member.relationship_type),
        user_id=orm_member.user_id,
        created_at=orm_member.created_at,
    )


def credit_card_to_domain(orm_card: ORMCreditCard) -> domain.CreditCard:
    """Convert SQLAlchemy CreditCard model to domain CreditCard entity."""
    return domain.CreditCard(
        id=orm_card.id,
        name=orm_card.name,
        last_four_digits=orm_card.last_four_digits,
        card_type=domain.CardType(orm_card.card_type),
        holder=orm_card.holder,
        purpose=orm_card.purpose,
        color=orm_card.color,
        icon=orm_card.icon,
        limit=_decimal(orm_card.limit),
        closing_day=orm_card.closing_day,
        due_day=orm_card.due_day,
        holder_family_member_id=orm_card.holder_family_member_id,
        user_id=orm_card.user_id,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        amount=_decimal(orm_transaction.amount),
        type=domain.TransactionType(orm_transaction.type),
        category_id=orm_transaction.category_id,
        name=orm_transaction.name,
        description=orm_transaction.description,
        mode=domain.TransactionMode(orm_transaction.mode),
        installment_number=orm_transaction.installment_number,
        installments_total=orm_transaction.installments_total,
        card_id=orm_transaction.card_id,
        family_member_id=orm_transaction.family_member_id,
        due_date=orm_transaction.due_date,
        is_paid=orm_transaction.is_paid,
        is_recurring=orm_transaction.is_recurring,
        recurring_months=orm_transaction.recurring_months,
        source=domain.TransactionSource(orm_transaction.source),
        source_bank=orm_transaction.source_bank,
        user_id=orm_transaction.user_id,
    )


def apply_record(orm_obj: Any, record: Mapping[str, Any]) -> None:
    """Copy domain record values onto an ORM object.

    Keys the model does not define are ignored, as is ``id``.
    """
    columns = _FAMILY_MEMBER_COLUMNS if isinstance(orm_obj, ORMFamilyMember) else {}
    for key, value in record.items():
        if key == "id":
            continue
        attribute = columns.get(key, key)
        if hasattr(type(orm_obj), attribute):
            setattr(orm_obj, attribute, _plain(value))
