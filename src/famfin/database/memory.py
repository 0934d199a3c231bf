"""In-memory storage implementation.

A plain dict per entity type with linear scans. Used for demos, the
``memory`` backend setting, and tests that do not need SQL.
"""

import uuid
from datetime import datetime, UTC
from dataclasses import fields, replace
from typing import Any, Optional, Sequence, TypeVar

from famfin.database.base import Record, Storage
from famfin.domain.defaults import DEFAULT_CATEGORIES
from famfin.domain.entities import (
    Category,
    CreditCard,
    FamilyMember,
    Transaction,
)

EntityT = TypeVar("EntityT")


def _build(entity_cls: type[EntityT], data: Record, **extra: Any) -> EntityT:
    """Build an entity from a record, ignoring keys it does not define."""
    names = {f.name for f in fields(entity_cls)}
    values = {key: value for key, value in data.items() if key in names}
    values.update(extra)
    return entity_cls(**values)


def _apply(entity: EntityT, updates: Record) -> EntityT:
    names = {f.name for f in fields(entity)} - {"id"}
    return replace(entity, **{key: value for key, value in updates.items() if key in names})


class MemoryStorage(Storage):
    """Dict-backed implementation of Storage interface."""

    def __init__(self, seed_defaults: bool = True):
        """Initialize memory storage.

        Args:
            seed_defaults: If True, preload the default category set
        """
        self.categories: dict[str, Category] = {}
        self.transactions: dict[str, Transaction] = {}
        self.credit_cards: dict[str, CreditCard] = {}
        self.family_members: dict[str, FamilyMember] = {}

        if seed_defaults:
            for category_id, name, category_type, color in DEFAULT_CATEGORIES:
                self.categories[category_id] = Category(
                    id=category_id, name=name, type=category_type, color=color
                )

    def connect(self) -> None:
        """Nothing to connect."""
        pass

    def disconnect(self) -> None:
        """Nothing to disconnect."""
        pass

    def initialize_schema(self) -> None:
        """Nothing to create."""
        pass

    @staticmethod
    def _owned(items, user_id: Optional[str]) -> list:
        # Entities without an owner (seeded defaults) are visible to everyone
        return [
            item for item in items
            if user_id is None or item.user_id is None or item.user_id == user_id
        ]

    # Category operations
    def get_all_categories(self, user_id: Optional[str] = None) -> list[Category]:
        return sorted(self._owned(self.categories.values(), user_id), key=lambda c: c.name)

    def get_category(self, category_id: str) -> Optional[Category]:
        return self.categories.get(category_id)

    def create_category(self, data: Record, user_id: Optional[str] = None) -> Category:
        category = _build(Category, data, id=str(uuid.uuid4()), user_id=user_id)
        self.categories[category.id] = category
        return category

    def update_category(self, category_id: str, updates: Record) -> Optional[Category]:
        existing = self.categories.get(category_id)
        if existing is None:
            return None
        updated = _apply(existing, updates)
        self.categories[category_id] = updated
        return updated

    def delete_category(self, category_id: str) -> None:
        self.categories.pop(category_id, None)

    # Transaction operations
    def get_all_transactions(self, user_id: Optional[str] = None) -> list[Transaction]:
        owned = [
            txn for txn in self.transactions.values()
            if user_id is None or txn.user_id == user_id
        ]
        return sorted(owned, key=lambda t: t.date, reverse=True)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self.transactions.get(transaction_id)

    def create_transaction(self, data: Record, user_id: Optional[str] = None) -> Transaction:
        transaction = _build(Transaction, data, id=str(uuid.uuid4()), user_id=user_id)
        self.transactions[transaction.id] = transaction
        return transaction

    def batch_create_transactions(
        self, records: Sequence[Record], user_id: Optional[str] = None
    ) -> list[Transaction]:
        return [self.create_transaction(record, user_id=user_id) for record in records]

    def update_transaction(self, transaction_id: str, updates: Record) -> Optional[Transaction]:
        existing = self.transactions.get(transaction_id)
        if existing is None:
            return None
        updated = _apply(existing, updates)
        self.transactions[transaction_id] = updated
        return updated

    def delete_transaction(self, transaction_id: str) -> None:
        self.transactions.pop(transaction_id, None)

    def count_category_transactions(self, category_id: str) -> int:
        return sum(1 for txn in self.transactions.values() if txn.category_id == category_id)

    # Credit card operations
    def get_all_credit_cards(self, user_id: Optional[str] = None) -> list[CreditCard]:
        return sorted(self._owned(self.credit_cards.values(), user_id), key=lambda c: c.name)

    def get_credit_card(self, card_id: str) -> Optional[CreditCard]:
        return self.credit_cards.get(card_id)

    def create_credit_card(self, data: Record, user_id: Optional[str] = None) -> CreditCard:
        card = _build(CreditCard, data, id=str(uuid.uuid4()), user_id=user_id)
        self.credit_cards[card.id] = card
        return card

    def update_credit_card(self, card_id: str, updates: Record) -> Optional[CreditCard]:
        existing = self.credit_cards.get(card_id)
        if existing is None:
            return None
        updated = _apply(existing, updates)
        self.credit_cards[card_id] = updated
        return updated

    def delete_credit_card(self, card_id: str) -> None:
        self.credit_cards.pop(card_id, None)

    # Family member operations
    def get_all_family_members(self, user_id: Optional[str] = None) -> list[FamilyMember]:
        return sorted(self._owned(self.family_members.values(), user_id), key=lambda m: m.name)

    def get_family_member(self, member_id: str) -> Optional[FamilyMember]:
        return self.family_members.get(member_id)

    def find_family_member_by_name(
        self, user_id: Optional[str], name: str
    ) -> Optional[FamilyMember]:
        wanted = name.strip().lower()
        for member in self._owned(self.family_members.values(), user_id):
            if member.name.lower() == wanted:
                return member
        return None

    def create_family_member(self, data: Record, user_id: Optional[str] = None) -> FamilyMember:
        member = _build(
            FamilyMember,
            data,
            id=str(uuid.uuid4()),
            user_id=user_id,
            created_at=datetime.now(UTC),
        )
        self.family_members[member.id] = member
        return member

    def update_family_member(self, member_id: str, updates: Record) -> Optional[FamilyMember]:
        existing = self.family_members.get(member_id)
        if existing is None:
            return None
        updated = _apply(existing, updates)
        self.family_members[member_id] = updated
        return updated

    def delete_family_member(self, member_id: str) -> None:
        self.family_members.pop(member_id, None)
