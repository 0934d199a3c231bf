"""Abstract storage interface.

Every backend implements the same small CRUD contract per entity type.
Lookups, updates and deletes on a missing id never raise: ``get_*`` and
``update_*`` return None and ``delete_*`` is a no-op. Services decide whether
a miss is an error.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence

# domain/__init__.py loads services lazily, so this import does not cycle back here
from famfin.domain.entities import (
    Category,
    CreditCard,
    FamilyMember,
    Transaction,
)

Record = Mapping[str, Any]


class Storage(ABC):
    """Abstract storage interface for famfin."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the backing store."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the backing store."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize schema (create tables) if the backend has one."""
        pass

    # Category operations
    @abstractmethod
    def get_all_categories(self, user_id: Optional[str] = None) -> list[Category]:
        """List categories ordered by name, optionally filtered by owner."""
        pass

    @abstractmethod
    def get_category(self, category_id: str) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def create_category(self, data: Record, user_id: Optional[str] = None) -> Category:
        """Create a category."""
        pass

    @abstractmethod
    def update_category(self, category_id: str, updates: Record) -> Optional[Category]:
        """Update a category. Returns None if it does not exist."""
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> None:
        """Delete a category if it exists."""
        pass

    # Transaction operations
    @abstractmethod
    def get_all_transactions(self, user_id: Optional[str] = None) -> list[Transaction]:
        """List transactions sorted by date, newest first."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def create_transaction(self, data: Record, user_id: Optional[str] = None) -> Transaction:
        """Create a transaction."""
        pass

    @abstractmethod
    def batch_create_transactions(
        self, records: Sequence[Record], user_id: Optional[str] = None
    ) -> list[Transaction]:
        """Create several transactions at once, preserving input order."""
        pass

    @abstractmethod
    def update_transaction(self, transaction_id: str, updates: Record) -> Optional[Transaction]:
        """Update a transaction. Returns None if it does not exist."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction if it exists."""
        pass

    @abstractmethod
    def count_category_transactions(self, category_id: str) -> int:
        """Count transactions assigned to a category."""
        pass

    # Credit card operations
    @abstractmethod
    def get_all_credit_cards(self, user_id: Optional[str] = None) -> list[CreditCard]:
        """List credit cards ordered by name."""
        pass

    @abstractmethod
    def get_credit_card(self, card_id: str) -> Optional[CreditCard]:
        """Get credit card by ID."""
        pass

    @abstractmethod
    def create_credit_card(self, data: Record, user_id: Optional[str] = None) -> CreditCard:
        """Create a credit card."""
        pass

    @abstractmethod
    def update_credit_card(self, card_id: str, updates: Record) -> Optional[CreditCard]:
        """Update a credit card. Returns None if it does not exist."""
        pass

    @abstractmethod
    def delete_credit_card(self, card_id: str) -> None:
        """Delete a credit card if it exists."""
        pass

    # Family member operations
    @abstractmethod
    def get_all_family_members(self, user_id: Optional[str] = None) -> list[FamilyMember]:
        """List family members ordered by name."""
        pass

    @abstractmethod
    def get_family_member(self, member_id: str) -> Optional[FamilyMember]:
        """Get family member by ID."""
        pass

    @abstractmethod
    def find_family_member_by_name(
        self, user_id: Optional[str], name: str
    ) -> Optional[FamilyMember]:
        """Find a family member by exact name (case-insensitive)."""
        pass

    @abstractmethod
    def create_family_member(self, data: Record, user_id: Optional[str] = None) -> FamilyMember:
        """Create a family member."""
        pass

    @abstractmethod
    def update_family_member(self, member_id: str, updates: Record) -> Optional[FamilyMember]:
        """Update a family member. Returns None if it does not exist."""
        pass

    @abstractmethod
    def delete_family_member(self, member_id: str) -> None:
        """Delete a family member if it exists."""
        pass
