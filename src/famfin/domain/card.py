"""Credit card domain service."""

from typing import Any, Mapping, Optional

from famfin.database.base import Storage
from famfin.domain.entities import CreditCard as CreditCardEntity
from famfin.domain.errors import (
    DependencyError,
    NotFoundError,
    card_delete_blocked,
    card_not_found,
    family_member_not_found,
)
from famfin.domain.schemas import CardCreate, CardUpdate, validate_payload
from famfin.logging_utils import get_logger

LOGGER = get_logger(__name__)


class CardService:
    """Service for managing credit cards."""

    def __init__(self, db: Storage, user_id: Optional[str] = None):
        """Initialize card service.

        Args:
            db: Storage instance
            user_id: Owner of the cards
        """
        self.db = db
        self.user_id = user_id

    def _check_holder(self, record: Mapping[str, Any]) -> None:
        member_id = record.get("holder_family_member_id")
        if member_id is not None and self.db.get_family_member(member_id) is None:
            raise NotFoundError(family_member_not_found(member_id))

    def create_card(self, data: Mapping[str, Any]) -> CreditCardEntity:
        """Create a credit card.

        Args:
            data: Card payload

        Returns:
            Created card

        Raises:
            ValidationError: If the payload is invalid
            NotFoundError: If the holder family member doesn't exist
        """
        record = validate_payload(CardCreate, data).to_record()
        self._check_holder(record)

        card = self.db.create_credit_card(record, user_id=self.user_id)
        LOGGER.info("Created card '%s' ending in %s", card.name, card.last_four_digits)
        return card

    def get_card(self, card_id: str) -> Optional[CreditCardEntity]:
        """Get card by ID, or None if not found."""
        return self.db.get_credit_card(card_id)

    def list_cards(self) -> list[CreditCardEntity]:
        """List cards ordered by name."""
        return self.db.get_all_credit_cards(user_id=self.user_id)

    def update_card(self, card_id: str, data: Mapping[str, Any]) -> CreditCardEntity:
        """Apply a partial update to a card.

        Raises:
            ValidationError: If the payload is invalid
            NotFoundError: If the card or the holder doesn't exist
        """
        updates = validate_payload(CardUpdate, data).to_record()
        self._check_holder(updates)

        updated = self.db.update_credit_card(card_id, updates)
        if updated is None:
            raise NotFoundError(card_not_found(card_id))
        return updated

    def delete_card(self, card_id: str) -> None:
        """Delete a card.

        Raises:
            NotFoundError: If card doesn't exist
            DependencyError: If transactions still use the card
        """
        if self.db.get_credit_card(card_id) is None:
            raise NotFoundError(card_not_found(card_id))

        transaction_count = sum(
            1 for txn in self.db.get_all_transactions() if txn.card_id == card_id
        )
        if transaction_count > 0:
            raise DependencyError(card_delete_blocked(card_id, transaction_count))

        self.db.delete_credit_card(card_id)
        LOGGER.info("Deleted card %s", card_id)
