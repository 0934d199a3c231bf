"""Transaction domain service."""

from dataclasses import asdict
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from famfin.database.base import Storage
from famfin.domain.calculations import (
    calculate_dual_running_balances,
    calculate_summary,
    get_transaction_status,
)
from famfin.domain.entities import (
    DualRunningBalances,
    Transaction as TransactionEntity,
    TransactionSummary,
    TransactionType,
)
from famfin.domain.errors import (
    NotFoundError,
    card_not_found,
    category_not_found,
    family_member_not_found,
    transaction_not_found,
)
from famfin.domain.generators import process_transaction
from famfin.domain.schemas import (
    TransactionBatch,
    TransactionCreate,
    TransactionUpdate,
    validate_payload,
)
from famfin.logging_utils import get_logger

LOGGER = get_logger(__name__)


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Storage, user_id: Optional[str] = None):
        """Initialize transaction service.

        Args:
            db: Storage instance
            user_id: Owner of every transaction created or listed
        """
        self.db = db
        self.user_id = user_id

    def _check_references(self, record: Mapping[str, Any]) -> None:
        """Verify that referenced category, card and family member exist.

        Raises:
            NotFoundError: If any referenced entity is missing
        """
        category_id = record.get("category_id")
        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        card_id = record.get("card_id")
        if card_id is not None and self.db.get_credit_card(card_id) is None:
            raise NotFoundError(card_not_found(card_id))

        member_id = record.get("family_member_id")
        if member_id is not None and self.db.get_family_member(member_id) is None:
            raise NotFoundError(family_member_not_found(member_id))

    def create_transaction(self, data: Mapping[str, Any]) -> list[TransactionEntity]:
        """Create a transaction, expanding installments and recurrences.

        Args:
            data: Transaction payload (camelCase or snake_case keys)

        Returns:
            Every created transaction, in chronological order

        Raises:
            ValidationError: If the payload is invalid
            NotFoundError: If a referenced category, card or member doesn't exist
        """
        record = validate_payload(TransactionCreate, data).to_record()
        self._check_references(record)

        records = process_transaction(record)
        if len(records) == 1:
            created = [self.db.create_transaction(records[0], user_id=self.user_id)]
        else:
            created = self.db.batch_create_transactions(records, user_id=self.user_id)
        LOGGER.info("Created %s transaction(s) for '%s'", len(created), record["name"])
        return created

    def batch_create_transactions(self, data: Mapping[str, Any]) -> list[TransactionEntity]:
        """Create several transactions at once, without series expansion.

        Args:
            data: Payload with a non-empty ``transactions`` list

        Returns:
            Created transactions in input order

        Raises:
            ValidationError: If the payload or any transaction is invalid
            NotFoundError: If a referenced entity doesn't exist
        """
        batch = validate_payload(TransactionBatch, data)
        records = [item.to_record() for item in batch.transactions]
        for record in records:
            self._check_references(record)

        created = self.db.batch_create_transactions(records, user_id=self.user_id)
        LOGGER.info("Batch created %s transactions", len(created))
        return created

    def get_transaction(self, transaction_id: str) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        transaction_type: Optional[TransactionType] = None,
        category_id: Optional[str] = None,
        card_id: Optional[str] = None,
        family_member_id: Optional[str] = None,
        is_paid: Optional[bool] = None,
    ) -> list[TransactionEntity]:
        """List transactions with optional filters, newest first.

        Args:
            start_date: Optional start date (inclusive)
            end_date: Optional end date (inclusive)
            transaction_type: Optional income/expense filter
            category_id: Optional category filter
            card_id: Optional credit card filter
            family_member_id: Optional family member filter
            is_paid: Optional paid/unpaid filter

        Returns:
            List of transaction entities
        """
        transactions = self.db.get_all_transactions(user_id=self.user_id)

        def keep(txn: TransactionEntity) -> bool:
            if start_date is not None and txn.date < start_date:
                return False
            if end_date is not None and txn.date > end_date:
                return False
            if transaction_type is not None and txn.type != transaction_type:
                return False
            if category_id is not None and txn.category_id != category_id:
                return False
            if card_id is not None and txn.card_id != card_id:
                return False
            if family_member_id is not None and txn.family_member_id != family_member_id:
                return False
            if is_paid is not None and txn.is_paid != is_paid:
                return False
            return True

        return [txn for txn in transactions if keep(txn)]

    def update_transaction(
        self, transaction_id: str, data: Mapping[str, Any]
    ) -> TransactionEntity:
        """Apply a partial update to a transaction.

        Args:
            transaction_id: Transaction ID to update
            data: Fields to change; omitted fields are left alone

        Returns:
            The updated transaction

        Raises:
            ValidationError: If the payload is invalid
            NotFoundError: If the transaction or a referenced entity doesn't exist
        """
        updates = validate_payload(TransactionUpdate, data).to_record()
        self._check_references(updates)

        updated = self.db.update_transaction(transaction_id, updates)
        if updated is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return updated

    def mark_paid(self, transaction_id: str, paid: bool = True) -> TransactionEntity:
        """Set the paid flag of a transaction.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        updated = self.db.update_transaction(transaction_id, {"is_paid": paid})
        if updated is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return updated

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Args:
            transaction_id: Transaction ID to delete

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        if self.db.get_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        self.db.delete_transaction(transaction_id)
        LOGGER.info("Deleted transaction %s", transaction_id)

    def get_summary(self, **filters: Any) -> TransactionSummary:
        """Summarize the transactions matching ``list_transactions`` filters."""
        return calculate_summary(self.list_transactions(**filters))

    def get_running_balances(self, **filters: Any) -> DualRunningBalances:
        """Running real and projected balances for the filtered transactions."""
        return calculate_dual_running_balances(self.list_transactions(**filters))

    def enrich_transactions(
        self, transactions: Iterable[TransactionEntity], today: Optional[date] = None
    ) -> list[dict[str, Any]]:
        """Attach card, family member and status details to transactions.

        Args:
            transactions: Transactions to enrich
            today: Reference date for the status, defaults to today

        Returns:
            One dict per transaction with ``card``, ``family_member`` and
            ``status`` keys added
        """
        cards = {card.id: card for card in self.db.get_all_credit_cards(user_id=self.user_id)}
        members = {
            member.id: member
            for member in self.db.get_all_family_members(user_id=self.user_id)
        }

        enriched = []
        for txn in transactions:
            card = cards.get(txn.card_id) if txn.card_id else None
            member = members.get(txn.family_member_id) if txn.family_member_id else None
            status = get_transaction_status(txn, today=today)

            item = asdict(txn)
            item["card"] = (
                {
                    "id": card.id,
                    "name": card.name,
                    "last_four_digits": card.last_four_digits,
                    "card_type": card.card_type,
                }
                if card is not None
                else None
            )
            item["family_member"] = (
                {"id": member.id, "name": member.name} if member is not None else None
            )
            item["status"] = {"status": status.status, "label": status.label}
            enriched.append(item)
        return enriched
