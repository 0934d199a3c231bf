"""Family member domain service."""

from typing import Any, Mapping, Optional

from famfin.database.base import Storage
from famfin.domain.entities import FamilyMember as FamilyMemberEntity
from famfin.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    family_member_delete_blocked,
    family_member_name_taken,
    family_member_not_found,
)
from famfin.domain.schemas import FamilyMemberCreate, FamilyMemberUpdate, validate_payload
from famfin.logging_utils import get_logger

LOGGER = get_logger(__name__)


class FamilyMemberService:
    """Service for managing family members."""

    def __init__(self, db: Storage, user_id: Optional[str] = None):
        """Initialize family member service.

        Args:
            db: Storage instance
            user_id: Account the members belong to
        """
        self.db = db
        self.user_id = user_id

    def _check_name_available(self, name: str, member_id: Optional[str] = None) -> None:
        existing = self.db.find_family_member_by_name(self.user_id, name)
        if existing is not None and existing.id != member_id:
            raise ConflictError(family_member_name_taken(name))

    def create_member(self, data: Mapping[str, Any]) -> FamilyMemberEntity:
        """Create a family member.

        Args:
            data: Member payload (name, relationship)

        Returns:
            Created member

        Raises:
            ValidationError: If the payload is invalid
            ConflictError: If a member with the same name already exists
        """
        record = validate_payload(FamilyMemberCreate, data).to_record()
        self._check_name_available(record["name"])

        member = self.db.create_family_member(record, user_id=self.user_id)
        LOGGER.info("Created family member '%s'", member.name)
        return member

    def get_member(self, member_id: str) -> Optional[FamilyMemberEntity]:
        """Get family member by ID, or None if not found."""
        return self.db.get_family_member(member_id)

    def find_by_name(self, name: str) -> Optional[FamilyMemberEntity]:
        """Find a family member by name, ignoring case."""
        return self.db.find_family_member_by_name(self.user_id, name)

    def list_members(self) -> list[FamilyMemberEntity]:
        """List family members ordered by name."""
        return self.db.get_all_family_members(user_id=self.user_id)

    def update_member(self, member_id: str, data: Mapping[str, Any]) -> FamilyMemberEntity:
        """Apply a partial update to a family member.

        Raises:
            ValidationError: If the payload is invalid
            ConflictError: If the new name belongs to another member
            NotFoundError: If the member doesn't exist
        """
        updates = validate_payload(FamilyMemberUpdate, data).to_record()
        if updates.get("name"):
            self._check_name_available(updates["name"], member_id=member_id)

        updated = self.db.update_family_member(member_id, updates)
        if updated is None:
            raise NotFoundError(family_member_not_found(member_id))
        return updated

    def delete_member(self, member_id: str) -> None:
        """Delete a family member.

        Raises:
            NotFoundError: If member doesn't exist
            DependencyError: If transactions or cards still point at the member
        """
        if self.db.get_family_member(member_id) is None:
            raise NotFoundError(family_member_not_found(member_id))

        transaction_count = sum(
            1 for txn in self.db.get_all_transactions() if txn.family_member_id == member_id
        )
        card_count = sum(
            1
            for card in self.db.get_all_credit_cards()
            if card.holder_family_member_id == member_id
        )
        if transaction_count or card_count:
            raise DependencyError(
                family_member_delete_blocked(member_id, transaction_count, card_count)
            )

        self.db.delete_family_member(member_id)
        LOGGER.info("Deleted family member %s", member_id)
