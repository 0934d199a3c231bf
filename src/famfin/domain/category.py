"""Category domain service."""

from typing import Any, Mapping, Optional

from famfin.database.base import Storage
from famfin.domain.entities import Category as CategoryEntity, CategoryType
from famfin.domain.errors import (
    DependencyError,
    FieldIssue,
    NotFoundError,
    ValidationError,
    category_delete_blocked,
    category_has_children,
    category_not_found,
    category_parent_cycle,
)
from famfin.domain.schemas import CategoryCreate, CategoryUpdate, validate_payload
from famfin.logging_utils import get_logger

LOGGER = get_logger(__name__)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Storage, user_id: Optional[str] = None):
        """Initialize category service.

        Args:
            db: Storage instance
            user_id: Owner of created categories; listing also includes defaults
        """
        self.db = db
        self.user_id = user_id

    def create_category(self, data: Mapping[str, Any]) -> CategoryEntity:
        """Create a category.

        Args:
            data: Category payload (name, type, color, optional icon/parent)

        Returns:
            Created category

        Raises:
            ValidationError: If the payload is invalid
            NotFoundError: If the parent category doesn't exist
        """
        record = validate_payload(CategoryCreate, data).to_record()
        parent_id = record.get("parent_id")
        if parent_id is not None and self.db.get_category(parent_id) is None:
            raise NotFoundError(category_not_found(parent_id))

        category = self.db.create_category(record, user_id=self.user_id)
        LOGGER.info("Created category '%s' (%s)", category.name, category.id)
        return category

    def get_category(self, category_id: str) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(category_id)

    def find_category_by_name(
        self, name: str, category_type: Optional[CategoryType] = None
    ) -> Optional[CategoryEntity]:
        """Find a category by name (case-insensitive), optionally of one type."""
        wanted = name.strip().lower()
        for category in self.list_categories(category_type):
            if category.name.lower() == wanted:
                return category
        return None

    def list_categories(
        self, category_type: Optional[CategoryType] = None
    ) -> list[CategoryEntity]:
        """List categories ordered by name.

        Args:
            category_type: Optional income/expense filter

        Returns:
            List of category entities
        """
        categories = self.db.get_all_categories(user_id=self.user_id)
        if category_type is not None:
            categories = [cat for cat in categories if cat.type == category_type]
        return categories

    def get_category_tree(
        self, category_type: Optional[CategoryType] = None
    ) -> list[dict[str, Any]]:
        """Get full category tree.

        Returns:
            List of root nodes, each ``{"category": Category, "children": [...]}``
        """
        categories = self.list_categories(category_type)
        known = {cat.id for cat in categories}
        nodes = {cat.id: {"category": cat, "children": []} for cat in categories}

        roots = []
        for cat in categories:
            if cat.parent_id is not None and cat.parent_id in known:
                nodes[cat.parent_id]["children"].append(nodes[cat.id])
            else:
                roots.append(nodes[cat.id])
        return roots

    def format_category_path(self, category_id: str) -> str:
        """Get full path for a category.

        Args:
            category_id: Category ID

        Returns:
            Full category path (e.g., "Moradia > Aluguel")
        """
        cat = self.get_category(category_id)
        if cat is None:
            return ""

        path_parts = [cat.name]
        seen = {cat.id}
        current_parent_id = cat.parent_id

        while current_parent_id is not None and current_parent_id not in seen:
            parent = self.get_category(current_parent_id)
            if parent is None:
                break
            path_parts.append(parent.name)
            seen.add(parent.id)
            current_parent_id = parent.parent_id

        return " > ".join(reversed(path_parts))

    def update_category(self, category_id: str, data: Mapping[str, Any]) -> CategoryEntity:
        """Apply a partial update to a category.

        Raises:
            ValidationError: If the payload is invalid or creates a cycle
            NotFoundError: If the category or the new parent doesn't exist
        """
        updates = validate_payload(CategoryUpdate, data).to_record()

        parent_id = updates.get("parent_id")
        if parent_id is not None:
            if self.db.get_category(parent_id) is None:
                raise NotFoundError(category_not_found(parent_id))
            if self._is_descendant(parent_id, category_id):
                message = category_parent_cycle(category_id)
                raise ValidationError(message, [FieldIssue("parentId", message)])

        updated = self.db.update_category(category_id, updates)
        if updated is None:
            raise NotFoundError(category_not_found(category_id))
        return updated

    def _is_descendant(self, candidate_id: str, ancestor_id: str) -> bool:
        """True if candidate_id is ancestor_id or lies beneath it."""
        current: Optional[str] = candidate_id
        seen: set[str] = set()
        while current is not None and current not in seen:
            if current == ancestor_id:
                return True
            seen.add(current)
            parent = self.db.get_category(current)
            current = parent.parent_id if parent is not None else None
        return False

    def delete_category(self, category_id: str) -> None:
        """Delete a category.

        Args:
            category_id: Category ID to delete

        Raises:
            NotFoundError: If category doesn't exist
            DependencyError: If transactions or subcategories still use it
        """
        if self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        transaction_count = self.db.count_category_transactions(category_id)
        if transaction_count > 0:
            raise DependencyError(category_delete_blocked(category_id, transaction_count))

        child_count = sum(
            1 for cat in self.db.get_all_categories() if cat.parent_id == category_id
        )
        if child_count > 0:
            raise DependencyError(category_has_children(category_id, child_count))

        self.db.delete_category(category_id)
        LOGGER.info("Deleted category %s", category_id)
