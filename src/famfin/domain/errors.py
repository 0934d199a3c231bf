"""Shared domain error messages and error types."""

from dataclasses import dataclass
from typing import Sequence


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only catch ValueError.
    """


@dataclass(frozen=True)
class FieldIssue:
    """A single field-level validation problem."""

    path: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"path": self.path, "message": self.message}


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    def __init__(self, message: str, issues: Sequence[FieldIssue] = ()):
        super().__init__(message)
        self.issues = tuple(issues)

    def issue_paths(self) -> list[str]:
        """Return the field paths that failed."""
        return [issue.path for issue in self.issues]


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transação não encontrada: {transaction_id}"


def category_not_found(category_id: str) -> str:
    """Return message for missing category."""
    return f"Categoria não encontrada: {category_id}"


def card_not_found(card_id: str) -> str:
    """Return message for missing credit card."""
    return f"Cartão não encontrado: {card_id}"


def family_member_not_found(member_id: str) -> str:
    """Return message for missing family member."""
    return f"Membro da família não encontrado: {member_id}"


def family_member_name_taken(name: str) -> str:
    """Return message for a duplicate family member name."""
    return f"Já existe um membro da família chamado '{name}'"


def category_delete_blocked(category_id: str, transaction_count: int) -> str:
    """Return message when a category still has transactions."""
    noun = "transação" if transaction_count == 1 else "transações"
    return (
        f"Não é possível excluir a categoria {category_id}: "
        f"ela possui {transaction_count} {noun}. "
        "Reatribua ou exclua as transações primeiro."
    )


def category_has_children(category_id: str, child_count: int) -> str:
    """Return message when a category still has subcategories."""
    noun = "subcategoria" if child_count == 1 else "subcategorias"
    return (
        f"Não é possível excluir a categoria {category_id}: "
        f"ela possui {child_count} {noun}."
    )


def category_parent_cycle(category_id: str) -> str:
    """Return message when a category would become its own ancestor."""
    return f"A categoria {category_id} não pode ser subcategoria de si mesma"


def card_delete_blocked(card_id: str, transaction_count: int) -> str:
    """Return message when a card still has transactions."""
    noun = "transação" if transaction_count == 1 else "transações"
    return (
        f"Não é possível excluir o cartão {card_id}: "
        f"ele possui {transaction_count} {noun}."
    )


def family_member_delete_blocked(member_id: str, transaction_count: int, card_count: int) -> str:
    """Return message when transactions or cards still point at a family member."""
    links = []
    if transaction_count:
        links.append(f"{transaction_count} {'transação' if transaction_count == 1 else 'transações'}")
    if card_count:
        links.append(f"{card_count} {'cartão' if card_count == 1 else 'cartões'}")
    return (
        f"Não é possível excluir o membro da família {member_id}: "
        f"ele está vinculado a {' e '.join(links)}."
    )
