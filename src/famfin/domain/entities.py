"""Domain model entities for famfin.

These are pure data classes representing business concepts, independent of
the storage backend. Both the in-memory store and the SQLAlchemy store hand
these out, so services and the aggregation layer never see ORM rows.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionMode(str, Enum):
    """Single purchase (avulsa) or one of N installments (parcelada)."""

    AVULSA = "avulsa"
    PARCELADA = "parcelada"


class TransactionSource(str, Enum):
    """Where a transaction came from."""

    MANUAL = "manual"
    CREDIT_CARD_IMPORT = "credit_card_import"
    BANK_STATEMENT_IMPORT = "bank_statement_import"


class CategoryType(str, Enum):
    """Category kind, matches the transaction direction it groups."""

    INCOME = "income"
    EXPENSE = "expense"


class CardType(str, Enum):
    """Credit card form factor."""

    PHYSICAL = "physical"
    VIRTUAL = "virtual"


class Relationship(str, Enum):
    """Relationship of a family member to the account owner."""

    SELF = "self"
    SPOUSE = "spouse"
    CHILD = "child"
    PARENT = "parent"
    SIBLING = "sibling"
    OTHER = "other"


class StatementType(str, Enum):
    """Statement layouts accepted by the import endpoint."""

    BRADESCO_CREDIT = "bradesco_credit"
    BRADESCO_DEBIT = "bradesco_debit"
    INTER_CREDIT = "inter_credit"
    NUBANK_CREDIT = "nubank_credit"


class TransactionStatus(str, Enum):
    """Payment status of a transaction relative to today."""

    PAID = "paid"
    PENDING = "pending"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"


@dataclass(frozen=True)
class Category:
    """Category domain entity, optionally nested under a parent."""

    id: str
    name: str
    type: CategoryType
    color: str
    icon: Optional[str] = None
    parent_id: Optional[str] = None
    user_id: Optional[str] = None


@dataclass(frozen=True)
class CreditCard:
    """Credit card domain entity."""

    id: str
    name: str
    last_four_digits: str
    card_type: CardType
    holder: str
    purpose: str
    color: str
    icon: Optional[str] = None
    limit: Optional[Decimal] = None
    closing_day: Optional[int] = None
    due_day: Optional[int] = None
    holder_family_member_id: Optional[str] = None
    user_id: Optional[str] = None


@dataclass(frozen=True)
class FamilyMember:
    """Family member domain entity."""

    id: str
    name: str
    relationship: Relationship
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: str
    date: date
    amount: Decimal
    type: TransactionType
    category_id: str
    name: str
    description: Optional[str] = None
    mode: TransactionMode = TransactionMode.AVULSA
    installment_number: Optional[int] = None
    installments_total: Optional[int] = None
    card_id: Optional[str] = None
    family_member_id: Optional[str] = None
    due_date: Optional[date] = None
    is_paid: bool = False
    is_recurring: bool = False
    recurring_months: Optional[int] = None
    source: TransactionSource = TransactionSource.MANUAL
    source_bank: Optional[str] = None
    user_id: Optional[str] = None

    @property
    def signed_amount(self) -> Decimal:
        """Amount with income positive and expense negative."""
        if self.type == TransactionType.INCOME:
            return self.amount
        return -self.amount


@dataclass(frozen=True)
class TransactionSummary:
    """Totals shown on the dashboard summary cards."""

    saldo_real: Decimal
    a_receber: Decimal
    a_pagar: Decimal
    saldo_previsto: Decimal


@dataclass(frozen=True)
class DualRunningBalances:
    """Cumulative balances per transaction id, in date order."""

    saldo_real: dict[str, Decimal] = field(default_factory=dict)
    saldo_previsto: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class StatusInfo:
    """Payment status plus its user-facing label."""

    status: TransactionStatus
    label: str


@dataclass(frozen=True)
class ParsedTransaction:
    """A transaction line extracted from a bank statement."""

    date: date
    description: str
    amount: Decimal
    type: TransactionType
    mode: TransactionMode = TransactionMode.AVULSA
    installment_number: Optional[int] = None
    installments_total: Optional[int] = None


@dataclass(frozen=True)
class ParserResult:
    """Result of parsing a whole statement."""

    transactions: tuple[ParsedTransaction, ...]
    bank: str
    statement_type: str
    parsing_method: str
    confidence: float

    @property
    def total_transactions(self) -> int:
        return len(self.transactions)

    @property
    def metadata(self) -> dict:
        return {
            "total_transactions": self.total_transactions,
            "parsing_method": self.parsing_method,
            "confidence": self.confidence,
        }
