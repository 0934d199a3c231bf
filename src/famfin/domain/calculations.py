"""Balance and summary calculations over transaction lists.

All functions here are pure: they take already-validated transactions, never
touch storage and never raise for well-formed input.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from famfin.domain.entities import (
    DualRunningBalances,
    StatusInfo,
    Transaction,
    TransactionStatus,
    TransactionSummary,
    TransactionType,
)

STATUS_LABELS = {
    TransactionStatus.PAID: "Pago",
    TransactionStatus.OVERDUE: "Vencido",
    TransactionStatus.DUE_TODAY: "Vence Hoje",
    TransactionStatus.PENDING: "Em Aberto",
}


def calculate_summary(transactions: Iterable[Transaction]) -> TransactionSummary:
    """Compute realized, pending and projected totals in a single pass.

    Args:
        transactions: Transactions to aggregate

    Returns:
        TransactionSummary where saldo_previsto = saldo_real + a_receber - a_pagar
    """
    paid_income = Decimal("0")
    paid_expense = Decimal("0")
    pending_income = Decimal("0")
    pending_expense = Decimal("0")

    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            if txn.is_paid:
                paid_income += txn.amount
            else:
                pending_income += txn.amount
        else:
            if txn.is_paid:
                paid_expense += txn.amount
            else:
                pending_expense += txn.amount

    saldo_real = paid_income - paid_expense
    return TransactionSummary(
        saldo_real=saldo_real,
        a_receber=pending_income,
        a_pagar=pending_expense,
        saldo_previsto=saldo_real + pending_income - pending_expense,
    )


def calculate_dual_running_balances(
    transactions: Sequence[Transaction],
) -> DualRunningBalances:
    """Compute cumulative projected and realized balances per transaction.

    Transactions are visited in ascending date order; ``sorted`` is stable so
    transactions sharing a date keep their input order. Unpaid transactions
    move the projected balance but carry the previous realized balance forward.

    Args:
        transactions: Transactions in any order

    Returns:
        DualRunningBalances mapping transaction id to each cumulative value
    """
    balance_real = Decimal("0")
    balance_previsto = Decimal("0")
    saldo_real: dict[str, Decimal] = {}
    saldo_previsto: dict[str, Decimal] = {}

    for txn in sorted(transactions, key=lambda t: t.date):
        amount = txn.signed_amount

        balance_previsto += amount
        saldo_previsto[txn.id] = balance_previsto

        if txn.is_paid:
            balance_real += amount
        saldo_real[txn.id] = balance_real

    return DualRunningBalances(saldo_real=saldo_real, saldo_previsto=saldo_previsto)


def calculate_transaction_totals(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Sum income and expense regardless of payment status."""
    income = Decimal("0")
    expense = Decimal("0")
    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            income += txn.amount
        else:
            expense += txn.amount
    return {"income": income, "expense": expense, "balance": income - expense}


def get_transaction_status(
    transaction: Transaction, today: Optional[date] = None
) -> StatusInfo:
    """Classify a transaction as paid, overdue, due today or pending."""
    today = today or date.today()

    if transaction.is_paid:
        status = TransactionStatus.PAID
    elif transaction.due_date is not None and transaction.due_date < today:
        status = TransactionStatus.OVERDUE
    elif transaction.due_date == today:
        status = TransactionStatus.DUE_TODAY
    else:
        status = TransactionStatus.PENDING

    return StatusInfo(status=status, label=STATUS_LABELS[status])
