"""Expansion of installment and recurring transactions.

A single submitted transaction may stand for a whole series: every remaining
installment of a purchase, or the next N months of a recurring bill. These
helpers work on plain record dicts (the output of ``TransactionCreate``) so
the series can be validated once and persisted in a single batch.
"""

from typing import Any, Optional

from famfin.domain.entities import TransactionMode
from famfin.utils.date_parser import add_months

TransactionRecord = dict[str, Any]


def _shift(record: TransactionRecord, months: int) -> TransactionRecord:
    shifted = dict(record)
    shifted["date"] = add_months(record["date"], months)
    if record.get("due_date") is not None:
        shifted["due_date"] = add_months(record["due_date"], months)
    return shifted


def generate_recurring_transactions(
    base: TransactionRecord, months: Optional[int]
) -> list[TransactionRecord]:
    """Generate monthly copies of a recurring transaction.

    Args:
        base: Transaction record to replicate
        months: Number of months to cover, including the base month

    Returns:
        The base record followed by one unpaid copy per following month
    """
    if not base.get("is_recurring") or not months or months <= 0:
        return [base]

    transactions = [dict(base)]
    for offset in range(1, months):
        copy = _shift(base, offset)
        copy["is_paid"] = False
        transactions.append(copy)
    return transactions


def generate_installment_transactions(base: TransactionRecord) -> list[TransactionRecord]:
    """Generate every remaining installment of a purchase.

    Installments run from ``installment_number`` (default 1) up to
    ``installments_total``, one month apart. Only the first generated
    installment keeps the submitted ``is_paid`` flag.
    """
    total = base.get("installments_total")
    if base.get("mode") != TransactionMode.PARCELADA or not total or total <= 1:
        return [base]

    start = base.get("installment_number") or 1
    transactions = []
    for number in range(start, total + 1):
        installment = _shift(base, number - start)
        installment["installment_number"] = number
        installment["is_paid"] = bool(base.get("is_paid")) if number == start else False
        transactions.append(installment)
    return transactions


def process_transaction(record: TransactionRecord) -> list[TransactionRecord]:
    """Expand a transaction into every record that must be created.

    Installments take priority over recurrence; a transaction is never both.
    """
    total = record.get("installments_total")
    if record.get("mode") == TransactionMode.PARCELADA and total and total > 1:
        return generate_installment_transactions(record)

    if record.get("is_recurring") and record.get("recurring_months"):
        return generate_recurring_transactions(record, record["recurring_months"])

    return [record]
