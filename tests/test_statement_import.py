"""Tests for statement import service."""

from datetime import date
from decimal import Decimal

import pytest

from famfin.domain.entities import (
    CreditCard,
    StatementType,
    TransactionMode,
    TransactionSource,
    TransactionType,
)
from famfin.domain.errors import NotFoundError, ValidationError
from famfin.domain.statement_import import (
    CHECKING,
    CREDIT_CARD,
    calculate_due_date,
    guess_statement_type,
)

NUBANK_INVOICE = """\
Nubank
Fatura do cartão de crédito
15/01/2024 Mercado Extra 150,00
16/01/2024 Loja Tech 3/10 300,00
17/01/2024 Estorno Netflix 39,90
18/01/2024 Pagamento em débito em c/c 1.000,00
"""

BRADESCO_CHECKING = """\
Bradesco
Extrato de conta corrente
Saldo anterior 1.000,00
05/02/2024 PIX RECEBIDO JOAO 200,00
06/02/2024 ENERGIA ELETRICA -150,00
"""


def _card(closing_day=None, due_day=None):
    return CreditCard(
        id="card-1",
        name="Roxinho",
        last_four_digits="1234",
        card_type="physical",
        holder="Maria",
        purpose="pessoal",
        color="#8b5cf6",
        closing_day=closing_day,
        due_day=due_day,
    )


class TestCalculateDueDate:
    def test_checking_is_due_on_its_own_date(self):
        assert calculate_due_date(date(2024, 2, 6), CHECKING) == date(2024, 2, 6)

    def test_purchase_before_closing_day_is_due_this_month(self):
        card = _card(closing_day=20, due_day=28)

        assert calculate_due_date(date(2024, 3, 5), CREDIT_CARD, card) == date(2024, 3, 28)

    def test_purchase_after_closing_day_is_due_next_month(self):
        card = _card(closing_day=20, due_day=28)

        assert calculate_due_date(date(2024, 3, 25), CREDIT_CARD, card) == date(2024, 4, 28)

    def test_year_rollover_and_month_end_clamp(self):
        card = _card(closing_day=10, due_day=31)

        assert calculate_due_date(date(2024, 1, 15), CREDIT_CARD, card) == date(2024, 2, 29)
        assert calculate_due_date(date(2024, 12, 15), CREDIT_CARD, card) == date(2025, 1, 31)

    def test_default_cycle_without_card(self):
        assert calculate_due_date(date(2024, 1, 15), CREDIT_CARD) == date(2024, 2, 10)


def test_suggest_category_by_keyword(import_service):
    category = import_service.suggest_category("IFOOD RESTAURANTE", TransactionType.EXPENSE)

    assert category.name == "Alimentação"


def test_suggest_category_by_name_in_description(import_service):
    category = import_service.suggest_category("Mensalidade Educação Infantil", TransactionType.EXPENSE)

    assert category.name == "Educação"


def test_suggest_category_falls_back_to_outros_of_same_type(import_service):
    expense = import_service.suggest_category("Loja Tech", TransactionType.EXPENSE)
    income = import_service.suggest_category("Estorno Netflix", TransactionType.INCOME)

    assert expense.name == "Outros"
    assert expense.type.value == "expense"
    assert income.name == "Outros"
    assert income.type.value == "income"


def test_extract_credit_card_invoice(import_service, category_ids):
    preview = import_service.extract(
        {"text": NUBANK_INVOICE, "statementType": "nubank_credit"}
    )

    assert preview.result.bank == "Nubank"
    assert preview.created == []
    # The invoice payment line is not a purchase
    assert [draft["name"] for draft in preview.drafts] == [
        "Mercado Extra",
        "Loja Tech",
        "Estorno Netflix",
    ]

    mercado, loja, estorno = preview.drafts
    assert mercado["category_id"] == category_ids[("Alimentação", "expense")]
    assert mercado["amount"] == Decimal("150.00")
    assert mercado["due_date"] == date(2024, 2, 10)
    assert mercado["is_paid"] is False
    assert mercado["source"] == TransactionSource.CREDIT_CARD_IMPORT
    assert mercado["source_bank"] == "Nubank"

    assert loja["mode"] == TransactionMode.PARCELADA
    assert (loja["installment_number"], loja["installments_total"]) == (3, 10)

    assert estorno["type"] == TransactionType.INCOME
    assert estorno["category_id"] == category_ids[("Outros", "income")]


def test_extract_checking_statement_marks_paid(import_service):
    preview = import_service.extract(
        {"text": BRADESCO_CHECKING, "statementType": "bradesco_debit"}
    )

    assert len(preview.drafts) == 2
    for draft in preview.drafts:
        assert draft["is_paid"] is True
        assert draft["source"] == TransactionSource.BANK_STATEMENT_IMPORT
        assert draft["due_date"] == draft["date"]


def test_extract_with_card_uses_its_cycle(import_service, memory_db):
    card = memory_db.create_credit_card(
        {
            "name": "Roxinho",
            "last_four_digits": "1234",
            "card_type": "physical",
            "holder": "Maria",
            "purpose": "pessoal",
            "color": "#8b5cf6",
            "closing_day": 20,
            "due_day": 5,
        }
    )

    preview = import_service.extract(
        {"text": NUBANK_INVOICE, "statementType": "nubank_credit"}, card_id=card.id
    )

    assert all(draft["card_id"] == card.id for draft in preview.drafts)
    assert preview.drafts[0]["due_date"] == date(2024, 1, 5)


def test_extract_unknown_card(import_service):
    with pytest.raises(NotFoundError):
        import_service.extract(
            {"text": NUBANK_INVOICE, "statementType": "nubank_credit"},
            card_id="99999999-9999-9999-9999-999999999999",
        )


def test_extract_rejects_unknown_statement_type(import_service):
    with pytest.raises(ValidationError) as excinfo:
        import_service.extract({"text": NUBANK_INVOICE, "statementType": "caixa_credit"})

    assert excinfo.value.issue_paths() == ["statementType"]


def test_import_statement_commit_persists_batch(import_service, memory_db):
    preview = import_service.import_statement(
        {"text": NUBANK_INVOICE, "statementType": "nubank_credit"}, commit=True
    )

    assert len(preview.created) == 3
    stored = memory_db.get_all_transactions()
    assert sorted(txn.name for txn in stored) == ["Estorno Netflix", "Loja Tech", "Mercado Extra"]
    assert all(txn.source == TransactionSource.CREDIT_CARD_IMPORT for txn in stored)


def test_commit_requires_drafts(import_service):
    with pytest.raises(ValidationError):
        import_service.commit([])


@pytest.mark.parametrize(
    "text,expected",
    [
        (BRADESCO_CHECKING, StatementType.BRADESCO_DEBIT),
        (NUBANK_INVOICE, StatementType.NUBANK_CREDIT),
        ("Banco Inter\nFatura do cartão\ntotal da fatura", StatementType.INTER_CREDIT),
        ("Bradesco\nFatura\ncartão de crédito", StatementType.BRADESCO_CREDIT),
    ],
)
def test_guess_statement_type(text, expected):
    assert guess_statement_type(text) == expected
