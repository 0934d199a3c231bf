"""Tests for transaction service."""

from datetime import date
from decimal import Decimal

import pytest

from famfin.domain.entities import TransactionMode, TransactionStatus, TransactionType
from famfin.domain.errors import NotFoundError, ValidationError
from famfin.domain.transaction import TransactionService

MISSING_ID = "99999999-9999-9999-9999-999999999999"


@pytest.fixture
def expense_category(category_ids):
    return category_ids[("Alimentação", "expense")]


@pytest.fixture
def income_category(category_ids):
    return category_ids[("Salário", "income")]


def _payload(category_id, **overrides):
    payload = {
        "date": "2024-01-15",
        "amount": "89.90",
        "type": "expense",
        "categoryId": category_id,
        "name": "Mercado",
    }
    payload.update(overrides)
    return payload


def test_create_single_transaction(transaction_service, expense_category):
    created = transaction_service.create_transaction(_payload(expense_category))

    assert len(created) == 1
    txn = transaction_service.get_transaction(created[0].id)
    assert txn.name == "Mercado"
    assert txn.amount == Decimal("89.90")
    assert txn.type == TransactionType.EXPENSE
    assert txn.date == date(2024, 1, 15)
    assert txn.is_paid is False


def test_create_installments_expands_series(transaction_service, expense_category):
    created = transaction_service.create_transaction(
        _payload(
            expense_category,
            name="Notebook",
            amount="350.00",
            mode="parcelada",
            installmentNumber=1,
            installmentsTotal=4,
        )
    )

    assert [txn.installment_number for txn in created] == [1, 2, 3, 4]
    assert all(txn.mode == TransactionMode.PARCELADA for txn in created)
    assert [txn.date for txn in created][-1] == date(2024, 4, 15)
    assert len(transaction_service.list_transactions()) == 4


def test_create_recurring_expands_series(transaction_service, income_category):
    created = transaction_service.create_transaction(
        _payload(
            income_category,
            type="income",
            name="Salário",
            amount="5000",
            isPaid=True,
            isRecurring=True,
            recurringMonths=12,
        )
    )

    assert len(created) == 12
    assert created[0].is_paid is True
    assert not any(txn.is_paid for txn in created[1:])


def test_create_rejects_invalid_payload(transaction_service, expense_category):
    with pytest.raises(ValidationError) as excinfo:
        transaction_service.create_transaction(_payload(expense_category, mode="parcelada"))

    assert excinfo.value.issue_paths() == ["mode"]
    assert transaction_service.list_transactions() == []


def test_create_rejects_installment_past_total(transaction_service, expense_category):
    with pytest.raises(ValidationError) as excinfo:
        transaction_service.create_transaction(
            _payload(
                expense_category, mode="parcelada", installmentNumber=5, installmentsTotal=3
            )
        )

    assert excinfo.value.issue_paths() == ["installmentNumber"]
    assert transaction_service.list_transactions() == []


def test_create_rejects_unknown_category(transaction_service):
    with pytest.raises(NotFoundError, match="Categoria não encontrada"):
        transaction_service.create_transaction(_payload(MISSING_ID))


def test_create_rejects_unknown_card(transaction_service, expense_category):
    with pytest.raises(NotFoundError, match="Cartão não encontrado"):
        transaction_service.create_transaction(_payload(expense_category, cardId=MISSING_ID))


def test_batch_create_does_not_expand(transaction_service, expense_category):
    created = transaction_service.batch_create_transactions(
        {
            "transactions": [
                _payload(expense_category, name="Primeira"),
                _payload(
                    expense_category,
                    name="Parcela 2",
                    mode="parcelada",
                    installmentNumber=2,
                    installmentsTotal=5,
                ),
            ]
        }
    )

    assert [txn.name for txn in created] == ["Primeira", "Parcela 2"]
    assert len(transaction_service.list_transactions()) == 2


def test_list_transactions_filters(
    transaction_service, expense_category, income_category, sample_card
):
    transaction_service.create_transaction(_payload(expense_category, date="2024-01-05"))
    transaction_service.create_transaction(
        _payload(expense_category, date="2024-02-05", cardId=sample_card.id, isPaid=True)
    )
    transaction_service.create_transaction(
        _payload(income_category, type="income", date="2024-02-10", name="Salário")
    )

    assert len(transaction_service.list_transactions()) == 3
    assert len(transaction_service.list_transactions(start_date=date(2024, 2, 1))) == 2
    assert len(transaction_service.list_transactions(end_date=date(2024, 1, 31))) == 1
    assert [
        txn.name
        for txn in transaction_service.list_transactions(transaction_type=TransactionType.INCOME)
    ] == ["Salário"]
    assert len(transaction_service.list_transactions(card_id=sample_card.id)) == 1
    assert len(transaction_service.list_transactions(is_paid=False)) == 2
    assert len(transaction_service.list_transactions(category_id=income_category)) == 1


def test_list_transactions_newest_first(transaction_service, expense_category):
    for day in ("2024-03-01", "2024-03-20", "2024-03-10"):
        transaction_service.create_transaction(_payload(expense_category, date=day))

    dates = [txn.date.day for txn in transaction_service.list_transactions()]

    assert dates == [20, 10, 1]


def test_transactions_are_scoped_to_user(temp_db, expense_category):
    ana = TransactionService(temp_db, user_id="ana")
    bruno = TransactionService(temp_db, user_id="bruno")
    ana.create_transaction(_payload(expense_category, name="Da Ana"))

    assert [txn.name for txn in ana.list_transactions()] == ["Da Ana"]
    assert bruno.list_transactions() == []


def test_update_transaction(transaction_service, expense_category):
    txn = transaction_service.create_transaction(_payload(expense_category))[0]

    updated = transaction_service.update_transaction(
        txn.id, {"amount": "120.00", "description": "Compra do mês"}
    )

    assert updated.amount == Decimal("120.00")
    assert updated.description == "Compra do mês"
    assert updated.name == "Mercado"


def test_update_missing_transaction(transaction_service):
    with pytest.raises(NotFoundError, match="Transação não encontrada"):
        transaction_service.update_transaction(MISSING_ID, {"name": "x"})


def test_mark_paid_and_undo(transaction_service, expense_category):
    txn = transaction_service.create_transaction(_payload(expense_category))[0]

    assert transaction_service.mark_paid(txn.id).is_paid is True
    assert transaction_service.mark_paid(txn.id, paid=False).is_paid is False


def test_delete_transaction(transaction_service, expense_category):
    txn = transaction_service.create_transaction(_payload(expense_category))[0]

    transaction_service.delete_transaction(txn.id)

    assert transaction_service.get_transaction(txn.id) is None
    with pytest.raises(NotFoundError):
        transaction_service.delete_transaction(txn.id)


def test_summary_and_running_balances(transaction_service, expense_category, income_category):
    income = transaction_service.create_transaction(
        _payload(income_category, type="income", amount="500", date="2024-01-01", isPaid=True)
    )[0]
    expense = transaction_service.create_transaction(
        _payload(expense_category, amount="200", date="2024-01-02")
    )[0]

    summary = transaction_service.get_summary()
    balances = transaction_service.get_running_balances()

    assert summary.saldo_real == Decimal("500")
    assert summary.a_pagar == Decimal("200")
    assert summary.saldo_previsto == Decimal("300")
    assert balances.saldo_real == {income.id: Decimal("500"), expense.id: Decimal("500")}
    assert balances.saldo_previsto == {income.id: Decimal("500"), expense.id: Decimal("300")}


def test_summary_respects_filters(transaction_service, income_category):
    transaction_service.create_transaction(
        _payload(income_category, type="income", amount="100", date="2024-01-01", isPaid=True)
    )
    transaction_service.create_transaction(
        _payload(income_category, type="income", amount="300", date="2024-02-01", isPaid=True)
    )

    summary = transaction_service.get_summary(start_date=date(2024, 2, 1))

    assert summary.saldo_real == Decimal("300")


def test_enrich_transactions(transaction_service, expense_category, sample_card, sample_member):
    txn = transaction_service.create_transaction(
        _payload(
            expense_category,
            cardId=sample_card.id,
            familyMemberId=sample_member.id,
            dueDate="2024-01-10",
        )
    )[0]

    enriched = transaction_service.enrich_transactions([txn], today=date(2024, 1, 20))[0]

    assert enriched["id"] == txn.id
    assert enriched["card"] == {
        "id": sample_card.id,
        "name": "Nubank Roxinho",
        "last_four_digits": "1234",
        "card_type": sample_card.card_type,
    }
    assert enriched["family_member"] == {"id": sample_member.id, "name": "Maria"}
    assert enriched["status"] == {"status": TransactionStatus.OVERDUE, "label": "Vencido"}


def test_enrich_without_card_or_member(transaction_service, expense_category):
    txn = transaction_service.create_transaction(_payload(expense_category, isPaid=True))[0]

    enriched = transaction_service.enrich_transactions([txn])[0]

    assert enriched["card"] is None
    assert enriched["family_member"] is None
    assert enriched["status"]["label"] == "Pago"
