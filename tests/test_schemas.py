"""Tests for input validation schemas."""

from datetime import date
from decimal import Decimal

import pytest

from famfin.domain.entities import TransactionMode, TransactionType
from famfin.domain.errors import ValidationError
from famfin.domain.schemas import (
    CardCreate,
    CategoryCreate,
    CategoryUpdate,
    EntityId,
    FamilyMemberCreate,
    ImportRequest,
    TransactionBatch,
    TransactionCreate,
    TransactionFilters,
    TransactionUpdate,
    is_valid_uuid,
    validate_payload,
)

CATEGORY_ID = "20000000-0000-0000-0000-000000000001"


def _transaction(**overrides):
    payload = {
        "date": "2024-01-15",
        "amount": "150.00",
        "type": "expense",
        "categoryId": CATEGORY_ID,
        "name": "Mercado",
    }
    payload.update(overrides)
    return payload


def _issues(excinfo) -> dict[str, str]:
    return {issue.path: issue.message for issue in excinfo.value.issues}


class TestTransactionCreate:
    def test_accepts_camel_case_payload(self):
        txn = validate_payload(TransactionCreate, _transaction(isPaid=True, dueDate="20/01/2024"))

        assert txn.date == date(2024, 1, 15)
        assert txn.amount == Decimal("150.00")
        assert txn.type == TransactionType.EXPENSE
        assert txn.is_paid is True
        assert txn.due_date == date(2024, 1, 20)
        assert txn.mode == TransactionMode.AVULSA

    def test_accepts_snake_case_payload(self):
        payload = _transaction()
        payload["category_id"] = payload.pop("categoryId")

        txn = validate_payload(TransactionCreate, payload)

        assert txn.category_id == CATEGORY_ID

    def test_record_uses_snake_case_keys(self):
        record = validate_payload(TransactionCreate, _transaction()).to_record()

        assert record["category_id"] == CATEGORY_ID
        assert "categoryId" not in record

    def test_iso_datetime_keeps_calendar_day(self):
        txn = validate_payload(TransactionCreate, _transaction(date="2024-01-15T23:30:00Z"))

        assert txn.date == date(2024, 1, 15)

    def test_parcelada_without_installments_total_fails_on_mode(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(
                TransactionCreate, _transaction(mode="parcelada", installmentNumber=1)
            )

        issues = _issues(excinfo)
        assert list(issues) == ["mode"]
        assert issues["mode"] == "Transações parceladas devem ter número e total de parcelas"

    def test_parcelada_with_installments_is_valid(self):
        txn = validate_payload(
            TransactionCreate,
            _transaction(mode="parcelada", installmentNumber=2, installmentsTotal=6),
        )

        assert txn.installment_number == 2
        assert txn.installments_total == 6

    def test_installment_number_cannot_exceed_total(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(
                TransactionCreate,
                _transaction(mode="parcelada", installmentNumber=5, installmentsTotal=3),
            )

        assert _issues(excinfo) == {
            "installmentNumber": "Número da parcela não pode ser maior que o total de parcelas"
        }

    @pytest.mark.parametrize("amount", ["0", "-10", "abc"])
    def test_amount_must_be_positive_number(self, amount):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(TransactionCreate, _transaction(amount=amount))

        assert "amount" in _issues(excinfo)

    def test_name_is_required_and_bounded(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(TransactionCreate, _transaction(name=""))
        assert _issues(excinfo)["name"] == "Nome é obrigatório"

        with pytest.raises(ValidationError) as excinfo:
            validate_payload(TransactionCreate, _transaction(name="x" * 101))
        assert _issues(excinfo)["name"] == "Nome deve ter no máximo 100 caracteres"

    def test_description_is_bounded(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(TransactionCreate, _transaction(description="d" * 501))

        assert "description" in _issues(excinfo)

    def test_category_must_be_uuid(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(TransactionCreate, _transaction(categoryId="groceries"))

        assert _issues(excinfo)["categoryId"] == "ID de categoria inválido"

    def test_missing_fields_are_reported_in_portuguese(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(TransactionCreate, {})

        issues = _issues(excinfo)
        for field in ("date", "amount", "type", "categoryId", "name"):
            assert issues[field] == "Campo obrigatório"

    def test_invalid_date(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(TransactionCreate, _transaction(date="31/02/2024"))

        assert "date" in _issues(excinfo)

    def test_error_message_lists_issues(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(TransactionCreate, _transaction(type="transfer"))

        assert str(excinfo.value).startswith("Dados inválidos")
        assert excinfo.value.issue_paths() == ["type"]


class TestTransactionUpdate:
    def test_only_set_fields_are_returned(self):
        record = validate_payload(TransactionUpdate, {"amount": "75.00"}).to_record()

        assert record == {"amount": Decimal("75.00")}

    def test_nullable_field_can_be_cleared(self):
        record = validate_payload(TransactionUpdate, {"dueDate": None, "cardId": None}).to_record()

        assert record == {"due_date": None, "card_id": None}

    def test_required_field_cannot_be_null(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(TransactionUpdate, {"name": None})

        assert _issues(excinfo) == {"name": "Campo não pode ser nulo"}


def test_batch_requires_at_least_one_transaction():
    with pytest.raises(ValidationError) as excinfo:
        validate_payload(TransactionBatch, {"transactions": []})

    assert _issues(excinfo) == {"transactions": "Pelo menos uma transação é necessária"}


def test_batch_reports_index_of_bad_item():
    with pytest.raises(ValidationError) as excinfo:
        validate_payload(
            TransactionBatch, {"transactions": [_transaction(), _transaction(amount="-1")]}
        )

    assert list(_issues(excinfo)) == ["transactions.1.amount"]


class TestCategorySchemas:
    def test_valid_category(self):
        category = validate_payload(
            CategoryCreate, {"name": "Pets", "type": "expense", "color": "#A1B2C3"}
        )

        assert category.name == "Pets"
        assert category.parent_id is None

    @pytest.mark.parametrize("color", ["red", "#12345", "#GGGGGG", "123456"])
    def test_color_must_be_hex(self, color):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(CategoryCreate, {"name": "Pets", "type": "expense", "color": color})

        assert _issues(excinfo) == {"color": "Cor deve ser hex válida"}

    def test_update_rejects_null_color(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(CategoryUpdate, {"color": None})

        assert "color" in _issues(excinfo)


class TestCardCreate:
    def _card(self, **overrides):
        payload = {
            "name": "Inter Black",
            "lastFourDigits": "9876",
            "cardType": "virtual",
            "holder": "João",
            "purpose": "pessoal",
            "color": "#ff7a00",
        }
        payload.update(overrides)
        return payload

    def test_valid_card(self):
        card = validate_payload(CardCreate, self._card(limit="5000", closingDay=3, dueDay=10))

        assert card.limit == Decimal("5000")
        assert card.closing_day == 3

    @pytest.mark.parametrize("digits", ["123", "12345", "12a4"])
    def test_last_four_digits(self, digits):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(CardCreate, self._card(lastFourDigits=digits))

        assert _issues(excinfo) == {
            "lastFourDigits": "Últimos 4 dígitos devem conter exatamente 4 números"
        }

    def test_snake_case_payload_reports_camel_case_path(self):
        payload = self._card()
        del payload["lastFourDigits"]
        payload["last_four_digits"] = "12"

        with pytest.raises(ValidationError) as excinfo:
            validate_payload(CardCreate, payload)

        assert excinfo.value.issue_paths() == ["lastFourDigits"]

    def test_closing_day_range(self):
        with pytest.raises(ValidationError) as excinfo:
            validate_payload(CardCreate, self._card(closingDay=32))

        assert _issues(excinfo) == {"closingDay": "Dia deve estar entre 1 e 31"}


def test_family_member_relationship_must_be_known():
    with pytest.raises(ValidationError) as excinfo:
        validate_payload(FamilyMemberCreate, {"name": "Ana", "relationship": "cousin"})

    assert _issues(excinfo) == {"relationship": "Opção inválida"}


def test_import_request_requires_text():
    with pytest.raises(ValidationError) as excinfo:
        validate_payload(ImportRequest, {"text": "  ", "statementType": "nubank_credit"})

    assert _issues(excinfo) == {"text": "Texto do extrato é obrigatório"}


def test_filters_map_type_to_service_keyword():
    filters = validate_payload(
        TransactionFilters, {"startDate": "2024-01-01", "type": "income", "isPaid": "false"}
    )

    assert filters.to_filters() == {
        "start_date": date(2024, 1, 1),
        "transaction_type": TransactionType.INCOME,
        "is_paid": False,
    }


def test_entity_id_normalises_case():
    entity = validate_payload(EntityId, {"id": "ABCDEF00-0000-0000-0000-000000000001"})

    assert entity.id == "abcdef00-0000-0000-0000-000000000001"
    assert is_valid_uuid(entity.id)
    assert not is_valid_uuid("not-a-uuid")
