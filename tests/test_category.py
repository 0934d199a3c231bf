"""Tests for category service."""

import pytest

from famfin.domain.entities import CategoryType
from famfin.domain.errors import DependencyError, NotFoundError, ValidationError
from famfin.domain.transaction import TransactionService

MISSING_ID = "99999999-9999-9999-9999-999999999999"


def _category(name, parent_id=None, category_type="expense"):
    return {"name": name, "type": category_type, "color": "#334455", "parentId": parent_id}


def test_defaults_are_listed(category_service):
    names = [cat.name for cat in category_service.list_categories(CategoryType.INCOME)]

    assert names == ["Freelance", "Investimentos", "Outros", "Salário"]


def test_create_category(category_service):
    category = category_service.create_category(_category("Pets"))

    assert category.type == CategoryType.EXPENSE
    assert category_service.get_category(category.id).name == "Pets"


def test_create_category_with_unknown_parent(category_service):
    with pytest.raises(NotFoundError):
        category_service.create_category(_category("Aluguel", parent_id=MISSING_ID))


def test_find_category_by_name_is_case_insensitive_and_typed(category_service):
    expense = category_service.find_category_by_name("outros", CategoryType.EXPENSE)
    income = category_service.find_category_by_name("OUTROS", CategoryType.INCOME)

    assert expense.type == CategoryType.EXPENSE
    assert income.type == CategoryType.INCOME
    assert expense.id != income.id
    assert category_service.find_category_by_name("Inexistente") is None


def test_category_tree_and_path(category_service, category_ids):
    moradia_id = category_ids[("Moradia", "expense")]
    aluguel = category_service.create_category(_category("Aluguel", parent_id=moradia_id))
    condominio = category_service.create_category(_category("Condomínio", parent_id=moradia_id))

    tree = category_service.get_category_tree(CategoryType.EXPENSE)

    moradia_node = next(node for node in tree if node["category"].id == moradia_id)
    assert [child["category"].id for child in moradia_node["children"]] == [
        aluguel.id,
        condominio.id,
    ]
    assert all(node["category"].parent_id is None for node in tree)
    assert category_service.format_category_path(aluguel.id) == "Moradia > Aluguel"
    assert category_service.format_category_path(MISSING_ID) == ""


def test_update_category(category_service):
    category = category_service.create_category(_category("Pets"))

    updated = category_service.update_category(category.id, {"name": "Animais", "icon": "paw"})

    assert updated.name == "Animais"
    assert updated.icon == "paw"


def test_update_category_rejects_cycle(category_service):
    parent = category_service.create_category(_category("Casa"))
    child = category_service.create_category(_category("Reforma", parent_id=parent.id))

    with pytest.raises(ValidationError) as excinfo:
        category_service.update_category(parent.id, {"parentId": child.id})

    assert excinfo.value.issue_paths() == ["parentId"]


def test_update_missing_category(category_service):
    with pytest.raises(NotFoundError):
        category_service.update_category(MISSING_ID, {"name": "x"})


def test_delete_category(category_service):
    category = category_service.create_category(_category("Pets"))

    category_service.delete_category(category.id)

    assert category_service.get_category(category.id) is None


def test_delete_missing_category(category_service):
    with pytest.raises(NotFoundError):
        category_service.delete_category(MISSING_ID)


def test_delete_category_in_use(temp_db, category_service):
    category = category_service.create_category(_category("Pets"))
    TransactionService(temp_db).create_transaction(
        {
            "date": "2024-01-15",
            "amount": "80",
            "type": "expense",
            "categoryId": category.id,
            "name": "Ração",
        }
    )

    with pytest.raises(DependencyError, match="1 transação"):
        category_service.delete_category(category.id)


def test_delete_category_with_children(category_service):
    parent = category_service.create_category(_category("Casa"))
    category_service.create_category(_category("Reforma", parent_id=parent.id))

    with pytest.raises(DependencyError, match="subcategoria"):
        category_service.delete_category(parent.id)
