"""Shared pytest fixtures for famfin tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from famfin.database.factories import create_memory_storage, create_sqlite_storage
from famfin.domain.card import CardService
from famfin.domain.category import CategoryService
from famfin.domain.defaults import DEFAULT_CATEGORIES
from famfin.domain.entities import Transaction, TransactionType
from famfin.domain.family import FamilyMemberService
from famfin.domain.statement_import import StatementImportService
from famfin.domain.transaction import TransactionService

ALIMENTACAO_ID = "20000000-0000-0000-0000-000000000001"


@pytest.fixture
def temp_db():
    """Create a temporary SQLite database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_storage(db_path)
    # Store the path and URL for CLI tests
    db.database_path = db_path
    db.connect()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_db():
    """Create an in-memory storage seeded with the default categories."""
    return create_memory_storage()


@pytest.fixture(params=["memory", "sqlite"])
def any_db(request):
    """Run a test against both storage backends."""
    if request.param == "memory":
        return create_memory_storage()
    return request.getfixturevalue("temp_db")


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def card_service(temp_db):
    """Create a CardService with a temporary database."""
    return CardService(temp_db)


@pytest.fixture
def family_service(temp_db):
    """Create a FamilyMemberService with a temporary database."""
    return FamilyMemberService(temp_db)


@pytest.fixture
def import_service(memory_db):
    """Create a StatementImportService over memory storage."""
    return StatementImportService(memory_db)


@pytest.fixture
def sample_card(card_service):
    """Create a sample credit card for testing."""
    return card_service.create_card(
        {
            "name": "Nubank Roxinho",
            "lastFourDigits": "1234",
            "cardType": "physical",
            "holder": "Maria",
            "purpose": "pessoal",
            "color": "#8b5cf6",
            "closingDay": 5,
            "dueDay": 12,
        }
    )


@pytest.fixture
def sample_member(family_service):
    """Create a sample family member for testing."""
    return family_service.create_member({"name": "Maria", "relationship": "spouse"})


@pytest.fixture
def make_transaction():
    """Build Transaction entities without going through storage."""
    counter = {"next": 0}

    def _make(
        amount,
        transaction_type=TransactionType.EXPENSE,
        is_paid=False,
        txn_date=date(2024, 1, 1),
        txn_id=None,
        due_date=None,
    ):
        counter["next"] += 1
        return Transaction(
            id=txn_id or f"txn-{counter['next']}",
            date=txn_date,
            amount=Decimal(str(amount)),
            type=transaction_type,
            category_id=ALIMENTACAO_ID,
            name=f"Transaction {counter['next']}",
            is_paid=is_paid,
            due_date=due_date,
        )

    return _make


@pytest.fixture
def category_ids():
    """Default category IDs keyed by (name, type value)."""
    return {(name, ctype.value): cat_id for cat_id, name, ctype, _ in DEFAULT_CATEGORIES}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def api_client(memory_db):
    """Create a FastAPI test client over memory storage."""
    from fastapi.testclient import TestClient

    from famfin.api.app import create_application
    from famfin.config import FamfinSettings

    app = create_application(storage=memory_db, settings=FamfinSettings(_env_file=None))
    return TestClient(app)
