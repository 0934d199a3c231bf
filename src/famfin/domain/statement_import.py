"""Statement import domain service."""

import calendar
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from famfin.database.base import Storage
from famfin.domain.defaults import FALLBACK_CATEGORY_NAME
from famfin.domain.entities import (
    Category,
    CategoryType,
    CreditCard,
    ParsedTransaction,
    ParserResult,
    StatementType,
    Transaction,
    TransactionSource,
    TransactionType,
)
from famfin.domain.errors import NotFoundError, card_not_found
from famfin.domain.schemas import ImportRequest, validate_payload
from famfin.domain.statement_parser import (
    CHECKING,
    CREDIT_CARD,
    UNKNOWN_BANK,
    detect_bank,
    detect_statement_type,
    parse_statement,
)
from famfin.domain.transaction import TransactionService
from famfin.logging_utils import get_logger

LOGGER = get_logger(__name__)

STATEMENT_LAYOUTS = {
    StatementType.BRADESCO_CREDIT: CREDIT_CARD,
    StatementType.BRADESCO_DEBIT: CHECKING,
    StatementType.INTER_CREDIT: CREDIT_CARD,
    StatementType.NUBANK_CREDIT: CREDIT_CARD,
}

# Billing cycle used when the card has none configured
DEFAULT_CLOSING_DAY = 1
DEFAULT_DUE_DAY = 10

INVOICE_PAYMENT = re.compile(r"pagto|pagamento|deb(ito)? em c/c", re.IGNORECASE)

# Category name -> description keywords
CATEGORY_KEYWORDS = {
    "Alimentação": (
        "mercado", "supermercado", "ifood", "restaurante", "padaria",
        "lanchonete", "açougue", "hortifruti", "pizza", "burger",
    ),
    "Transporte": (
        "uber", "99app", "posto", "combustivel", "combustível", "estacionamento",
        "pedagio", "pedágio", "metro", "metrô", "onibus", "ônibus",
    ),
    "Moradia": ("aluguel", "condominio", "condomínio", "iptu"),
    "Saúde": ("farmacia", "farmácia", "drogaria", "hospital", "clinica", "clínica", "laboratorio"),
    "Educação": ("escola", "curso", "faculdade", "universidade", "livraria"),
    "Lazer": ("netflix", "spotify", "cinema", "teatro", "disney", "prime video", "show"),
    "Contas": ("energia", "luz", "agua", "água", "internet", "telefone", "vivo", "claro", "tim"),
    "Compras": ("amazon", "mercado livre", "magazine", "shopee", "aliexpress", "shein"),
    "Salário": ("salario", "salário", "folha", "pagamento de salario"),
    "Investimentos": ("rendimento", "dividendo", "juros sobre capital", "resgate"),
}


def calculate_due_date(
    transaction_date: date,
    statement_type: str,
    card: Optional[CreditCard] = None,
) -> date:
    """Work out when an imported transaction is due.

    Checking account lines already happened, so they are due on their own
    date. Card purchases made before the closing day fall due this month,
    later ones next month.
    """
    if statement_type != CREDIT_CARD:
        return transaction_date

    closing_day = (card.closing_day if card else None) or DEFAULT_CLOSING_DAY
    due_day = (card.due_day if card else None) or DEFAULT_DUE_DAY

    year, month = transaction_date.year, transaction_date.month
    if transaction_date.day >= closing_day:
        month += 1
        if month > 12:
            month = 1
            year += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(due_day, last_day))


@dataclass
class ImportPreview:
    """Parsed statement plus the transaction payloads it would create."""

    result: ParserResult
    drafts: list[dict[str, Any]] = field(default_factory=list)
    created: list[Transaction] = field(default_factory=list)


class StatementImportService:
    """Service for turning statement text into transactions."""

    def __init__(self, db: Storage, user_id: Optional[str] = None):
        """Initialize statement import service.

        Args:
            db: Storage instance
            user_id: Owner of imported transactions
        """
        self.db = db
        self.user_id = user_id
        self.transactions = TransactionService(db, user_id=user_id)

    def suggest_category(
        self, description: str, transaction_type: TransactionType
    ) -> Optional[Category]:
        """Pick a category for a description.

        Tries, in order: a category whose name appears in the description,
        a keyword match, then the "Outros" category of the right type.
        """
        category_type = CategoryType(transaction_type.value)
        categories = [
            cat for cat in self.db.get_all_categories(user_id=self.user_id)
            if cat.type == category_type
        ]
        by_name = {cat.name.lower(): cat for cat in categories}
        text = description.lower()

        for cat in categories:
            if cat.name.lower() != FALLBACK_CATEGORY_NAME.lower() and cat.name.lower() in text:
                return cat

        for name, keywords in CATEGORY_KEYWORDS.items():
            category = by_name.get(name.lower())
            if category is None:
                continue
            if any(re.search(rf"\b{re.escape(kw)}\b", text) for kw in keywords):
                return category

        return by_name.get(FALLBACK_CATEGORY_NAME.lower())

    def build_draft(
        self,
        parsed: ParsedTransaction,
        result: ParserResult,
        card: Optional[CreditCard] = None,
        family_member_id: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        """Map a parsed line to a transaction creation payload.

        Returns None when no category of the right type exists.
        """
        category = self.suggest_category(parsed.description, parsed.type)
        if category is None:
            LOGGER.warning("No category available for '%s'", parsed.description)
            return None

        is_card = result.statement_type == CREDIT_CARD
        return {
            "date": parsed.date,
            "amount": parsed.amount,
            "type": parsed.type,
            "category_id": category.id,
            "name": parsed.description[:100],
            "description": parsed.description[:500],
            "mode": parsed.mode,
            "installment_number": parsed.installment_number,
            "installments_total": parsed.installments_total,
            "card_id": card.id if card else None,
            "family_member_id": family_member_id,
            "due_date": calculate_due_date(parsed.date, result.statement_type, card),
            "is_paid": not is_card,
            "source": (
                TransactionSource.CREDIT_CARD_IMPORT
                if is_card
                else TransactionSource.BANK_STATEMENT_IMPORT
            ),
            "source_bank": result.bank[:50] if result.bank != UNKNOWN_BANK else None,
        }

    def extract(
        self,
        data: Mapping[str, Any],
        card_id: Optional[str] = None,
        family_member_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ImportPreview:
        """Parse statement text and prepare transaction payloads.

        Args:
            data: Import request with ``text`` and ``statement_type``
            card_id: Optional card the statement belongs to
            family_member_id: Optional family member to assign
            today: Reference date for DD/MM year inference

        Returns:
            ImportPreview with the parser result and the drafts

        Raises:
            ValidationError: If the request is invalid
            NotFoundError: If the card doesn't exist
        """
        request = validate_payload(ImportRequest, data)
        card = None
        if card_id is not None:
            card = self.db.get_credit_card(card_id)
            if card is None:
                raise NotFoundError(card_not_found(card_id))

        layout = STATEMENT_LAYOUTS[request.statement_type]
        result = parse_statement(request.text, forced_type=layout, today=today)

        drafts = []
        for parsed in result.transactions:
            if layout == CREDIT_CARD and INVOICE_PAYMENT.search(parsed.description):
                LOGGER.debug("Dropping invoice payment line '%s'", parsed.description)
                continue
            draft = self.build_draft(parsed, result, card=card, family_member_id=family_member_id)
            if draft is not None:
                drafts.append(draft)

        LOGGER.info(
            "Extracted %s transactions from %s statement (confidence %.2f)",
            len(drafts),
            result.bank,
            result.confidence,
        )
        return ImportPreview(result=result, drafts=drafts)

    def commit(self, drafts: list[Mapping[str, Any]]) -> list[Transaction]:
        """Persist reviewed drafts as a single batch.

        Raises:
            ValidationError: If the list is empty or any draft is invalid
        """
        return self.transactions.batch_create_transactions({"transactions": list(drafts)})

    def import_statement(
        self,
        data: Mapping[str, Any],
        commit: bool = False,
        card_id: Optional[str] = None,
        family_member_id: Optional[str] = None,
        today: Optional[date] = None,
    ) -> ImportPreview:
        """Extract a statement and optionally persist every draft."""
        preview = self.extract(
            data, card_id=card_id, family_member_id=family_member_id, today=today
        )
        if commit and preview.drafts:
            preview.created = self.commit(preview.drafts)
        return preview


def guess_statement_type(text: str) -> StatementType:
    """Pick the import layout for a statement when the user gave none.

    Only credit card versus checking matters to the parser; the bank name
    narrows the choice where a matching layout exists.
    """
    layout = detect_statement_type(text)
    bank = detect_bank(text)
    if layout == CHECKING:
        return StatementType.BRADESCO_DEBIT
    if bank == "Inter":
        return StatementType.INTER_CREDIT
    if bank == "Bradesco":
        return StatementType.BRADESCO_CREDIT
    return StatementType.NUBANK_CREDIT
