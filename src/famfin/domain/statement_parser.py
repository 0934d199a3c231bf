"""Bank statement text parser.

Statements arrive as text copied or extracted from PDF invoices and checking
account statements of Brazilian banks. Parsing is line based:

1. ``detect_bank`` names the issuer and ``detect_statement_type`` decides
   between a credit card invoice and a checking account statement.
2. Each line starting with a date (``DD/MM/YYYY``, ``YYYY-MM-DD``, ``DD/MM``
   or, for some banks, ``DD MMM``) and carrying a ``1.234,56`` amount becomes
   a ``ParsedTransaction``.
3. Bank rules decide which lines are totals or headers to skip and which
   descriptions are refunds (credit cards) or credits (checking accounts).

When the bank is unknown, or its rules find nothing, a generic pass runs that
also understands statements grouped under long date headers such as
"4 de Janeiro de 2025".
"""

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from famfin.domain.entities import (
    ParsedTransaction,
    ParserResult,
    TransactionMode,
    TransactionType,
)
from famfin.logging_utils import get_logger
from famfin.utils.amount_parser import parse_amount
from famfin.utils.date_parser import normalize_date

LOGGER = get_logger(__name__)

CREDIT_CARD = "credit_card"
CHECKING = "checking"
UNKNOWN_BANK = "Desconhecido"

BANK_SPECIFIC_CONFIDENCE = 0.95
GENERIC_CONFIDENCE = 0.7

# Banks with fewer lines than this are complemented with a generic pass
_COMPLEMENT_THRESHOLD = 10

MONTH_ABBREVIATIONS = {
    "JAN": 1, "FEV": 2, "MAR": 3, "ABR": 4, "MAI": 5, "JUN": 6,
    "JUL": 7, "AGO": 8, "SET": 9, "OUT": 10, "NOV": 11, "DEZ": 12,
}

MONTH_NAMES = {
    "janeiro": 1, "fevereiro": 2, "março": 3, "marco": 3, "abril": 4,
    "maio": 5, "junho": 6, "julho": 7, "agosto": 8, "setembro": 9,
    "outubro": 10, "novembro": 11, "dezembro": 12,
}

_AMOUNT = r"(?P<amount>[+-]?\s?(?:R\$\s?)?-?(?:\d{1,3}(?:\.\d{3})+|\d+),\d{2})(?=\s|$)"

DATED_LINE_PATTERNS = (
    re.compile(rf"^(?P<date>\d{{2}}/\d{{2}}/\d{{4}})\s+(?P<description>.+?)\s+{_AMOUNT}"),
    re.compile(rf"^(?P<date>\d{{4}}-\d{{2}}-\d{{2}})\s+(?P<description>.+?)\s+{_AMOUNT}"),
    re.compile(rf"^(?P<date>\d{{2}}/\d{{2}})\s+(?P<description>.+?)\s+{_AMOUNT}"),
)

MONTH_ABBREVIATION_LINE = re.compile(
    rf"^(?P<day>\d{{1,2}})\s+(?P<month>{'|'.join(MONTH_ABBREVIATIONS)})\s+"
    rf"(?P<description>.+?)\s+{_AMOUNT}",
    re.IGNORECASE,
)

LONG_DATE_HEADER = re.compile(
    rf"(?P<day>\d{{1,2}})\s+de\s+(?P<month>{'|'.join(MONTH_NAMES)})\s+de\s+(?P<year>\d{{4}})",
    re.IGNORECASE,
)

SECTION_LINE = re.compile(
    r"^(?P<description>.+?)\s+(?P<amount>-?\s?R\$\s?-?(?:\d{1,3}(?:\.\d{3})+|\d+),\d{2})(?=\s|$)"
)

INSTALLMENT_SUFFIX = re.compile(r"\s*(?P<number>\d{1,2})/(?P<total>\d{1,2})\s*$")

NON_TRANSACTION_PATTERNS = (
    re.compile(r"^saldo\s+(do\s+dia|disponível|bloqueado|anterior|total)", re.IGNORECASE),
    re.compile(r"^(fale\s+com|sac:|ouvidoria:|deficiência)", re.IGNORECASE),
    re.compile(r"^(data|valor|descrição|histórico|lançamento)$", re.IGNORECASE),
    re.compile(r"^total\s+(da\s+fatura|para|geral)", re.IGNORECASE),
    re.compile(r"^(período|agência|conta|cpf|cnpj)", re.IGNORECASE),
    re.compile(r"^(data|valor|descrição|total|saldo|anterior|limite)$", re.IGNORECASE),
)

INCOME_KEYWORDS = re.compile(
    r"recebid[oa]|crédito|credito|depósito|deposito|rendimento|juros|dividendo"
    r"|salário|salario|reembolso|estorno|devolução|devolvido|cashback",
    re.IGNORECASE,
)

CREDIT_CARD_KEYWORDS = (
    r"fatura",
    r"cartão de crédito",
    r"cartao de credito",
    r"número do cartão",
    r"limite disponível",
    r"total da fatura",
    r"vencimento da fatura",
    r"pagamento mínimo",
    r"crédito rotativo",
)

CHECKING_KEYWORDS = (
    r"extrato",
    r"conta corrente",
    r"saldo anterior",
    r"débitos",
    r"créditos",
    r"saldo disponível",
    r"cheque especial",
)


@dataclass(frozen=True)
class BankRules:
    """Line rules for one issuer."""

    name: str
    detect: re.Pattern
    credit_skip: re.Pattern
    credit_refund: re.Pattern
    checking_skip: re.Pattern
    checking_income: Optional[re.Pattern] = None
    month_abbreviations: bool = False


def _ci(pattern: str) -> re.Pattern:
    return re.compile(pattern, re.IGNORECASE)


_CHECKING_SKIP = _ci(r"saldo|total|data|descrição|anterior")

# Detection order matters: Bradesco is checked last, its name shows up in
# other banks' boleto lines.
BANKS = (
    BankRules(
        name="Nubank",
        detect=_ci(r"nubank|nu pagamentos|roxinho|nu s\.a"),
        credit_skip=_ci(r"total|pagamento|ajuste|encargos|iof|juros"),
        credit_refund=_ci(r"estorno|devolução|reembolso"),
        checking_skip=_ci(r"saldo|total|data|descrição"),
        month_abbreviations=True,
    ),
    BankRules(
        name="Inter",
        detect=_ci(r"banco inter|inter s\.?a|intermedium"),
        credit_skip=_ci(r"total|pagamento|limite|disponível"),
        credit_refund=_ci(r"estorno|devolução|cashback"),
        checking_skip=_CHECKING_SKIP,
        checking_income=_ci(r"pix recebido|transferência recebida|crédito|ted recebida"),
        month_abbreviations=True,
    ),
    BankRules(
        name="Itaú",
        detect=_ci(r"ita[uú]|itau unibanco"),
        credit_skip=_ci(r"total|pagamento|saldo|crédito anterior|encargos"),
        credit_refund=_ci(r"estorno|credito|devolução"),
        checking_skip=_ci(r"saldo|total|data|lançamento|anterior"),
    ),
    BankRules(
        name="BTG",
        detect=_ci(r"btg pactual|btg banking"),
        credit_skip=_ci(r"saldo|total|data|descrição|limite"),
        credit_refund=_ci(r"estorno|devolução|cashback"),
        checking_skip=_ci(r"saldo|total|data|descrição|limite"),
    ),
    BankRules(
        name="Santander",
        detect=_ci(r"santander"),
        credit_skip=_ci(r"total|pagamento|saldo|encargos|iof|juros"),
        credit_refund=_ci(r"estorno|devolução|crédito"),
        checking_skip=_CHECKING_SKIP,
    ),
    BankRules(
        name="C6 Bank",
        detect=_ci(r"c6 bank|c6 s\.?a"),
        credit_skip=_ci(r"saldo|total|data|descrição|limite"),
        credit_refund=_ci(r"estorno|devolução|cashback|átomos"),
        checking_skip=_ci(r"saldo|total|data|descrição|limite"),
    ),
    BankRules(
        name="Cora",
        detect=_ci(r"cora scm|cora s\.?a|cora\.com"),
        credit_skip=_CHECKING_SKIP,
        credit_refund=_ci(r"estorno|devolução"),
        checking_skip=_CHECKING_SKIP,
    ),
    BankRules(
        name="Bradesco",
        detect=_ci(r"bradesco"),
        credit_skip=_ci(r"total|subtotal|pagto|pagamento|data|histórico|lançamento|vencimento"),
        credit_refund=_ci(r"estorno|devolução|crédito"),
        checking_skip=_ci(r"saldo|total|data|lançamento|anterior"),
    ),
)

GENERIC_RULES = BankRules(
    name=UNKNOWN_BANK,
    detect=_ci(r"$^"),
    credit_skip=_ci(r"^(total|saldo|limite)\b"),
    credit_refund=_ci(r"estorno|devolução|crédito|cashback"),
    checking_skip=_ci(r"^(saldo|total)\b"),
)


def detect_bank(text: str) -> str:
    """Name the bank that issued a statement, or "Desconhecido"."""
    for rules in BANKS:
        if rules.detect.search(text):
            return rules.name
    return UNKNOWN_BANK


def detect_statement_type(text: str) -> str:
    """Decide between a credit card invoice and a checking statement.

    Each keyword present scores one point for its side; ties go to checking.
    """
    credit_score = sum(1 for kw in CREDIT_CARD_KEYWORDS if re.search(kw, text, re.IGNORECASE))
    checking_score = sum(1 for kw in CHECKING_KEYWORDS if re.search(kw, text, re.IGNORECASE))
    return CREDIT_CARD if credit_score > checking_score else CHECKING


def clean_description(description: str) -> str:
    """Drop asterisks and collapse whitespace."""
    clean = re.sub(r"\*+", " ", description.strip())
    return re.sub(r"\s{2,}", " ", clean).strip()


def is_non_transaction(description: str) -> bool:
    """True for headers, balances and other lines that are not transactions."""
    return any(pattern.search(description) for pattern in NON_TRANSACTION_PATTERNS)


def _dedup_key(txn: ParsedTransaction) -> tuple:
    return (txn.date, txn.description[:30].lower(), txn.amount)


def _split_installment(description: str) -> tuple[str, Optional[int], Optional[int]]:
    match = INSTALLMENT_SUFFIX.search(description)
    if match is None:
        return description, None, None
    number, total = int(match.group("number")), int(match.group("total"))
    if number < 1 or total < 1 or number > total:
        return description, None, None
    return description[: match.start()].strip(), number, total


def _match_dated_line(
    line: str, rules: BankRules, today: Optional[date]
) -> Optional[tuple[date, str, str]]:
    """Return (date, raw description, raw amount) for a transaction line."""
    for pattern in DATED_LINE_PATTERNS:
        match = pattern.match(line)
        if match is not None:
            date_str = match.group("date")
            break
    else:
        match = MONTH_ABBREVIATION_LINE.match(line) if rules.month_abbreviations else None
        if match is None:
            return None
        month = MONTH_ABBREVIATIONS[match.group("month").upper()]
        date_str = f"{int(match.group('day')):02d}/{month:02d}"

    try:
        parsed_date = date.fromisoformat(normalize_date(date_str, today=today))
    except ValueError:
        LOGGER.debug("Skipping line with invalid date: %s", line)
        return None
    return parsed_date, match.group("description"), match.group("amount")


def _build_transaction(
    parsed_date: date,
    raw_description: str,
    raw_amount: str,
    statement_type: str,
    rules: BankRules,
) -> Optional[ParsedTransaction]:
    description = clean_description(raw_description)
    if len(description) < 3 or is_non_transaction(description):
        return None

    try:
        amount = parse_amount(raw_amount)
    except ValueError:
        return None
    if amount == 0:
        return None

    if statement_type == CREDIT_CARD:
        if rules.credit_skip.search(description):
            return None
        description, number, total = _split_installment(description)
        if len(description) < 3:
            return None
        is_income = amount < 0 or bool(rules.credit_refund.search(description))
        return ParsedTransaction(
            date=parsed_date,
            description=description,
            amount=abs(amount),
            type=TransactionType.INCOME if is_income else TransactionType.EXPENSE,
            mode=TransactionMode.PARCELADA if total is not None else TransactionMode.AVULSA,
            installment_number=number,
            installments_total=total,
        )

    if rules.checking_skip.search(description):
        return None
    if amount < 0:
        is_income = False
    else:
        income_pattern = rules.checking_income or INCOME_KEYWORDS
        is_income = "+" in raw_amount or bool(income_pattern.search(description))
    return ParsedTransaction(
        date=parsed_date,
        description=description,
        amount=abs(amount),
        type=TransactionType.INCOME if is_income else TransactionType.EXPENSE,
    )


def _unique(transactions: Iterable[ParsedTransaction]) -> list[ParsedTransaction]:
    seen = set()
    unique = []
    for txn in transactions:
        key = _dedup_key(txn)
        if key in seen:
            continue
        seen.add(key)
        unique.append(txn)
    return unique


def parse_lines(
    text: str,
    statement_type: str,
    rules: BankRules = GENERIC_RULES,
    today: Optional[date] = None,
) -> list[ParsedTransaction]:
    """Parse every dated line of a statement with one bank's rules."""
    transactions = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        matched = _match_dated_line(line, rules, today)
        if matched is None:
            continue
        txn = _build_transaction(*matched, statement_type=statement_type, rules=rules)
        if txn is not None:
            transactions.append(txn)
    return _unique(transactions)


def parse_long_date_sections(text: str) -> list[ParsedTransaction]:
    """Parse statements grouped under headers like "4 de Janeiro de 2025".

    Lines below a header read ``<description> R$ <amount> [R$ <balance>]``;
    negative amounts are debits, received transfers and other credit keywords
    are income.
    """
    transactions = []
    current_date: Optional[date] = None

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        header = LONG_DATE_HEADER.search(line)
        if header is not None:
            try:
                current_date = date(
                    int(header.group("year")),
                    MONTH_NAMES[header.group("month").lower()],
                    int(header.group("day")),
                )
            except ValueError:
                current_date = None
            continue

        if current_date is None:
            continue
        match = SECTION_LINE.match(line)
        if match is None:
            continue

        description = clean_description(match.group("description").replace('"', " "))
        description = re.sub(r"^Cp\s*:\s*\d+-", "", description, flags=re.IGNORECASE).strip()
        if len(description) < 2 or is_non_transaction(description):
            continue

        amount = parse_amount(match.group("amount"))
        if amount == 0:
            continue
        if amount < 0 or re.search(r"recebido\s+devolvido", description, re.IGNORECASE):
            is_income = False
        else:
            is_income = bool(INCOME_KEYWORDS.search(description))

        transactions.append(
            ParsedTransaction(
                date=current_date,
                description=description,
                amount=abs(amount),
                type=TransactionType.INCOME if is_income else TransactionType.EXPENSE,
            )
        )
    return _unique(transactions)


def parse_generic(
    text: str, statement_type: str, today: Optional[date] = None
) -> list[ParsedTransaction]:
    """Parse a statement from an unknown layout."""
    sectioned = parse_long_date_sections(text)
    if sectioned:
        LOGGER.debug("Generic parser: %s transactions under long date headers", len(sectioned))
        return sectioned
    return parse_lines(text, statement_type, GENERIC_RULES, today=today)


def parse_statement(
    text: str,
    forced_type: Optional[str] = None,
    today: Optional[date] = None,
) -> ParserResult:
    """Parse statement text into transactions.

    Args:
        text: Statement text
        forced_type: "credit_card" or "checking" to skip type detection
        today: Reference date for year inference on DD/MM dates

    Returns:
        ParserResult with the transactions found, the detected bank and type,
        and the parsing method and confidence
    """
    bank = detect_bank(text)
    statement_type = forced_type or detect_statement_type(text)
    LOGGER.debug("Detected bank %s, statement type %s", bank, statement_type)

    transactions: list[ParsedTransaction] = []
    confidence = 0.0
    parsing_method = "regex"

    rules = next((r for r in BANKS if r.name == bank), None)
    if rules is not None:
        transactions = parse_lines(text, statement_type, rules, today=today)
        if not transactions and statement_type == CHECKING:
            transactions = parse_long_date_sections(text)
        confidence = BANK_SPECIFIC_CONFIDENCE if transactions else 0.0

    if not transactions:
        LOGGER.debug("No bank specific matches, falling back to generic parser")
        transactions = parse_generic(text, statement_type, today=today)
        confidence = GENERIC_CONFIDENCE if transactions else 0.0
        parsing_method = "hybrid"
    elif bank != UNKNOWN_BANK and len(transactions) < _COMPLEMENT_THRESHOLD:
        generic = parse_generic(text, statement_type, today=today)
        if len(generic) > len(transactions):
            known = {_dedup_key(txn) for txn in transactions}
            transactions.extend(txn for txn in generic if _dedup_key(txn) not in known)
            parsing_method = "hybrid"

    LOGGER.debug("Extracted %s transactions", len(transactions))
    return ParserResult(
        transactions=tuple(transactions),
        bank=bank,
        statement_type=statement_type,
        parsing_method=parsing_method,
        confidence=confidence,
    )
