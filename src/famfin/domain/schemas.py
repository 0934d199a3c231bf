"""Input validation schemas.

Every entity has a creation schema (required fields enforced) and an update
schema (every field optional, explicit nulls only where the column is
nullable). Payloads are accepted in camelCase, the wire format used by the
API, or in snake_case. Error messages are user-facing and in Portuguese.

``validate_payload`` is the single entry point services use; it converts
pydantic failures into ``famfin.domain.errors.ValidationError`` with one
``FieldIssue`` per failing field.
"""

import re
from datetime import date as date_type
from decimal import Decimal
from typing import Annotated, Any, ClassVar, Mapping, Optional, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    ValidationError as PydanticValidationError,
    model_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from famfin.domain.entities import (
    CardType,
    CategoryType,
    Relationship,
    StatementType,
    TransactionMode,
    TransactionSource,
    TransactionType,
)
from famfin.domain.errors import FieldIssue, ValidationError
from famfin.logging_utils import get_logger
from famfin.utils.date_parser import coerce_date

LOGGER = get_logger(__name__)

UUID_REGEX = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
HEX_COLOR_REGEX = re.compile(r"^#[0-9A-F]{6}$", re.IGNORECASE)
LAST_FOUR_REGEX = re.compile(r"^\d{4}$")

INSTALLMENTS_REQUIRED_MESSAGE = "Transações parceladas devem ter número e total de parcelas"
INSTALLMENT_NUMBER_MESSAGE = "Número da parcela não pode ser maior que o total de parcelas"

# Messages for pydantic's built-in error types.
_BUILTIN_MESSAGES = {
    "missing": "Campo obrigatório",
    "enum": "Opção inválida",
    "string_type": "Deve ser um texto",
    "int_type": "Deve ser um número inteiro",
    "int_parsing": "Deve ser um número inteiro",
    "int_from_float": "Deve ser um número inteiro",
    "decimal_type": "Deve ser um número",
    "decimal_parsing": "Deve ser um número",
    "bool_type": "Deve ser verdadeiro ou falso",
    "bool_parsing": "Deve ser verdadeiro ou falso",
    "list_type": "Deve ser uma lista",
    "model_type": "Formato inválido",
    "model_attributes_type": "Formato inválido",
    "dict_type": "Formato inválido",
}


def is_valid_uuid(value: str) -> bool:
    """Return True if value is a UUID string."""
    return bool(UUID_REGEX.match(value))


def _uuid_check(message: str):
    def check(value: str) -> str:
        if not is_valid_uuid(value):
            raise PydanticCustomError("uuid_format", message)
        return value.lower()

    return AfterValidator(check)


def _text_check(
    required_message: Optional[str] = None,
    max_length: Optional[int] = None,
    max_message: Optional[str] = None,
):
    def check(value: str) -> str:
        if required_message is not None and not value:
            raise PydanticCustomError("text_required", required_message)
        if max_length is not None and len(value) > max_length:
            raise PydanticCustomError(
                "text_too_long",
                max_message or "Deve ter no máximo {max_length} caracteres",
                {"max_length": max_length},
            )
        return value

    return AfterValidator(check)


def _check_hex_color(value: str) -> str:
    if not HEX_COLOR_REGEX.match(value):
        raise PydanticCustomError("hex_color", "Cor deve ser hex válida")
    return value


def _check_last_four(value: str) -> str:
    if not LAST_FOUR_REGEX.match(value):
        raise PydanticCustomError(
            "last_four_digits", "Últimos 4 dígitos devem conter exatamente 4 números"
        )
    return value


def _check_positive_amount(value: Decimal) -> Decimal:
    if not value.is_finite() or value <= 0:
        raise PydanticCustomError("positive_amount", "Valor deve ser positivo")
    return value


def _check_positive_int(value: int) -> int:
    if value <= 0:
        raise PydanticCustomError("positive_int", "Deve ser um número inteiro positivo")
    return value


def _check_day_of_month(value: int) -> int:
    if not 1 <= value <= 31:
        raise PydanticCustomError("day_of_month", "Dia deve estar entre 1 e 31")
    return value


def _parse_date_value(value: Any) -> date_type:
    try:
        return coerce_date(value)
    except ValueError:
        raise PydanticCustomError(
            "date_format", "Data deve estar no formato ISO 8601 ou DD/MM/AAAA"
        )


Uuid = Annotated[str, _uuid_check("ID inválido")]
CategoryRef = Annotated[str, _uuid_check("ID de categoria inválido")]
EntityName = Annotated[str, _text_check(required_message="Nome é obrigatório")]
TransactionName = Annotated[
    str,
    _text_check(
        required_message="Nome é obrigatório",
        max_length=100,
        max_message="Nome deve ter no máximo 100 caracteres",
    ),
]
Description = Annotated[
    str,
    _text_check(max_length=500, max_message="Descrição deve ter no máximo 500 caracteres"),
]
SourceBank = Annotated[str, _text_check(max_length=50)]
RequiredText = Annotated[str, _text_check(required_message="Campo obrigatório")]
HexColor = Annotated[str, AfterValidator(_check_hex_color)]
LastFourDigits = Annotated[str, AfterValidator(_check_last_four)]
PositiveAmount = Annotated[Decimal, AfterValidator(_check_positive_amount)]
PositiveInt = Annotated[int, AfterValidator(_check_positive_int)]
DayOfMonth = Annotated[int, AfterValidator(_check_day_of_month)]
DateValue = Annotated[date_type, BeforeValidator(_parse_date_value)]


class _Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    def to_record(self) -> dict[str, Any]:
        """Dump to a snake_case dict."""
        return self.model_dump(mode="python")


class _PartialSchema(_Schema):
    """Update schema: unset fields are left alone, nulls only where allowed."""

    non_nullable_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def _reject_null_required_fields(self):
        for name in sorted(self.model_fields_set & self.non_nullable_fields):
            if getattr(self, name) is None:
                raise PydanticCustomError(
                    "null_not_allowed",
                    "Campo não pode ser nulo",
                    {"field": to_camel(name)},
                )
        return self

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="python", exclude_unset=True)


def _require_installment_fields(mode, installment_number, installments_total) -> None:
    if mode == TransactionMode.PARCELADA and (
        installment_number is None or installments_total is None
    ):
        raise PydanticCustomError(
            "installments_required", INSTALLMENTS_REQUIRED_MESSAGE, {"field": "mode"}
        )
    if (
        installment_number is not None
        and installments_total is not None
        and installment_number > installments_total
    ):
        raise PydanticCustomError(
            "installment_number_range",
            INSTALLMENT_NUMBER_MESSAGE,
            {"field": "installmentNumber"},
        )


class TransactionCreate(_Schema):
    """Fields required to create a transaction."""

    date: DateValue
    amount: PositiveAmount
    type: TransactionType
    category_id: CategoryRef
    name: TransactionName
    description: Optional[Description] = None
    mode: TransactionMode = TransactionMode.AVULSA
    installment_number: Optional[PositiveInt] = None
    installments_total: Optional[PositiveInt] = None
    card_id: Optional[Uuid] = None
    family_member_id: Optional[Uuid] = None
    due_date: Optional[DateValue] = None
    is_paid: bool = False
    is_recurring: bool = False
    recurring_months: Optional[PositiveInt] = None
    source: TransactionSource = TransactionSource.MANUAL
    source_bank: Optional[SourceBank] = None

    @model_validator(mode="after")
    def _check_installments(self):
        _require_installment_fields(
            self.mode, self.installment_number, self.installments_total
        )
        return self


class TransactionUpdate(_PartialSchema):
    """Partial transaction update."""

    non_nullable_fields: ClassVar[frozenset[str]] = frozenset(
        {"date", "amount", "type", "category_id", "name", "mode", "is_paid", "is_recurring", "source"}
    )

    date: Optional[DateValue] = None
    amount: Optional[PositiveAmount] = None
    type: Optional[TransactionType] = None
    category_id: Optional[CategoryRef] = None
    name: Optional[TransactionName] = None
    description: Optional[Description] = None
    mode: Optional[TransactionMode] = None
    installment_number: Optional[PositiveInt] = None
    installments_total: Optional[PositiveInt] = None
    card_id: Optional[Uuid] = None
    family_member_id: Optional[Uuid] = None
    due_date: Optional[DateValue] = None
    is_paid: Optional[bool] = None
    is_recurring: Optional[bool] = None
    recurring_months: Optional[PositiveInt] = None
    source: Optional[TransactionSource] = None
    source_bank: Optional[SourceBank] = None


class TransactionBatch(_Schema):
    """Several transactions created in one request."""

    transactions: list[TransactionCreate]

    @model_validator(mode="after")
    def _check_not_empty(self):
        if not self.transactions:
            raise PydanticCustomError(
                "batch_empty",
                "Pelo menos uma transação é necessária",
                {"field": "transactions"},
            )
        return self


class CategoryCreate(_Schema):
    """Fields required to create a category."""

    name: EntityName
    type: CategoryType
    color: HexColor
    icon: Optional[str] = None
    parent_id: Optional[Uuid] = None


class CategoryUpdate(_PartialSchema):
    """Partial category update."""

    non_nullable_fields: ClassVar[frozenset[str]] = frozenset({"name", "type", "color"})

    name: Optional[EntityName] = None
    type: Optional[CategoryType] = None
    color: Optional[HexColor] = None
    icon: Optional[str] = None
    parent_id: Optional[Uuid] = None


class CardCreate(_Schema):
    """Fields required to create a credit card."""

    name: EntityName
    last_four_digits: LastFourDigits
    card_type: CardType
    holder: RequiredText
    purpose: RequiredText
    color: HexColor
    icon: Optional[str] = None
    limit: Optional[PositiveAmount] = None
    closing_day: Optional[DayOfMonth] = None
    due_day: Optional[DayOfMonth] = None
    holder_family_member_id: Optional[Uuid] = None


class CardUpdate(_PartialSchema):
    """Partial credit card update."""

    non_nullable_fields: ClassVar[frozenset[str]] = frozenset(
        {"name", "last_four_digits", "card_type", "holder", "purpose", "color"}
    )

    name: Optional[EntityName] = None
    last_four_digits: Optional[LastFourDigits] = None
    card_type: Optional[CardType] = None
    holder: Optional[RequiredText] = None
    purpose: Optional[RequiredText] = None
    color: Optional[HexColor] = None
    icon: Optional[str] = None
    limit: Optional[PositiveAmount] = None
    closing_day: Optional[DayOfMonth] = None
    due_day: Optional[DayOfMonth] = None
    holder_family_member_id: Optional[Uuid] = None


class FamilyMemberCreate(_Schema):
    """Fields required to create a family member."""

    name: EntityName
    relationship: Relationship


class FamilyMemberUpdate(_PartialSchema):
    """Partial family member update."""

    non_nullable_fields: ClassVar[frozenset[str]] = frozenset({"name", "relationship"})

    name: Optional[EntityName] = None
    relationship: Optional[Relationship] = None


class ImportRequest(_Schema):
    """Statement text submitted for extraction."""

    text: Annotated[str, _text_check(required_message="Texto do extrato é obrigatório")]
    statement_type: StatementType


class TransactionFilters(_Schema):
    """Query string filters for listing and summarizing transactions."""

    start_date: Optional[DateValue] = None
    end_date: Optional[DateValue] = None
    type: Optional[TransactionType] = None
    category_id: Optional[Uuid] = None
    card_id: Optional[Uuid] = None
    family_member_id: Optional[Uuid] = None
    is_paid: Optional[bool] = None

    def to_filters(self) -> dict[str, Any]:
        """Keyword arguments for ``TransactionService.list_transactions``."""
        record = self.model_dump(mode="python", exclude_none=True)
        if "type" in record:
            record["transaction_type"] = record.pop("type")
        return record


class EntityId(_Schema):
    """Path parameter carrying an entity id."""

    id: Uuid


SchemaT = TypeVar("SchemaT", bound=_Schema)


def _path_part(part: Any) -> str:
    # snake_case input keys are reported under their camelCase alias
    if isinstance(part, str) and "_" in part:
        return to_camel(part)
    return str(part)


def _issue_from_error(error: Mapping[str, Any]) -> FieldIssue:
    parts = [_path_part(part) for part in error.get("loc", ())]
    ctx = error.get("ctx") or {}
    if "field" in ctx:
        parts.append(str(ctx["field"]))
    message = _BUILTIN_MESSAGES.get(error["type"], error["msg"])
    return FieldIssue(path=".".join(parts), message=message)


def validate_payload(schema: type[SchemaT], data: Mapping[str, Any]) -> SchemaT:
    """Validate a payload against a schema.

    Args:
        schema: Schema class, e.g. TransactionCreate
        data: Raw payload (camelCase or snake_case keys)

    Returns:
        Validated schema instance

    Raises:
        ValidationError: With one FieldIssue per failing field
    """
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        issues = [_issue_from_error(err) for err in e.errors()]
        summary = "; ".join(f"{issue.path}: {issue.message}" for issue in issues)
        LOGGER.warning("%s rejected: %s", schema.__name__, summary)
        raise ValidationError(f"Dados inválidos ({summary})", issues) from e
