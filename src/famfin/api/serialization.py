"""Convert domain objects to the camelCase JSON the API returns."""

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic.alias_generators import to_camel


def _key(key: Any) -> Any:
    # Only snake_case field names are converted; id-keyed maps pass through
    if isinstance(key, str) and "_" in key:
        return to_camel(key)
    return key


def to_json(value: Any) -> Any:
    """Recursively turn dataclasses, enums, decimals and dates into JSON values."""
    if is_dataclass(value) and not isinstance(value, type):
        value = asdict(value)
    if isinstance(value, dict):
        return {_key(key): to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value
