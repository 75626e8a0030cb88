# products_api/validation.py

"""
Declarative request validation.

A rule names where a value lives (`params` or `body`), the field, a check and
the message reported when the check fails. `validate` evaluates every rule in
declaration order and returns one error record per failing rule, so a single
field can contribute several errors. `check_input` is the gate handlers call
before touching the database.
"""
import re
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Sequence, Type

from pydantic import BaseModel, ValidationError

_MISSING = object()

_INT_RE = re.compile(r"^[-+]?[0-9]+$")
_NUMERIC_RE = re.compile(r"^[+-]?([0-9]*[.])?[0-9]+$")
_BOOLEAN_STRINGS = ("true", "false", "1", "0")

INVALID_ID = "Id no válido"
EMPTY = "No puede ir vacio"
INVALID_VALUE = "Valor no valido"
NOT_POSITIVE = "Tiene que ser mayor a 0"


class Rule(NamedTuple):
    location: str
    field: str
    check: Callable[[Any], bool]
    message: str
    optional: bool = False


class InputValidationError(Exception):
    """Raised by the gate; carries the collected error records."""

    def __init__(self, errors: List[Dict[str, Any]]):
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors


def _as_string(value: Any) -> str:
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return 0.0
        try:
            return float(stripped)
        except ValueError:
            return None
    return None


# --- Checks ---
def is_int(value: Any) -> bool:
    return bool(_INT_RE.match(_as_string(value)))


def not_empty(value: Any) -> bool:
    return _as_string(value) != ""


def is_numeric(value: Any) -> bool:
    return bool(_NUMERIC_RE.match(_as_string(value)))


def is_boolean(value: Any) -> bool:
    return _as_string(value) in _BOOLEAN_STRINGS


def greater_than(limit: float) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        number = _as_number(value)
        return number is not None and number > limit

    return check


def validate(rules: Sequence[Rule], data: Mapping[str, Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Evaluates `rules` against `data` (keyed by location) and returns the error records."""
    errors = []
    for rule in rules:
        value = data.get(rule.location, {}).get(rule.field, _MISSING)
        if rule.optional and value is _MISSING:
            continue
        if rule.check(value):
            continue
        error = {"type": "field", "msg": rule.message, "path": rule.field, "location": rule.location}
        if value is not _MISSING:
            error["value"] = value
        errors.append(error)
    return errors


def check_input(rules: Sequence[Rule], params: Optional[Mapping[str, Any]] = None, body: Optional[Mapping[str, Any]] = None) -> None:
    """Raises InputValidationError when any rule fails."""
    errors = validate(rules, {"params": params or {}, "body": body or {}})
    if errors:
        raise InputValidationError(errors)


def coerce_body(schema: Type[BaseModel], body: Mapping[str, Any]) -> BaseModel:
    """Builds `schema` from a body that already passed its rules."""
    try:
        return schema.model_validate(body)
    except ValidationError as e:
        raise InputValidationError(
            [
                {
                    "type": "field",
                    "msg": INVALID_VALUE,
                    "path": ".".join(str(part) for part in err["loc"]),
                    "location": "body",
                }
                for err in e.errors()
            ]
        ) from e


# --- Rule sets ---
PRODUCT_ID_RULES = [
    Rule("params", "id", is_int, INVALID_ID),
]

_NAME_PRICE_RULES = [
    Rule("body", "name", not_empty, EMPTY),
    Rule("body", "price", is_numeric, INVALID_VALUE),
    Rule("body", "price", not_empty, EMPTY),
    Rule("body", "price", greater_than(0), NOT_POSITIVE),
]

CREATE_PRODUCT_RULES = _NAME_PRICE_RULES + [
    Rule("body", "availability", is_boolean, INVALID_VALUE, optional=True),
]

UPDATE_PRODUCT_RULES = PRODUCT_ID_RULES + _NAME_PRICE_RULES + [
    Rule("body", "availability", is_boolean, INVALID_VALUE),
]
