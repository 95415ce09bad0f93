"""User Field Rules — the single definition of what a valid user record is.

Invariants:
    - USER_FIELD_RULES is the only place field limits live; UserFields is built from it and
      the client form reads its input lengths from it
    - Values are trimmed before every check; stored values are the trimmed ones
    - All four fields are checked on every call: violations are collected, never short-circuited
    - At most one violation per field, reported in rule order
    - Imported by the server repository (authoritative) and the client form (advisory)
"""

from dataclasses import dataclass
from typing import Annotated, Any, Mapping

from pydantic import (
    BaseModel, ConfigDict, Field, StringConstraints, ValidationError, create_model,
)

PHONE_DIGITS = 10
PHONE_PATTERN = rf"^[0-9]{{{PHONE_DIGITS}}}$"


@dataclass(frozen=True)
class FieldRule:
    """Rule set for one business field, keyed by its wire name."""
    key: str
    attr: str
    label: str
    max_length: int | None = None
    pattern: str | None = None
    pattern_message: str | None = None
    input_length: int | None = None

    @property
    def max_input_length(self) -> int | None:
        """Longest value an input should accept, from max_length or the fixed pattern width."""
        return self.max_length or self.input_length

    @property
    def required_message(self) -> str:
        return f"{self.label} is required"

    @property
    def too_long_message(self) -> str:
        return f"{self.label} cannot exceed {self.max_length} characters"


USER_FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("name", "name", "Name", max_length=50),
    FieldRule("address", "address", "Address", max_length=200),
    FieldRule(
        "phoneNumber", "phone_number", "Phone number",
        pattern=PHONE_PATTERN,
        pattern_message=f"Phone number must be exactly {PHONE_DIGITS} digits",
        input_length=PHONE_DIGITS,
    ),
    FieldRule("companyName", "company_name", "Company name", max_length=100),
)

USER_FIELD_KEYS: tuple[str, ...] = tuple(rule.key for rule in USER_FIELD_RULES)

_RULES_BY_NAME: dict[str, FieldRule] = {
    **{rule.key: rule for rule in USER_FIELD_RULES},
    **{rule.attr: rule for rule in USER_FIELD_RULES},
}

_REQUIRED_ERROR_TYPES = frozenset({"missing", "string_type", "string_too_short"})


def _constrained_text(rule: FieldRule) -> Any:
    return Annotated[
        str,
        StringConstraints(
            strip_whitespace=True,
            min_length=1,
            max_length=rule.max_length,
            pattern=rule.pattern,
        ),
    ]


UserFields: type[BaseModel] = create_model(
    "UserFields",
    __config__=ConfigDict(populate_by_name=True, extra="ignore"),
    **{
        rule.attr: (_constrained_text(rule), Field(alias=rule.key))
        for rule in USER_FIELD_RULES
    },
)


@dataclass(frozen=True)
class FieldViolation:
    """One violated rule: the wire name of the field and a readable message."""
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


def _message_for(rule: FieldRule, error: Mapping[str, Any]) -> str:
    error_type = error.get("type", "")
    if error_type in _REQUIRED_ERROR_TYPES:
        return rule.required_message
    if error_type == "string_too_long":
        return rule.too_long_message
    if error_type == "string_pattern_mismatch" and rule.pattern_message:
        return rule.pattern_message
    return str(error.get("msg", rule.required_message))


def check_user_fields(data: Mapping[str, Any]) -> list[FieldViolation]:
    """Return every violated field rule for a candidate record. Empty means valid."""
    try:
        UserFields.model_validate(dict(data))
    except ValidationError as exc:
        found: dict[str, FieldViolation] = {}
        for error in exc.errors():
            loc = error.get("loc") or ("",)
            rule = _RULES_BY_NAME.get(str(loc[0]))
            if rule is None or rule.key in found:
                continue
            found[rule.key] = FieldViolation(rule.key, _message_for(rule, error))
        return [found[key] for key in USER_FIELD_KEYS if key in found]
    return []


def normalize_user_fields(data: Mapping[str, Any]) -> dict[str, str]:
    """Trimmed values of the four business fields, keyed by wire name.

    Only call with data that check_user_fields accepted.
    """
    return UserFields.model_validate(dict(data)).model_dump(by_alias=True)


def pick_user_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only the business field keys present in data."""
    return {key: data[key] for key in USER_FIELD_KEYS if key in data}
