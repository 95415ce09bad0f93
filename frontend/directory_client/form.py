"""User Form — values, per-field errors and the submit guard for create/update.

Invariants:
    - validate() runs the shared field rules; it is advisory, the server re-checks everything
    - Editing a field clears that field's error
    - submitting is True only while a submit is in flight; a second submit is refused
"""

from dataclasses import dataclass, field
from typing import Any

from directory_api.core.user_rules import USER_FIELD_KEYS, USER_FIELD_RULES, check_user_fields
from directory_api.schemas.user import UserRecord


_INPUT_LENGTHS = {rule.key: rule.max_input_length for rule in USER_FIELD_RULES}


@dataclass(frozen=True)
class FormField:
    """Display text for one input; its length limit comes from the shared field rules."""
    key: str
    label: str
    placeholder: str

    @property
    def max_length(self) -> int:
        return _INPUT_LENGTHS[self.key]


FORM_FIELDS: tuple[FormField, ...] = (
    FormField("name", "Full Name", "Enter your full name"),
    FormField("address", "Address", "Enter your complete address"),
    FormField("phoneNumber", "Phone Number", "Enter 10-digit phone number"),
    FormField("companyName", "Company Name", "Enter your company name"),
)


def _blank() -> dict[str, str]:
    return {key: "" for key in USER_FIELD_KEYS}


@dataclass
class UserForm:
    values: dict[str, str] = field(default_factory=_blank)
    errors: dict[str, str] = field(default_factory=dict)
    is_edit: bool = False
    submitting: bool = False

    @classmethod
    def for_create(cls) -> "UserForm":
        return cls()

    @classmethod
    def from_user(cls, user: UserRecord) -> "UserForm":
        return cls(values=user.business_fields(), is_edit=True)

    @property
    def title(self) -> str:
        return "Update User" if self.is_edit else "Create New User"

    @property
    def submit_label(self) -> str:
        if self.submitting:
            return "Updating..." if self.is_edit else "Creating..."
        return self.title if self.is_edit else "Create User"

    def set_field(self, key: str, value: str) -> None:
        if key not in self.values:
            raise KeyError(key)
        self.values[key] = value
        self.errors.pop(key, None)

    def validate(self) -> bool:
        self.errors = {v.field: v.message for v in check_user_fields(self.values)}
        return not self.errors

    def apply_server_errors(self, errors: list[dict[str, Any]]) -> None:
        """Show field errors returned by the server next to their inputs."""
        for error in errors:
            key = error.get("field")
            if key in self.values and error.get("message"):
                self.errors[key] = str(error["message"])

    def reset(self) -> None:
        self.values = _blank()
        self.errors = {}

    def payload(self) -> dict[str, str]:
        return dict(self.values)
