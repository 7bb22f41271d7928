"""Employee models for the remote roster service and the edit form."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class Employee(BaseModel):
    """An employee record as exchanged with the remote service.

    Attributes are snake_case; the wire format uses the camelCase aliases.
    A missing manager is always ``None`` locally and ``null`` on the wire.
    """

    employee_id: int = Field(..., alias="employeeId")
    name: str
    age: int = Field(..., ge=0)
    salary: float = Field(..., ge=0, allow_inf_nan=False)
    department_id: int = Field(..., alias="departmentId")
    manager_id: int | None = Field(default=None, alias="managerId")

    model_config = {
        "populate_by_name": True,
        "frozen": True,
    }

    @field_validator("manager_id", mode="before")
    @classmethod
    def _blank_manager_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


# (attribute, wire alias) pairs in form display order
EMPLOYEE_FIELDS: list[tuple[str, str]] = [
    ("employee_id", "employeeId"),
    ("name", "name"),
    ("age", "age"),
    ("salary", "salary"),
    ("department_id", "departmentId"),
    ("manager_id", "managerId"),
]

REQUIRED_FIELDS: frozenset[str] = frozenset(
    {"employee_id", "name", "age", "salary", "department_id"}
)


def as_form_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class EmployeeDraft(BaseModel):
    """Raw form input for an employee; every field is kept as entered."""

    employee_id: str = Field(default="", alias="employeeId")
    name: str = ""
    age: str = ""
    salary: str = ""
    department_id: str = Field(default="", alias="departmentId")
    manager_id: str = Field(default="", alias="managerId")

    model_config = {
        "populate_by_name": True,
        "validate_assignment": True,
    }

    @classmethod
    def blank(cls) -> EmployeeDraft:
        return cls()

    @classmethod
    def from_employee(cls, employee: Employee) -> EmployeeDraft:
        return cls(**{attr: as_form_text(getattr(employee, attr)) for attr, _ in EMPLOYEE_FIELDS})


class FormState(BaseModel):
    """Snapshot of the form workflow for the console API."""

    mode: str
    draft: dict[str, str]
    target_id: int | None = Field(default=None, alias="targetId")
    error: str | None = None

    model_config = {"populate_by_name": True}
