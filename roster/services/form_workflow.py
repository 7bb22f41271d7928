"""Create/edit form state machine.

Idle -> Creating (``open_create``), Idle -> Editing (``open_edit``), and back
to Idle on ``cancel`` or on a successful ``submit``. A failed submit leaves
the mode and the draft untouched so the input can be corrected and retried.
A submit whose form was cancelled or reopened while the save was in flight
leaves the newer form alone.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from roster.core.exceptions import RosterError, ValidationError, WorkflowStateError
from roster.models.employee import (
    EMPLOYEE_FIELDS,
    REQUIRED_FIELDS,
    Employee,
    EmployeeDraft,
    FormState,
    as_form_text,
)
from roster.services.roster_cache import RosterCache

logger = logging.getLogger(__name__)

# both spellings of a field resolve to (attribute, wire alias)
_FIELD_LOOKUP: dict[str, tuple[str, str]] = {}
for _attr, _alias in EMPLOYEE_FIELDS:
    _FIELD_LOOKUP[_attr] = (_attr, _alias)
    _FIELD_LOOKUP[_alias] = (_attr, _alias)


class FormMode(str, Enum):
    IDLE = "idle"
    CREATING = "creating"
    EDITING = "editing"


class FormWorkflow:
    def __init__(self, cache: RosterCache) -> None:
        self.cache = cache
        self.mode = FormMode.IDLE
        self.draft = EmployeeDraft.blank()
        self.target: Employee | None = None
        self.error: str | None = None
        # changes whenever the form is opened or closed
        self._session = 0

    def _require_mode(self, *modes: FormMode, action: str) -> None:
        if self.mode not in modes:
            raise WorkflowStateError(f"Cannot {action} while the form is {self.mode.value}")

    def _reset(self) -> None:
        self._session += 1
        self.mode = FormMode.IDLE
        self.draft = EmployeeDraft.blank()
        self.target = None
        self.error = None

    def open_create(self) -> None:
        self._require_mode(FormMode.IDLE, action="start a new employee")
        self._session += 1
        self.mode = FormMode.CREATING
        self.draft = EmployeeDraft.blank()
        self.target = None
        self.error = None

    def open_edit(self, employee: Employee) -> None:
        self._require_mode(FormMode.IDLE, action=f"edit employee {employee.employee_id}")
        self._session += 1
        self.mode = FormMode.EDITING
        self.draft = EmployeeDraft.from_employee(employee)
        self.target = employee
        self.error = None

    def cancel(self) -> None:
        self._require_mode(FormMode.CREATING, FormMode.EDITING, action="cancel")
        self._reset()

    def set_field(self, name: str, value: Any) -> None:
        self._require_mode(FormMode.CREATING, FormMode.EDITING, action="edit fields")
        if name not in _FIELD_LOOKUP:
            raise ValidationError(f"Unknown field: {name}", fields={name: "unknown field"})

        attr, alias = _FIELD_LOOKUP[name]
        if attr == "employee_id" and self.mode is FormMode.EDITING:
            raise ValidationError(
                "employeeId cannot be changed while editing",
                fields={alias: "read-only while editing"},
            )
        setattr(self.draft, attr, as_form_text(value))

    def validate(self) -> Employee:
        """Build an Employee from the draft or raise ValidationError."""
        values = {attr: getattr(self.draft, attr).strip() for attr, _ in EMPLOYEE_FIELDS}
        if self.mode is FormMode.EDITING and self.target is not None:
            values["employee_id"] = str(self.target.employee_id)

        missing = {
            alias: "required" for attr, alias in EMPLOYEE_FIELDS if attr in REQUIRED_FIELDS and not values[attr]
        }
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", fields=missing)

        try:
            return Employee.model_validate(values)
        except PydanticValidationError as e:
            fields: dict[str, str] = {}
            for error in e.errors():
                key = str(error["loc"][0]) if error["loc"] else ""
                alias = _FIELD_LOOKUP.get(key, (key, key))[1]
                fields[alias] = error["msg"]
            raise ValidationError(f"Invalid fields: {', '.join(fields)}", fields=fields) from e

    async def submit(self) -> Employee:
        self._require_mode(FormMode.CREATING, FormMode.EDITING, action="submit")
        session, mode, target = self._session, self.mode, self.target

        try:
            if mode is FormMode.EDITING and target is None:
                raise WorkflowStateError("No employee selected for editing")
            record = self.validate()
            if mode is FormMode.CREATING:
                saved = await self.cache.create(record)
            else:
                saved = await self.cache.update(target.employee_id, record)
        except RosterError as e:
            if self._session == session:
                self.error = e.message
            logger.warning("Form submit failed (%s): %s", mode.value, e.message)
            raise

        if self._session == session:
            self._reset()
        else:
            logger.info("Employee %d saved after its form was closed", saved.employee_id)
        return saved

    def state(self) -> FormState:
        return FormState(
            mode=self.mode.value,
            draft=self.draft.model_dump(by_alias=True),
            target_id=self.target.employee_id if self.target else None,
            error=self.error,
        )
