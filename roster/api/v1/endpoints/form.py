from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from roster.core.dependencies import get_form, get_roster, http_error
from roster.core.exceptions import RosterError
from roster.models.employee import FormState
from roster.services.form_workflow import FormMode, FormWorkflow
from roster.services.roster_cache import RosterCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/form", tags=["form"])


@router.get("", response_model=FormState)
async def get_form_state(form: FormWorkflow = Depends(get_form)):  # noqa: B008
    return form.state()


@router.post("/new", response_model=FormState)
async def open_create(form: FormWorkflow = Depends(get_form)):  # noqa: B008
    try:
        form.open_create()
    except RosterError as err:
        raise http_error(err) from err
    return form.state()


@router.post("/edit/{employee_id}", response_model=FormState)
async def open_edit(
    employee_id: int,
    form: FormWorkflow = Depends(get_form),  # noqa: B008
    roster: RosterCache = Depends(get_roster),  # noqa: B008
):
    employee = roster.get(employee_id)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee {employee_id} not found",
        )
    try:
        form.open_edit(employee)
    except RosterError as err:
        raise http_error(err) from err
    return form.state()


@router.patch("", response_model=FormState)
async def update_fields(
    changes: dict[str, Any] = Body(...),  # noqa: B008
    form: FormWorkflow = Depends(get_form),  # noqa: B008
):
    previous = form.draft.model_copy()
    try:
        for name, value in changes.items():
            form.set_field(name, value)
    except RosterError as err:
        form.draft = previous
        raise http_error(err) from err
    return form.state()


@router.post("/cancel", response_model=FormState)
async def cancel(form: FormWorkflow = Depends(get_form)):  # noqa: B008
    try:
        form.cancel()
    except RosterError as err:
        raise http_error(err) from err
    return form.state()


@router.post("/submit")
async def submit(form: FormWorkflow = Depends(get_form)):  # noqa: B008
    creating = form.mode is FormMode.CREATING
    try:
        saved = await form.submit()
    except RosterError as err:
        logger.error("Form submit failed: %s", err)
        raise http_error(err) from err

    return {
        "employee": saved,
        "message": "Employee added!" if creating else "Employee updated!",
    }
