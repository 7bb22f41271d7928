from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from roster.core.dependencies import get_roster, http_error
from roster.core.exceptions import RosterError
from roster.models.employee import Employee
from roster.services.roster_cache import RosterCache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=list[Employee])
async def list_employees(roster: RosterCache = Depends(get_roster)):  # noqa: B008
    return list(roster.employees)


@router.post("/refresh", response_model=list[Employee])
async def refresh_employees(roster: RosterCache = Depends(get_roster)):  # noqa: B008
    try:
        await roster.refresh()
    except RosterError as err:
        logger.error("Roster refresh failed: %s", err)
        raise http_error(err) from err
    return list(roster.employees)


@router.get("/{employee_id}", response_model=Employee)
async def get_employee(
    employee_id: int,
    roster: RosterCache = Depends(get_roster),  # noqa: B008
):
    employee = roster.get(employee_id)
    if employee is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Employee {employee_id} not found",
        )
    return employee


@router.delete("/{employee_id}")
async def delete_employee(
    employee_id: int,
    confirm: bool = False,
    roster: RosterCache = Depends(get_roster),  # noqa: B008
):
    try:
        deleted = await roster.remove(employee_id, confirm=lambda _: confirm)
    except RosterError as err:
        logger.error("Failed to delete employee %s: %s", employee_id, err)
        raise http_error(err) from err

    return {
        "deleted": deleted,
        "employeeId": employee_id,
        "message": "Employee deleted!" if deleted else "Deletion not confirmed",
    }
