from __future__ import annotations

from fastapi import HTTPException, Request, status

from roster.core.config import Settings
from roster.core.exceptions import (
    NetworkError,
    NotFoundError,
    RosterError,
    ServiceError,
    ValidationError,
    WorkflowStateError,
)
from roster.services.employee_gateway import EmployeeGateway
from roster.services.form_workflow import FormWorkflow
from roster.services.roster_cache import RosterCache


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> EmployeeGateway:
    return request.app.state.gateway


def get_roster(request: Request) -> RosterCache:
    return request.app.state.roster


def get_form(request: Request) -> FormWorkflow:
    return request.app.state.form


def http_error(err: RosterError) -> HTTPException:
    """Translate a roster failure into the matching HTTP error."""
    if isinstance(err, ValidationError):
        return HTTPException(
            status_code=422,
            detail={"message": err.message, "fields": err.fields},
        )
    if isinstance(err, WorkflowStateError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=err.message)
    if isinstance(err, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=err.message)
    if isinstance(err, (NetworkError, ServiceError)):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=err.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=err.message)
