"""Error taxonomy shared by the gateway, the roster cache and the form workflow."""

from __future__ import annotations


class RosterError(Exception):
    """Base class for roster failures.

    ``operation`` and ``employee_id`` identify what was being attempted so the
    message shown to a user can say which action failed for which record.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        employee_id: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.employee_id = employee_id


class NetworkError(RosterError):
    """The remote service could not be reached (no response)."""


class ServiceError(RosterError):
    """The remote service answered with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        operation: str | None = None,
        employee_id: int | None = None,
    ) -> None:
        super().__init__(message, operation=operation, employee_id=employee_id)
        self.status = status


class NotFoundError(ServiceError):
    """The addressed employee does not exist on the remote service."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        employee_id: int | None = None,
    ) -> None:
        super().__init__(message, status=404, operation=operation, employee_id=employee_id)


class MalformedResponseError(ServiceError):
    """The remote service answered successfully but the body is unusable.

    Retrying does not help, so the cold-start loop does not retry it.
    """


class ValidationError(RosterError):
    """Form input is malformed; raised before any network call."""

    def __init__(self, message: str, *, fields: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.fields = dict(fields or {})


class WorkflowStateError(RosterError):
    """A form action was requested in a mode that does not allow it."""
