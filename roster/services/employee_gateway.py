from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from roster.core.config import Settings
from roster.core.exceptions import MalformedResponseError, NetworkError, NotFoundError, ServiceError
from roster.models.employee import Employee

logger = logging.getLogger(__name__)

_ERROR_TEXT_LIMIT = 200

_VERBS = {
    "list": "listing",
    "create": "creating",
    "update": "updating",
    "delete": "deleting",
}


def _describe(operation: str, employee_id: int | None) -> str:
    verb = _VERBS.get(operation, operation)
    if operation == "list":
        return f"Error {verb} employees"
    if employee_id is None:
        return f"Error {verb} employee"
    return f"Error {verb} employee {employee_id}"


class EmployeeGateway:
    def __init__(self) -> None:
        self.initialized = False
        self.base_url = ""
        self.timeout = 30.0

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.api_base:
            logger.warning("ROSTER_API_URL missing — EmployeeGateway not initialized")
            return

        self.base_url = settings.api_base
        self.timeout = settings.ROSTER_REQUEST_TIMEOUT_SECONDS
        self.initialized = True
        logger.info("EmployeeGateway initialized (base=%s)", self.base_url)

    async def close(self) -> None:
        self.initialized = False
        self.base_url = ""

    async def list_employees(self) -> list[Employee]:
        data = await self._request("GET", "/Employee", operation="list", parse_body=True)
        if not isinstance(data, list):
            raise MalformedResponseError(
                f"{_describe('list', None)}: expected a list, got {type(data).__name__}",
                status=200,
                operation="list",
            )
        try:
            return [Employee.model_validate(item) for item in data]
        except PydanticValidationError as e:
            raise MalformedResponseError(
                f"{_describe('list', None)}: malformed employee record ({e.error_count()} errors)",
                status=200,
                operation="list",
            ) from e

    async def create_employee(self, record: Employee) -> Employee:
        data = await self._request(
            "POST",
            "/Employee/add",
            operation="create",
            employee_id=record.employee_id,
            payload=record.to_payload(),
            parse_body=True,
        )
        # Some deployments acknowledge with an empty body
        if not data:
            return record
        try:
            return Employee.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedResponseError(
                f"{_describe('create', record.employee_id)}: malformed response ({e.error_count()} errors)",
                status=200,
                operation="create",
                employee_id=record.employee_id,
            ) from e

    async def update_employee(self, employee_id: int, record: Employee) -> None:
        await self._request(
            "PUT",
            f"/Employee/{employee_id}",
            operation="update",
            employee_id=employee_id,
            payload=record.to_payload(),
        )

    async def delete_employee(self, employee_id: int) -> None:
        await self._request(
            "DELETE",
            f"/Employee/{employee_id}",
            operation="delete",
            employee_id=employee_id,
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        employee_id: int | None = None,
        payload: dict[str, Any] | None = None,
        parse_body: bool = False,
    ) -> Any:
        if not self.initialized:
            raise RuntimeError("EmployeeGateway not initialized")

        url = f"{self.base_url}{path}"
        label = _describe(operation, employee_id)
        # 404 only means "no such employee" for id-addressed calls
        addressed = operation in ("update", "delete")

        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.request(method, url, json=payload) as response:
                    if 200 <= response.status < 300:
                        if not parse_body:
                            return None
                        try:
                            return await response.json(content_type=None)
                        except ValueError as e:
                            raise MalformedResponseError(
                                f"{label}: response is not valid JSON",
                                status=response.status,
                                operation=operation,
                                employee_id=employee_id,
                            ) from e

                    error_text = (await response.text())[:_ERROR_TEXT_LIMIT]
                    if response.status == 404 and addressed:
                        raise NotFoundError(
                            f"{label}: not found on the remote service",
                            operation=operation,
                            employee_id=employee_id,
                        )
                    raise ServiceError(
                        f"{label}: HTTP {response.status} - {error_text}",
                        status=response.status,
                        operation=operation,
                        employee_id=employee_id,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkError(
                f"{label}: {type(e).__name__} {e}".rstrip(),
                operation=operation,
                employee_id=employee_id,
            ) from e

    async def check_connection(self) -> bool:
        if not self.initialized:
            return False

        try:
            timeout = aiohttp.ClientTimeout(total=10)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(f"{self.base_url}/Employee") as response:
                    return response.status == 200
        except Exception:
            logger.exception("EmployeeGateway connection check failed")
            return False
