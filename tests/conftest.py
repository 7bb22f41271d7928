from __future__ import annotations

import asyncio

import pytest
from starlette.testclient import TestClient

from roster.core.config import Settings
from roster.core.exceptions import NotFoundError
from roster.main import create_app
from roster.models.employee import Employee

TEST_API_URL = "https://roster.example.test/api/"


def make_employee(employee_id: int, name: str = "A", **overrides) -> Employee:
    data = {
        "employee_id": employee_id,
        "name": name,
        "age": 30,
        "salary": 50000,
        "department_id": 10,
        "manager_id": None,
    }
    data.update(overrides)
    return Employee(**data)


class FakeGateway:
    """In-memory stand-in for EmployeeGateway that records every call."""

    def __init__(self, employees: list[Employee] | None = None) -> None:
        self.initialized = False
        self.remote: list[Employee] = list(employees or [])
        self.calls: list[tuple] = []
        self.list_failures: list[Exception] = []
        self.list_times: list[float] = []
        self.fail_next: Exception | None = None
        self.in_flight = 0
        self.max_in_flight = 0
        self.delay = 0.0
        self.list_delay = 0.0

    async def initialize(self, settings: Settings) -> None:
        self.initialized = True

    async def close(self) -> None:
        self.initialized = False

    async def check_connection(self) -> bool:
        return self.initialized

    async def _enter(self, *call) -> None:
        self.calls.append(call)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if self.fail_next is not None:
            err, self.fail_next = self.fail_next, None
            raise err

    def _index_of(self, employee_id: int) -> int | None:
        for index, employee in enumerate(self.remote):
            if employee.employee_id == employee_id:
                return index
        return None

    async def list_employees(self) -> list[Employee]:
        self.calls.append(("list",))
        self.list_times.append(asyncio.get_running_loop().time())
        if self.list_failures:
            raise self.list_failures.pop(0)
        snapshot = list(self.remote)
        if self.list_delay:
            await asyncio.sleep(self.list_delay)
        return snapshot

    async def create_employee(self, record: Employee) -> Employee:
        await self._enter("create", record.employee_id)
        index = self._index_of(record.employee_id)
        if index is None:
            self.remote.append(record)
        else:
            self.remote[index] = record
        return record

    async def update_employee(self, employee_id: int, record: Employee) -> None:
        await self._enter("update", employee_id)
        index = self._index_of(employee_id)
        if index is None:
            raise NotFoundError(
                f"Error updating employee {employee_id}: not found on the remote service",
                operation="update",
                employee_id=employee_id,
            )
        self.remote[index] = record

    async def delete_employee(self, employee_id: int) -> None:
        await self._enter("delete", employee_id)
        index = self._index_of(employee_id)
        if index is None:
            raise NotFoundError(
                f"Error deleting employee {employee_id}: not found on the remote service",
                operation="delete",
                employee_id=employee_id,
            )
        del self.remote[index]

    def mutation_calls(self) -> list[tuple]:
        return [call for call in self.calls if call[0] != "list"]


@pytest.fixture
def gateway():
    return FakeGateway([make_employee(1, "A"), make_employee(2, "B", age=25, salary=40000, manager_id=1)])


@pytest.fixture
def test_settings():
    return Settings(ROSTER_API_URL=TEST_API_URL, ROSTER_RETRY_DELAY_SECONDS=0.01)


@pytest.fixture
def client(gateway, test_settings):
    app = create_app(test_settings, gateway=gateway)
    with TestClient(app) as c:
        for _ in range(100):
            if c.get("/api/v1/health/ready").json()["ready"]:
                break
        yield c


@pytest.fixture
def anyio_backend():
    return "asyncio"
