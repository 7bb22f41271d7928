"""Local roster mirroring the remote employee service.

Reconciliation is merge-after-acknowledgment: a create, update or remove is
applied to the local list only once the gateway call has returned
successfully. Mutations and ``refresh()`` are serialized by a single lock.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from roster.core.exceptions import MalformedResponseError, NetworkError, NotFoundError, ServiceError
from roster.models.employee import Employee
from roster.services.employee_gateway import EmployeeGateway

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[int], bool]

DEFAULT_RETRY_DELAY_SECONDS = 2.0


class RosterCache:
    def __init__(
        self,
        gateway: EmployeeGateway,
        *,
        retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS,
        confirm: ConfirmFn | None = None,
    ) -> None:
        self.gateway = gateway
        self.retry_delay = retry_delay
        self.confirm = confirm
        self.loaded = False
        self._employees: list[Employee] = []
        self._lock = asyncio.Lock()
        self._load_cancelled: asyncio.Event | None = None
        # bumped after every acknowledged mutation
        self._mutations = 0

    @property
    def employees(self) -> tuple[Employee, ...]:
        return tuple(self._employees)

    def __len__(self) -> int:
        return len(self._employees)

    def get(self, employee_id: int) -> Employee | None:
        index = self._index_of(employee_id)
        return None if index is None else self._employees[index]

    def _index_of(self, employee_id: int) -> int | None:
        for index, employee in enumerate(self._employees):
            if employee.employee_id == employee_id:
                return index
        return None

    def _replace_all(self, employees: list[Employee]) -> None:
        self._employees = list(employees)
        self.loaded = True

    def _cancel_pending_load(self) -> None:
        if self._load_cancelled is not None:
            self._load_cancelled.set()
            self._load_cancelled = None

    async def load(self) -> bool:
        """Fetch the whole roster, retrying until the backend answers.

        Network and service failures are logged and retried after
        ``retry_delay`` seconds. A later ``load()``, a successful ``refresh()``
        or ``close()`` cancels the pending retry; the cancelled call returns
        ``False``. Returns ``True`` once the roster has been replaced.

        ``NotFoundError`` and ``MalformedResponseError`` are not retried. A
        fetch that overlaps an acknowledged mutation is discarded and issued
        again immediately, so the loaded list always includes that mutation.
        """
        self._cancel_pending_load()
        cancelled = asyncio.Event()
        self._load_cancelled = cancelled

        attempt = 0
        while True:
            attempt += 1
            seen = self._mutations
            try:
                employees = await self.gateway.list_employees()
            except (NotFoundError, MalformedResponseError):
                raise
            except (NetworkError, ServiceError) as e:
                logger.warning(
                    "Roster load attempt %d failed (%s); retrying in %.1fs (backend may be starting)",
                    attempt,
                    e,
                    self.retry_delay,
                )
                try:
                    await asyncio.wait_for(cancelled.wait(), timeout=self.retry_delay)
                except asyncio.TimeoutError:
                    continue
                logger.info("Roster load cancelled after %d attempt(s)", attempt)
                return False

            if cancelled.is_set():
                logger.info("Roster load superseded after %d attempt(s)", attempt)
                return False

            if self._mutations != seen:
                logger.info("Roster changed during load attempt %d; fetching again", attempt)
                continue

            self._replace_all(employees)
            if self._load_cancelled is cancelled:
                self._load_cancelled = None
            logger.info("Roster loaded: %d employees after %d attempt(s)", len(employees), attempt)
            return True

    async def refresh(self) -> None:
        async with self._lock:
            employees = await self.gateway.list_employees()
            self._cancel_pending_load()
            self._replace_all(employees)
            logger.info("Roster refreshed: %d employees", len(employees))

    async def create(self, record: Employee) -> Employee:
        async with self._lock:
            created = await self.gateway.create_employee(record)
            index = self._index_of(created.employee_id)
            if index is None:
                self._employees.append(created)
            else:
                self._employees[index] = created
            self._mutations += 1
            logger.info("Employee %d created", created.employee_id)
            return created

    async def update(self, employee_id: int, record: Employee) -> Employee:
        if record.employee_id != employee_id:
            record = record.model_copy(update={"employee_id": employee_id})

        async with self._lock:
            await self.gateway.update_employee(employee_id, record)
            index = self._index_of(employee_id)
            if index is None:
                self._employees.append(record)
            else:
                self._employees[index] = record
            self._mutations += 1
            logger.info("Employee %d updated", employee_id)
            return record

    async def remove(self, employee_id: int, confirm: ConfirmFn | None = None) -> bool:
        gate = confirm or self.confirm
        if gate is None:
            logger.warning("No confirmation available for deleting employee %d — skipped", employee_id)
            return False
        if not gate(employee_id):
            logger.info("Deletion of employee %d declined", employee_id)
            return False

        async with self._lock:
            await self.gateway.delete_employee(employee_id)
            index = self._index_of(employee_id)
            if index is not None:
                del self._employees[index]
            self._mutations += 1
            logger.info("Employee %d deleted", employee_id)
            return True

    async def close(self) -> None:
        self._cancel_pending_load()
