from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

import pytest

from hrhub.attendance.model import AttendanceRecord, AttendanceReportRow
from hrhub.container import wire
from hrhub.core.enums import LeaveStatus
from hrhub.employees.model import Designation, Employee
from hrhub.leaves.model import LeaveRequest, LeaveRow, LeaveType
from hrhub.promotions.model import Promotion


class InMemoryEmployees:
    def __init__(self, employees=(), designations=()):
        self.by_id: dict[int, Employee] = {e.employee_id: e for e in employees}
        self.designations = list(designations)
        self.fail_designation_update = False

    def add(self, employee: Employee) -> Employee:
        self.by_id[employee.employee_id] = employee
        return employee

    def find_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.by_id.get(int(employee_id))

    def find_by_email(self, email: str, *, case_insensitive: bool = True) -> Optional[Employee]:
        for e in self.by_id.values():
            if (e.email.lower() == email.lower()) if case_insensitive else (e.email == email):
                return e
        return None

    def find_by_principal(self, principal_id: str) -> Optional[Employee]:
        for e in self.by_id.values():
            if e.principal_id == principal_id:
                return e
        return None

    def link_principal(self, employee_id: int, principal_id: str) -> bool:
        e = self.by_id.get(int(employee_id))
        if e is None or e.principal_id is not None:
            return False
        self.by_id[e.employee_id] = replace(e, principal_id=principal_id)
        return True

    def update_designation(self, employee_id: int, designation_id: int) -> bool:
        if self.fail_designation_update:
            raise RuntimeError("connection lost")
        e = self.by_id.get(int(employee_id))
        if e is None:
            return False
        self.by_id[e.employee_id] = replace(e, designation_id=int(designation_id))
        return True

    def list_designations(self):
        return list(self.designations)


class InMemoryAttendance:
    def __init__(self, names: Optional[dict] = None):
        self.by_key: dict[tuple[int, date], AttendanceRecord] = {}
        self.names = names or {}
        self.refuse_next_upsert = False

    def add(self, record: AttendanceRecord) -> None:
        self.by_key[(record.employee_id, record.work_date)] = record

    def find(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self.by_key.get((employee_id, work_date))

    def upsert(self, record: AttendanceRecord) -> bool:
        if self.refuse_next_upsert:
            # Simulates a concurrent writer that stored the same transition first.
            self.refuse_next_upsert = False
            self.add(record)
            return False
        stored = self.find(record.employee_id, record.work_date)
        if stored is None:
            self.add(record)
            return True
        if stored.in_time is not None and stored.out_time is not None:
            return False
        if stored.in_time is not None and record.out_time is None:
            return False
        self.add(replace(stored, in_time=stored.in_time or record.in_time, out_time=record.out_time))
        return True

    def exists_in_range(self, employee_id: int, start: date, end: date) -> bool:
        return any(e == employee_id and start <= d <= end for (e, d) in self.by_key)

    def report_rows(self, *, start=None, end=None):
        rows = [
            AttendanceReportRow(
                employee_id=r.employee_id,
                employee_name=self.names.get(r.employee_id, f"Employee {r.employee_id}"),
                work_date=r.work_date,
                in_time=r.in_time,
                out_time=r.out_time,
            )
            for r in self.by_key.values()
            if (start is None or r.work_date >= start) and (end is None or r.work_date <= end)
        ]
        rows.sort(key=lambda r: (r.work_date, r.employee_name))
        return rows


class InMemoryLeaveTypes:
    def __init__(self, types=()):
        self.by_id: dict[int, LeaveType] = {t.leave_type_id: t for t in types}

    def annual_quota(self, leave_type_id: int) -> Optional[Decimal]:
        t = self.by_id.get(int(leave_type_id))
        return t.annual_quota if t else None

    def list_types(self):
        return sorted(self.by_id.values(), key=lambda t: t.name)


class InMemoryLeaves:
    def __init__(self):
        self.by_id: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def add(self, request: LeaveRequest) -> LeaveRequest:
        stored = replace(request, leave_id=self._next_id)
        self._next_id += 1
        self.by_id[stored.leave_id] = stored
        return stored

    def exists_approved_overlap(self, employee_id: int, start: date, end: date) -> bool:
        return any(
            r.employee_id == employee_id
            and r.status == LeaveStatus.APPROVED
            and r.start_date <= end
            and r.end_date >= start
            for r in self.by_id.values()
        )

    def sum_approved_days(self, employee_id: int, leave_type_id: int, year: int) -> Decimal:
        return sum(
            (
                r.days
                for r in self.by_id.values()
                if r.employee_id == employee_id
                and r.leave_type_id == leave_type_id
                and r.status == LeaveStatus.APPROVED
                and r.start_date.year == year
            ),
            Decimal(0),
        )

    def insert(self, request: LeaveRequest) -> int:
        return self.add(request).leave_id

    def find_by_id(self, leave_id: int) -> Optional[LeaveRequest]:
        return self.by_id.get(int(leave_id))

    def update(self, request: LeaveRequest, *, expected_status: LeaveStatus) -> bool:
        stored = self.by_id.get(int(request.leave_id))
        if stored is None or stored.status != expected_status:
            return False
        self.by_id[stored.leave_id] = replace(
            stored,
            status=request.status,
            approver_employee_id=request.approver_employee_id,
        )
        return True

    def _row(self, r: LeaveRequest) -> LeaveRow:
        return LeaveRow(
            leave_id=r.leave_id,
            employee_id=r.employee_id,
            employee_name=f"Employee {r.employee_id}",
            leave_type_name=f"Type {r.leave_type_id}",
            start_date=r.start_date,
            end_date=r.end_date,
            days=r.days,
            status=r.status,
            reason=r.reason,
        )

    def list_pending(self):
        rows = [r for r in self.by_id.values() if r.status == LeaveStatus.PENDING]
        return [self._row(r) for r in sorted(rows, key=lambda r: r.start_date)]

    def list_by_employee(self, employee_id: int):
        rows = [r for r in self.by_id.values() if r.employee_id == employee_id]
        return [self._row(r) for r in sorted(rows, key=lambda r: r.start_date, reverse=True)]


class InMemoryPromotions:
    def __init__(self):
        self.items: list[Promotion] = []

    def add(self, promotion: Promotion) -> Promotion:
        stored = replace(promotion, promotion_id=len(self.items) + 1)
        self.items.append(stored)
        return stored

    def last_effective_date(self, employee_id: int) -> Optional[date]:
        dates = [p.effective_date for p in self.items if p.employee_id == employee_id]
        return max(dates) if dates else None

    def insert(self, promotion: Promotion) -> int:
        return self.add(promotion).promotion_id

    def list_by_employee(self, employee_id: int):
        rows = [p for p in self.items if p.employee_id == employee_id]
        return sorted(rows, key=lambda p: p.effective_date, reverse=True)


class InMemoryUnitOfWork:
    """Snapshots every registered store and restores them if the block raises."""

    def __init__(self, *stores):
        self._stores = stores
        self.isolation_levels: list = []
        self.commits = 0
        self.rollbacks = 0

    @contextmanager
    def transaction(self, *, isolation_level=None):
        self.isolation_levels.append(isolation_level)
        snapshots = [copy.deepcopy(s.__dict__) for s in self._stores]
        try:
            yield self
        except Exception:
            for store, snap in zip(self._stores, snapshots):
                store.__dict__.clear()
                store.__dict__.update(snap)
            self.rollbacks += 1
            raise
        self.commits += 1


TODAY = date(2024, 3, 15)  # a Friday
JOINED = date(2020, 1, 1)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def employees():
    return InMemoryEmployees(
        employees=[
            Employee(
                employee_id=1,
                employee_number="E-001",
                full_name="Rahim Uddin",
                email="Rahim@Example.com",
                join_date=JOINED,
                designation_id=1,
                company_id=1,
                department_id=1,
            ),
            Employee(
                employee_id=2,
                employee_number="E-002",
                full_name="Karim Ahmed",
                email="karim@example.com",
                join_date=JOINED,
                designation_id=2,
                company_id=1,
                department_id=1,
                principal_id="admin-principal",
            ),
        ],
        designations=[
            Designation(designation_id=1, title="Junior Officer"),
            Designation(designation_id=2, title="Officer"),
            Designation(designation_id=3, title="Senior Officer"),
        ],
    )


@pytest.fixture
def attendance():
    return InMemoryAttendance(names={1: "Rahim Uddin", 2: "Karim Ahmed"})


@pytest.fixture
def leave_types():
    return InMemoryLeaveTypes([LeaveType(leave_type_id=1, name="Casual", annual_quota=Decimal("10"))])


@pytest.fixture
def leaves():
    return InMemoryLeaves()


@pytest.fixture
def promotions():
    return InMemoryPromotions()


@pytest.fixture
def uow(employees, attendance, leaves, promotions):
    return InMemoryUnitOfWork(employees, attendance, leaves, promotions)


@pytest.fixture
def container(uow, employees, attendance, leaves, leave_types, promotions):
    return wire(
        uow=uow,
        employees_repo=employees,
        attendance_repo=attendance,
        leaves_repo=leaves,
        leave_types_repo=leave_types,
        promotions_repo=promotions,
        today=lambda: TODAY,
        clock=lambda: datetime(2024, 3, 14, 9, 0, 0),
    )
