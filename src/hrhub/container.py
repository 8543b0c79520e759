from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import AbstractSet, Callable

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceStore
from .attendance.service import AttendanceTracker
from .common.datetime_utils import now_local, today_local
from .core.constants import WEEKEND_DAYS
from .database.connection import DBConfig, DatabaseConnection, UnitOfWork
from .employees.identity import IdentityLinker
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeDirectory
from .leaves.mysql_leave_repository import MySQLLeaveRepository, MySQLLeaveTypeRepository
from .leaves.repository import LeaveStore, LeaveTypeStore
from .leaves.service import LeaveService
from .leaves.validator import LeaveValidator
from .promotions.mysql_promotion_repository import MySQLPromotionRepository
from .promotions.repository import PromotionStore
from .promotions.service import PromotionApplier, PromotionValidator


@dataclass(frozen=True)
class Container:
    uow: UnitOfWork

    employees_repo: EmployeeDirectory
    attendance_repo: AttendanceStore
    leaves_repo: LeaveStore
    leave_types_repo: LeaveTypeStore
    promotions_repo: PromotionStore

    identity_linker: IdentityLinker
    attendance_tracker: AttendanceTracker
    leave_validator: LeaveValidator
    leave_service: LeaveService
    promotion_validator: PromotionValidator
    promotion_applier: PromotionApplier


def wire(
    *,
    uow: UnitOfWork,
    employees_repo: EmployeeDirectory,
    attendance_repo: AttendanceStore,
    leaves_repo: LeaveStore,
    leave_types_repo: LeaveTypeStore,
    promotions_repo: PromotionStore,
    weekend_days: AbstractSet[int] = WEEKEND_DAYS,
    today: Callable[[], date] = today_local,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Build services on top of any set of repositories (MySQL or in-memory)."""

    leave_validator = LeaveValidator(
        leaves_repo,
        leave_types_repo,
        attendance_repo,
        today=today,
        weekend_days=weekend_days,
    )
    promotion_validator = PromotionValidator(employees_repo, promotions_repo)
    attendance_tracker = AttendanceTracker(attendance_repo, clock=clock)

    return Container(
        uow=uow,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        leave_types_repo=leave_types_repo,
        promotions_repo=promotions_repo,
        identity_linker=IdentityLinker(employees_repo),
        attendance_tracker=attendance_tracker,
        leave_validator=leave_validator,
        leave_service=LeaveService(leaves_repo, leave_types_repo, leave_validator, uow),
        promotion_validator=promotion_validator,
        promotion_applier=PromotionApplier(promotion_validator, employees_repo, promotions_repo, uow),
    )


def build_container(*, db_config: dict, weekend_days: AbstractSet[int] = WEEKEND_DAYS) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire(
        uow=conn,
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        leave_types_repo=MySQLLeaveTypeRepository(conn),
        promotions_repo=MySQLPromotionRepository(conn),
        weekend_days=weekend_days,
    )
