from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from ..core.results import Result
from ..employees.model import Designation


@dataclass(frozen=True)
class Promotion:
    """Domain entity: immutable designation change for one employee."""

    employee_id: int
    old_designation_id: int
    new_designation_id: int
    effective_date: date
    notes: Optional[str] = None
    promotion_id: Optional[int] = None


@dataclass(frozen=True)
class PromotionHistoryRow:
    promotion_id: int
    effective_date: date
    old_designation: str
    new_designation: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class PromotionHistory:
    employee_id: int
    employee_name: str
    promotions: Sequence[PromotionHistoryRow] = ()


@dataclass(frozen=True)
class PromotionCheck(Result):
    last_promotion_date: Optional[date] = None


@dataclass(frozen=True)
class PromotionOutcome(Result):
    promotion: Optional[Promotion] = None


@dataclass(frozen=True)
class PromotionForm(Result):
    """What a client needs before posting a promotion for one employee."""

    employee_id: Optional[int] = None
    employee_name: str = ""
    current_designation_id: Optional[int] = None
    current_designation: str = ""
    last_promotion_date: Optional[date] = None
    designations: Sequence[Designation] = ()
