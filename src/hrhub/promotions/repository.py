from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Promotion


class PromotionStore(Protocol):
    def last_effective_date(self, employee_id: int) -> Optional[date]:
        raise NotImplementedError

    def insert(self, promotion: Promotion) -> int:
        raise NotImplementedError

    def list_by_employee(self, employee_id: int) -> Sequence[Promotion]:
        """Most recent effective_date first."""

        raise NotImplementedError
