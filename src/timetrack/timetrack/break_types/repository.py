from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import BreakType


class BreakTypeRepository(Protocol):
    def list_for_company(self, company_id: int, *, active_only: bool = False) -> Sequence[BreakType]:
        raise NotImplementedError

    def get(self, company_id: int, break_type_id: int) -> Optional[BreakType]:
        raise NotImplementedError

    def get_by_name(self, company_id: int, name: str) -> Optional[BreakType]:
        raise NotImplementedError

    def create(
        self,
        *,
        company_id: int,
        name: str,
        description: Optional[str],
        color: str,
        requires_reason: bool,
        max_minutes: Optional[int],
    ) -> int:
        raise NotImplementedError

    def update(self, break_type: BreakType) -> bool:
        raise NotImplementedError

    def delete(self, company_id: int, break_type_id: int) -> bool:
        raise NotImplementedError

    def count_entries(self, break_type_id: int) -> int:
        raise NotImplementedError
