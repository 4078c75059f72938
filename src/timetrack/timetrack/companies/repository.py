from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Company


class CompanyRepository(Protocol):
    def get_by_id(self, company_id: int) -> Optional[Company]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Company]:
        raise NotImplementedError
