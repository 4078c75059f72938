from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_BREAK_TYPE_COLOR


@dataclass(frozen=True)
class BreakType:
    break_type_id: int
    company_id: int
    name: str
    description: Optional[str] = None
    color: str = DEFAULT_BREAK_TYPE_COLOR
    active: bool = True
    requires_reason: bool = False
    max_minutes: Optional[int] = None
