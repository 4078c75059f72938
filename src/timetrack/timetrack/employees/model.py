from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Employee:
    """An employee as seen from one company (``active`` is the company link flag)."""

    employee_id: int
    name: str
    surname: Optional[str]
    dni: str
    email: Optional[str] = None
    active: bool = True
    pin_hash: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.surname}".strip() if self.surname else self.name
