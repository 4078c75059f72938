from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..common.validators import clean_optional_text, optional_positive_int, require_color, require_min_length, require_non_empty
from ..core.constants import DEFAULT_BREAK_TYPE_COLOR
from ..core.exceptions import ConflictError, NotFoundError
from .model import BreakType
from .repository import BreakTypeRepository

logger = logging.getLogger(__name__)


class BreakTypeService:
    def __init__(self, break_types: BreakTypeRepository):
        self._break_types = break_types

    def list(self, *, company_id: int, active_only: bool = False) -> list[BreakType]:
        return list(self._break_types.list_for_company(int(company_id), active_only=active_only))

    def get(self, *, company_id: int, break_type_id: int) -> BreakType:
        break_type = self._break_types.get(int(company_id), int(break_type_id))
        if not break_type:
            raise NotFoundError("Break type not found")
        return break_type

    def _require_unique_name(self, company_id: int, name: str, *, current_id: Optional[int] = None) -> str:
        name = require_min_length(require_non_empty(name, "Name"), "Name", 2)
        clash = self._break_types.get_by_name(int(company_id), name)
        if clash and clash.break_type_id != current_id:
            raise ConflictError("A break type with this name already exists")
        return name

    def create(
        self,
        *,
        company_id: int,
        name: str,
        description: Optional[str] = None,
        color: Optional[str] = None,
        requires_reason: bool = False,
        max_minutes: Optional[int] = None,
    ) -> BreakType:
        name = self._require_unique_name(company_id, name)
        break_type_id = self._break_types.create(
            company_id=int(company_id),
            name=name,
            description=clean_optional_text(description),
            color=require_color(color, DEFAULT_BREAK_TYPE_COLOR),
            requires_reason=bool(requires_reason),
            max_minutes=optional_positive_int(max_minutes, "Maximum minutes"),
        )
        return self.get(company_id=company_id, break_type_id=break_type_id)

    def update(self, *, company_id: int, break_type_id: int, changes: dict) -> BreakType:
        current = self.get(company_id=company_id, break_type_id=break_type_id)
        updated = current
        if "name" in changes:
            updated = replace(updated, name=self._require_unique_name(company_id, changes["name"], current_id=current.break_type_id))
        if "description" in changes:
            updated = replace(updated, description=clean_optional_text(changes["description"]))
        if "color" in changes:
            updated = replace(updated, color=require_color(changes["color"], DEFAULT_BREAK_TYPE_COLOR))
        if "requires_reason" in changes:
            updated = replace(updated, requires_reason=bool(changes["requires_reason"]))
        if "max_minutes" in changes:
            updated = replace(updated, max_minutes=optional_positive_int(changes["max_minutes"], "Maximum minutes"))
        if "active" in changes:
            updated = replace(updated, active=bool(changes["active"]))

        self._break_types.update(updated)
        return updated

    def delete(self, *, company_id: int, break_type_id: int) -> bool:
        """Delete a break type; returns False when it was only deactivated."""
        current = self.get(company_id=company_id, break_type_id=break_type_id)
        if self._break_types.count_entries(current.break_type_id):
            # Recorded breaks keep pointing at it; hide it instead.
            self._break_types.update(replace(current, active=False))
            logger.info("Deactivated break type %s (still referenced)", break_type_id)
            return False

        self._break_types.delete(int(company_id), current.break_type_id)
        return True
