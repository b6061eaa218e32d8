"""
Weekly routine editor.

Holds a deep copy of one class's weekly schedule, lets an admin edit cells
and period labels, and hands the whole grid back to the owner on save.
"""

import copy
from typing import Callable, List, Optional

from capabilities import can_edit_routine
from errors import InvalidFieldError
from logging_config import get_logger
from schemas import CANONICAL_DAY, DAYS, SENTINEL_SUBJECTS, ScheduleEntry, User, WeeklySchedule

logger = get_logger(__name__)

EDITABLE_FIELDS = ("subject", "teacher", "notes")
MISSING_CELL = "-"


class RoutineEditor:
    def __init__(
        self,
        user: User,
        class_name: str,
        routine: WeeklySchedule,
        on_update_routine: Callable[[str, WeeklySchedule], None],
    ):
        self.user = user
        self.on_update_routine = on_update_routine
        self.class_name = class_name
        self.editable_routine: WeeklySchedule = {}
        self.dirty = False
        self._source: Optional[WeeklySchedule] = None
        self.load_canonical(class_name, routine)

    @property
    def can_edit(self) -> bool:
        return can_edit_routine(self.user.role)

    def load_canonical(self, class_name: str, routine: WeeklySchedule) -> None:
        """Reset the working copy to the owner's routine, discarding unsaved edits."""
        self.class_name = class_name
        self._source = routine
        self.editable_routine = copy.deepcopy(routine)
        self.dirty = False

    def sync(self, class_name: str, routine: WeeklySchedule) -> bool:
        # the owner replaces the schedule object on every update
        if routine is self._source and class_name == self.class_name:
            return False
        self.load_canonical(class_name, routine)
        return True

    @property
    def max_periods(self) -> int:
        return max([0] + [len(self.editable_routine.get(day) or []) for day in DAYS])

    def entry(self, day: str, period_index: int) -> Optional[ScheduleEntry]:
        entries = self.editable_routine.get(day) or []
        if period_index < len(entries):
            return entries[period_index]
        return None

    def is_sentinel_row(self, period_index: int) -> bool:
        first = self.entry(CANONICAL_DAY, period_index)
        return first is not None and first.subject in SENTINEL_SUBJECTS

    def set_field(self, day: str, period_index: int, field: str, value: str) -> bool:
        if day not in DAYS:
            raise InvalidFieldError(f"Unknown day: {day}")
        if field not in EDITABLE_FIELDS:
            raise InvalidFieldError(f"Unknown field: {field}")
        if not self.can_edit or self.is_sentinel_row(period_index):
            return False

        entries = self.editable_routine.setdefault(day, [])
        while len(entries) <= period_index:
            entries.append(ScheduleEntry.blank())
        setattr(entries[period_index], field, value)
        self.dirty = True
        return True

    def set_period_label(self, period_index: int, value: str) -> bool:
        """Write the label at period_index on every day that has that period.

        Days shorter than period_index are skipped, so their label can drift
        from the other days.
        """
        if not self.can_edit:
            return False
        for day in DAYS:
            entry = self.entry(day, period_index)
            if entry is not None:
                entry.period = value
        self.dirty = True
        return True

    def save(self) -> bool:
        if not self.can_edit or not self.dirty:
            return False
        self.on_update_routine(self.class_name, self.editable_routine)
        self.dirty = False
        logger.info("routine_saved", class_name=self.class_name, user=self.user.username, periods=self.max_periods)
        return True

    def render(self) -> dict:
        rows: List[dict] = []
        for period_index in range(self.max_periods):
            merged = self.is_sentinel_row(period_index)
            first = self.entry(CANONICAL_DAY, period_index)
            cells = []
            for day in DAYS:
                entry = self.entry(day, period_index)
                if entry is None:
                    cells.append({"day": day, "placeholder": MISSING_CELL, "editable": False})
                elif merged:
                    cells.append({"day": day, "subject": entry.subject, "editable": False})
                else:
                    cells.append({
                        "day": day,
                        "subject": entry.subject,
                        "teacher": entry.teacher or "",
                        "notes": entry.notes or "",
                        "editable": self.can_edit,
                    })
            rows.append({
                "index": period_index,
                "period": first.period if first is not None else "",
                "period_editable": self.can_edit,
                "merged": merged,
                "cells": cells,
            })
        return {
            "class_name": self.class_name,
            "days": list(DAYS),
            "max_periods": self.max_periods,
            "rows": rows,
            "can_edit": self.can_edit,
            "dirty": self.dirty,
            "can_save": self.can_edit and self.dirty,
        }
