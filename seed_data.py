"""
Sample routine, notes and staff accounts loaded when the service starts.
"""

from datetime import datetime, timezone
from functools import lru_cache
from typing import Dict, List, Tuple

from schemas import DAYS, FullSchoolRoutine, Note, Role, ScheduleEntry
from security import get_password_hash

CLASSES = ["9", "10", "11", "12"]

PERIODS = [
    "10:00 - 10:45",
    "10:45 - 11:30",
    "11:30 - 12:15",
    "12:15 - 12:45",
    "12:45 - 1:30",
    "1:30 - 2:15",
    "2:15 - 2:30",
    "2:30 - 3:15",
]
# period index -> sentinel subject
FIXED_ROWS = {3: "Lunch", 6: "Break"}
# Saturday is a half day
SATURDAY_PERIODS = 4

SUBJECTS = [
    ("English", "Mr. Sharma"),
    ("Nepali", "Mrs. Karki"),
    ("Mathematics", "Mr. Adhikari"),
    ("Science", "Ms. Shrestha"),
    ("Social Studies", "Mr. Thapa"),
    ("Computer Science", "Mr. Pradhan"),
    ("Health & Physical Education", "Ms. Gurung"),
]

# username -> (display name, role, password)
STAFF = {
    "admin@school.edu.np": ("School Administrator", Role.admin, "admin123"),
    "teacher": ("Demo Teacher", Role.teacher, "teacher123"),
}


def build_week(class_index: int) -> Dict[str, List[ScheduleEntry]]:
    week = {}
    for day_index, day in enumerate(DAYS):
        count = SATURDAY_PERIODS if day == "Saturday" else len(PERIODS)
        entries = []
        for period_index in range(count):
            if period_index in FIXED_ROWS:
                entries.append(ScheduleEntry(period=PERIODS[period_index], subject=FIXED_ROWS[period_index]))
                continue
            subject, teacher = SUBJECTS[(class_index + day_index + period_index) % len(SUBJECTS)]
            entries.append(ScheduleEntry(period=PERIODS[period_index], subject=subject, teacher=teacher))
        week[day] = entries
    return week


def default_routine() -> FullSchoolRoutine:
    return {name: build_week(i) for i, name in enumerate(CLASSES)}


def default_notes() -> List[Note]:
    return [
        Note(
            id="welcome",
            content="Welcome to the new school dashboard. Class routines and announcements are posted here.",
            author="School Administrator",
            timestamp=datetime(2024, 4, 14, tzinfo=timezone.utc),
        )
    ]


@lru_cache(maxsize=1)
def default_accounts() -> Tuple[Tuple[str, str, Role, str], ...]:
    """Staff accounts as (username, name, role, password hash); hashed once per process."""
    return tuple(
        (username, name, role, get_password_hash(password))
        for username, (name, role, password) in STAFF.items()
    )
