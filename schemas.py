"""
Data models for the School Dashboard (Pydantic models)
Routine, note and user shapes shared by the store, the dashboard components and the API.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
CANONICAL_DAY = DAYS[0]
SENTINEL_SUBJECTS = ("Break", "Lunch")
# upper bound on period indexes accepted over HTTP
MAX_PERIOD_INDEX = 23

EntryField = Literal["subject", "teacher", "notes"]
Tab = Literal["dashboard", "notepad"]


class Role(str, Enum):
    student = "student"
    teacher = "teacher"
    admin = "admin"


# Core Users
class User(BaseModel):
    username: str
    name: str = Field(..., description="Display name")
    role: Role = Role.student


class ScheduleEntry(BaseModel):
    period: str = Field("", description="Period label e.g. 10:00 - 10:45")
    subject: str = ""
    teacher: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def blank(cls) -> "ScheduleEntry":
        return cls(period="", subject="", teacher="", notes="")


# Day name -> ordered periods; class identifier -> weekly schedule
WeeklySchedule = Dict[str, List[ScheduleEntry]]
FullSchoolRoutine = Dict[str, WeeklySchedule]


class Note(BaseModel):
    id: str
    content: str
    author: str
    timestamp: datetime


# ----------------------- Requests -----------------------
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    username: str
    password: str
    role: Role = Role.student


class TabSelection(BaseModel):
    tab: Tab


class ClassSelection(BaseModel):
    class_name: str


class CellEdit(BaseModel):
    day: str
    period_index: int = Field(..., ge=0, le=MAX_PERIOD_INDEX)
    field: EntryField
    value: str


class PeriodLabelEdit(BaseModel):
    period_index: int = Field(..., ge=0, le=MAX_PERIOD_INDEX)
    value: str


class TextIn(BaseModel):
    content: str


class PromptIn(BaseModel):
    prompt: Optional[str] = None
