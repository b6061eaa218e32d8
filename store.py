"""
Canonical school data: routines, announcements, notepads and accounts.

Dashboard components keep working copies and call back into this store on
save. Every routine update replaces the class's schedule object, so holders
of the previous object can detect the change by identity. Last save wins.
"""

import copy
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import seed_data
from errors import NoteNotFoundError, UnknownClassError
from logging_config import get_logger
from schemas import FullSchoolRoutine, Note, Role, User, WeeklySchedule
from security import verify_password

logger = get_logger(__name__)


class SchoolStore:
    def __init__(
        self,
        routine: FullSchoolRoutine,
        notes: Optional[List[Note]] = None,
        accounts: Optional[Tuple[Tuple[str, str, Role, str], ...]] = None,
    ):
        self.routine: FullSchoolRoutine = routine
        self.notes: List[Note] = list(notes or [])
        self.notepads: Dict[str, str] = {}
        # username -> (display name, role, password hash)
        self.accounts = {username: (name, role, hashed) for username, name, role, hashed in (accounts or ())}

    @classmethod
    def with_defaults(cls) -> "SchoolStore":
        return cls(
            routine=seed_data.default_routine(),
            notes=seed_data.default_notes(),
            accounts=seed_data.default_accounts(),
        )

    # ----------------------- Auth -----------------------
    def authenticate(self, username: str, password: str, role: Role) -> Optional[User]:
        """Return the session user, or None when the credentials do not match the role."""
        username = username.strip()
        if not username or not password.strip():
            return None

        if role == Role.student:
            # class number + roll number
            if username not in self.routine or not password.strip().isdigit():
                return None
            return User(username=username, name=f"Class {username}, Roll {password.strip()}", role=Role.student)

        account = self.accounts.get(username)
        if account is None:
            return None
        name, account_role, hashed = account
        if account_role != role or not verify_password(password, hashed):
            return None
        return User(username=username, name=name, role=account_role)

    # ----------------------- Routine -----------------------
    def class_names(self) -> List[str]:
        return list(self.routine.keys())

    def routine_for(self, class_name: str) -> WeeklySchedule:
        if class_name not in self.routine:
            raise UnknownClassError(f"Unknown class: {class_name}")
        return self.routine[class_name]

    def update_routine(self, class_name: str, routine: WeeklySchedule) -> None:
        if class_name not in self.routine:
            raise UnknownClassError(f"Unknown class: {class_name}")
        self.routine[class_name] = copy.deepcopy(routine)
        logger.info("routine_updated", class_name=class_name)

    # ----------------------- Notes -----------------------
    def _note_index(self, note_id: str) -> int:
        for i, note in enumerate(self.notes):
            if note.id == note_id:
                return i
        raise NoteNotFoundError(f"Note not found: {note_id}")

    def get_note(self, note_id: str) -> Note:
        return self.notes[self._note_index(note_id)]

    def add_note(self, content: str, author: str) -> Note:
        note = Note(id=uuid.uuid4().hex, content=content, author=author, timestamp=datetime.now(timezone.utc))
        self.notes.append(note)
        logger.info("note_added", note_id=note.id, author=author)
        return note

    def edit_note(self, note_id: str, content: str) -> None:
        i = self._note_index(note_id)
        self.notes[i] = self.notes[i].model_copy(update={"content": content})
        logger.info("note_edited", note_id=note_id)

    def delete_note(self, note_id: str) -> None:
        del self.notes[self._note_index(note_id)]
        logger.info("note_deleted", note_id=note_id)

    # ----------------------- Notepad -----------------------
    def notepad_for(self, username: str) -> str:
        return self.notepads.get(username, "")

    def save_notepad(self, username: str, content: str) -> None:
        self.notepads[username] = content
        logger.info("notepad_stored", user=username, content_len=len(content))
