"""
Per-session dashboard shell.

Composes the class selector, routine editor, notes board and notepad behind
a tab switch, and pushes the store's canonical values into the components'
working copies before each view or action.
"""

import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from ai_client import TextGenerator
from capabilities import can_select_class, can_use_notepad
from logging_config import get_logger
from notepad import NotepadController
from notes_board import NotesBoard
from routine_editor import RoutineEditor
from schemas import Role, User
from store import SchoolStore

logger = get_logger(__name__)


class Dashboard:
    def __init__(self, user: User, store: SchoolStore, generator: TextGenerator):
        self.user = user
        self.store = store
        self.active_tab = "dashboard"

        classes = store.class_names()
        if user.role == Role.student:
            self.selected_class = user.username
        else:
            self.selected_class = classes[0] if classes else ""

        self.routine = RoutineEditor(
            user,
            self.selected_class,
            store.routine.get(self.selected_class, {}),
            on_update_routine=store.update_routine,
        )
        self.notes = NotesBoard(
            user,
            on_add_note=lambda content: store.add_note(content, author=user.name),
            on_edit_note=store.edit_note,
            on_delete_note=store.delete_note,
        )
        self.notepad = NotepadController(
            user,
            store.notepad_for(user.username),
            generator,
            on_save=lambda content: store.save_notepad(user.username, content),
        )

    def sync(self) -> None:
        """Reload working copies whose canonical value changed since the last load."""
        routine = self.store.routine.get(self.selected_class, {})
        if self.routine.sync(self.selected_class, routine):
            logger.debug("routine_reloaded", user=self.user.username, class_name=self.selected_class)
        if self.notepad.sync(self.store.notepad_for(self.user.username)):
            logger.debug("notepad_reloaded", user=self.user.username)
        self.notes.forget_missing(self.store.notes)

    def set_tab(self, tab: str) -> bool:
        if tab == "notepad" and not can_use_notepad(self.user.role):
            return False
        self.active_tab = tab
        return True

    def select_class(self, class_name: str) -> bool:
        if not can_select_class(self.user.role):
            return False
        self.store.routine_for(class_name)
        self.selected_class = class_name
        self.sync()
        return True

    def view(self) -> dict:
        self.sync()
        notepad_enabled = can_use_notepad(self.user.role)
        view = {
            "user": {"username": self.user.username, "name": self.user.name, "role": self.user.role.value},
            "welcome": f"Welcome, {self.user.role.value}",
            "tabs": ["dashboard", "notepad"] if notepad_enabled else [],
            "active_tab": self.active_tab,
        }
        if self.active_tab == "dashboard":
            view["classes"] = {
                "options": self.store.class_names(),
                "selected": self.selected_class,
                "selectable": can_select_class(self.user.role),
            }
            view["routine"] = self.routine.render()
            view["notes"] = self.notes.view(self.store.notes)
        elif notepad_enabled:
            view["notepad"] = self.notepad.view()
        return view


class SessionRegistry:
    """Live dashboards keyed by session id.

    A session lives as long as its access token; expired entries are pruned
    on open() and dropped on get().
    """

    def __init__(self, store: SchoolStore, generator: TextGenerator, ttl: timedelta = timedelta(hours=12)):
        self.store = store
        self.generator = generator
        self.ttl = ttl
        self.sessions: Dict[str, Dashboard] = {}
        self.expires: Dict[str, datetime] = {}
        # open() is reached from the login threadpool
        self._lock = threading.Lock()

    def open(self, user: User) -> str:
        session_id = uuid.uuid4().hex
        dashboard = Dashboard(user, self.store, self.generator)
        with self._lock:
            self._prune(datetime.now(timezone.utc))
            self.sessions[session_id] = dashboard
            self.expires[session_id] = datetime.now(timezone.utc) + self.ttl
        logger.info("session_opened", session_id=session_id, user=user.username, role=user.role.value)
        return session_id

    def get(self, session_id: str) -> Optional[Dashboard]:
        with self._lock:
            expires = self.expires.get(session_id)
            if expires is not None and expires <= datetime.now(timezone.utc):
                self._drop(session_id)
                logger.info("session_expired", session_id=session_id)
                return None
            return self.sessions.get(session_id)

    def close(self, session_id: str) -> None:
        with self._lock:
            closed = self._drop(session_id)
        if closed:
            logger.info("session_closed", session_id=session_id)

    def _drop(self, session_id: str) -> bool:
        self.expires.pop(session_id, None)
        return self.sessions.pop(session_id, None) is not None

    def _prune(self, now: datetime) -> None:
        expired = [sid for sid, expires in self.expires.items() if expires <= now]
        for session_id in expired:
            self._drop(session_id)
        if expired:
            logger.info("sessions_pruned", count=len(expired))
