"""
Teacher notepad: a free-text working copy with an optional AI assist panel.

The working content is a local draft of the owner's canonical value. It is
pushed back only by save() and replaced wholesale whenever the owner's value
changes (last writer wins, unsaved edits are dropped).
"""

from typing import Callable, Optional

from ai_client import TextGenerator
from capabilities import can_use_notepad
from logging_config import get_logger
from schemas import User

logger = get_logger(__name__)

AI_BLOCK_TEMPLATE = '\n\n--- AI Generated Content for "{prompt}" ---\n{result}\n--- End AI Content ---'


class NotepadController:
    def __init__(
        self,
        user: User,
        initial_content: str,
        generator: TextGenerator,
        on_save: Callable[[str], None],
    ):
        self.user = user
        self.generator = generator
        self.on_save = on_save
        self.read_only = not can_use_notepad(user.role)

        self.content = ""
        self.prompt_draft = ""
        self.assist_panel_visible = False
        self.is_generating = False
        self._canonical: Optional[str] = None
        self.load_canonical(initial_content)

    def load_canonical(self, initial_content: str) -> None:
        """Replace the working content with the owner's value, discarding unsaved edits."""
        self._canonical = initial_content
        self.content = initial_content

    def sync(self, initial_content: str) -> bool:
        if initial_content == self._canonical:
            return False
        self.load_canonical(initial_content)
        return True

    def edit(self, content: str) -> bool:
        if self.read_only:
            return False
        self.content = content
        return True

    def set_prompt(self, prompt: str) -> None:
        self.prompt_draft = prompt

    def toggle_assist_panel(self) -> bool:
        if self.read_only:
            return False
        self.assist_panel_visible = not self.assist_panel_visible
        return True

    async def request_generation(self, prompt: Optional[str] = None) -> bool:
        """Run one generation and append its result to the content.

        Returns False without calling the generator when read-only, when the
        prompt is blank, or while another generation is still in flight.
        """
        if self.read_only or self.is_generating:
            return False
        if prompt is None:
            prompt = self.prompt_draft
        if not prompt.strip():
            return False

        self.prompt_draft = prompt
        self.is_generating = True
        logger.info("notepad_generation_started", user=self.user.username)
        try:
            result = await self.generator.generate(prompt)
            self.content = self.content + AI_BLOCK_TEMPLATE.format(prompt=prompt, result=result)
            self.prompt_draft = ""
            self.assist_panel_visible = False
        finally:
            self.is_generating = False
        logger.info("notepad_generation_applied", user=self.user.username, content_len=len(self.content))
        return True

    def save(self) -> bool:
        if self.read_only:
            return False
        self.on_save(self.content)
        logger.info("notepad_saved", user=self.user.username, content_len=len(self.content))
        return True

    def view(self) -> dict:
        return {
            "content": self.content,
            "prompt": self.prompt_draft,
            "read_only": self.read_only,
            "assist_panel_visible": self.assist_panel_visible and not self.read_only,
            "is_generating": self.is_generating,
            "can_save": not self.read_only,
            "can_generate": not self.read_only and not self.is_generating,
        }
