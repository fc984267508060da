# backend/core/session_machine.py

import asyncio
import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, List, Optional, Tuple

from core.attachment_encoder import UploadedFile, UnsupportedAttachmentError, read_attachment
from core.config import AppConfig
from core.cost_estimator import estimate_input, estimate_output
from core.history_store import HistoryStore, CredentialStore
from models.session_models import (
    AttachmentSummary,
    CreativityLevel,
    ErrorKind,
    HistoryEntry,
    PromptStyle,
    ResultTab,
    SessionDraft,
    SessionState,
    SessionView,
    Toast,
)

logger = logging.getLogger(__name__)


# ==========================================
# USER-FACING MESSAGES
# ==========================================
MISSING_KEY_GENERATE = "Please configure your API key in the panel above to continue."
MISSING_KEY_EXECUTE = "Please configure your API key to continue."
EMPTY_IDEA = "Please type an idea or attach a file to get started."
MISSING_SUPER_PROMPT = "Generate a super prompt before running it."
GENERATE_FAILED = "An error occurred while generating the prompt. Check your API key and connection."
EXECUTE_FAILED = "An error occurred while running the final prompt. Check your API key."

TOAST_KEY_SAVED = "API key saved successfully!"
TOAST_NEW_PROJECT = "New project started!"
TOAST_HISTORY_LOADED = "Project loaded from history"

EXPORT_FILENAMES = {
    ResultTab.PROMPT: "vertex_architect_prompt.md",
    ResultTab.RESULT: "vertex_architect_result.md",
}

_ATTACHMENT_SUFFIX = re.compile(r" \[\d+ file\(s\)\]$")


class HistoryEntryNotFoundError(Exception):
    """Raised when a history id does not exist (any more)."""


def summarize_idea(idea: str, attachment_count: int) -> str:
    if attachment_count > 0:
        return f"{idea} [{attachment_count} file(s)]"
    return idea


def strip_attachment_suffix(idea_summary: str) -> str:
    return _ATTACHMENT_SUFFIX.sub("", idea_summary)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionMachine:
    """
    Owns the single Session Draft and the two-stage workflow
    idea -> super prompt -> final result.

    Busy flags are advisory: callers serialize user actions. Every request is
    tagged with the current request generation; new_project() and
    load_from_history() bump it. A late completion still reaches
    history but leaves the fresh draft alone.
    """

    def __init__(
        self,
        client,
        history: HistoryStore,
        credentials: CredentialStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.client = client
        self.history = history
        self.credentials = credentials
        self.clock = clock
        self.api_key = credentials.load()
        self.draft = SessionDraft()
        self._generation = 0

    # --- Derived state ---

    @property
    def state(self) -> SessionState:
        draft = self.draft
        if draft.is_generating:
            return SessionState.GENERATING
        if draft.is_executing:
            return SessionState.EXECUTING
        if draft.final_result:
            return SessionState.COMPLETE
        if draft.super_prompt:
            return SessionState.PROMPT_READY
        return SessionState.IDLE

    @property
    def request_generation(self) -> int:
        return self._generation

    def active_tab(self) -> ResultTab:
        if self.draft.is_executing or self.draft.final_result:
            return ResultTab.RESULT
        return ResultTab.PROMPT

    # --- Helpers ---

    def _toast(self, message: str) -> None:
        expires_at = self.clock() + timedelta(seconds=AppConfig.TOAST_TTL_SECONDS)
        self.draft.toast = Toast(message=message, expires_at=expires_at)

    def active_toast(self) -> Optional[str]:
        toast = self.draft.toast
        if toast is None:
            return None
        if self.clock() >= toast.expires_at:
            self.draft.toast = None
            return None
        return toast.message

    def _set_error(self, message: str, kind: ErrorKind) -> None:
        self.draft.error = message
        self.draft.error_kind = kind

    def _clear_error(self) -> None:
        self.draft.error = None
        self.draft.error_kind = None

    def _is_stale(self, token: int, what: str) -> bool:
        if token != self._generation:
            logger.info(f"Not applying stale {what} response to the draft (request {token}, current {self._generation})")
            return True
        return False

    # --- Draft editing ---

    def update_input(self, idea: Optional[str] = None, style=None, creativity=None) -> SessionDraft:
        if idea is not None:
            self.draft.idea = idea
        if style is not None:
            self.draft.style = PromptStyle.parse(style)
        if creativity is not None:
            self.draft.creativity = CreativityLevel.parse(creativity)
        return self.draft

    def set_api_key(self, api_key: str) -> None:
        api_key = (api_key or "").strip()
        self.api_key = api_key
        self.credentials.save(api_key)
        if api_key:
            self._toast(TOAST_KEY_SAVED)
            self._clear_error()

    async def add_attachments(self, uploads: Iterable[UploadedFile]) -> List[str]:
        """
        Reads every file concurrently. Each accepted file is appended when its
        own read finishes, so the final order is completion order.
        Returns warnings for rejected files.
        """
        token = self._generation
        warnings: List[str] = []

        async def _add_one(upload: UploadedFile) -> None:
            try:
                attachment = await read_attachment(upload)
            except UnsupportedAttachmentError as e:
                logger.warning(f"Rejected attachment {e.filename} ({e.mime_type})")
                warnings.append(str(e))
                return
            if self._is_stale(token, "attachment read"):
                return
            self.draft.attachments.append(attachment)

        await asyncio.gather(*(_add_one(upload) for upload in uploads))
        return warnings

    def remove_attachment(self, index: int) -> None:
        if index < 0 or index >= len(self.draft.attachments):
            raise IndexError(f"No attachment at index {index}")
        del self.draft.attachments[index]

    # --- Workflow ---

    async def generate(self) -> SessionDraft:
        """Stage 1: turn the idea (and attachments) into a super prompt."""
        draft = self.draft
        if not self.api_key:
            self._set_error(MISSING_KEY_GENERATE, ErrorKind.VALIDATION)
            return draft
        if not draft.idea.strip() and not draft.attachments:
            self._set_error(EMPTY_IDEA, ErrorKind.VALIDATION)
            return draft

        token = self._generation
        idea, style, creativity = draft.idea, draft.style, draft.creativity
        attachments = list(draft.attachments)

        draft.is_generating = True
        draft.final_result = ""
        self._clear_error()

        try:
            result = await self.client.generate_super_prompt(
                self.api_key, idea, style, creativity, attachments
            )
        except Exception:
            if self._is_stale(token, "generation"):
                return self.draft
            logger.exception("Super prompt generation failed")
            self.draft.is_generating = False
            self._set_error(GENERATE_FAILED, ErrorKind.SERVICE)
            return self.draft

        entry = self.history.add(
            HistoryEntry(
                idea_summary=summarize_idea(idea, len(attachments)),
                style=style,
                creativity=creativity,
                generated_prompt=result,
            )
        )
        if self._is_stale(token, "generation"):
            return self.draft

        self.draft.super_prompt = result
        self.draft.current_history_id = entry.id
        self.draft.is_generating = False
        logger.info(f"Super prompt ready ({len(result)} chars), history entry {entry.id}")
        return self.draft

    async def execute(self) -> SessionDraft:
        """Stage 2: run the super prompt and store the final result."""
        draft = self.draft
        if not self.api_key:
            self._set_error(MISSING_KEY_EXECUTE, ErrorKind.VALIDATION)
            return draft
        if not draft.super_prompt.strip():
            self._set_error(MISSING_SUPER_PROMPT, ErrorKind.VALIDATION)
            return draft

        token = self._generation
        bound_id = draft.current_history_id

        draft.is_executing = True
        self._clear_error()

        try:
            result = await self.client.execute_prompt(self.api_key, draft.super_prompt)
        except Exception:
            if self._is_stale(token, "execution"):
                return self.draft
            logger.exception("Super prompt execution failed")
            self.draft.is_executing = False
            self._set_error(EXECUTE_FAILED, ErrorKind.SERVICE)
            return self.draft

        if bound_id and not self.history.update_final_result(bound_id, result):
            logger.warning(f"History entry {bound_id} was deleted before its result arrived; update dropped")

        if self._is_stale(token, "execution"):
            return self.draft

        self.draft.is_executing = False
        if self.draft.current_history_id != bound_id:
            logger.info(f"Draft no longer bound to {bound_id}, not showing its result")
            return self.draft
        self.draft.final_result = result
        return self.draft

    def new_project(self) -> SessionDraft:
        self._generation += 1
        self.draft = SessionDraft()
        self._toast(TOAST_NEW_PROJECT)
        return self.draft

    # --- History ---

    def load_from_history(self, entry_id: str) -> SessionDraft:
        entry = self.history.get(entry_id)
        if entry is None:
            raise HistoryEntryNotFoundError(entry_id)

        self._generation += 1
        draft = self.draft
        draft.idea = strip_attachment_suffix(entry.idea_summary)
        draft.style = entry.style
        draft.creativity = entry.creativity
        draft.super_prompt = entry.generated_prompt
        draft.final_result = entry.final_result
        # Attachments are never persisted
        draft.attachments = []
        draft.is_generating = False
        draft.is_executing = False
        draft.current_history_id = entry.id
        self._clear_error()
        self._toast(TOAST_HISTORY_LOADED)
        return draft

    def delete_history_entry(self, entry_id: str) -> None:
        if not self.history.delete(entry_id):
            raise HistoryEntryNotFoundError(entry_id)
        if self.draft.current_history_id == entry_id:
            self.draft.current_history_id = None
            self.draft.super_prompt = ""
            self.draft.final_result = ""
            self.draft.idea = ""

    # --- Output ---

    def export_markdown(self, tab: ResultTab) -> Tuple[str, str]:
        content = self.draft.super_prompt if tab == ResultTab.PROMPT else self.draft.final_result
        return EXPORT_FILENAMES[tab], content

    def view(self) -> SessionView:
        draft = self.draft
        tab = self.active_tab()
        shown = draft.super_prompt if tab == ResultTab.PROMPT else draft.final_result
        return SessionView(
            state=self.state,
            active_tab=tab,
            idea=draft.idea,
            style=draft.style,
            creativity=draft.creativity,
            attachments=[
                AttachmentSummary(filename=a.filename, mime_type=a.mime_type, preview=a.preview)
                for a in draft.attachments
            ],
            super_prompt=draft.super_prompt,
            final_result=draft.final_result,
            error=draft.error,
            error_kind=draft.error_kind,
            is_generating=draft.is_generating,
            is_executing=draft.is_executing,
            current_history_id=draft.current_history_id,
            toast=self.active_toast(),
            has_api_key=bool(self.api_key),
            input_metrics=estimate_input(draft.idea, len(draft.attachments)),
            output_metrics=estimate_output(shown),
        )
