# backend/models/session_models.py

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Pydantic models define the shape of the single editing session and its history.


class PromptStyle(str, Enum):
    GENERAL = "General / Creative"
    CODING = "Software Development"
    DATA_ANALYSIS = "Data Analysis"
    SALES_MARKETING = "Sales & Marketing"
    ACADEMIC = "Academic / Research"
    VERTEX_EXPERT = "Vertex AI System Prompt"

    @classmethod
    def parse(cls, value: Any) -> "PromptStyle":
        """Accepts a member, its value or its name. Anything else is GENERAL."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value in (member.value, member.name):
                return member
        return cls.GENERAL


class CreativityLevel(str, Enum):
    LOW = "Low (Precise)"
    MEDIUM = "Medium (Balanced)"
    HIGH = "High (Creative)"

    @classmethod
    def parse(cls, value: Any) -> "CreativityLevel":
        """Accepts a member, its value or its name. Anything else is MEDIUM."""
        if isinstance(value, cls):
            return value
        for member in cls:
            if value in (member.value, member.name):
                return member
        return cls.MEDIUM


class SessionState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    PROMPT_READY = "prompt_ready"
    EXECUTING = "executing"
    COMPLETE = "complete"


class ResultTab(str, Enum):
    PROMPT = "prompt"
    RESULT = "result"


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    SERVICE = "service"


class Attachment(BaseModel):
    """An image or PDF encoded for an inline multimodal part. Never persisted."""
    model_config = ConfigDict(frozen=True)

    filename: str
    mime_type: str
    preview: str = ""
    payload: str


class AttachmentSummary(BaseModel):
    """What the view shows for an attachment (the payload stays server-side)."""
    filename: str
    mime_type: str
    preview: str = ""


class HistoryEntry(BaseModel):
    """
    One generation session. Only final_result changes after creation.
    """
    id: str = Field(default_factory=lambda: uuid4().hex)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    idea_summary: str
    style: PromptStyle
    creativity: CreativityLevel
    generated_prompt: str
    final_result: str = ""

    @field_validator("style", mode="before")
    @classmethod
    def _coerce_style(cls, value):
        return PromptStyle.parse(value)

    @field_validator("creativity", mode="before")
    @classmethod
    def _coerce_creativity(cls, value):
        return CreativityLevel.parse(value)


class Toast(BaseModel):
    message: str
    expires_at: datetime


class SessionDraft(BaseModel):
    """The currently edited, not-yet-committed session."""
    idea: str = ""
    style: PromptStyle = PromptStyle.GENERAL
    creativity: CreativityLevel = CreativityLevel.MEDIUM
    attachments: List[Attachment] = Field(default_factory=list)
    super_prompt: str = ""
    final_result: str = ""
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    is_generating: bool = False
    is_executing: bool = False
    current_history_id: Optional[str] = None
    toast: Optional[Toast] = None


class InputMetrics(BaseModel):
    char_count: int
    total_tokens: int
    cost: str


class OutputMetrics(BaseModel):
    tokens: int
    cost: str


# --- API request / response bodies ---

class SessionInputRequest(BaseModel):
    idea: str = ""
    style: PromptStyle = PromptStyle.GENERAL
    creativity: CreativityLevel = CreativityLevel.MEDIUM

    @field_validator("style", mode="before")
    @classmethod
    def _coerce_style(cls, value):
        return PromptStyle.parse(value)

    @field_validator("creativity", mode="before")
    @classmethod
    def _coerce_creativity(cls, value):
        return CreativityLevel.parse(value)


class ApiKeyRequest(BaseModel):
    api_key: str = ""


class SessionView(BaseModel):
    """
    Snapshot returned by every session endpoint. Errors travel inline here
    rather than as HTTP failures.
    """
    state: SessionState
    active_tab: ResultTab
    idea: str
    style: PromptStyle
    creativity: CreativityLevel
    attachments: List[AttachmentSummary]
    super_prompt: str
    final_result: str
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    is_generating: bool
    is_executing: bool
    current_history_id: Optional[str] = None
    toast: Optional[str] = None
    has_api_key: bool
    input_metrics: InputMetrics
    output_metrics: OutputMetrics


class AttachmentUploadResponse(BaseModel):
    session: SessionView
    warnings: List[str] = Field(default_factory=list)


class PromptExample(BaseModel):
    label: str
    text: str
