"""Pydantic models for Jale data structures."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Language = Literal["en", "es"]
Audience = Literal["worker", "employer"]
DialogueStep = Literal["idle", "awaiting_time"]
RouteKind = Literal["dialogue", "schedule_start", "job_question", "general_question"]
InterviewStatus = Literal["scheduled", "cancelled", "completed"]


class Profile(BaseModel):
    """A worker profile as used by the match scorer."""

    id: str | None = None
    name: str = ""
    skills_offered: list[str] = Field(default_factory=list, description="Trades and skills the worker offers")
    location: str = ""
    pay: str = Field(default="", description="Free-text rate, e.g. '$25-35/hr'; the first integer is the rate")
    availability: str = Field(default="", description="Free-text availability, e.g. '7:00 AM - 5:00 PM'")


class JobPosting(BaseModel):
    """A job posting as used by the match scorer and the job-question answers."""

    id: str | None = None
    employer_id: str | None = None
    title: str = ""
    description: str = ""
    skills_needed: list[str] = Field(default_factory=list)
    location: str = ""
    pay: str = ""
    availability: str = ""
    status: str = "active"


class ScoreBreakdown(BaseModel):
    """Per-factor result of scoring a profile against a job."""

    skill_component: float = 0.0
    location_component: float = 0.0
    pay_component: float = 0.0
    availability_component: float = 0.0
    total_weight_considered: int = Field(gt=0)
    matched_skills: list[str] = Field(default_factory=list)

    @property
    def score(self) -> int:
        """Final 0-100 score, rounded half up."""
        total = self.skill_component + self.location_component + self.pay_component + self.availability_component
        return int(total / self.total_weight_considered * 100 + 0.5)


class KnowledgeEntry(BaseModel):
    """A static question/answer pair for free-text retrieval."""

    model_config = ConfigDict(frozen=True)

    id: str
    trigger_phrases: tuple[str, ...]
    answer: str
    audience: Audience
    category: str = "general"


class RetrievalResult(BaseModel):
    answer: str
    confidence: float
    entry_id: str


class RouteDecision(BaseModel):
    kind: RouteKind


class TimeExpression(BaseModel):
    """Date/time found in free text, before it becomes a concrete timestamp."""

    has_date: bool = False
    day_offset: int = 0
    has_time_of_day: bool = False
    hour: int = Field(default=0, ge=0, le=23)
    minute: int = Field(default=0, ge=0, le=59)


class ConversationState(BaseModel):
    """Scheduling dialogue state for one chat thread."""

    match_id: str
    language: Language = "en"
    step: DialogueStep = "awaiting_time"
    job_context: JobPosting | None = None


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    message: str


class ChatSession(BaseModel):
    """Everything the assistant remembers about one chat thread between messages."""

    match_id: str
    language: Language = "en"
    audience: Audience = "worker"
    scheduling: ConversationState | None = None
    history: list[ChatTurn] = Field(default_factory=list)


class InterviewBooking(BaseModel):
    """Interview record written to the ``interviews`` collection."""

    match_id: str
    scheduled_at: datetime
    duration: int = Field(default=30, gt=0, description="Length in minutes")
    status: InterviewStatus = "scheduled"
    room_token: str
    interview_type: str = "video"
    notes: str = ""


class OutreachMessage(BaseModel):
    message: str
    score: int = Field(ge=0, le=100)


class AssistantReply(BaseModel):
    """Text to show in the chat plus the updated session."""

    text: str
    session: ChatSession
    booking: InterviewBooking | None = None
