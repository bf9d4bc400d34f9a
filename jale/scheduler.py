"""Scheduling dialogue — the multi-turn exchange that books an interview.

A thread is either idle (no ``ConversationState``) or awaiting a time.  While
awaiting, each message is one of:

* a cancellation → acknowledge and go idle;
* a request for suggestions → offer two days of slots, keep waiting;
* a time the date-time parser understands → book it and go idle, unless it
  has already passed, in which case ask again;
* anything else → reprompt with examples, keep waiting.

A failed booking keeps the state so the user can simply retry.
"""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from .errors import PersistenceError, RecordNotFoundError
from .models import ConversationState, InterviewBooking, JobPosting
from .store import RecordStore
from .templates import format_date, format_datetime, format_short_date, format_time, render, resolve_language
from .text import contains_phrase
from .timeparse import parse

logger = logging.getLogger(__name__)

CANCEL_KEYWORDS: dict[str, tuple[str, ...]] = {
    "en": ("cancel", "nevermind", "never mind", "forget it"),
    "es": ("cancelar", "cancela", "no importa", "olvídalo", "olvidalo"),
}
SUGGEST_KEYWORDS: dict[str, tuple[str, ...]] = {
    "en": ("suggest", "show options", "options"),
    "es": ("sugerir", "sugiere", "mostrar", "opciones"),
}

# Offered for tomorrow and the day after, respectively.
SUGGESTED_SLOTS: tuple[tuple[tuple[int, int], ...], ...] = (
    ((9, 0), (14, 0), (16, 0)),
    ((10, 0), (13, 0), (15, 0)),
)

DEFAULT_INTERVIEW_MINUTES = 30


def generate_room_token(match_id: str) -> str:
    """Video-room name for an interview; unique per call."""
    return f"jale-interview-{match_id}-{secrets.token_hex(6)}"


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _keywords(table: dict[str, tuple[str, ...]]) -> tuple[str, ...]:
    return tuple(k for words in table.values() for k in words)


@dataclass
class DialogueOutcome:
    """Reply for the user plus the state to keep (None once the dialogue ends)."""

    reply: str
    state: ConversationState | None
    booking: InterviewBooking | None = None


class SchedulingDialogue:
    """Drives a thread from "let's schedule" to a stored ``InterviewBooking``."""

    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], datetime] = _local_now,
        room_token_factory: Callable[[str], str] = generate_room_token,
        interview_minutes: int = DEFAULT_INTERVIEW_MINUTES,
    ) -> None:
        self.store = store
        self.clock = clock
        self.room_token_factory = room_token_factory
        self.interview_minutes = interview_minutes

    def start(self, match_id: str, language: str = "en", job: JobPosting | None = None) -> DialogueOutcome:
        lang = resolve_language(language)
        state = ConversationState(match_id=match_id, language=lang, step="awaiting_time", job_context=job)
        return DialogueOutcome(reply=render(lang, "interview_invite"), state=state)

    def handle(
        self,
        state: ConversationState,
        message: str,
        requester: dict[str, Any] | None = None,
    ) -> DialogueOutcome:
        """Advance an ``awaiting_time`` dialogue by one user message."""
        lang = state.language

        if contains_phrase(message, _keywords(CANCEL_KEYWORDS)):
            logger.info("Scheduling cancelled for match %s", state.match_id)
            return DialogueOutcome(reply=render(lang, "scheduling_cancelled"), state=None)

        if contains_phrase(message, _keywords(SUGGEST_KEYWORDS)):
            return DialogueOutcome(reply=self.suggest_time_slots(lang), state=state)

        now = self.clock()
        scheduled_at = parse(message, now)
        if scheduled_at is None:
            return DialogueOutcome(reply=render(lang, "scheduling_reprompt"), state=state)
        if scheduled_at < now:
            logger.debug("Requested time %s is in the past for match %s", scheduled_at.isoformat(), state.match_id)
            return DialogueOutcome(reply=render(lang, "scheduling_past_time"), state=state)

        try:
            booking = self.book(state.match_id, scheduled_at, lang, requester)
        except PersistenceError:
            logger.exception("Failed to book interview for match %s", state.match_id)
            return DialogueOutcome(reply=render(lang, "scheduling_error"), state=state)

        reply = render(lang, "interview_confirmation", datetime=format_datetime(scheduled_at, lang))
        return DialogueOutcome(reply=reply, state=None, booking=booking)

    def suggest_time_slots(self, language: str = "en") -> str:
        now = self.clock()
        days = [now + timedelta(days=offset) for offset in (1, 2)]

        def _times(day: datetime, slots: tuple[tuple[int, int], ...]) -> str:
            return "\n".join(
                f"• {format_time(day.replace(hour=h, minute=m, second=0, microsecond=0), language)}" for h, m in slots
            )

        return render(
            language,
            "suggestions",
            tomorrow=format_short_date(days[0], language),
            tomorrow_times=_times(days[0], SUGGESTED_SLOTS[0]),
            day_after=format_short_date(days[1], language),
            day_after_times=_times(days[1], SUGGESTED_SLOTS[1]),
        )

    def book(
        self,
        match_id: str,
        scheduled_at: datetime,
        language: str = "en",
        requester: dict[str, Any] | None = None,
    ) -> InterviewBooking:
        """Write the interview and its side effects for *match_id*.

        Marks the match as ``interview_scheduled``, creates the
        ``interviews`` record, posts a system message to the thread and
        notifies the worker and the employer.  If a later write fails, the
        match status is restored and any interview already written is marked
        ``cancelled``, so a retry leaves one scheduled interview.

        Raises:
            RecordNotFoundError: If the match does not exist.
            PersistenceError: If any store call fails.
        """
        match = self.store.get("matches", match_id)
        if match is None:
            raise RecordNotFoundError("matches", match_id)
        job = self.store.get("jobs", match["job_id"]) if match.get("job_id") else None
        job_title = (job or {}).get("title") or ""
        employer_id = (job or {}).get("employer_id")
        worker_id = match.get("worker_id")

        booking = InterviewBooking(
            match_id=match_id,
            scheduled_at=scheduled_at,
            duration=self.interview_minutes,
            room_token=self.room_token_factory(match_id),
            notes="Interview scheduled by AI assistant",
        )
        now_iso = self.clock().isoformat()

        self.store.update("matches", match_id, {"status": "interview_scheduled", "last_activity": now_iso})
        interview_id = None
        try:
            interview_id = self.store.create("interviews", {**booking.model_dump(mode="json"), "created_at": now_iso})
            self.store.create(
                "messages",
                {
                    "match_id": match_id,
                    "sender_id": "system",
                    "message": render(
                        language,
                        "booking_message",
                        date=format_date(scheduled_at, language),
                        time=format_time(scheduled_at, language),
                        duration=booking.duration,
                    ),
                    "message_type": "interview_scheduled",
                    "timestamp": now_iso,
                },
            )

            when = format_datetime(scheduled_at, language)
            if worker_id:
                self._notify(
                    worker_id,
                    render(language, "worker_notification_title"),
                    render(language, "worker_notification", title=job_title, datetime=when),
                    now_iso,
                )
            if employer_id:
                requester_name = (requester or {}).get("name") or self._user_name(worker_id)
                self._notify(
                    employer_id,
                    render(language, "employer_notification_title"),
                    render(language, "employer_notification", requester=requester_name, title=job_title, datetime=when),
                    now_iso,
                )
        except PersistenceError:
            self._roll_back(match_id, interview_id, match.get("status"))
            raise

        logger.info("Interview booked for match %s at %s", match_id, scheduled_at.isoformat())
        return booking

    def _roll_back(self, match_id: str, interview_id: str | None, previous_status: str | None) -> None:
        try:
            if interview_id:
                self.store.update("interviews", interview_id, {"status": "cancelled"})
            if previous_status:
                self.store.update("matches", match_id, {"status": previous_status})
        except PersistenceError:
            logger.exception("Could not roll back interview %s for match %s", interview_id, match_id)

    def _notify(self, user_id: str, title: str, message: str, timestamp: str) -> None:
        self.store.create(
            "notifications",
            {
                "user_id": user_id,
                "type": "interview_scheduled",
                "title": title,
                "message": message,
                "read": False,
                "timestamp": timestamp,
            },
        )

    def _user_name(self, user_id: str | None) -> str:
        if not user_id:
            return ""
        user = self.store.get("users", user_id)
        return (user or {}).get("name", "")
