"""Chat assistant — per-message control flow for one marketplace chat thread.

Each inbound message is normalized, then either continues an active
scheduling dialogue or is routed to scheduling, a job question, or the
general knowledge base.  Per-thread memory lives in a ``ChatSession`` that is
passed into :meth:`Assistant.respond` and returned with the reply.

:meth:`Assistant.handle_message` keeps those sessions between calls and holds
a per-thread lock for the whole exchange, so a second message for the same
thread waits until the first one (including its store writes) is done.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable
from datetime import datetime
from typing import Any

from .intent import answer_job_question, route
from .knowledge import KnowledgeBase, detect_audience, get_knowledge_base
from .models import AssistantReply, ChatSession, ChatTurn, InterviewBooking, JobPosting
from .scheduler import SchedulingDialogue
from .store import RecordStore
from .templates import render, resolve_language
from .text import normalize

logger = logging.getLogger(__name__)

MAX_HISTORY = 50


class Assistant:
    def __init__(
        self,
        store: RecordStore,
        dialogue: SchedulingDialogue | None = None,
        knowledge: KnowledgeBase | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        if dialogue is None:
            dialogue = SchedulingDialogue(store, clock=clock) if clock else SchedulingDialogue(store)
        self.dialogue = dialogue
        self.knowledge = knowledge or get_knowledge_base()
        self._sessions: dict[str, ChatSession] = {}
        # Entries vanish once no caller holds the lock.
        self._locks: weakref.WeakValueDictionary[str, threading.Lock] = weakref.WeakValueDictionary()
        self._registry_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Stateless core
    # ------------------------------------------------------------------

    def respond(
        self,
        session: ChatSession,
        message: str,
        job: JobPosting | None = None,
        requester: dict[str, Any] | None = None,
    ) -> AssistantReply:
        """Answer *message* in the thread described by *session*.

        *session* is not modified; the updated copy comes back on the reply.
        """
        session = session.model_copy(deep=True)
        lang = session.language

        if not isinstance(message, str) or not message.strip():
            return AssistantReply(text=render(lang, "greeting"), session=session)

        raw = message.strip()
        clean = normalize(raw)

        state = session.scheduling
        if state is not None and (state.match_id != session.match_id or state.step != "awaiting_time"):
            logger.warning(
                "Discarding scheduling state for match %s found in thread %s", state.match_id, session.match_id
            )
            state = session.scheduling = None

        decision = route(clean, has_active_dialogue=state is not None, has_job_context=job is not None)
        booking: InterviewBooking | None = None

        if decision.kind == "dialogue" and state is not None:
            outcome = self.dialogue.handle(state, clean, requester)
            session.scheduling = outcome.state
            booking = outcome.booking
            text = outcome.reply
        elif decision.kind == "schedule_start":
            outcome = self.dialogue.start(session.match_id, lang, job)
            session.scheduling = outcome.state
            text = outcome.reply
        elif decision.kind == "job_question" and job is not None:
            text = answer_job_question(clean, job, lang)
        else:
            session.audience = detect_audience(clean, session.audience)
            result = self.knowledge.retrieve(clean, session.audience)
            text = result.answer if result else render(lang, "answer_default")

        session.history.append(ChatTurn(role="user", message=raw))
        session.history.append(ChatTurn(role="assistant", message=text))
        del session.history[:-MAX_HISTORY]
        return AssistantReply(text=text, session=session, booking=booking)

    # ------------------------------------------------------------------
    # Per-thread sessions
    # ------------------------------------------------------------------

    def _thread_lock(self, match_id: str) -> threading.Lock:
        with self._registry_lock:
            return self._locks.setdefault(match_id, threading.Lock())

    def handle_message(
        self,
        match_id: str,
        message: str,
        language: str | None = None,
        job: JobPosting | None = None,
        requester: dict[str, Any] | None = None,
    ) -> AssistantReply:
        """Process one inbound message for thread *match_id*, serialized per thread."""
        with self._thread_lock(match_id):
            session = self._sessions.get(match_id) or ChatSession(match_id=match_id)
            if language:
                session = session.model_copy(update={"language": resolve_language(language)})
            reply = self.respond(session, message, job=job, requester=requester)
            self._sessions[match_id] = reply.session
            return reply

    def get_session(self, match_id: str) -> ChatSession | None:
        return self._sessions.get(match_id)

    def reset(self, match_id: str) -> None:
        """Forget thread *match_id*, abandoning any scheduling dialogue."""
        with self._thread_lock(match_id):
            self._sessions.pop(match_id, None)
