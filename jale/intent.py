"""Intent router — decides how a chat message outside a scheduling dialogue is handled."""

from __future__ import annotations

from .models import JobPosting, RouteDecision
from .templates import render, resolve_language
from .text import contains_phrase

# Anything that reads as "let's set up an interview", including plain agreement
# to the assistant's offer to schedule one.
SCHEDULING_KEYWORDS: dict[str, tuple[str, ...]] = {
    "en": (
        "schedule",
        "book",
        "booking",
        "arrange",
        "set up",
        "meeting",
        "meet",
        "interview",
        "when can",
        "available",
        "talk",
        "call",
        "video",
        "yes",
        "sure",
        "okay",
        "ok",
        "sounds good",
    ),
    "es": (
        "programar",
        "agendar",
        "reunión",
        "reunion",
        "entrevista",
        "disponible",
        "sí",
        "claro",
        "vale",
    ),
}

# Job-question topics, checked in this order.
JOB_TOPIC_KEYWORDS: dict[str, dict[str, tuple[str, ...]]] = {
    "pay": {
        "en": ("pay", "paid", "salary", "wage", "wages", "rate"),
        "es": ("pago", "salario", "sueldo"),
    },
    "location": {
        "en": ("location", "where", "address"),
        "es": ("ubicación", "ubicacion", "dónde", "donde"),
    },
    "schedule": {
        "en": ("hours", "shift", "shifts", "schedule"),
        "es": ("horario", "horas", "turno"),
    },
    "benefits": {
        "en": ("benefit", "benefits"),
        "es": ("beneficio", "beneficios"),
    },
}


def _all_phrases(table: dict[str, tuple[str, ...]]) -> tuple[str, ...]:
    return tuple(phrase for phrases in table.values() for phrase in phrases)


def has_scheduling_intent(message: str) -> bool:
    return contains_phrase(message, _all_phrases(SCHEDULING_KEYWORDS))


def route(message: str, has_active_dialogue: bool, has_job_context: bool = False) -> RouteDecision:
    """Classify a normalized message.

    An active scheduling dialogue bypasses classification entirely.
    """
    if has_active_dialogue:
        return RouteDecision(kind="dialogue")
    if has_scheduling_intent(message):
        return RouteDecision(kind="schedule_start")
    if has_job_context:
        return RouteDecision(kind="job_question")
    return RouteDecision(kind="general_question")


def detect_job_topic(message: str) -> str | None:
    for topic, table in JOB_TOPIC_KEYWORDS.items():
        if contains_phrase(message, _all_phrases(table)):
            return topic
    return None


def answer_job_question(message: str, job: JobPosting, language: str = "en") -> str:
    """Answer a question about *job* from its own attributes."""
    lang = resolve_language(language)
    topic = detect_job_topic(message)

    if topic == "pay":
        return render(
            lang,
            "answer_pay",
            pay=job.pay or render(lang, "default_pay"),
            location=job.location or render(lang, "default_area"),
        )
    if topic == "location":
        return render(lang, "answer_location", location=job.location or render(lang, "default_location"))
    if topic == "schedule":
        return render(lang, "answer_schedule", availability=job.availability or render(lang, "default_availability"))
    if topic == "benefits":
        return render(lang, "answer_benefits")
    if has_scheduling_intent(message):
        return render(lang, "interview_invite")
    return render(lang, "answer_default")
