"""Outreach composer — first message to a worker about a matching job."""

from __future__ import annotations

from .matcher import match_score
from .models import InterviewBooking, JobPosting, OutreachMessage, Profile
from .templates import format_date, format_time, render, resolve_language


def compose(profile: Profile, job: JobPosting, language: str = "en") -> OutreachMessage:
    """Build the outreach message for *profile* about *job*, with the match score.

    Raises:
        InvalidInputError: If the pair cannot be scored.
    """
    lang = resolve_language(language)
    score = match_score(profile, job)

    parts = [
        render(lang, "outreach_greeting", name=profile.name or render(lang, "default_name")),
        render(
            lang,
            "outreach_details",
            location=job.location or render(lang, "default_location"),
            pay=job.pay or render(lang, "default_pay"),
            availability=job.availability or render(lang, "default_availability"),
            skills=", ".join(job.skills_needed),
        ),
        render(lang, "outreach_score", score=score),
        render(lang, "outreach_questions"),
    ]
    return OutreachMessage(message="\n\n".join(parts), score=score)


def compose_reminder(booking: InterviewBooking, language: str = "en") -> str:
    """Reminder text for an upcoming interview."""
    return render(
        language,
        "reminder",
        date=format_date(booking.scheduled_at, language),
        time=format_time(booking.scheduled_at, language),
    )
