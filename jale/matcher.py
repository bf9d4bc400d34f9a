"""Match scorer — weighted worker/job compatibility."""

from __future__ import annotations

import logging
import re

from .errors import InvalidInputError
from .models import JobPosting, Profile, ScoreBreakdown
from .text import similarity

logger = logging.getLogger(__name__)

SKILL_WEIGHT = 50
LOCATION_WEIGHT = 25
PAY_WEIGHT = 15
AVAILABILITY_WEIGHT = 10

# A required skill counts as covered above this similarity.
SKILL_MATCH_THRESHOLD = 0.7

# Awarded when both sides state pay but a rate can't be read from one of them.
PAY_DEFAULT_COMPONENT = PAY_WEIGHT * 2 / 3

_FIRST_INTEGER = re.compile(r"\d+")


def extract_pay_rate(pay: str) -> int | None:
    """Return the first integer embedded in a free-text pay string.

    Lenient by convention: ``"$25-35/hr"`` reads as 25 and ``"negotiable"``
    as ``None``.  A rate of 0 is treated as missing.
    """
    match = _FIRST_INTEGER.search(pay or "")
    if not match:
        return None
    rate = int(match.group())
    return rate or None


def _skill_component(offered: list[str], needed: list[str]) -> tuple[float, list[str]]:
    matched = [
        skill
        for skill in needed
        if max(similarity(skill, have) for have in offered) > SKILL_MATCH_THRESHOLD
    ]
    return len(matched) / len(needed) * SKILL_WEIGHT, matched


def score(profile: Profile, job: JobPosting) -> ScoreBreakdown:
    """Score how well *profile* fits *job*.

    Each factor counts only when both sides provide it.

    Raises:
        InvalidInputError: If no factor can be compared.
    """
    skills = locations = pay = availability = 0.0
    matched_skills: list[str] = []
    total_weight = 0

    offered = [s for s in profile.skills_offered if s.strip()]
    needed = [s for s in job.skills_needed if s.strip()]
    if offered and needed:
        skills, matched_skills = _skill_component(offered, needed)
        total_weight += SKILL_WEIGHT

    if profile.location.strip() and job.location.strip():
        locations = similarity(profile.location, job.location) * LOCATION_WEIGHT
        total_weight += LOCATION_WEIGHT

    if profile.pay.strip() and job.pay.strip():
        worker_rate = extract_pay_rate(profile.pay)
        job_rate = extract_pay_rate(job.pay)
        if worker_rate and job_rate:
            pay = min(job_rate / worker_rate, 1.0) * PAY_WEIGHT
        else:
            pay = PAY_DEFAULT_COMPONENT
        total_weight += PAY_WEIGHT

    if profile.availability.strip() and job.availability.strip():
        availability = similarity(profile.availability, job.availability) * AVAILABILITY_WEIGHT
        total_weight += AVAILABILITY_WEIGHT

    if total_weight == 0:
        raise InvalidInputError(
            f"Nothing to compare between profile {profile.id or profile.name!r} and job {job.id or job.title!r}"
        )

    return ScoreBreakdown(
        skill_component=skills,
        location_component=locations,
        pay_component=pay,
        availability_component=availability,
        total_weight_considered=total_weight,
        matched_skills=matched_skills,
    )


def match_score(profile: Profile, job: JobPosting) -> int:
    return score(profile, job).score


def rank_jobs(profile: Profile, jobs: list[JobPosting]) -> list[tuple[JobPosting, int]]:
    """Return ``(job, score)`` pairs for *profile*, best first.

    Jobs that share no comparable attribute with the profile are left out.
    """
    ranked: list[tuple[JobPosting, int]] = []
    for job in jobs:
        try:
            ranked.append((job, match_score(profile, job)))
        except InvalidInputError:
            logger.debug("Skipping job %s: nothing to compare", job.id)
    ranked.sort(key=lambda pair: pair[1], reverse=True)
    return ranked


def rank_profiles(job: JobPosting, profiles: list[Profile]) -> list[tuple[Profile, int]]:
    """Return ``(profile, score)`` pairs for *job*, best first."""
    ranked: list[tuple[Profile, int]] = []
    for profile in profiles:
        try:
            ranked.append((profile, match_score(profile, job)))
        except InvalidInputError:
            logger.debug("Skipping profile %s: nothing to compare", profile.id)
    ranked.sort(key=lambda pair: pair[1], reverse=True)
    return ranked
