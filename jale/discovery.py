"""Job discovery for workers and candidate discovery for employers.

Both directions score with :mod:`jale.matcher` and write ``matches`` records;
outreach messages are posted to the new thread as the AI sender.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from .errors import RecordNotFoundError
from .matcher import rank_jobs, rank_profiles
from .models import JobPosting, Profile
from .outreach import compose
from .store import RecordStore

logger = logging.getLogger(__name__)

AI_SENDER_ID = "ai"
DEFAULT_MIN_SCORE = 60


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def load_profile(store: RecordStore, worker_id: str) -> Profile:
    record = store.get("users", worker_id)
    if record is None:
        raise RecordNotFoundError("users", worker_id)
    return Profile.model_validate(record)


def load_job(store: RecordStore, job_id: str) -> JobPosting:
    record = store.get("jobs", job_id)
    if record is None:
        raise RecordNotFoundError("jobs", job_id)
    return JobPosting.model_validate(record)


def load_match_job(store: RecordStore, match_id: str) -> JobPosting | None:
    """Job context for a chat thread, or None when the match has no job."""
    match = store.get("matches", match_id)
    if match is None:
        raise RecordNotFoundError("matches", match_id)
    if not match.get("job_id"):
        return None
    return load_job(store, match["job_id"])


def rank_open_jobs(store: RecordStore, worker: Profile) -> list[tuple[JobPosting, int]]:
    """Active jobs the worker has no match for yet, best score first."""
    seen = {m.get("job_id") for m in store.query("matches", worker_id=worker.id)}
    jobs = [JobPosting.model_validate(r) for r in store.query("jobs", status="active") if r.get("id") not in seen]
    return rank_jobs(worker, jobs)


def find_candidates(
    store: RecordStore,
    job: JobPosting,
    min_score: int = DEFAULT_MIN_SCORE,
    now: datetime | None = None,
) -> list[tuple[str, Profile, int]]:
    """Create ``pending`` matches for workers scoring at least *min_score*.

    Workers already matched to *job* are skipped.  Returns
    ``(match_id, worker, score)`` for each match created, best first.
    """
    timestamp = (now or _utcnow()).isoformat()
    existing = {m.get("worker_id") for m in store.query("matches", job_id=job.id)}
    workers = [
        Profile.model_validate(u) for u in store.query("users", user_type="worker") if u.get("id") not in existing
    ]

    created: list[tuple[str, Profile, int]] = []
    for worker, score in rank_profiles(job, workers):
        if score < min_score:
            break
        match_id = store.create(
            "matches",
            {
                "job_id": job.id,
                "worker_id": worker.id,
                "status": "pending",
                "match_score": score,
                "created_at": timestamp,
            },
        )
        created.append((match_id, worker, score))

    logger.info("Job %s: %d new candidate(s) at score >= %d", job.id, len(created), min_score)
    return created


def post_outreach(
    store: RecordStore,
    match_id: str,
    worker: Profile,
    job: JobPosting,
    language: str = "en",
    now: datetime | None = None,
) -> str:
    """Post the AI outreach message to thread *match_id*; returns the message id."""
    outreach = compose(worker, job, language)
    return _create_outreach(store, match_id, outreach.message, now or _utcnow())


def _create_outreach(store: RecordStore, match_id: str, text: str, now: datetime) -> str:
    return store.create(
        "messages",
        {
            "match_id": match_id,
            "sender_id": AI_SENDER_ID,
            "message": text,
            "message_type": "ai_outreach",
            "read": False,
            "timestamp": now.isoformat(),
        },
    )


def express_interest(
    store: RecordStore,
    worker: Profile,
    job: JobPosting,
    language: str = "en",
    now: datetime | None = None,
) -> str:
    """Record that *worker* wants *job*: an ``accepted`` match plus outreach.

    Returns the new match id.
    """
    now = now or _utcnow()
    outreach = compose(worker, job, language)
    match_id = store.create(
        "matches",
        {
            "job_id": job.id,
            "worker_id": worker.id,
            "status": "accepted",
            "match_score": outreach.score,
            "created_at": now.isoformat(),
        },
    )
    _create_outreach(store, match_id, outreach.message, now)
    logger.info("Worker %s expressed interest in job %s (score %d)", worker.id, job.id, outreach.score)
    return match_id


def post_message(
    store: RecordStore,
    match_id: str,
    sender_id: str,
    text: str,
    now: datetime | None = None,
) -> str:
    """Append a plain chat message to thread *match_id*."""
    return store.create(
        "messages",
        {
            "match_id": match_id,
            "sender_id": sender_id,
            "message": text,
            "read": False,
            "timestamp": (now or _utcnow()).isoformat(),
        },
    )
