#!/usr/bin/env python3
"""Jale candidate outreach — designed to run as a scheduled job.

Per-job pipeline:
  1. Load all active jobs.
  2. Score every worker not yet matched to the job.
  3. Create a pending match for each worker at or above the threshold.
  4. Post the AI outreach message to each new match thread.

Required env vars:
    SUPABASE_URL, SUPABASE_KEY          — Supabase credentials (anon)
    SUPABASE_SERVICE_KEY                — Supabase service-role key

Optional:
    JALE_MIN_MATCH_SCORE                — threshold for new matches (default 60)
    JALE_OUTREACH_LANGUAGE              — en or es (default en)
"""

import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from jale.config import get_env, get_store, load_settings
from jale.discovery import find_candidates, post_outreach
from jale.errors import InvalidInputError, PersistenceError
from jale.models import JobPosting

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(message)s",
)
log = logging.getLogger("outreach_task")


def main() -> int:
    settings = load_settings()
    store = get_store(settings)
    language = get_env("JALE_OUTREACH_LANGUAGE", "en") or "en"

    # ── 1. Load active jobs ──────────────────────────────────────────────
    records = store.query("jobs", status="active")
    if not records:
        log.info("No active jobs — nothing to do.")
        return 0
    log.info("Found %d active jobs", len(records))

    # ── 2-4. Per job: match candidates and post outreach ────────────────
    total_matches = 0
    for record in records:
        job = JobPosting.model_validate(record)
        try:
            candidates = find_candidates(store, job, min_score=settings.min_match_score)
        except PersistenceError:
            log.exception("  job=%s — failed to create matches, skipping", job.id)
            continue

        for match_id, worker, score in candidates:
            try:
                post_outreach(store, match_id, worker, job, language)
            except (PersistenceError, InvalidInputError):
                log.exception("  job=%s worker=%s — failed to post outreach, continuing", job.id, worker.id)
                continue
            log.info("  job=%s — reached out to worker=%s (score %d)", job.id, worker.id, score)
        total_matches += len(candidates)

    log.info("Outreach complete: %d new match(es).", total_matches)
    return 0


if __name__ == "__main__":
    sys.exit(main())
