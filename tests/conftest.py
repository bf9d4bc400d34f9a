"""Shared pytest fixtures for Jale tests."""

from datetime import datetime, timezone

import pytest

from jale.models import JobPosting, Profile
from jale.store import MemoryRecordStore

# Monday
FIXED_NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def clock():
    return lambda: FIXED_NOW


@pytest.fixture()
def sample_profile() -> Profile:
    return Profile(
        id="w-1",
        name="Carlos Martinez",
        skills_offered=["Plumbing", "General Maintenance", "Repair Work"],
        location="El Paso, TX",
        pay="$25-35/hr",
        availability="7:00 AM - 5:00 PM",
    )


@pytest.fixture()
def sample_job() -> JobPosting:
    return JobPosting(
        id="j-1",
        employer_id="e-1",
        title="Kitchen Plumbing Renovation",
        description="Install new sink, dishwasher lines and garbage disposal.",
        skills_needed=["Plumbing", "Pipe Fitting"],
        location="El Paso, TX",
        pay="$30-35/hr",
        availability="Monday-Friday, 8:00 AM - 4:00 PM",
    )


@pytest.fixture()
def seed_records(sample_profile: Profile, sample_job: JobPosting) -> dict[str, list[dict]]:
    """One employer, one worker, one job and the match (chat thread) between them."""
    return {
        "users": [
            {"id": "e-1", "name": "Home Improvement Solutions", "user_type": "employer", "location": "El Paso, TX"},
            {**sample_profile.model_dump(), "user_type": "worker"},
        ],
        "jobs": [sample_job.model_dump()],
        "matches": [{"id": "m-1", "job_id": "j-1", "worker_id": "w-1", "status": "accepted", "match_score": 90}],
    }


def fill_store(store: MemoryRecordStore, records: dict[str, list[dict]]) -> MemoryRecordStore:
    for collection, rows in records.items():
        for row in rows:
            store.create(collection, row)
    return store


@pytest.fixture()
def store(seed_records: dict[str, list[dict]]) -> MemoryRecordStore:
    return fill_store(MemoryRecordStore(), seed_records)
