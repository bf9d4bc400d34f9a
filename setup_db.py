#!/usr/bin/env python3
"""Initialize the Jale Supabase database tables.

Verifies that the required tables exist and prints any missing schema
that needs to be created via the Supabase SQL Editor.

Usage:
    python setup_db.py
"""

import os
import sys

from dotenv import load_dotenv
from supabase import create_client

from jale.store import COLLECTIONS

load_dotenv()

# The SQL to run in Supabase SQL Editor if tables don't exist yet.
SETUP_SQL = """\
-- ── users ────────────────────────────────────────────────────────────
CREATE TABLE IF NOT EXISTS users (
    id              TEXT DEFAULT gen_random_uuid()::text PRIMARY KEY,
    email           TEXT UNIQUE,
    name            TEXT NOT NULL,
    user_type       TEXT NOT NULL CHECK (user_type IN ('worker', 'employer')),
    company         TEXT,
    location        TEXT,
    pay             TEXT,
    availability    TEXT,
    skills_offered  TEXT[] NOT NULL DEFAULT '{}',
    experience      TEXT,
    created_at      TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE INDEX IF NOT EXISTS idx_users_type ON users (user_type);

-- ── jobs ─────────────────────────────────────────────────────────────
CREATE TABLE IF NOT EXISTS jobs (
    id              TEXT DEFAULT gen_random_uuid()::text PRIMARY KEY,
    employer_id     TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    title           TEXT NOT NULL,
    description     TEXT,
    location        TEXT,
    pay             TEXT,
    availability    TEXT,
    skills_needed   TEXT[] NOT NULL DEFAULT '{}',
    status          TEXT NOT NULL DEFAULT 'active',
    created_at      TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE INDEX IF NOT EXISTS idx_jobs_status ON jobs (status);

-- ── matches (one chat thread each) ───────────────────────────────────
CREATE TABLE IF NOT EXISTS matches (
    id              TEXT DEFAULT gen_random_uuid()::text PRIMARY KEY,
    job_id          TEXT NOT NULL REFERENCES jobs(id) ON DELETE CASCADE,
    worker_id       TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    status          TEXT NOT NULL DEFAULT 'pending',
    match_score     INTEGER,
    last_activity   TIMESTAMPTZ,
    created_at      TIMESTAMPTZ NOT NULL DEFAULT now(),
    UNIQUE (job_id, worker_id)
);

-- ── messages ─────────────────────────────────────────────────────────
CREATE TABLE IF NOT EXISTS messages (
    id              TEXT DEFAULT gen_random_uuid()::text PRIMARY KEY,
    match_id        TEXT NOT NULL REFERENCES matches(id) ON DELETE CASCADE,
    sender_id       TEXT NOT NULL,
    message         TEXT NOT NULL,
    message_type    TEXT,
    read            BOOLEAN NOT NULL DEFAULT FALSE,
    timestamp       TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE INDEX IF NOT EXISTS idx_messages_match ON messages (match_id);

-- ── interviews ───────────────────────────────────────────────────────
CREATE TABLE IF NOT EXISTS interviews (
    id              TEXT DEFAULT gen_random_uuid()::text PRIMARY KEY,
    match_id        TEXT NOT NULL REFERENCES matches(id) ON DELETE CASCADE,
    scheduled_at    TIMESTAMPTZ NOT NULL,
    duration        INTEGER NOT NULL DEFAULT 30,
    status          TEXT NOT NULL DEFAULT 'scheduled',
    room_token      TEXT NOT NULL UNIQUE,
    interview_type  TEXT NOT NULL DEFAULT 'video',
    notes           TEXT,
    created_at      TIMESTAMPTZ NOT NULL DEFAULT now()
);

-- ── notifications ────────────────────────────────────────────────────
CREATE TABLE IF NOT EXISTS notifications (
    id              TEXT DEFAULT gen_random_uuid()::text PRIMARY KEY,
    user_id         TEXT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
    type            TEXT NOT NULL,
    title           TEXT NOT NULL,
    message         TEXT NOT NULL,
    read            BOOLEAN NOT NULL DEFAULT FALSE,
    timestamp       TIMESTAMPTZ NOT NULL DEFAULT now()
);
CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications (user_id) WHERE NOT read;
"""

REQUIRED_TABLES = list(COLLECTIONS)


def main() -> int:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_KEY")

    if not url or not key:
        print("ERROR: Set SUPABASE_URL and SUPABASE_KEY environment variables.")
        return 1

    client = create_client(url, key)

    print("Checking Supabase tables …\n")
    all_ok = True
    for table in REQUIRED_TABLES:
        try:
            client.table(table).select("*").limit(1).execute()
            print(f"  ✓ {table}")
        except Exception as e:
            print(f"  ✗ {table}  — {e}")
            all_ok = False

    if all_ok:
        print("\nAll tables exist. You're good to go!")
        return 0

    print("\n" + "=" * 60)
    print("Some tables are missing. Run the following SQL in the")
    print("Supabase SQL Editor (https://supabase.com/dashboard):\n")
    print(SETUP_SQL)
    print("=" * 60)
    return 1


if __name__ == "__main__":
    sys.exit(main())
