"""Environment-driven settings for Jale."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .store import MemoryRecordStore, RecordStore

logger = logging.getLogger(__name__)

load_dotenv()


@dataclass(frozen=True)
class Settings:
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_key: str = ""
    timezone: str = "UTC"
    min_match_score: int = 60
    interview_minutes: int = 30
    log_level: str = "INFO"

    @property
    def has_supabase(self) -> bool:
        return bool(self.supabase_url and (self.supabase_service_key or self.supabase_key))

    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except ZoneInfoNotFoundError:
            logger.warning("Unknown timezone %r, falling back to UTC", self.timezone)
            return ZoneInfo("UTC")

    def now(self) -> datetime:
        return datetime.now(self.tzinfo())


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _int_env(key: str, default: int) -> int:
    raw = get_env(key)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("%s=%r is not an integer, using %d", key, raw, default)
        return default


def load_settings() -> Settings:
    return Settings(
        supabase_url=get_env("SUPABASE_URL"),
        supabase_key=get_env("SUPABASE_KEY"),
        supabase_service_key=get_env("SUPABASE_SERVICE_KEY"),
        timezone=get_env("JALE_TIMEZONE", "UTC") or "UTC",
        min_match_score=_int_env("JALE_MIN_MATCH_SCORE", 60),
        interview_minutes=_int_env("JALE_INTERVIEW_MINUTES", 30),
        log_level=get_env("LOG_LEVEL", "INFO").upper() or "INFO",
    )


def get_store(settings: Settings, demo: bool = False) -> RecordStore:
    """Supabase-backed store when credentials are set, otherwise an in-memory one.

    *demo* forces the in-memory store seeded with the bundled demo data.
    """
    if demo or not settings.has_supabase:
        if not demo:
            logger.warning("Supabase is not configured; using the in-memory demo store")
        return MemoryRecordStore.from_seed()

    # Lazy import so the core can be used without supabase credentials or network.
    from supabase import create_client  # noqa: PLC0415

    from .db import SupabaseRecordStore  # noqa: PLC0415

    key = settings.supabase_service_key or settings.supabase_key
    return SupabaseRecordStore(create_client(settings.supabase_url, key))
