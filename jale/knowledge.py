"""Knowledge retriever — best answer for a free-text question from a static Q&A table."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from .models import Audience, KnowledgeEntry, RetrievalResult
from .text import contains_phrase, similarity

logger = logging.getLogger(__name__)

DEFAULT_KNOWLEDGE_PATH = Path(__file__).parent / "data" / "knowledge.json"

# Best similarity must exceed this for an answer to be returned.
ACCEPTANCE_THRESHOLD = 0.35

EMPLOYER_PHRASES = (
    "need worker",
    "need workers",
    "hire",
    "hiring",
    "looking to hire",
    "necesito trabajador",
    "contratar",
)
WORKER_PHRASES = ("looking for", "need work", "find job", "find work", "busco trabajo", "necesito trabajo")


class KnowledgeBase:
    """Read-only collection of ``KnowledgeEntry`` rows, grouped by audience."""

    def __init__(self, entries: list[KnowledgeEntry]) -> None:
        self._by_audience: dict[str, tuple[KnowledgeEntry, ...]] = {
            audience: tuple(e for e in entries if e.audience == audience) for audience in ("worker", "employer")
        }

    @classmethod
    def from_file(cls, path: Path = DEFAULT_KNOWLEDGE_PATH) -> KnowledgeBase:
        data = json.loads(path.read_text(encoding="utf-8"))
        entries = [KnowledgeEntry(**raw) for raw in data.get("entries", [])]
        logger.debug("Loaded %d knowledge entries from %s", len(entries), path)
        return cls(entries)

    def entries_for(self, audience: Audience) -> tuple[KnowledgeEntry, ...]:
        return self._by_audience.get(audience, ())

    def retrieve(self, message: str, audience: Audience) -> RetrievalResult | None:
        """Return the best-matching answer for *message*, or None below the threshold."""
        text = message.lower()
        best: KnowledgeEntry | None = None
        best_score = 0.0
        for entry in self.entries_for(audience):
            for phrase in entry.trigger_phrases:
                s = similarity(text, phrase.lower())
                if s > best_score:
                    best, best_score = entry, s

        if best is None or best_score <= ACCEPTANCE_THRESHOLD:
            return None
        return RetrievalResult(answer=best.answer, confidence=round(best_score, 3), entry_id=best.id)


@lru_cache(maxsize=1)
def get_knowledge_base() -> KnowledgeBase:
    """Process-wide knowledge base, loaded on first use."""
    return KnowledgeBase.from_file()


def detect_audience(message: str, previous: Audience | None = None) -> Audience:
    """Guess whether the sender is an employer or a worker.

    Falls back to *previous* (the session's last guess), then to ``"worker"``.
    """
    if contains_phrase(message, EMPLOYER_PHRASES):
        return "employer"
    if contains_phrase(message, WORKER_PHRASES):
        return "worker"
    return previous or "worker"


def retrieve(message: str, audience: Audience) -> RetrievalResult | None:
    return get_knowledge_base().retrieve(message, audience)
