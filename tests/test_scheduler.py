"""Tests for jale.scheduler — the interview scheduling dialogue."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from freezegun import freeze_time

from jale.errors import PersistenceError, RecordNotFoundError
from jale.models import ConversationState
from jale.scheduler import SchedulingDialogue, generate_room_token
from jale.store import MemoryRecordStore


@pytest.fixture()
def dialogue(store, clock) -> SchedulingDialogue:
    return SchedulingDialogue(store, clock=clock, room_token_factory=lambda match_id: f"room-{match_id}")


@pytest.fixture()
def awaiting() -> ConversationState:
    return ConversationState(match_id="m-1", language="en", step="awaiting_time")


class TestStart:
    def test_enters_awaiting_time(self, dialogue, sample_job):
        outcome = dialogue.start("m-1", "en", sample_job)

        assert outcome.state.step == "awaiting_time"
        assert outcome.state.match_id == "m-1"
        assert outcome.state.job_context == sample_job
        assert "schedule an interview" in outcome.reply

    def test_spanish_invite(self, dialogue):
        outcome = dialogue.start("m-1", "es")
        assert outcome.state.language == "es"
        assert outcome.reply.startswith("¡Genial!")


class TestHandle:
    def test_cancel_goes_idle_without_booking(self, dialogue, awaiting, store):
        outcome = dialogue.handle(awaiting, "cancel")

        assert outcome.state is None
        assert outcome.booking is None
        assert "cancelled" in outcome.reply
        assert store.count("interviews") == 0

    def test_spanish_cancel(self, dialogue, store):
        state = ConversationState(match_id="m-1", language="es")
        outcome = dialogue.handle(state, "no importa, olvídalo")
        assert outcome.state is None
        assert outcome.reply.startswith("Está bien")

    def test_unparsable_reprompts_and_keeps_waiting(self, dialogue, awaiting, store):
        outcome = dialogue.handle(awaiting, "sometime soonish")

        assert outcome.state == awaiting
        assert outcome.booking is None
        assert "couldn't understand" in outcome.reply
        assert store.count("interviews") == 0

    def test_suggestions_keep_waiting(self, dialogue, awaiting):
        outcome = dialogue.handle(awaiting, "show options")

        assert outcome.state == awaiting
        assert "Tuesday, Mar 3" in outcome.reply
        assert "Wednesday, Mar 4" in outcome.reply
        assert "9:00 AM" in outcome.reply
        assert "3:00 PM" in outcome.reply

    def test_availability_statement_books(self, dialogue, awaiting):
        outcome = dialogue.handle(awaiting, "I'm available tomorrow at 2pm")
        assert outcome.booking is not None

    def test_valid_time_books_and_confirms(self, dialogue, awaiting):
        outcome = dialogue.handle(awaiting, "tomorrow at 2pm")

        assert outcome.state is None
        assert outcome.booking.scheduled_at == datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc)
        assert outcome.booking.room_token == "room-m-1"
        assert "Tuesday, March 3, 2026 at 2:00 PM" in outcome.reply

    def test_show_up_is_not_a_suggestion_request(self, dialogue, awaiting):
        outcome = dialogue.handle(awaiting, "I can show up tomorrow at 2pm")

        assert outcome.booking is not None
        assert outcome.state is None

    def test_past_time_today_reprompts(self, dialogue, awaiting, store):
        # clock is 09:00
        outcome = dialogue.handle(awaiting, "today at 8am")

        assert outcome.state == awaiting
        assert outcome.booking is None
        assert "already passed" in outcome.reply
        assert store.count("interviews") == 0

    def test_past_time_reprompt_in_spanish(self, dialogue, store):
        state = ConversationState(match_id="m-1", language="es")

        outcome = dialogue.handle(state, "hoy a las 8am")

        assert outcome.state == state
        assert "ya pasó" in outcome.reply

    def test_later_today_books(self, dialogue, awaiting):
        outcome = dialogue.handle(awaiting, "today at 4pm")
        assert outcome.booking.scheduled_at == datetime(2026, 3, 2, 16, 0, tzinfo=timezone.utc)

    def test_persistence_failure_keeps_state(self, awaiting, clock):
        broken = MagicMock()
        broken.get.side_effect = PersistenceError("connection reset")
        dialogue = SchedulingDialogue(broken, clock=clock)

        outcome = dialogue.handle(awaiting, "tomorrow at 2pm")

        assert outcome.state == awaiting
        assert outcome.booking is None
        assert "error scheduling" in outcome.reply

    def test_missing_match_is_a_persistence_failure(self, clock):
        dialogue = SchedulingDialogue(MemoryRecordStore(), clock=clock)
        state = ConversationState(match_id="nope")

        outcome = dialogue.handle(state, "tomorrow at 2pm")

        assert outcome.state == state
        assert outcome.booking is None


class TestBook:
    def test_writes_interview_and_side_effects(self, dialogue, store, fixed_now):
        when = datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc)

        booking = dialogue.book("m-1", when, "en")

        interviews = store.query("interviews", match_id="m-1")
        assert len(interviews) == 1
        assert datetime.fromisoformat(interviews[0]["scheduled_at"].replace("Z", "+00:00")) == when
        assert interviews[0]["status"] == "scheduled"
        assert interviews[0]["duration"] == 30
        assert interviews[0]["room_token"] == booking.room_token

        match = store.get("matches", "m-1")
        assert match["status"] == "interview_scheduled"
        assert match["last_activity"] == fixed_now.isoformat()

        messages = store.query("messages", match_id="m-1")
        assert len(messages) == 1
        assert messages[0]["sender_id"] == "system"
        assert messages[0]["message_type"] == "interview_scheduled"
        assert "30 minutes" in messages[0]["message"]

    def test_notifies_both_parties(self, dialogue, store):
        dialogue.book("m-1", datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc), "en")

        worker_note = store.query("notifications", user_id="w-1")
        employer_note = store.query("notifications", user_id="e-1")
        assert len(worker_note) == 1 and len(employer_note) == 1
        assert "Kitchen Plumbing Renovation" in worker_note[0]["message"]
        assert employer_note[0]["message"].startswith("Carlos Martinez scheduled an interview")
        assert employer_note[0]["read"] is False

    def test_requester_name_used_when_given(self, dialogue, store):
        dialogue.book("m-1", datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc), "en", requester={"name": "Carlos M."})

        employer_note = store.query("notifications", user_id="e-1")[0]
        assert employer_note["message"].startswith("Carlos M. scheduled")

    def test_spanish_side_effects(self, dialogue, store):
        dialogue.book("m-1", datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc), "es")

        message = store.query("messages", match_id="m-1")[0]["message"]
        assert "martes, 3 de marzo de 2026" in message
        assert "14:00" in message

    def test_unknown_match_raises(self, dialogue):
        with pytest.raises(RecordNotFoundError):
            dialogue.book("missing", datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc))

    def test_custom_interview_length(self, store, clock):
        dialogue = SchedulingDialogue(store, clock=clock, interview_minutes=45)
        booking = dialogue.book("m-1", datetime(2026, 3, 3, 14, 0, tzinfo=timezone.utc))
        assert booking.duration == 45


class _FlakyStore(MemoryRecordStore):
    """Fails the first write to *fail_collection*, then behaves normally."""

    def __init__(self, fail_collection: str, fail_on: str = "create") -> None:
        super().__init__()
        self.fail_collection = fail_collection
        self.fail_on = fail_on
        self.failed = False

    def _maybe_fail(self, collection, operation):
        if not self.failed and collection == self.fail_collection and operation == self.fail_on:
            self.failed = True
            raise PersistenceError(f"{operation} {collection} failed")

    def create(self, collection, record):
        self._maybe_fail(collection, "create")
        return super().create(collection, record)

    def update(self, collection, record_id, fields):
        self._maybe_fail(collection, "update")
        return super().update(collection, record_id, fields)


class TestRetryAfterFailure:
    @pytest.fixture()
    def flaky(self, seed_records):
        def _build(fail_collection, fail_on="create"):
            store = _FlakyStore(fail_collection, fail_on)
            for collection, rows in seed_records.items():
                for row in rows:
                    store.create(collection, row)
            return store

        return _build

    def test_failed_match_update_then_retry_books_once(self, flaky, clock, awaiting):
        store = flaky("matches", "update")
        dialogue = SchedulingDialogue(store, clock=clock)

        first = dialogue.handle(awaiting, "tomorrow at 2pm")
        second = dialogue.handle(first.state, "tomorrow at 2pm")

        assert first.booking is None and first.state == awaiting
        assert second.booking is not None
        assert store.count("interviews") == 1

    @pytest.mark.parametrize("fail_collection", ["messages", "notifications"])
    def test_failure_after_interview_write_is_rolled_back(self, flaky, clock, awaiting, fail_collection):
        store = flaky(fail_collection)
        dialogue = SchedulingDialogue(store, clock=clock)

        first = dialogue.handle(awaiting, "tomorrow at 2pm")

        assert first.booking is None
        assert store.query("interviews", match_id="m-1", status="scheduled") == []
        assert store.get("matches", "m-1")["status"] == "accepted"

        second = dialogue.handle(first.state, "tomorrow at 2pm")

        assert second.booking is not None
        scheduled = store.query("interviews", match_id="m-1", status="scheduled")
        assert len(scheduled) == 1
        assert scheduled[0]["room_token"] == second.booking.room_token
        assert store.get("matches", "m-1")["status"] == "interview_scheduled"

    def test_failed_interview_write_restores_match(self, flaky, clock, awaiting):
        store = flaky("interviews")
        dialogue = SchedulingDialogue(store, clock=clock)

        first = dialogue.handle(awaiting, "tomorrow at 2pm")
        assert store.get("matches", "m-1")["status"] == "accepted"

        second = dialogue.handle(first.state, "tomorrow at 2pm")

        assert first.booking is None
        assert second.booking is not None
        assert store.count("interviews") == 1


class TestRoomToken:
    def test_format(self):
        assert generate_room_token("m-1").startswith("jale-interview-m-1-")

    def test_unique_per_call(self):
        assert generate_room_token("m-1") != generate_room_token("m-1")


class TestDefaultClock:
    @freeze_time("2026-03-02 09:00:00")
    def test_suggestions_follow_wall_clock(self, store):
        dialogue = SchedulingDialogue(store, clock=lambda: datetime.now(timezone.utc))
        reply = dialogue.suggest_time_slots("es")
        assert "martes, 3 mar" in reply
        assert "miércoles, 4 mar" in reply
        assert "09:00" in reply
