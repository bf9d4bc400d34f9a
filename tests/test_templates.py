"""Tests for jale.templates — language tables and date formatting."""

from datetime import datetime

import pytest

from jale.templates import (
    SLOTS,
    SUPPORTED_LANGUAGES,
    TEMPLATES,
    format_date,
    format_datetime,
    format_short_date,
    format_time,
    render,
    resolve_language,
    template_slots,
)

MOMENT = datetime(2026, 3, 3, 14, 5)


class TestTables:
    def test_languages_share_keys(self):
        keys = {lang: set(TEMPLATES[lang]) for lang in SUPPORTED_LANGUAGES}
        assert keys["en"] == keys["es"]

    @pytest.mark.parametrize("key", sorted(TEMPLATES["en"]))
    def test_languages_share_slots(self, key):
        assert template_slots("en", key) == template_slots("es", key)

    @pytest.mark.parametrize("key", sorted(TEMPLATES["en"]))
    def test_only_known_slots(self, key):
        assert template_slots("en", key) <= SLOTS


class TestRender:
    def test_fills_slots(self):
        assert render("en", "outreach_score", score=87) == "Based on your profile, you're a 87% match for this role!"

    def test_unknown_slot_rejected(self):
        with pytest.raises(ValueError, match="salary"):
            render("en", "outreach_score", score=1, salary=2)

    def test_missing_slot_raises(self):
        with pytest.raises(KeyError):
            render("en", "outreach_score")

    def test_unknown_key_raises(self):
        with pytest.raises(KeyError):
            render("en", "no_such_template")

    def test_unsupported_language_falls_back_to_english(self):
        assert render("fr", "greeting") == TEMPLATES["en"]["greeting"]


class TestResolveLanguage:
    @pytest.mark.parametrize(
        "language, expected",
        [("es", "es"), ("ES", "es"), ("es-MX", "es"), ("en", "en"), ("fr", "en"), ("", "en"), (None, "en")],
    )
    def test_resolution(self, language, expected):
        assert resolve_language(language) == expected


class TestFormatting:
    def test_time(self):
        assert format_time(MOMENT, "en") == "2:05 PM"
        assert format_time(MOMENT, "es") == "14:05"
        assert format_time(MOMENT.replace(hour=0), "en") == "12:05 AM"

    def test_date(self):
        assert format_date(MOMENT, "en") == "Tuesday, March 3, 2026"
        assert format_date(MOMENT, "es") == "martes, 3 de marzo de 2026"

    def test_short_date(self):
        assert format_short_date(MOMENT, "en") == "Tuesday, Mar 3"
        assert format_short_date(MOMENT, "es") == "martes, 3 mar"

    def test_datetime(self):
        assert format_datetime(MOMENT, "en") == "Tuesday, March 3, 2026 at 2:05 PM"
        assert format_datetime(MOMENT, "es") == "martes, 3 de marzo de 2026 a las 14:05"
