"""
Tests for engagement scoring: the two-window decay and its boundaries.
"""
from datetime import datetime, timedelta, timezone

import pytest

from conftest import NOW
from uninexus.scoring.engagement import (
    club_score,
    days_between,
    decay_bonus,
    event_score,
    score_club,
    score_event,
)


def test_decay_window_edges():
    assert decay_bonus(0, 50, 10) == 50
    assert decay_bonus(7, 50, 10) == 0
    assert decay_bonus(30, 50, 10) == 0
    assert decay_bonus(-0.001, 50, 10) == 0
    assert decay_bonus(30.001, 50, 10) == 0
    assert decay_bonus(3.5, 50, 10) == pytest.approx(25)
    assert decay_bonus(18.5, 50, 10) == pytest.approx(5)


def test_event_exactly_seven_days_out_gets_base_only():
    assert event_score(10, 4, NOW + timedelta(days=7), NOW) == pytest.approx(22)


def test_event_eight_days_out_uses_far_window():
    assert event_score(0, 0, NOW + timedelta(days=8), NOW) == pytest.approx(10 * (1 - 1 / 23))


def test_event_already_started_gets_no_bonus():
    assert event_score(10, 0, NOW - timedelta(days=1), NOW) == pytest.approx(20)


def test_event_thirty_days_out_gets_no_bonus():
    assert event_score(0, 0, NOW + timedelta(days=30), NOW) == 0


def test_popular_imminent_event_scores_high():
    score = event_score(100, 200, NOW + timedelta(days=1), NOW)
    assert score >= 300
    assert score == pytest.approx(300 + 50 * 6 / 7)


def test_imminent_event_beats_distant_twin():
    soon = event_score(5, 5, NOW + timedelta(days=2), NOW)
    later = event_score(5, 5, NOW + timedelta(days=20), NOW)
    assert soon > later


def test_club_updated_just_now_gets_full_bonus():
    assert club_score(10, 2, NOW, NOW) == pytest.approx(30 + 3 + 30)


def test_club_boundaries():
    assert club_score(0, 0, NOW - timedelta(days=7), NOW) == 0
    assert club_score(0, 0, NOW - timedelta(days=8), NOW) == pytest.approx(10 * 22 / 23)
    assert club_score(1, 0, NOW - timedelta(days=45), NOW) == 3


def test_club_updated_in_future_gets_no_bonus():
    assert club_score(1, 1, NOW + timedelta(hours=1), NOW) == pytest.approx(4.5)


def test_days_between_treats_naive_as_utc():
    naive = datetime(2026, 3, 11, 12, 0)
    assert days_between(naive, NOW) == pytest.approx(1)


def test_days_between_ignores_timezone_representation():
    plus_two = timezone(timedelta(hours=2))
    same_instant = NOW.astimezone(plus_two)
    assert days_between(same_instant, NOW) == 0


def test_score_event_reads_nested_stats():
    event = {
        "startTime": NOW + timedelta(days=10),
        "stats": {"attendeeCount": 3, "viewCount": 10},
    }
    assert score_event(event, NOW) == pytest.approx(6 + 5 + 10 * (1 - 3 / 23))


def test_score_event_accepts_iso_strings_and_top_level_counters():
    event = {"startTime": "2026-03-17T12:00:00Z", "attendeeCount": 4}
    assert score_event(event, NOW) == pytest.approx(8)


def test_score_event_missing_counters_default_to_zero():
    assert score_event({"startTime": NOW + timedelta(days=40)}, NOW) == 0


def test_score_club_falls_back_to_created_at():
    club = {"stats": {"memberCount": 2}, "createdAt": NOW - timedelta(days=1)}
    assert score_club(club, NOW) == pytest.approx(6 + 30 * 6 / 7)


def test_score_club_without_timestamps_is_base_only():
    assert score_club({"stats": {"memberCount": 2, "eventCount": 2}}, NOW) == 9
