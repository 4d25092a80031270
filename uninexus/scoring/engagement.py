"""
Engagement scoring for trending events and clubs.

Implements a usage-counter base plus a time-decayed bonus:
- Events: (attendees * 2) + (views * 0.5) + recency bonus for imminent starts
- Clubs:  (members * 3) + (events * 1.5) + activity bonus for recent updates

The bonus decays linearly over two windows, a steep one over the first 7
days and a shallow one from day 7 to day 30. Boundary days (exactly 7 and
exactly 30) belong to the inner branch. Outside [0, 30] days the bonus is 0.

Day arithmetic is timezone-agnostic elapsed time: (a - b) / 86400s.
Pure functions, no I/O.
"""
from datetime import datetime
from typing import Any, Mapping

from uninexus.data.serialization import as_utc, parse_datetime

SECONDS_PER_DAY = 86400.0

NEAR_WINDOW_DAYS = 7
FAR_WINDOW_DAYS = 30
FAR_WINDOW_SPAN = FAR_WINDOW_DAYS - NEAR_WINDOW_DAYS  # 23

EVENT_ATTENDEE_WEIGHT = 2.0
EVENT_VIEW_WEIGHT = 0.5
EVENT_NEAR_BONUS = 50.0
EVENT_FAR_BONUS = 10.0

CLUB_MEMBER_WEIGHT = 3.0
CLUB_EVENT_WEIGHT = 1.5
CLUB_NEAR_BONUS = 30.0
CLUB_FAR_BONUS = 10.0


def days_between(later: datetime, earlier: datetime) -> float:
    """Elapsed days from ``earlier`` to ``later`` (negative if reversed)."""
    return (as_utc(later) - as_utc(earlier)).total_seconds() / SECONDS_PER_DAY


def decay_bonus(days: float, near_bonus: float, far_bonus: float) -> float:
    """
    Two-window linear decay.

        near_bonus * (1 - days/7)            if 0 <= days <= 7
        far_bonus  * (1 - (days - 7)/23)     if 7 < days <= 30
        0                                    otherwise
    """
    if 0 <= days <= NEAR_WINDOW_DAYS:
        return near_bonus * (1 - days / NEAR_WINDOW_DAYS)
    if NEAR_WINDOW_DAYS < days <= FAR_WINDOW_DAYS:
        return far_bonus * (1 - (days - NEAR_WINDOW_DAYS) / FAR_WINDOW_SPAN)
    return 0.0


def event_score(attendee_count: float, view_count: float, start_time: datetime, now: datetime) -> float:
    """Score an event; events starting sooner get a higher recency bonus."""
    base = attendee_count * EVENT_ATTENDEE_WEIGHT + view_count * EVENT_VIEW_WEIGHT
    days_until_start = days_between(start_time, now)
    return base + decay_bonus(days_until_start, EVENT_NEAR_BONUS, EVENT_FAR_BONUS)


def club_score(member_count: float, event_count: float, updated_at: datetime, now: datetime) -> float:
    """Score a club; recently updated clubs get a higher activity bonus."""
    base = member_count * CLUB_MEMBER_WEIGHT + event_count * CLUB_EVENT_WEIGHT
    days_since_update = days_between(now, updated_at)
    return base + decay_bonus(days_since_update, CLUB_NEAR_BONUS, CLUB_FAR_BONUS)


def _counter(entity: Mapping[str, Any], name: str) -> float:
    """Read a usage counter from ``stats.<name>`` or the top level; missing = 0."""
    stats = entity.get("stats") or {}
    value = stats.get(name, entity.get(name))
    return value or 0


def score_event(entity: Mapping[str, Any], now: datetime) -> float:
    return event_score(
        _counter(entity, "attendeeCount"),
        _counter(entity, "viewCount"),
        parse_datetime(entity["startTime"]),
        now,
    )


def score_club(entity: Mapping[str, Any], now: datetime) -> float:
    member_count = _counter(entity, "memberCount")
    event_count = _counter(entity, "eventCount")
    updated_at = entity.get("updatedAt") or entity.get("createdAt")
    if updated_at is None:
        # No activity timestamp, no bonus
        return member_count * CLUB_MEMBER_WEIGHT + event_count * CLUB_EVENT_WEIGHT
    return club_score(member_count, event_count, parse_datetime(updated_at), now)
