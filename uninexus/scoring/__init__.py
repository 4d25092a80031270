"""Engagement scoring for trending rankings."""
from uninexus.scoring.engagement import club_score, event_score, score_club, score_event

__all__ = ["event_score", "club_score", "score_event", "score_club"]
