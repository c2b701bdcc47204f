"""Respondent-side navigation: condition matching, resolution, and walking a quiz."""

from .conditions import matches
from .resolver import linear_next, resolve_next
from .runner import QuizRunner, replay

__all__ = [
    "matches",
    "linear_next",
    "resolve_next",
    "QuizRunner",
    "replay",
]
