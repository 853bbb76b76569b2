"""Exception types raised by the score keeper."""
from __future__ import annotations


class ScoringError(RuntimeError):
    pass


class MissingScoreError(ScoringError, KeyError):
    """A ranking request named a player without a recorded score."""

    def __str__(self) -> str:
        return RuntimeError.__str__(self)


class SessionError(ScoringError):
    pass


class ValidationError(ScoringError, ValueError):
    pass


class RecordNotFoundError(ScoringError, KeyError):
    def __str__(self) -> str:
        return RuntimeError.__str__(self)


class DuplicateRecordError(ScoringError):
    pass


__all__ = [
    "ScoringError",
    "MissingScoreError",
    "SessionError",
    "ValidationError",
    "RecordNotFoundError",
    "DuplicateRecordError",
]
