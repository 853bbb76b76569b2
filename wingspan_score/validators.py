"""Input-boundary checks for names, counts and score values."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .data.constants import (
    MAX_PLAYERS,
    MAX_SCORE_VALUE,
    MIN_PLAYERS,
    PLAYER_NAME_MAX_LENGTH,
    PLAYER_NAME_MIN_LENGTH,
    ROUND_GOAL_MAX_POINTS,
)
from .errors import ValidationError
from .game_models import GoalScoringMode


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: Optional[str] = None

    def raise_for_error(self) -> None:
        if not self.valid:
            raise ValidationError(self.error or "Invalid value")


_OK = ValidationResult(True)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_player_name(name: str) -> ValidationResult:
    trimmed = (name or "").strip()
    if not trimmed:
        return ValidationResult(False, "Name is required")
    if len(trimmed) < PLAYER_NAME_MIN_LENGTH:
        return ValidationResult(False, f"Name must be at least {PLAYER_NAME_MIN_LENGTH} characters")
    if len(trimmed) > PLAYER_NAME_MAX_LENGTH:
        return ValidationResult(False, f"Name must be {PLAYER_NAME_MAX_LENGTH} characters or less")
    return _OK


def validate_score_input(value: Any) -> ValidationResult:
    if not _is_int(value):
        return ValidationResult(False, "Score must be a whole number")
    if value < 0:
        return ValidationResult(False, "Score cannot be negative")
    if value > MAX_SCORE_VALUE:
        return ValidationResult(False, "Score seems too high")
    return _OK


def validate_player_count(count: int) -> ValidationResult:
    if count < MIN_PLAYERS:
        return ValidationResult(False, f"Wingspan requires at least {MIN_PLAYERS} player")
    if count > MAX_PLAYERS:
        return ValidationResult(False, f"Wingspan supports up to {MAX_PLAYERS} players")
    return _OK


def validate_round_goal_input(value: Any, mode: GoalScoringMode) -> ValidationResult:
    if not _is_int(value):
        return ValidationResult(False, "Points must be a whole number")
    if value < 0:
        return ValidationResult(False, "Points cannot be negative")
    if value > ROUND_GOAL_MAX_POINTS:
        label = GoalScoringMode(mode).value.capitalize()
        return ValidationResult(False, f"{label} mode max is {ROUND_GOAL_MAX_POINTS} points per round")
    return _OK


def is_valid_number_string(value: str) -> bool:
    if value == "":
        return True  # empty reads as 0
    try:
        return int(value.strip()) >= 0
    except ValueError:
        return False


def parse_score_input(value: str) -> int:
    """Parse a text field into a score, treating blanks and junk as 0."""
    trimmed = (value or "").strip()
    if not trimmed:
        return 0
    try:
        return max(0, int(trimmed))
    except ValueError:
        return 0


def clamp_non_negative(value: Any) -> int:
    return max(0, int(value))


__all__ = [
    "ValidationResult",
    "validate_player_name",
    "validate_score_input",
    "validate_player_count",
    "validate_round_goal_input",
    "is_valid_number_string",
    "parse_score_input",
    "clamp_non_negative",
]
