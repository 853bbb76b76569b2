"""Scoring core: score composition, nectar majorities, round goals and ranking."""
from __future__ import annotations

from .composer import (
    calculate_total_score,
    compose_score,
    create_empty_score_input,
    round_goal_total,
)
from .majority import allocate, allocate_all, allocate_majority_bonus, contributions_from_inputs
from .ranking import (
    PlayerScore,
    format_position,
    get_position_counts,
    get_winners,
    has_shared_victory,
    rank_players,
)
from .round_goals import (
    get_casual_goal_points,
    get_competitive_goal_points,
    get_round_goal_points,
    get_tied_goal_points,
    resolve_competitive_round,
)

# Short aliases matching the public contract names.
compose = compose_score
rank = rank_players

__all__ = [
    "compose_score",
    "compose",
    "calculate_total_score",
    "create_empty_score_input",
    "round_goal_total",
    "allocate",
    "allocate_all",
    "allocate_majority_bonus",
    "contributions_from_inputs",
    "PlayerScore",
    "rank_players",
    "rank",
    "has_shared_victory",
    "get_winners",
    "get_position_counts",
    "format_position",
    "get_casual_goal_points",
    "get_competitive_goal_points",
    "get_round_goal_points",
    "get_tied_goal_points",
    "resolve_competitive_round",
]
